from typing import Optional

from draftvista.agents.base import Agent
from draftvista.agents.prompts import build_pre_submission_prompt
from draftvista.schemas import AnalysisType, JournalInfo


class PreSubmissionAnalyzer(Agent):
    name = "pre_submission"
    analysis_type = AnalysisType.PRE_SUBMISSION
    failure_prefix = "Analysis failed"

    @property
    def retry_delay(self) -> float:
        return self.config.pre_submission_retry_delay

    def build_prompt(self, manuscript_text: str, journal_info: JournalInfo,
                     reviewer_comments: Optional[str] = None) -> str:
        return build_pre_submission_prompt(manuscript_text, journal_info, self.config.max_manuscript_chars)
