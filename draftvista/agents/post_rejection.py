from typing import Optional

from draftvista.agents.base import Agent
from draftvista.agents.prompts import build_post_rejection_prompt
from draftvista.schemas import AnalysisType, JournalInfo


class PostRejectionAnalyzer(Agent):
    name = "post_rejection"
    analysis_type = AnalysisType.POST_REJECTION
    failure_prefix = "Post-rejection analysis failed"

    @property
    def retry_delay(self) -> float:
        return self.config.post_rejection_retry_delay

    def build_prompt(self, manuscript_text: str, journal_info: JournalInfo,
                     reviewer_comments: Optional[str] = None) -> str:
        return build_post_rejection_prompt(manuscript_text, journal_info, reviewer_comments,
                                           self.config.max_manuscript_chars)
