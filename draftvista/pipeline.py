import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from draftvista.agents.base import Agent
from draftvista.agents.post_rejection import PostRejectionAnalyzer
from draftvista.agents.pre_submission import PreSubmissionAnalyzer
from draftvista.config import Config
from draftvista.errors import InputError
from draftvista.parsing.documents import extract_text, validate_file
from draftvista.schemas import AnalysisResponse, AnalysisType, JournalSummary, ManuscriptInfo
from draftvista.services.journals import JournalScraper

logger = logging.getLogger(__name__)

ANALYZER_CLASSES = {
    AnalysisType.PRE_SUBMISSION: PreSubmissionAnalyzer,
    AnalysisType.POST_REJECTION: PostRejectionAnalyzer,
}


class AnalysisPipeline:
    """extract text -> scrape journal -> build prompt -> call oracle -> parse, one request at a time.

    Uploaded-file cleanup belongs to the caller (see ``services.uploads.managed_upload``).
    """

    def __init__(self, llm, config: Config = None, scraper: JournalScraper = None,
                 sleep: Optional[Callable[[float], None]] = None,
                 text_extractor: Callable[[str], str] = extract_text):
        self.config = config or Config()
        self.scraper = scraper or JournalScraper(timeout=self.config.scrape_timeout)
        self.text_extractor = text_extractor
        kwargs = {"sleep": sleep} if sleep is not None else {}
        self.analyzers: Dict[AnalysisType, Agent] = {
            kind: cls(llm, self.config, **kwargs) for kind, cls in ANALYZER_CLASSES.items()
        }

    def run(self, file_path, journal_url: str, analysis_type: AnalysisType,
            filename: Optional[str] = None, size: Optional[int] = None,
            reviewer_comments: Optional[str] = None) -> AnalysisResponse:
        analysis_type = AnalysisType(analysis_type)
        if not file_path:
            raise InputError("No manuscript file provided")
        if not journal_url or not journal_url.strip():
            raise InputError("Journal URL is required")
        if analysis_type == AnalysisType.POST_REJECTION and not (reviewer_comments or "").strip():
            raise InputError("Reviewer comments are required for post-rejection analysis")

        path = Path(file_path)
        file_info = validate_file(str(path))
        if not file_info["exists"] or not path.is_file():
            raise InputError(f"Manuscript file not found: {path}")
        logger.info("Manuscript file: %s (%s MB, supported=%s)",
                    path.name, file_info["size_in_mb"], file_info["is_supported"])
        filename = filename or path.name
        if size is None:
            size = file_info["size"]
        journal_url = journal_url.strip()
        logger.info("Processing %s analysis for: %s", analysis_type.value, filename)

        manuscript_text = self.text_extractor(str(path))
        journal_info = self.scraper.get_journal_info(journal_url)
        analysis = self.analyzers[analysis_type].analyze(manuscript_text, journal_info, reviewer_comments)

        return AnalysisResponse(
            analysis_type=analysis_type,
            manuscript=ManuscriptInfo(filename=filename, size=size),
            journal=JournalSummary(url=journal_url, name=journal_info.name or "Unknown Journal"),
            analysis=analysis,
        )
