from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class _Model(BaseModel):
    # JSON keys are camelCase for the browser clients; Python code uses snake_case
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalysisType(str, Enum):
    PRE_SUBMISSION = "pre-submission"
    POST_REJECTION = "post-rejection"


class JournalInfo(_Model):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    url: str
    name: str
    scope: str
    guidelines: str
    publisher: str
    keywords: List[str] = []  # at most 10
    recent_topics: List[str] = []  # at most 5
    scraped_at: datetime = Field(default_factory=utc_now)
    fallback: bool = False


class KnownJournalRecord(_Model):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    url_pattern: str
    name: str
    publisher: str
    scope: str
    guidelines: str

    def matches(self, url: str) -> bool:
        return self.url_pattern.lower() in url.lower()


class AnalysisSubsection(_Model):
    title: str
    content: str = ""


class AnalysisSection(_Model):
    title: str
    content: str = ""
    subsections: List[AnalysisSubsection] = []


class AnalysisResult(_Model):
    sections: List[AnalysisSection]
    analysis_type: AnalysisType
    timestamp: datetime = Field(default_factory=utc_now)
    is_mock: bool = False


class ManuscriptInfo(_Model):
    filename: str
    size: int


class JournalSummary(_Model):
    url: str
    name: str


class AnalysisResponse(_Model):
    success: bool = True
    analysis_type: AnalysisType
    manuscript: ManuscriptInfo
    journal: JournalSummary
    analysis: AnalysisResult
    timestamp: datetime = Field(default_factory=utc_now)


class ErrorResponse(_Model):
    error: str
    message: Optional[str] = None
    path: Optional[str] = None
    timestamp: datetime = Field(default_factory=utc_now)
