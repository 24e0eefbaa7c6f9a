"""
Shared fixtures: a scripted oracle, canned HTTP responses and a temp upload dir.
"""
from pathlib import Path
from typing import List
from unittest.mock import Mock

import pytest
import requests

from draftvista.config import Config
from draftvista.schemas import JournalInfo


class ScriptedLLM:
    """Stands in for LLMClient: replays ``outcomes`` (text or exception) one per call."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.prompts: List[str] = []
        self.kwargs: List[dict] = []

    def generate(self, prompt, **kwargs):
        self.prompts.append(prompt)
        self.kwargs.append(kwargs)
        outcome = self.outcomes[min(len(self.prompts), len(self.outcomes)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingSleep:
    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds):
        self.calls.append(seconds)


def make_response(html: str = "", status: int = 200, content_type: str = "text/html; charset=utf-8"):
    response = Mock()
    response.text = html
    response.status_code = status
    response.headers = {"Content-Type": content_type} if content_type else {}
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Client Error")
    else:
        response.raise_for_status.return_value = None
    return response


def make_session(html: str = "", **kwargs):
    session = Mock()
    session.get.return_value = make_response(html, **kwargs)
    return session


@pytest.fixture
def upload_dir(tmp_path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def test_config(upload_dir) -> Config:
    return Config(upload_dir=str(upload_dir), scrape_timeout=5)


@pytest.fixture
def journal_info() -> JournalInfo:
    return JournalInfo(
        url="https://www.example-journal.org",
        name="Journal of Examples",
        scope="Empirical studies of worked examples in the sciences and humanities.",
        guidelines="Submit a double-spaced manuscript under 8000 words.",
        publisher="Example Press",
        keywords=["examples", "pedagogy"],
        recent_topics=["Worked examples in statistics teaching"],
    )


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def review_markdown() -> str:
    return (
        "# AI-Generated Manuscript Review Report\n"
        "## Executive Summary\n"
        "Solid study with a thin discussion.\n"
        "\n"
        "## Detailed Section Assessment\n"
        "### 1. Title and Abstract\n"
        "- **Assessment**: Clear.\n"
        "### 2. Introduction\n"
        "- **Assessment**: Gap is well motivated.\n"
        "## Overall Recommendations\n"
        "1. Expand the discussion\n"
    )
