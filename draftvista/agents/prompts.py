from pathlib import Path

from draftvista.errors import InputError
from draftvista.schemas import JournalInfo

PROMPTS_DIR = Path(__file__).parents[1] / "prompts"

# Keeps the prompt inside the oracle's token budget
MAX_MANUSCRIPT_CHARS = 30000


def load_template(name: str) -> str:
    return (PROMPTS_DIR / f"{name}.txt").read_text(encoding="utf-8")


def _journal_fields(journal_info: JournalInfo) -> dict:
    return {
        "journal_name": journal_info.name or "Not specified",
        "journal_publisher": journal_info.publisher or "Not specified",
        "journal_scope": journal_info.scope or "Not specified",
        "journal_guidelines": journal_info.guidelines or "Not specified",
        "journal_keywords": ", ".join(journal_info.keywords) or "Not specified",
        "journal_recent_topics": "; ".join(journal_info.recent_topics) or "Not specified",
    }


def build_pre_submission_prompt(manuscript_text: str, journal_info: JournalInfo,
                                max_chars: int = MAX_MANUSCRIPT_CHARS) -> str:
    """Render the pre-submission review rubric for one manuscript and target journal."""
    return load_template("pre_submission").format(
        manuscript_text=manuscript_text[:max_chars],
        max_chars=f"{max_chars:,}",
        **_journal_fields(journal_info),
    )


def build_post_rejection_prompt(manuscript_text: str, journal_info: JournalInfo, reviewer_comments: str,
                                max_chars: int = MAX_MANUSCRIPT_CHARS) -> str:
    """Render the reviewer-response template; reviewer comments are mandatory."""
    if not reviewer_comments or not reviewer_comments.strip():
        raise InputError("Reviewer comments are required for post-rejection analysis")
    return load_template("post_rejection").format(
        manuscript_text=manuscript_text[:max_chars],
        reviewer_comments=reviewer_comments.strip(),
        max_chars=f"{max_chars:,}",
        **_journal_fields(journal_info),
    )
