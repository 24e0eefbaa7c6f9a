import logging
import re
from typing import Callable, Dict, Iterable, List, Optional, Tuple
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from ..errors import ScrapeError
from ..known_journals import KNOWN_JOURNALS, find_known_journal
from ..schemas import JournalInfo, KnownJournalRecord

logger = logging.getLogger(__name__)

# Some publishers reject the default python-requests agent
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
REQUEST_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
}

DEFAULT_NAME = "Unknown Journal"
DEFAULT_SCOPE = "General academic research"
DEFAULT_GUIDELINES = "Standard academic guidelines"
DEFAULT_PUBLISHER = "Unknown Publisher"
FALLBACK_SCOPE = "Academic research journal - scope could not be determined"
FALLBACK_GUIDELINES = "Standard academic guidelines apply - original research, proper methodology, clear writing"

MAX_KEYWORDS = 10
MAX_RECENT_TOPICS = 5

COMMON_PUBLISHERS = ["springer", "elsevier", "ieee", "acm", "nature", "wiley", "taylor", "sage"]
HOST_NOISE = {"www", "com", "org", "net", "edu", "journal", "journals"}

Probe = Callable[[BeautifulSoup], Optional[str]]


def _squash(text: str) -> str:
    return " ".join(text.split())


def select_text(selector: str) -> Probe:
    """Probe returning the text of the first element matching ``selector``."""
    def probe(soup: BeautifulSoup) -> Optional[str]:
        element = soup.select_one(selector)
        if element is None:
            return None
        return _squash(element.get_text()) or None
    return probe


def select_attr(selector: str, attr: str) -> Probe:
    """Probe returning an attribute of the first element matching ``selector``."""
    def probe(soup: BeautifulSoup) -> Optional[str]:
        element = soup.select_one(selector)
        if element is None:
            return None
        value = element.get(attr)
        return _squash(value) if isinstance(value, str) and value.strip() else None
    return probe


def length_between(low: int, high: int) -> Callable[[str], bool]:
    """Exclusive bounds on the character count."""
    return lambda text: low < len(text) < high


def first_match(soup: BeautifulSoup, probes: Iterable[Probe], accept: Callable[[str], bool],
                transform: Callable[[str], str] = lambda text: text) -> Optional[str]:
    """Run probes in order and return the first transformed value that ``accept`` allows."""
    for probe in probes:
        value = probe(soup)
        if value is None:
            continue
        value = transform(value)
        if value and accept(value):
            return value
    return None


def _strip_title_suffix(name: str) -> str:
    # "Journal of X | Publisher" and "Journal of X - Home" both become "Journal of X"
    name = re.sub(r"\s*\|.*$", "", name)
    name = re.sub(r"\s+[-–—]\s+.*$", "", name)
    return name.strip()


NAME_PROBES: List[Probe] = [
    select_text("title"),
    select_text("h1"),
    select_text(".journal-title"),
    select_text(".journal-name"),
    select_text("[data-journal-title]"),
    select_text(".site-title"),
    select_text(".brand-title"),
]

SCOPE_PROBES: List[Probe] = [
    select_text(".journal-description"),
    select_text(".about-journal"),
    select_text(".journal-scope"),
    select_text(".description"),
    select_attr('meta[name="description"]', "content"),
    select_text(".journal-aims"),
    select_text(".aims-scope"),
]

GUIDELINE_SELECTORS = [
    ".submission-guidelines",
    ".author-guidelines",
    ".instructions-authors",
    ".guidelines",
    '[href*="submission"]',
    '[href*="guidelines"]',
    '[href*="authors"]',
]

PUBLISHER_PROBES: List[Probe] = [
    select_text(".publisher"),
    select_text(".publisher-name"),
    select_text("[data-publisher]"),
    select_text(".copyright"),
    select_text("footer .publisher"),
]

KEYWORD_SELECTOR = ".subject-area, .keyword, .topic"
RECENT_TOPIC_SELECTOR = ".article-title, .paper-title, h2, h3"


def extract_journal_name(soup: BeautifulSoup) -> Optional[str]:
    return first_match(soup, NAME_PROBES, length_between(5, 200), transform=_strip_title_suffix)


def extract_scope(soup: BeautifulSoup) -> Optional[str]:
    return first_match(soup, SCOPE_PROBES, length_between(50, 1000))


def extract_guidelines(soup: BeautifulSoup) -> Optional[str]:
    """Join every guideline-looking element longer than 20 characters with " | "."""
    seen = set()
    guidelines: List[str] = []
    for selector in GUIDELINE_SELECTORS:
        for element in soup.select(selector):
            if id(element) in seen:
                continue
            seen.add(id(element))
            text = _squash(element.get_text())
            if len(text) > 20:
                guidelines.append(text)
    return " | ".join(guidelines) if guidelines else None


def extract_publisher(soup: BeautifulSoup) -> Optional[str]:
    publisher = first_match(soup, PUBLISHER_PROBES, length_between(3, 100))
    if publisher:
        return publisher

    body = soup.body or soup
    page_text = body.get_text().lower()
    for name in COMMON_PUBLISHERS:
        if name in page_text:
            return name.capitalize()
    return None


def extract_keywords(soup: BeautifulSoup) -> List[str]:
    keywords: List[str] = []
    meta = select_attr('meta[name="keywords"]', "content")(soup)
    if meta:
        keywords.extend(k.strip() for k in meta.split(",") if k.strip())

    for element in soup.select(KEYWORD_SELECTOR):
        text = _squash(element.get_text())
        if text and len(text) < 50:
            keywords.append(text)

    return keywords[:MAX_KEYWORDS]


def extract_recent_topics(soup: BeautifulSoup) -> List[str]:
    topics = []
    for element in soup.select(RECENT_TOPIC_SELECTOR)[:MAX_RECENT_TOPICS]:
        text = _squash(element.get_text())
        if 10 < len(text) < 200:
            topics.append(text)
    return topics


def is_valid_url(url: str) -> bool:
    try:
        parsed = urlparse(url)
    except (TypeError, ValueError, AttributeError):
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def name_from_url(url: str) -> str:
    """Guess a display name from the host, e.g. https://www.plosone.org -> "Plosone Journal"."""
    try:
        hostname = urlparse(url).hostname or ""
    except (TypeError, ValueError, AttributeError):
        return DEFAULT_NAME
    parts = [p for p in hostname.split(".") if p and p.lower() not in HOST_NOISE]
    if parts:
        return parts[0][0].upper() + parts[0][1:] + " Journal"
    return DEFAULT_NAME


class JournalScraper:
    """Builds a ``JournalInfo`` for a journal homepage; never raises."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 30.0,
                 known_journals: Tuple[KnownJournalRecord, ...] = KNOWN_JOURNALS,
                 user_agent: str = USER_AGENT):
        self.session = session or requests.Session()
        self.timeout = timeout
        self.known_journals = known_journals
        self.headers = {"User-Agent": user_agent, **REQUEST_HEADERS}

    def get_journal_info(self, url: str) -> JournalInfo:
        logger.info("Fetching journal info from: %s", url)
        try:
            if not is_valid_url(url):
                raise ScrapeError("Invalid journal URL provided")
            scraped = self.scrape_journal_info(url)
            info = self.enhance_with_known_data(scraped, url)
            return JournalInfo(
                url=url,
                name=info.get("name") or DEFAULT_NAME,
                scope=info.get("scope") or DEFAULT_SCOPE,
                guidelines=info.get("guidelines") or DEFAULT_GUIDELINES,
                publisher=info.get("publisher") or DEFAULT_PUBLISHER,
                keywords=info.get("keywords") or [],
                recent_topics=info.get("recent_topics") or [],
            )
        except Exception as e:
            # Third-party HTML is unreliable; callers always get a usable record
            logger.warning("Journal scraping failed: %s", e)
            return self.fallback_journal_info(url)

    def scrape_journal_info(self, url: str) -> Dict[str, object]:
        """Fetch ``url`` and run every extraction probe. Missing fields are None."""
        try:
            response = self.session.get(url, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise ScrapeError(f"Failed to scrape journal: {e}") from e

        content_type = response.headers.get("Content-Type", "")
        if content_type and "html" not in content_type and "xml" not in content_type:
            raise ScrapeError(f"Failed to scrape journal: unexpected content type {content_type}")

        soup = BeautifulSoup(response.text, "html.parser")
        return {
            "name": extract_journal_name(soup),
            "scope": extract_scope(soup),
            "guidelines": extract_guidelines(soup),
            "publisher": extract_publisher(soup),
            "keywords": extract_keywords(soup),
            "recent_topics": extract_recent_topics(soup),
        }

    def enhance_with_known_data(self, scraped: Dict[str, object], url: str) -> Dict[str, object]:
        """Start from the matching known-journal record, then let every scraped value override it."""
        record = find_known_journal(url, self.known_journals)
        if record is None:
            return dict(scraped)
        merged: Dict[str, object] = record.model_dump(exclude={"url_pattern"})
        merged.update({key: value for key, value in scraped.items() if value})
        return merged

    def fallback_journal_info(self, url: str) -> JournalInfo:
        url = url if isinstance(url, str) else ""
        return JournalInfo(
            url=url,
            name=name_from_url(url),
            scope=FALLBACK_SCOPE,
            guidelines=FALLBACK_GUIDELINES,
            publisher=DEFAULT_PUBLISHER,
            fallback=True,
        )
