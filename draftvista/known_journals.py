from typing import Optional, Tuple

from .schemas import KnownJournalRecord

# Backfills fields the scraper cannot find; scraped values win per field
KNOWN_JOURNALS: Tuple[KnownJournalRecord, ...] = (
    KnownJournalRecord(
        url_pattern="nature.com",
        name="Nature",
        publisher="Nature Publishing Group",
        scope="Multidisciplinary science journal covering all areas of science and technology",
        guidelines="High-impact research with broad significance. Strict formatting requirements.",
    ),
    KnownJournalRecord(
        url_pattern="ieee.org",
        name="IEEE Journals",
        publisher="IEEE",
        scope="Engineering, computer science, and technology research",
        guidelines="Technical rigor, reproducibility, and practical applications required.",
    ),
    KnownJournalRecord(
        url_pattern="springer.com",
        name="Springer Journals",
        publisher="Springer",
        scope="Academic research across multiple disciplines",
        guidelines="Peer-reviewed research with clear methodology and significant contributions.",
    ),
    KnownJournalRecord(
        url_pattern="elsevier.com",
        name="Elsevier Journals",
        publisher="Elsevier",
        scope="Scientific and technical research publications",
        guidelines="Original research with clear impact and rigorous methodology.",
    ),
    KnownJournalRecord(
        url_pattern="acm.org",
        name="ACM Journals",
        publisher="Association for Computing Machinery",
        scope="Computer science and information technology research",
        guidelines="Technical innovation, reproducible results, and clear contributions to computing.",
    ),
)


def find_known_journal(url: str, known: Tuple[KnownJournalRecord, ...] = KNOWN_JOURNALS) -> Optional[KnownJournalRecord]:
    for record in known:
        if record.matches(url):
            return record
    return None
