"""Title, issuance date and legal-force status of a portal page.

Both the title and the status are resolved through ordered detector chains:
each detector is an independent function returning a value or ``None`` and
the first non-``None`` answer wins. New detectors can be slotted into the
tuples without touching the others.
"""

import logging
import re
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from lexua.core.text import collapse_whitespace, has_cyrillic, has_latin, normalize
from lexua.legislation.models import ActStatus

logger = logging.getLogger(__name__)

TitleDetector = Callable[[BeautifulSoup], Optional[str]]
StatusDetector = Callable[[BeautifulSoup], Optional[ActStatus]]

PAGE_HEADER_SELECTORS = (
    ".page-header h1",
    "h1.page-header",
    "h1.doc-title",
    ".doc-title",
    "h1",
)

ISSUED_DATE_PATTERN = re.compile(r"(?<!\d)(\d{2})\.(\d{2})\.(\d{4})(?!\d)")
ISSUED_ON_SUFFIX = re.compile(
    r"\s*(?:від|вiд|from|of)\s+\d{1,2}\.\d{1,2}\.\d{4}.*$", re.IGNORECASE | re.DOTALL
)
TITLE_SEPARATORS = " |-–—:,;"
ELLIPSIS_MARKERS = ("…", "...")

REPEALED_BADGE_CLASSES = ["invalid", "obsolete", "disabled"]

NOT_YET_IN_FORCE_KEYWORDS = (
    "не набрав чинності",
    "не набрала чинності",
    "не набуло чинності",
    "not yet in force",
    "not entered into force",
)
REPEALED_KEYWORDS = (
    "втратив чинність",
    "втратила чинність",
    "втратило чинність",
    "нечинн",
    "no longer in force",
    "repealed",
    "invalid",
)
IN_FORCE_KEYWORDS = ("чинний", "чинна", "чинне", "in force", "valid")


@dataclass(frozen=True)
class PageMetadata:
    """Metadata resolved from a portal page before assembly."""

    title: str
    status: ActStatus
    issued_date: Optional[str] = None
    in_force_date: Optional[str] = None
    title_en: Optional[str] = None


def _element_text(element: Optional[Tag]) -> str:
    if element is None:
        return ""
    return collapse_whitespace(normalize(element))


def _page_title_text(soup: BeautifulSoup) -> str:
    return _element_text(soup.find("title"))


# Title detectors


def title_from_page_header(soup: BeautifulSoup) -> Optional[str]:
    """Text of the structured page-header element."""
    for selector in PAGE_HEADER_SELECTORS:
        text = _element_text(soup.select_one(selector))
        if text:
            return text
    return None


def title_from_title_element(soup: BeautifulSoup) -> Optional[str]:
    """The generic <title>, minus the site name and the "issued on <date>" suffix."""
    text = _page_title_text(soup)
    if not text:
        return None

    text = text.split("|")[0]
    text = ISSUED_ON_SUFFIX.sub("", text)
    text = text.strip(TITLE_SEPARATORS)
    return text or None


TITLE_DETECTORS: tuple[TitleDetector, ...] = (
    title_from_page_header,
    title_from_title_element,
)


def is_truncated(title: str) -> bool:
    """Display strings cut with an ellipsis are not trustworthy titles."""
    return any(marker in title for marker in ELLIPSIS_MARKERS)


def resolve_title(
    soup: BeautifulSoup,
    fallback: str = "",
    detectors: Sequence[TitleDetector] = TITLE_DETECTORS,
) -> str:
    """Resolve the document title, falling back when it is missing or truncated."""
    for detector in detectors:
        candidate = detector(soup)
        if not candidate:
            continue
        if is_truncated(candidate):
            logger.debug(f"Discarding truncated title {candidate!r} from {detector.__name__}")
            return fallback
        return candidate
    return fallback


def resolve_issued_date(soup: BeautifulSoup) -> Optional[str]:
    """Parse ``DD.MM.YYYY`` from the page title and emit ``YYYY-MM-DD``."""
    match = ISSUED_DATE_PATTERN.search(_page_title_text(soup))
    if not match:
        return None

    day, month, year = (int(part) for part in match.groups())
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        logger.debug(f"Ignoring invalid issuance date {match.group(0)!r}")
        return None


# Status detectors


def detect_valid_badge(soup: BeautifulSoup) -> Optional[ActStatus]:
    """An explicit "valid" CSS badge."""
    if soup.find(class_="valid"):
        return ActStatus.IN_FORCE
    return None


def detect_repealed_badge(soup: BeautifulSoup) -> Optional[ActStatus]:
    """An explicit "invalid", "obsolete" or "disabled" CSS badge."""
    if soup.find(class_=REPEALED_BADGE_CLASSES):
        return ActStatus.REPEALED
    return None


def _status_from_keywords(text: str) -> Optional[ActStatus]:
    text = text.lower()
    if any(keyword in text for keyword in NOT_YET_IN_FORCE_KEYWORDS):
        return ActStatus.NOT_YET_IN_FORCE
    if any(keyword in text for keyword in REPEALED_KEYWORDS):
        return ActStatus.REPEALED
    if any(keyword in text for keyword in IN_FORCE_KEYWORDS):
        return ActStatus.IN_FORCE
    return None


def detect_status_label(soup: BeautifulSoup) -> Optional[ActStatus]:
    """A generic status label, judged by its CSS classes or its bilingual text."""
    for label in soup.find_all(class_=re.compile("status")):
        classes = " ".join(label.get("class", [])).lower()
        status = _status_from_keywords(classes) or _status_from_keywords(_element_text(label))
        if status is not None:
            return status
    return None


def detect_not_yet_in_force(soup: BeautifulSoup) -> Optional[ActStatus]:
    """Page-wide scan for "not yet in force" phrasing in either language."""
    text = collapse_whitespace(normalize(soup)).lower()
    if any(keyword in text for keyword in NOT_YET_IN_FORCE_KEYWORDS):
        return ActStatus.NOT_YET_IN_FORCE
    return None


STATUS_DETECTORS: tuple[StatusDetector, ...] = (
    detect_valid_badge,
    detect_repealed_badge,
    detect_status_label,
    detect_not_yet_in_force,
)


def resolve_status(
    soup: BeautifulSoup,
    default: Optional[ActStatus] = None,
    detectors: Sequence[StatusDetector] = STATUS_DETECTORS,
) -> ActStatus:
    """Run the status detector chain; the first answer wins.

    When no detector answers, ``default`` is used, and without a default the
    act is taken to be in force.
    """
    for detector in detectors:
        status = detector(soup)
        if status is not None:
            logger.debug(f"Status {status.value} detected by {detector.__name__}")
            return status
    return default or ActStatus.IN_FORCE


def extract_english_title(soup: Optional[BeautifulSoup]) -> Optional[str]:
    """Title candidate from the English rendition of a page, if it looks English."""
    if soup is None:
        return None
    candidate = resolve_title(soup)
    if candidate and is_english_title(candidate):
        return candidate
    return None


def is_english_title(text: str) -> bool:
    """Latin script only: at least one Latin letter and no Cyrillic ones."""
    return has_latin(text) and not has_cyrillic(text)
