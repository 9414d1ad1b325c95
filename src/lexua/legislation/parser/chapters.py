"""Attribute provisions to their enclosing chapter or division heading.

Only a bounded window before the provision is scanned. Headings further
back are not attributed, so chapter coverage of very long documents is not
guaranteed.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from lexua.core.text import ROMAN_DIGITS, collapse_whitespace, fold_roman_numeral, normalize
from lexua.settings import CHAPTER_LOOKBACK_CHARS, CHAPTER_TITLE_LOOKAHEAD_CHARS

MAX_CHAPTER_TITLE_CHARS = 200


@dataclass(frozen=True)
class HeadingMarker:
    """One heading vocabulary entry: the label to emit and how to find it."""

    label: str
    pattern: re.Pattern


@dataclass(frozen=True)
class HeadingVocabulary:
    """The chapter and division vocabularies of one source grammar.

    ``title_pattern`` is searched right after a matched marker, bounded by the
    lookahead and by the provision position; its ``title`` group is
    normalised into the heading title.
    """

    markers: Tuple[HeadingMarker, ...]
    title_pattern: re.Pattern


# Sejm ELI text.html: <h3>Rozdział&nbsp;2</h3> ... <span class="pro-title-unit">Title</span>
POLISH_HEADINGS = HeadingVocabulary(
    markers=(
        HeadingMarker(
            "Rozdział",
            re.compile(r"\b(?:Rozdzia[łl]|ROZDZIA[ŁL])(?:\s|&nbsp;|\xa0)*(?P<number>\d+[a-z]?)\b"),
        ),
        HeadingMarker(
            "Dział",
            re.compile(r"\b(?:Dzia[łl]|DZIA[ŁL])(?:\s|&nbsp;|\xa0)*(?P<number>[IVXLCDM]+[a-z]?)\b"),
        ),
    ),
    title_pattern=re.compile(
        r"<span[^>]*class=\"[^\"]*pro-title-unit[^\"]*\"[^>]*>(?P<title>[^<]{1,400})</span>",
        re.IGNORECASE,
    ),
)

# zakon.rada.gov.ua print pages, scanned as normalised block text
UKRAINIAN_HEADINGS = HeadingVocabulary(
    markers=(
        HeadingMarker(
            "Розділ",
            re.compile(
                rf"^(?:Розділ|РОЗДІЛ)\s+(?P<number>[{ROMAN_DIGITS}]+|\d+(?:-\d+)?)(?=[\s.:]|$)",
                re.MULTILINE,
            ),
        ),
        HeadingMarker(
            "Глава",
            re.compile(
                rf"^(?:Глава|ГЛАВА)\s+(?P<number>\d+(?:-\d+)?|[{ROMAN_DIGITS}]+)(?=[\s.:]|$)",
                re.MULTILINE,
            ),
        ),
    ),
    title_pattern=re.compile(r"[ \t.:]*\n?(?P<title>[^\n]{1,400})"),
)


def _find_last_marker(
    text: str, start: int, end: int, vocabulary: HeadingVocabulary
) -> Optional[Tuple[HeadingMarker, re.Match]]:
    last = None
    for marker in vocabulary.markers:
        for match in marker.pattern.finditer(text, start, end):
            if last is None or match.start() > last[1].start():
                last = (marker, match)
    return last


def _find_title(text: str, marker_end: int, position: int, vocabulary: HeadingVocabulary) -> str:
    limit = min(marker_end + CHAPTER_TITLE_LOOKAHEAD_CHARS, position)
    if limit <= marker_end:
        return ""

    match = vocabulary.title_pattern.search(text, marker_end, limit)
    if not match:
        return ""

    title = collapse_whitespace(normalize(match.group("title")))
    return title[:MAX_CHAPTER_TITLE_CHARS].strip()


def resolve_heading(
    text: str,
    position: int,
    vocabulary: HeadingVocabulary = POLISH_HEADINGS,
    window: int = CHAPTER_LOOKBACK_CHARS,
) -> Optional[str]:
    """Return the innermost chapter/division heading enclosing ``position``.

    The last marker inside ``text[position - window:position]`` wins. When a
    short title follows the marker the result is ``"Label N - Title"``,
    otherwise ``"Label N"``. ``None`` when the window holds no marker.
    """
    position = max(0, min(position, len(text)))
    start = max(0, position - window)

    found = _find_last_marker(text, start, position, vocabulary)
    if found is None:
        return None

    marker, match = found
    number = fold_roman_numeral(match.group("number").strip())
    title = _find_title(text, match.end(), position, vocabulary)

    if title:
        return f"{marker.label} {number} - {title}"
    return f"{marker.label} {number}"
