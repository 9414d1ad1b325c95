"""Mine term/definition pairs from definitional provisions.

Two pattern families run over the same provision text, in order:

- numbered lists: ``1) term – definition;`` up to the next ordinal marker
- quoted terms: ``«term» – definition`` up to the next quoted term or the end
  of the sentence

Candidates are filtered on length, terms that only introduce a shorthand
("hereinafter referred to as") are dropped, and terms are deduplicated per
act, case-insensitively, keeping the first occurrence in document order.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

from lexua.core.text import collapse_whitespace
from lexua.legislation.models import Definition, Provision

logger = logging.getLogger(__name__)

MIN_TERM_LENGTH = 2
MAX_TERM_LENGTH = 160
MIN_DEFINITION_LENGTH = 8

QUOTE_CHARS = "«»„“”\"'‘’‚"
TRAILING_PUNCTUATION = ";.,: "
DASHES = "-‐‑‒–—"

ORDINAL_MARKER = re.compile(r"(?:^|(?<=[;:]\s)|(?<=[;:]))[ \t]*\d{1,3}(?:-\d{1,3})?\)\s+", re.MULTILINE)
TERM_SEPARATOR = re.compile(rf"\s+[{DASHES}]\s+")
QUOTED_SEPARATOR = re.compile(rf"\s*[{DASHES}]\s*")
OPENING_QUOTE = re.compile(r"[«„“]")
QUOTE_PAIRS = {"«": "»", "„": "“”", "“": "”"}
SENTENCE_END = re.compile(r"[;.](?=\s|$)|\n")


@dataclass(frozen=True)
class DefinitionLexicon:
    """Drafting conventions of one source language.

    ``signals`` are lower-case fragments flagging a provision as definitional;
    ``forward_reference`` matches terms that merely introduce a shorthand.
    """

    signals: Tuple[str, ...]
    forward_reference: re.Pattern


UKRAINIAN_DEFINITIONS = DefinitionLexicon(
    signals=(
        "визначення термінів",
        "терміни вживаються",
        "вживаються в такому значенні",
        "вживаються у такому значенні",
        "наведені нижче терміни",
        "означає",
    ),
    forward_reference=re.compile(rf"\(\s*далі|далі\s*[{DASHES}:]|hereinafter", re.IGNORECASE),
)

POLISH_DEFINITIONS = DefinitionLexicon(
    signals=(
        "ilekroć",
        "rozumie się",
        "należy przez to rozumieć",
        "oznacza",
    ),
    forward_reference=re.compile(r"zwan\w*\s+dalej|\bdalej\s*:|hereinafter", re.IGNORECASE),
)


def is_definitional(provision: Provision, lexicon: DefinitionLexicon) -> bool:
    """Whether the heading or body carries one of the lexicon's signals."""
    text = f"{provision.title}\n{provision.content}".lower()
    return any(signal in text for signal in lexicon.signals)


def _clean_term(term: str) -> str:
    return collapse_whitespace(term).strip(QUOTE_CHARS + " ")


def _clean_definition(definition: str) -> str:
    return collapse_whitespace(definition).rstrip(TRAILING_PUNCTUATION).strip()


def _numbered_candidates(text: str) -> Iterator[Tuple[str, str]]:
    markers = list(ORDINAL_MARKER.finditer(text))
    for index, marker in enumerate(markers):
        end = markers[index + 1].start() if index + 1 < len(markers) else len(text)
        segment = text[marker.end() : end]

        # The term never runs past the length cap, so the separator search is bounded too
        separator = TERM_SEPARATOR.search(segment, 0, MAX_TERM_LENGTH * 2)
        if not separator:
            continue
        yield segment[: separator.start()], segment[separator.end() :]


def _find_closing_quote(text: str, start: int, closers: str) -> Optional[int]:
    limit = min(len(text), start + MAX_TERM_LENGTH * 2)
    for index in range(start, limit):
        if text[index] in closers:
            return index
    return None


def _quoted_candidates(text: str) -> Iterator[Tuple[str, str]]:
    position = 0
    while True:
        opening = OPENING_QUOTE.search(text, position)
        if not opening:
            return

        closing = _find_closing_quote(text, opening.end(), QUOTE_PAIRS[opening.group()])
        if closing is None:
            position = opening.end()
            continue

        term = text[opening.end() : closing]
        position = closing + 1

        separator = QUOTED_SEPARATOR.match(text, position)
        if not separator:
            continue

        next_quote = OPENING_QUOTE.search(text, separator.end())
        body = text[separator.end() : next_quote.start() if next_quote else len(text)]
        boundary = SENTENCE_END.search(body)
        if boundary:
            body = body[: boundary.start()]
        yield term, body


def _accept(term: str, definition: str, lexicon: DefinitionLexicon) -> bool:
    if not MIN_TERM_LENGTH <= len(term) <= MAX_TERM_LENGTH:
        return False
    if len(definition) < MIN_DEFINITION_LENGTH:
        return False
    if lexicon.forward_reference.search(term):
        return False
    return True


def mine_definitions(
    text: str, source_provision: Optional[str], lexicon: DefinitionLexicon
) -> Iterator[Definition]:
    """Yield every accepted candidate from one provision text, numbered form first."""
    for family in (_numbered_candidates, _quoted_candidates):
        for raw_term, raw_definition in family(text):
            term = _clean_term(raw_term)
            definition = _clean_definition(raw_definition)
            if _accept(term, definition, lexicon):
                yield Definition(term=term, definition=definition, source_provision=source_provision)


def extract_definitions(
    provisions: Iterable[Provision], lexicon: DefinitionLexicon
) -> list[Definition]:
    """Definitions of one act, deduplicated case-insensitively, first occurrence kept."""
    definitions = []
    seen_terms = set()

    for provision in provisions:
        if not is_definitional(provision, lexicon):
            continue

        for definition in mine_definitions(provision.content, provision.provision_ref, lexicon):
            key = definition.term.casefold()
            if key in seen_terms:
                continue
            seen_terms.add(key)
            definitions.append(definition)

    logger.debug(f"Extracted {len(definitions)} definitions")
    return definitions
