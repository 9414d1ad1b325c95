"""Parser for zakon.rada.gov.ua print pages.

A print page is a flat stream of ``<p>``/``<pre>`` blocks. Articles are not
containers; an article starts at a block whose first line reads
``Стаття N.`` and runs until the next such block. Everything between is
either article body or editorial noise (amendment notes in brackets,
signature lines, banners) which has to be recognised and skipped.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from bs4 import BeautifulSoup, Tag

from lexua.core.exceptions import StructuralParsingError
from lexua.core.text import (
    HYPHEN_VARIANTS,
    ROMAN_DIGITS,
    fold_hyphens,
    normalize,
    strip_brackets,
    tidy_text,
)
from lexua.legislation.models import LegislationSource, Provision, SourceConfig
from lexua.legislation.parser.base import LawParser
from lexua.legislation.parser.chapters import UKRAINIAN_HEADINGS, resolve_heading
from lexua.legislation.parser.definitions import UKRAINIAN_DEFINITIONS
from lexua.legislation.parser.metadata import (
    PageMetadata,
    extract_english_title,
    resolve_issued_date,
    resolve_status,
    resolve_title,
)
from lexua.legislation.urls import rada_document_url
from lexua.settings import FALLBACK_SECTION

logger = logging.getLogger(__name__)

CONTENT_CONTAINER_SELECTORS = (
    "div#article",
    "div#Text",
    "div.document",
    "div.txt",
)
BLOCK_TAGS = ["p", "pre"]

# A title may follow the number without a period when it starts with a capital
# letter: "Стаття 1 Загальні положення".
ARTICLE_HEADING = re.compile(
    r"^(?P<label>Стаття|Статті|Article)\s+"
    rf"(?P<number>\d+(?:\^\d+)?(?:\s*[-{HYPHEN_VARIANTS}]\s*\d+(?:\^\d+)?)?)"
    r"(?:\.|(?=\s*[{(\[])|[ \t]*(?=\n|$)"
    r"|(?P<bare_title>)(?=[ \t]+[A-ZА-ЯЄІЇҐ]))"
)
SENTENCE_END = (".", ";", ":", ",")

REPEAL_MARKER = re.compile(
    r"виключ|втратил[аио]?\s+чинність|втратив\s+чинність|excluded|repealed|struck\s+out|lost\s+(?:its\s+)?force",
    re.IGNORECASE,
)

BANNER_LINE = re.compile(
    r"^(?:(?:КНИГА|Книга)\s+\S+"
    rf"|(?:РОЗДІЛ|Розділ|ГЛАВА|Глава)\s+(?:[{ROMAN_DIGITS}]+|\d+(?:-\d+)?)(?=[\s.:]|$))"
)

EDITORIAL_LINE_PATTERNS = (
    re.compile(r"^Президент\s+України"),
    re.compile(r"^(?:Із|Зі|З)\s+змінами,?\s+внесеними", re.IGNORECASE),
    re.compile(r"^м\.\s*Київ"),
    re.compile(r"^\d{1,2}\s+[а-яіїєґ']+\s+\d{4}\s+року$", re.IGNORECASE),
    re.compile(r"^\d{1,2}\.\d{1,2}\.\d{4}(?:\s+року)?$"),
    re.compile(r"^№\s*\S+$"),
)

BRACKET_PAIRS = {"{": "}", "[": "]", "(": ")"}


def is_bracket_wrapped(text: str) -> bool:
    """The whole block sits inside one outer pair of brackets.

    A single depth counter covers every bracket kind, so ``(a) (b)`` is not
    wrapped while ``{a (b) c}`` is.
    """
    if not text or text[0] not in BRACKET_PAIRS:
        return False

    closers = set(BRACKET_PAIRS.values())
    depth = 0
    for index, char in enumerate(text):
        if char in BRACKET_PAIRS:
            depth += 1
        elif char in closers:
            depth -= 1
            if depth == 0:
                return index == len(text) - 1
    return False


def is_editorial_line(text: str) -> bool:
    """Signature lines, amendment notices, city/date stamps and decree numbers."""
    first_line = text.split("\n", 1)[0]
    return any(pattern.match(first_line) for pattern in EDITORIAL_LINE_PATTERNS)


def is_banner(text: str) -> bool:
    """Book, division and chapter banners."""
    return bool(BANNER_LINE.match(text))


def is_uppercase_title(text: str) -> bool:
    letters = [char for char in text if char.isalpha()]
    return bool(letters) and all(char.isupper() for char in letters)


def match_article_heading(text: str) -> Optional[re.Match]:
    """Match an article heading at the start of a block.

    The period-less ``Стаття N Title`` form is only trusted when the first line
    reads like a title rather than a sentence citing an article.
    """
    match = ARTICLE_HEADING.match(text)
    if match is None or match.group("bare_title") is None:
        return match

    first_line = text.split("\n", 1)[0].rstrip()
    if match.group("label") == "Статті" or first_line.endswith(SENTENCE_END):
        return None
    return match


def superscript_heading(element: Tag, text: str) -> str:
    """Write ``Стаття 8<sup>1</sup>`` as ``Стаття 8^1`` on the heading line.

    Flattening the superscript would turn article 8^1 into article 81.
    """
    for sup in element.find_all("sup"):
        sup.replace_with(f"^{sup.get_text(strip=True)}")

    heading_line = normalize(element).split("\n", 1)[0].replace(" ^", "^")
    _, newline, rest = text.partition("\n")
    return heading_line + newline + rest


def normalize_section(number: str) -> str:
    """Fold hyphen variants and drop the spacing around range hyphens."""
    return "".join(fold_hyphens(number).split())


def provision_ref_for(section: str) -> str:
    """``8^1`` -> ``art8_1``; characters other than ASCII letters, digits, ``_`` and ``-`` are dropped."""
    token = section.replace("^", "_")
    return "art" + "".join(char for char in token if char.isascii() and (char.isalnum() or char in "_-"))


@dataclass
class _OpenArticle:
    section: str
    heading: str
    remainder: str
    offset: int
    body: list[str] = field(default_factory=list)


class PrintPageParser(LawParser):
    """Segments rada print pages into provisions."""

    source = LegislationSource.RADA
    lexicon = UKRAINIAN_DEFINITIONS

    def document_url(self, config: SourceConfig) -> str:
        return rada_document_url(config.reference)

    def resolve_metadata(
        self,
        soup: BeautifulSoup,
        config: SourceConfig,
        metadata_soup: Optional[BeautifulSoup] = None,
    ) -> PageMetadata:
        status_soup = metadata_soup if metadata_soup is not None else soup
        return PageMetadata(
            title=resolve_title(soup, fallback=config.title),
            status=resolve_status(status_soup, default=config.status),
            issued_date=resolve_issued_date(soup) or config.issued_date,
            in_force_date=config.in_force_date,
            title_en=extract_english_title(metadata_soup),
        )

    def find_container(self, soup: BeautifulSoup, config: SourceConfig) -> Tag:
        for selector in CONTENT_CONTAINER_SELECTORS:
            container = soup.select_one(selector)
            if container is not None:
                return container

        raise StructuralParsingError(
            f"No content container found for {config.id}",
            url=config.url or self.document_url(config),
            reference=config.reference,
        )

    def iter_blocks(self, container: Tag) -> list[str]:
        """Normalised text of every top-level paragraph block, in document order."""
        blocks = []
        for element in container.find_all(BLOCK_TAGS):
            if element.find_parent(BLOCK_TAGS) is not None:
                continue
            text = normalize(element)
            if element.find("sup") is not None and ARTICLE_HEADING.match(text):
                text = superscript_heading(element, text)
            if text:
                blocks.append(text)
        return blocks

    def segment(
        self, html: str, soup: BeautifulSoup, config: SourceConfig, metadata: PageMetadata
    ) -> list[Provision]:
        container = self.find_container(soup, config)
        blocks = self.iter_blocks(container)

        # Chapter banners are resolved against the whole stream, skipped blocks included
        stream_text = "\n".join(blocks)
        provisions = []
        current: Optional[_OpenArticle] = None
        after_banner = False
        offset = 0

        for text in blocks:
            block_offset = offset
            offset += len(text) + 1

            if is_bracket_wrapped(text) or is_editorial_line(text):
                continue

            if is_banner(text):
                after_banner = True
                continue

            if after_banner and is_uppercase_title(text):
                after_banner = False
                continue
            after_banner = False

            heading_match = match_article_heading(text)
            if heading_match:
                if current is not None:
                    self._append(provisions, current, stream_text)

                first_line, _, rest = text.partition("\n")
                section = normalize_section(heading_match.group("number"))
                heading = (
                    f"{heading_match.group('label')} {section}"
                    f"{first_line[heading_match.end('number'):]}"
                )
                current = _OpenArticle(
                    section=section,
                    heading=heading,
                    remainder=first_line[heading_match.end() :],
                    offset=block_offset,
                )
                if rest:
                    current.body.append(rest)
                continue

            if current is not None:
                current.body.append(text)

        if current is not None:
            self._append(provisions, current, stream_text)

        if not provisions:
            fallback = self.fallback_provision(container, metadata)
            if fallback is not None:
                logger.warning(
                    f"No article headings found in {config.id}, using whole-document fallback",
                    extra={"doc_id": config.id, "doc_source": self.source.value},
                )
                provisions.append(fallback)

        return provisions

    def _append(self, provisions: list[Provision], article: _OpenArticle, stream_text: str) -> None:
        provision = self.finalize(article, stream_text)
        if provision is not None:
            provisions.append(provision)

    def finalize(self, article: _OpenArticle, stream_text: str) -> Optional[Provision]:
        """Close an open article; headings without body are dropped unless repealed."""
        heading = tidy_text(article.heading)
        content = tidy_text("\n".join(article.body))

        if not content:
            if not REPEAL_MARKER.search(heading):
                logger.debug(f"Dropping empty article {article.section}")
                return None
            content = strip_brackets(article.remainder).lstrip(". ")
            if not content:
                content = strip_brackets(heading)

        return Provision(
            provision_ref=provision_ref_for(article.section),
            chapter=resolve_heading(stream_text, article.offset, UKRAINIAN_HEADINGS),
            section=article.section,
            title=heading,
            content=content,
        )

    def fallback_provision(self, container: Tag, metadata: PageMetadata) -> Optional[Provision]:
        content = normalize(container)
        if not content:
            return None
        return Provision(
            provision_ref=provision_ref_for(FALLBACK_SECTION),
            chapter=None,
            section=FALLBACK_SECTION,
            title=metadata.title,
            content=content,
        )
