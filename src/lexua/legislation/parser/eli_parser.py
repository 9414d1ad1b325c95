"""Parser for the Sejm ELI ``text.html`` rendition.

Articles are explicit containers::

    <div class="unit unit_arti" id="chpt_2-arti_5" data-id="arti_5">
      <h3><b>Art. 5.</b></h3>
      <div class="unit-inner">...</div>
    </div>

Amending acts quote whole articles of the amended act; those show up as
containers whose id chains several ``arti_`` segments
(``chpt_12-arti_111-arti_22_2``) and are not provisions of this act.
Containers are located with a linear scan of ``<div>`` start tags, and each
article spans up to the next retained container.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Optional

from bs4 import BeautifulSoup

from lexua.core.text import collapse_whitespace, normalize, parse_html
from lexua.legislation.models import ActStatus, LegislationSource, Provision, SourceConfig
from lexua.legislation.parser.base import LawParser
from lexua.legislation.parser.chapters import POLISH_HEADINGS, resolve_heading
from lexua.legislation.parser.definitions import POLISH_DEFINITIONS
from lexua.legislation.parser.metadata import PageMetadata
from lexua.legislation.urls import eli_text_url
from lexua.settings import MAX_PROVISION_CHARS, MIN_PROVISION_CHARS

logger = logging.getLogger(__name__)

ARTICLE_CLASS = "unit_arti"
ARTICLE_ID_MARKER = "arti_"

DIV_START_TAG = re.compile(r"<div\b[^>]*>", re.IGNORECASE)
TAG_ATTRIBUTE = re.compile(r"([\w:-]+)\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|([^\s\"'>]+))")
ARTICLE_NUMBER = re.compile(r"^Art\.?\s*(?P<number>\d+[a-z]*(?:\^\w+)?)", re.IGNORECASE)


@dataclass(frozen=True)
class ArticleContainer:
    """Start tag of one article container and its position in the document."""

    element_id: str
    data_id: str
    start: int
    end_of_tag: int

    @property
    def id_number(self) -> str:
        """Article number encoded in the identifier (``arti_22_2`` -> ``22^2``)."""
        token = self.data_id or self.element_id
        number = token.rsplit(ARTICLE_ID_MARKER, 1)[-1]
        head, _, tail = number.partition("_")
        return f"{head}^{tail}" if tail else head


def parse_attributes(start_tag: str) -> dict[str, str]:
    attributes = {}
    for match in TAG_ATTRIBUTE.finditer(start_tag):
        name = match.group(1).lower()
        value = next((group for group in match.groups()[1:] if group is not None), "")
        attributes.setdefault(name, value)
    return attributes


def is_nested_article(element_id: str) -> bool:
    """Quoted sub-articles of an amending act carry more than one article segment."""
    return element_id.count(ARTICLE_ID_MARKER) > 1


def iter_article_containers(html: str) -> Iterator[ArticleContainer]:
    """Top-level article containers in document order."""
    for match in DIV_START_TAG.finditer(html):
        attributes = parse_attributes(match.group(0))
        classes = attributes.get("class", "").split()
        element_id = attributes.get("id", "")

        if ARTICLE_CLASS not in classes or ARTICLE_ID_MARKER not in element_id:
            continue
        if is_nested_article(element_id):
            logger.debug(f"Skipping nested article container {element_id}")
            continue

        yield ArticleContainer(
            element_id=element_id,
            data_id=attributes.get("data-id", ""),
            start=match.start(),
            end_of_tag=match.end(),
        )


def provision_ref_for(section: str) -> str:
    """``22^2`` -> ``art22_2``; anything outside ASCII letters, digits and ``-`` is dropped."""
    token = section.replace("^", "_")
    return "art" + "".join(char for char in token if char.isascii() and (char.isalnum() or char in "_-"))


def truncate_content(content: str, limit: int = MAX_PROVISION_CHARS) -> str:
    if len(content) > limit:
        logger.debug(f"Truncating provision content from {len(content)} to {limit} characters")
        return content[:limit]
    return content


class EliTextParser(LawParser):
    """Segments Sejm ELI article containers into provisions.

    The text endpoint carries no reliable page metadata, so titles, status
    and dates come from the source configuration.
    """

    source = LegislationSource.SEJM
    lexicon = POLISH_DEFINITIONS

    def document_url(self, config: SourceConfig) -> str:
        return eli_text_url(config.reference)

    def resolve_metadata(
        self,
        soup: BeautifulSoup,
        config: SourceConfig,
        metadata_soup: Optional[BeautifulSoup] = None,
    ) -> PageMetadata:
        return PageMetadata(
            title=config.title,
            status=config.status or ActStatus.IN_FORCE,
            issued_date=config.issued_date,
            in_force_date=config.in_force_date,
            title_en=None,
        )

    def segment(
        self, html: str, soup: BeautifulSoup, config: SourceConfig, metadata: PageMetadata
    ) -> list[Provision]:
        containers = list(iter_article_containers(html))
        provisions = []

        for index, container in enumerate(containers):
            end = containers[index + 1].start if index + 1 < len(containers) else len(html)
            provision = self.parse_article(html, container, end)
            if provision is not None:
                provisions.append(provision)

        logger.debug(
            f"Found {len(containers)} article containers, kept {len(provisions)}",
            extra={"doc_id": config.id, "doc_source": self.source.value},
        )
        return provisions

    def parse_article(self, html: str, container: ArticleContainer, end: int) -> Optional[Provision]:
        fragment = parse_html(html[container.start : end])

        section = None
        heading = self._find_heading(fragment)
        if heading is not None:
            section = self._heading_number(heading)
            heading.decompose()
        section = section or container.id_number

        content = normalize(fragment)
        if len(content) < MIN_PROVISION_CHARS:
            logger.debug(f"Dropping structural-only article {container.element_id}")
            return None

        return Provision(
            provision_ref=provision_ref_for(section),
            chapter=resolve_heading(html, container.start, POLISH_HEADINGS),
            section=section,
            title=f"Art. {section}",
            content=truncate_content(content),
        )

    @staticmethod
    def _find_heading(fragment: BeautifulSoup):
        for heading in fragment.find_all("h3"):
            if ARTICLE_NUMBER.match(collapse_whitespace(normalize(heading))):
                return heading
        return None

    @staticmethod
    def _heading_number(heading) -> Optional[str]:
        for sup in heading.find_all("sup"):
            sup.replace_with(f"^{sup.get_text(strip=True)}")

        # "Art. 22 ^2." -> "Art. 22^2."
        text = collapse_whitespace(normalize(heading)).replace(" ^", "^")
        match = ARTICLE_NUMBER.match(text)
        return match.group("number") if match else None
