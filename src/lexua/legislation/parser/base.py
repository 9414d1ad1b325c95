import logging
from abc import abstractmethod
from typing import Optional

from bs4 import BeautifulSoup

from lexua.core.parser import LexParser
from lexua.core.text import parse_html
from lexua.legislation.models import Act, LegislationSource, Provision, SourceConfig, SourceDocument
from lexua.legislation.parser.assembler import assemble_act
from lexua.legislation.parser.definitions import DefinitionLexicon
from lexua.legislation.parser.metadata import PageMetadata

logger = logging.getLogger(__name__)


class LawParser(LexParser):
    """Turns the HTML of one portal into an Act.

    Subclasses provide the source-specific pieces: metadata resolution and
    provision segmentation. Allow-list filtering, definition extraction and
    assembly are shared.
    """

    source: LegislationSource
    lexicon: DefinitionLexicon

    def __init__(self, extract_definitions: bool = True):
        self.extract_definitions = extract_definitions

    def parse(self, html: str, config: SourceConfig, metadata_html: Optional[str] = None) -> Act:
        soup = parse_html(html)
        metadata_soup = parse_html(metadata_html) if metadata_html else None

        metadata = self.resolve_metadata(soup, config, metadata_soup)
        provisions = self.segment(html, soup, config, metadata)

        act = assemble_act(
            config,
            metadata,
            provisions,
            url=self.document_url(config),
            lexicon=self.lexicon,
            extract=self.extract_definitions,
        )

        logger.debug(
            f"Parsed {act.id}: {len(act.provisions)} provisions, {len(act.definitions)} definitions",
            extra={
                "doc_id": act.id,
                "doc_source": self.source.value,
                "provision_count": len(act.provisions),
                "definition_count": len(act.definitions),
            },
        )
        return act

    def parse_content(self, document: SourceDocument) -> Act:
        return self.parse(document.html, document.config, document.metadata_html)

    @abstractmethod
    def resolve_metadata(
        self,
        soup: BeautifulSoup,
        config: SourceConfig,
        metadata_soup: Optional[BeautifulSoup] = None,
    ) -> PageMetadata:
        pass

    @abstractmethod
    def segment(
        self, html: str, soup: BeautifulSoup, config: SourceConfig, metadata: PageMetadata
    ) -> list[Provision]:
        """Split the document into provisions in source order."""
        pass

    @abstractmethod
    def document_url(self, config: SourceConfig) -> str:
        """Canonical URL used when the config does not carry one."""
        pass
