"""
Parsers turning portal HTML into Act records.

Two source grammars are supported behind the shared LawParser interface:

- PrintPageParser: zakon.rada.gov.ua print pages, a flat stream of paragraph
  blocks with inline "Стаття N." headings
- EliTextParser: the Sejm ELI text endpoint, with one div container per article

Both share normalisation, chapter attribution, definition mining and assembly.
"""

from lexua.legislation.models import LegislationSource

from .base import LawParser
from .eli_parser import EliTextParser
from .print_parser import PrintPageParser

PARSERS_BY_SOURCE = {
    LegislationSource.RADA: PrintPageParser,
    LegislationSource.SEJM: EliTextParser,
}


def get_parser(source: LegislationSource, extract_definitions: bool = True) -> LawParser:
    """Parser instance for the given source portal."""
    return PARSERS_BY_SOURCE[LegislationSource(source)](extract_definitions=extract_definitions)


__all__ = ["LawParser", "PrintPageParser", "EliTextParser", "PARSERS_BY_SOURCE", "get_parser"]
