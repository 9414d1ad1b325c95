import logging
from typing import Optional

from lexua.legislation.catalog import SourceCatalog
from lexua.legislation.models import Act
from lexua.legislation.parser import LawParser, PrintPageParser

logger = logging.getLogger(__name__)


def build_act(
    html: str,
    reference: str,
    catalog: SourceCatalog,
    parser: Optional[LawParser] = None,
    metadata_html: Optional[str] = None,
) -> Act:
    """Parse any document by its portal reference.

    The curated configuration is used when the catalog knows the reference;
    otherwise a generic configuration is derived from the reference alone.
    Print pages are assumed unless another parser is supplied.
    """
    config = catalog.resolve(reference)
    parser = parser or PrintPageParser()

    logger.debug(
        f"Building {config.id} from reference {reference}",
        extra={"doc_id": config.id, "doc_source": parser.source.value},
    )
    return parser.parse(html, config, metadata_html=metadata_html)
