import logging
from pathlib import Path
from typing import Optional, Tuple

from lexua.core.loader import LexLoader
from lexua.core.utils import read_html_file
from lexua.legislation.models import LegislationSource, SourceConfig, SourceDocument
from lexua.legislation.urls import eli_text_url, rada_print_url
from lexua.settings import SOURCE_DIR

logger = logging.getLogger(__name__)

# File suffixes of the document text and of the optional metadata page
SOURCE_FILE_SUFFIXES = {
    LegislationSource.RADA: ("print", "en"),
    LegislationSource.SEJM: ("text", None),
}


def source_file_path(source_dir: str | Path, config: SourceConfig, suffix: str) -> Path:
    """Cached page location, e.g. ``data/source/01-ua-personal-data-protection.print.html``."""
    return Path(source_dir) / f"{config.order}-{config.id}.{suffix}.html"


def source_file_paths(
    source_dir: str | Path, config: SourceConfig, source: LegislationSource
) -> Tuple[Path, Optional[Path]]:
    text_suffix, metadata_suffix = SOURCE_FILE_SUFFIXES[LegislationSource(source)]
    text_path = source_file_path(source_dir, config, text_suffix)
    metadata_path = source_file_path(source_dir, config, metadata_suffix) if metadata_suffix else None
    return text_path, metadata_path


def document_text_url(config: SourceConfig, source: LegislationSource) -> str:
    """URL the document text is fetched from."""
    if LegislationSource(source) == LegislationSource.SEJM:
        return eli_text_url(config.reference)
    return rada_print_url(config.reference)


class LegislationLoader(LexLoader):
    """Loader for legislation pages previously cached on disk."""

    def __init__(self, source: LegislationSource = LegislationSource.RADA, input_path: str | Path = SOURCE_DIR):
        self.source = LegislationSource(source)
        self.input_path = Path(input_path)

    def has_content(self, config: SourceConfig) -> bool:
        """Whether every page this source needs is cached."""
        text_path, metadata_path = source_file_paths(self.input_path, config, self.source)
        return text_path.exists() and (metadata_path is None or metadata_path.exists())

    def load_document(self, config: SourceConfig) -> SourceDocument:
        text_path, metadata_path = source_file_paths(self.input_path, config, self.source)
        logger.debug(f"Loading {config.id} from {text_path}")

        return SourceDocument(
            config=config,
            source=self.source,
            url=document_text_url(config, self.source),
            html=read_html_file(text_path),
            metadata_html=read_html_file(metadata_path) if metadata_path else None,
        )
