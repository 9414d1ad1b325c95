import logging
from pathlib import Path

from lexua.core.exceptions import FetchError
from lexua.core.http import HttpClient
from lexua.core.loader import LexLoader
from lexua.core.utils import write_text_file
from lexua.legislation.loader import document_text_url, source_file_paths
from lexua.legislation.models import LegislationSource, SourceConfig, SourceDocument
from lexua.legislation.urls import rada_english_url
from lexua.settings import SOURCE_DIR

logger = logging.getLogger(__name__)


class LegislationScraper(LexLoader):
    """Fetches legislation pages from the portal and caches them on disk."""

    def __init__(
        self,
        http_client: HttpClient,
        source: LegislationSource = LegislationSource.RADA,
        output_path: str | Path = SOURCE_DIR,
    ):
        self.http_client = http_client
        self.source = LegislationSource(source)
        self.output_path = Path(output_path)

    def load_document(self, config: SourceConfig) -> SourceDocument:
        """Fetch the document text (and the English metadata page for rada).

        Raises:
            FetchError: If any required page answers with a non-200 status
        """
        text_url = document_text_url(config, self.source)
        html = self._fetch(text_url, config)

        metadata_html = None
        if self.source == LegislationSource.RADA:
            metadata_html = self._fetch(rada_english_url(config.reference), config)

        text_path, metadata_path = source_file_paths(self.output_path, config, self.source)
        write_text_file(text_path, html)
        if metadata_path is not None and metadata_html is not None:
            write_text_file(metadata_path, metadata_html)
        logger.debug(f"Cached {config.id} at {text_path}")

        return SourceDocument(
            config=config,
            source=self.source,
            url=text_url,
            html=html,
            metadata_html=metadata_html,
        )

    def _fetch(self, url: str, config: SourceConfig) -> str:
        status, body = self.http_client.fetch(url)
        if status != 200:
            raise FetchError(f"Fetch failed for {config.id}: HTTP {status}", url=url, status_code=status)
        return body
