import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Protocol, Sequence, Tuple

from lexua.core.exceptions import EmptyResultError, ProcessedException
from lexua.core.http import HttpClient
from lexua.core.loader import LexLoader
from lexua.core.pipeline_utils import PipelineMonitor
from lexua.core.utils import write_text_file
from lexua.legislation.catalog import configs_for_source
from lexua.legislation.loader import LegislationLoader
from lexua.legislation.models import Act, LegislationSource, SourceConfig
from lexua.legislation.parser import LawParser, get_parser
from lexua.legislation.scraper import LegislationScraper
from lexua.settings import SEED_DIR, SOURCE_DIR

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    """Anything that can fetch a page as ``(status_code, body_text)``."""

    def fetch(self, url: str) -> Tuple[int, str]: ...


class ActStore(Protocol):
    """Destination for canonical act records, keyed by ``act.id``."""

    def save(self, act: Act, order: str = "") -> Path: ...


@dataclass
class IngestStats:
    """Counters of one ingestion run."""

    processed: int = 0
    failed: int = 0
    provisions: int = 0
    definitions: int = 0
    failures: list[Tuple[str, str]] = field(default_factory=list)

    def record_success(self, act: Act) -> None:
        self.processed += 1
        self.provisions += len(act.provisions)
        self.definitions += len(act.definitions)

    def record_failure(self, config: SourceConfig, error: Exception) -> None:
        self.failed += 1
        self.failures.append((config.id, f"{type(error).__name__}: {error}"))

    def summary(self) -> str:
        return (
            f"Processed:   {self.processed}\n"
            f"Failed:      {self.failed}\n"
            f"Provisions:  {self.provisions}\n"
            f"Definitions: {self.definitions}"
        )


class SeedStore:
    """Seed JSON files, one per act, named ``{order}-{id}.json``."""

    def __init__(self, seed_dir: str | Path = SEED_DIR):
        self.seed_dir = Path(seed_dir)

    def path_for(self, act_id: str, order: str = "") -> Path:
        name = f"{order}-{act_id}.json" if order else f"{act_id}.json"
        return self.seed_dir / name

    def save(self, act: Act, order: str = "") -> Path:
        path = self.path_for(act.id, order)
        write_text_file(path, act.to_json())
        return path

    def find(self, act_id: str) -> Optional[Path]:
        """Seed file of an act, whatever its order prefix."""
        if not self.seed_dir.exists():
            return None
        pattern = re.compile(rf"^(?:\d+-)?{re.escape(act_id)}\.json$")
        for path in sorted(self.seed_dir.glob("*.json")):
            if pattern.match(path.name):
                return path
        return None

    def load(self, act_id: str) -> Optional[Act]:
        path = self.find(act_id)
        if path is None:
            return None
        return Act.model_validate_json(path.read_text(encoding="utf-8"))

    def clear(self) -> int:
        """Remove every seed file; returns how many were removed."""
        if not self.seed_dir.exists():
            return 0
        removed = 0
        for path in self.seed_dir.glob("*.json"):
            path.unlink()
            removed += 1
        return removed


@PipelineMonitor(doc_type="legislation", track_progress=True)
def pipe_acts(
    configs: Sequence[SourceConfig],
    loader_or_scraper: LexLoader,
    parser: LawParser,
    stats: IngestStats,
    cached_loader: Optional[LegislationLoader] = None,
    **kwargs,
) -> Iterator[Act]:
    """Load and parse each configured document, skipping the ones that fail.

    When ``cached_loader`` is given, documents already cached on disk are
    read from it instead of ``loader_or_scraper``.
    """
    for config in configs:
        try:
            if cached_loader is not None and cached_loader.has_content(config):
                document = cached_loader.load_document(config)
            else:
                document = loader_or_scraper.load_document(config)

            act = parser.parse_content(document)
            if act.is_empty:
                raise EmptyResultError(f"No provisions extracted for {config.id}", url=document.url)

        except ProcessedException as e:
            stats.record_failure(config, e)
            logger.info(
                f"Skipping {config.id}: {str(e)}",
                extra={"doc_id": config.id, "processing_status": "skipped"},
            )
            continue

        except Exception as e:
            stats.record_failure(config, e)
            logger.warning(
                f"Failed to ingest {config.id}: {e}",
                exc_info=False,
                extra={"doc_id": config.id, "processing_status": "failed"},
            )
            continue

        stats.record_success(act)
        yield act


def ingest_laws(
    source: LegislationSource = LegislationSource.RADA,
    limit: Optional[int] = None,
    skip_fetch: bool = False,
    configs: Optional[Sequence[SourceConfig]] = None,
    http_client: Optional[HttpClient] = None,
    source_dir: str | Path = SOURCE_DIR,
    store: Optional[SeedStore] = None,
) -> IngestStats:
    """Fetch (or load), parse and seed every configured law of one source.

    Old seed files are cleared first; a failing law is recorded and the run
    moves on to the next one.
    """
    source = LegislationSource(source)
    configs = list(configs if configs is not None else configs_for_source(source))
    if limit:
        configs = configs[:limit]

    store = store or SeedStore()
    cleared = store.clear()
    logger.info(
        f"Ingesting {len(configs)} documents from {source.value}, cleared {cleared} old seed files",
        extra={"doc_source": source.value, "limit": limit, "skip_fetch": skip_fetch},
    )

    scraper = LegislationScraper(http_client or HttpClient(), source=source, output_path=source_dir)
    cached_loader = LegislationLoader(source=source, input_path=source_dir) if skip_fetch else None
    stats = IngestStats()

    config_by_id = {config.id: config for config in configs}
    for act in pipe_acts(
        configs,
        scraper,
        get_parser(source),
        stats,
        cached_loader=cached_loader,
        source=source,
        limit=limit,
    ):
        path = store.save(act, order=config_by_id[act.id].order)
        logger.debug(f"Wrote {path}", extra={"doc_id": act.id})

    return stats
