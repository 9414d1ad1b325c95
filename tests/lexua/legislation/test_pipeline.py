"""Tests for loading, scraping and ingesting legislation without the network."""

import pytest

from lexua.core.exceptions import FetchError
from lexua.legislation.loader import LegislationLoader, source_file_path
from lexua.legislation.models import Act, LegislationSource, Provision, SourceConfig
from lexua.legislation.parser import PrintPageParser
from lexua.legislation.pipeline import IngestStats, SeedStore, ingest_laws, pipe_acts
from lexua.legislation.scraper import LegislationScraper
from lexua.legislation.urls import eli_text_url, rada_english_url, rada_print_url

GOOD = SourceConfig(id="ua-good", reference="1000-01", title="Добрий закон", order="01")
BROKEN = SourceConfig(id="ua-broken", reference="1000-02", title="Зламаний закон", order="02")
EMPTY = SourceConfig(id="ua-empty", reference="1000-03", title="Порожній закон", order="03")

PRINT_PAGE = (
    "<html><head><title>Добрий закон | Законодавство України</title></head>"
    '<body><div id="article"><p>Стаття 1. Сфера дії</p><p>Текст статті.</p></div></body></html>'
)
ENGLISH_PAGE = "<html><head><title>Good Law | Legislation of Ukraine</title></head><body></body></html>"


class FakeFetcher:
    """Answers from a fixed url map; unknown urls get a 404."""

    def __init__(self, pages=None, errors=None):
        self.pages = pages or {}
        self.errors = errors or {}
        self.calls = []

    def fetch(self, url):
        self.calls.append(url)
        if url in self.errors:
            raise self.errors[url]
        return self.pages.get(url, (404, "Not Found"))


def rada_pages(config: SourceConfig, html: str = PRINT_PAGE) -> dict:
    return {
        rada_print_url(config.reference): (200, html),
        rada_english_url(config.reference): (200, ENGLISH_PAGE),
    }


class TestScraper:
    def test_rada_fetches_print_and_english_pages(self, tmp_path):
        fetcher = FakeFetcher(rada_pages(GOOD))
        document = LegislationScraper(fetcher, output_path=tmp_path).load_document(GOOD)

        assert document.html == PRINT_PAGE
        assert document.metadata_html == ENGLISH_PAGE
        assert document.url == rada_print_url("1000-01")
        assert (tmp_path / "01-ua-good.print.html").read_text(encoding="utf-8") == PRINT_PAGE
        assert (tmp_path / "01-ua-good.en.html").exists()

    def test_sejm_fetches_text_only(self, tmp_path):
        config = SourceConfig(id="pl-act", reference="DU/2018/1000", order="01")
        fetcher = FakeFetcher({eli_text_url("DU/2018/1000"): (200, "<div></div>")})
        document = LegislationScraper(fetcher, source=LegislationSource.SEJM, output_path=tmp_path).load_document(config)

        assert document.metadata_html is None
        assert fetcher.calls == [eli_text_url("DU/2018/1000")]
        assert (tmp_path / "01-pl-act.text.html").exists()

    def test_non_200_raises_fetch_error(self, tmp_path):
        pages = rada_pages(GOOD)
        pages[rada_english_url(GOOD.reference)] = (503, "Service Unavailable")

        with pytest.raises(FetchError) as excinfo:
            LegislationScraper(FakeFetcher(pages), output_path=tmp_path).load_document(GOOD)

        assert excinfo.value.status_code == 503
        assert excinfo.value.url == rada_english_url(GOOD.reference)
        assert not (tmp_path / "01-ua-good.print.html").exists()


class TestLoader:
    def test_has_content_needs_every_page(self, tmp_path):
        loader = LegislationLoader(input_path=tmp_path)
        assert not loader.has_content(GOOD)

        source_file_path(tmp_path, GOOD, "print").write_text(PRINT_PAGE, encoding="utf-8")
        assert not loader.has_content(GOOD)

        source_file_path(tmp_path, GOOD, "en").write_text(ENGLISH_PAGE, encoding="utf-8")
        assert loader.has_content(GOOD)

    def test_load_document(self, tmp_path):
        source_file_path(tmp_path, GOOD, "print").write_text(PRINT_PAGE, encoding="utf-8")
        source_file_path(tmp_path, GOOD, "en").write_text(ENGLISH_PAGE, encoding="utf-8")

        document = LegislationLoader(input_path=tmp_path).load_document(GOOD)

        assert document.config == GOOD
        assert document.source == LegislationSource.RADA
        assert document.html == PRINT_PAGE
        assert document.metadata_html == ENGLISH_PAGE


class TestSeedStore:
    def test_save_find_load(self, tmp_path):
        store = SeedStore(tmp_path / "seed")
        act = Act(
            id="ua-good",
            title="Добрий закон",
            provisions=[Provision(provision_ref="art1", section="1", content="Текст.")],
        )

        path = store.save(act, order="01")

        assert path.name == "01-ua-good.json"
        assert store.find("ua-good") == path
        assert store.load("ua-good") == act
        assert store.load("ua-good-2") is None

    def test_find_ignores_ids_sharing_a_prefix(self, tmp_path):
        store = SeedStore(tmp_path)
        store.save(Act(id="ua-good-extra", title="t"), order="02")

        assert store.find("ua-good") is None

    def test_clear(self, tmp_path):
        store = SeedStore(tmp_path)
        store.save(Act(id="a", title="t"), order="01")
        store.save(Act(id="b", title="t"))

        assert store.clear() == 2
        assert list(tmp_path.glob("*.json")) == []
        assert SeedStore(tmp_path / "missing").clear() == 0


class TestPipeActs:
    def test_failures_are_isolated(self, tmp_path):
        pages = {**rada_pages(GOOD), **rada_pages(EMPTY, html=PRINT_PAGE.replace("<p>Стаття 1. Сфера дії</p><p>Текст статті.</p>", ""))}
        scraper = LegislationScraper(FakeFetcher(pages), output_path=tmp_path)
        stats = IngestStats()

        acts = list(pipe_acts([BROKEN, GOOD, EMPTY], scraper, PrintPageParser(), stats))

        assert [act.id for act in acts] == ["ua-good"]
        assert stats.processed == 1
        assert stats.failed == 2
        assert stats.provisions == 1
        assert [doc_id for doc_id, _ in stats.failures] == ["ua-broken", "ua-empty"]
        assert stats.failures[0][1].startswith("FetchError")
        assert stats.failures[1][1].startswith("EmptyResultError")

    def test_unexpected_errors_are_isolated(self, tmp_path):
        url = rada_print_url(BROKEN.reference)
        fetcher = FakeFetcher(rada_pages(GOOD), errors={url: RuntimeError("boom")})
        stats = IngestStats()

        acts = list(pipe_acts([BROKEN, GOOD], LegislationScraper(fetcher, output_path=tmp_path), PrintPageParser(), stats))

        assert [act.id for act in acts] == ["ua-good"]
        assert stats.failures == [("ua-broken", "RuntimeError: boom")]

    def test_missing_container_is_recorded(self, tmp_path):
        pages = rada_pages(GOOD, html="<html><body><p>Стаття 1. Текст</p></body></html>")
        stats = IngestStats()

        acts = list(pipe_acts([GOOD], LegislationScraper(FakeFetcher(pages), output_path=tmp_path), PrintPageParser(), stats))

        assert acts == []
        assert stats.failures[0][1].startswith("StructuralParsingError")


class TestIngestLaws:
    def test_ingest_writes_seed_files(self, tmp_path):
        store = SeedStore(tmp_path / "seed")
        (tmp_path / "seed").mkdir()
        (tmp_path / "seed" / "99-stale.json").write_text("{}", encoding="utf-8")

        stats = ingest_laws(
            configs=[GOOD, BROKEN],
            http_client=FakeFetcher(rada_pages(GOOD)),
            source_dir=tmp_path / "source",
            store=store,
        )

        assert stats.processed == 1
        assert stats.failed == 1
        assert not (tmp_path / "seed" / "99-stale.json").exists()
        assert (tmp_path / "seed" / "01-ua-good.json").exists()

        act = store.load("ua-good")
        assert act.title == "Добрий закон"
        assert act.title_en == "Good Law"
        assert act.provisions[0].content == "Текст статті."

    def test_limit(self, tmp_path):
        fetcher = FakeFetcher({**rada_pages(GOOD), **rada_pages(BROKEN)})

        stats = ingest_laws(
            configs=[GOOD, BROKEN],
            limit=1,
            http_client=fetcher,
            source_dir=tmp_path / "source",
            store=SeedStore(tmp_path / "seed"),
        )

        assert stats.processed == 1
        assert all("1000-02" not in url for url in fetcher.calls)

    def test_skip_fetch_reuses_cached_pages(self, tmp_path):
        source_dir = tmp_path / "source"
        source_dir.mkdir()
        source_file_path(source_dir, GOOD, "print").write_text(PRINT_PAGE, encoding="utf-8")
        source_file_path(source_dir, GOOD, "en").write_text(ENGLISH_PAGE, encoding="utf-8")
        fetcher = FakeFetcher()

        stats = ingest_laws(
            configs=[GOOD],
            skip_fetch=True,
            http_client=fetcher,
            source_dir=source_dir,
            store=SeedStore(tmp_path / "seed"),
        )

        assert stats.processed == 1
        assert fetcher.calls == []

    def test_summary(self):
        stats = IngestStats(processed=2, failed=1, provisions=10, definitions=3)

        assert stats.summary().splitlines() == [
            "Processed:   2",
            "Failed:      1",
            "Provisions:  10",
            "Definitions: 3",
        ]
