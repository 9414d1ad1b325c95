"""Tests for comparing stored provisions against a fresh parse."""

import pytest

from lexua.legislation.catalog import default_catalog
from lexua.legislation.models import Act, Provision
from lexua.legislation.pipeline import SeedStore
from lexua.legislation.urls import rada_print_url
from lexua.legislation.verify import (
    VerificationStatus,
    VerificationTarget,
    first_difference,
    verify_official_match,
    verify_target,
)

TARGET = VerificationTarget("ua-personal-data-protection", "2297-17", "1")
PAGE = (
    "<html><head><title>Про захист персональних даних | Законодавство України</title></head>"
    '<body><div id="article"><p>Стаття 1. Сфера дії</p><p>Цей Закон регулює відносини.</p></div></body></html>'
)


class FakeFetcher:
    def __init__(self, status=200, body=PAGE):
        self.status = status
        self.body = body

    def fetch(self, url):
        assert url == rada_print_url("2297-17")
        return self.status, self.body


def seed(tmp_path, content: str = "Цей Закон регулює відносини.", section: str = "1") -> SeedStore:
    store = SeedStore(tmp_path)
    act = Act(
        id="ua-personal-data-protection",
        title="Про захист персональних даних",
        provisions=[Provision(provision_ref=f"art{section}", section=section, content=content)],
    )
    store.save(act, order="01")
    return store


@pytest.mark.parametrize(
    "a,b,expected",
    [("abc", "abc", -1), ("abc", "abd", 2), ("ab", "abc", 2), ("", "a", 0)],
)
def test_first_difference(a, b, expected):
    assert first_difference(a, b) == expected


class TestVerifyTarget:
    def test_match(self, tmp_path):
        result = verify_target(TARGET, FakeFetcher(), seed(tmp_path), default_catalog())

        assert result.status == VerificationStatus.MATCH
        assert "Exact match" in result.details

    def test_mismatch_reports_first_difference(self, tmp_path):
        store = seed(tmp_path, content="Цей Закон регулює інше.")

        result = verify_target(TARGET, FakeFetcher(), store, default_catalog())

        assert result.status == VerificationStatus.MISMATCH
        assert "First diff at char 18" in result.details

    def test_missing_in_store(self, tmp_path):
        result = verify_target(TARGET, FakeFetcher(), SeedStore(tmp_path), default_catalog())

        assert result.status == VerificationStatus.MISSING_DB

    def test_section_missing_in_store(self, tmp_path):
        result = verify_target(TARGET, FakeFetcher(), seed(tmp_path, section="2"), default_catalog())

        assert result.status == VerificationStatus.MISSING_DB

    def test_missing_in_source(self, tmp_path):
        target = VerificationTarget("ua-personal-data-protection", "2297-17", "99")

        result = verify_target(target, FakeFetcher(), seed(tmp_path), default_catalog())

        assert result.status == VerificationStatus.MISSING_SOURCE

    def test_fetch_error(self, tmp_path):
        result = verify_target(TARGET, FakeFetcher(status=503, body=""), seed(tmp_path), default_catalog())

        assert result.status == VerificationStatus.FETCH_ERROR
        assert "HTTP 503" in result.details

    def test_result_string(self, tmp_path):
        result = verify_target(TARGET, FakeFetcher(), seed(tmp_path), default_catalog())

        assert str(result).startswith("ua-personal-data-protection section 1 (2297-17): MATCH")


def test_verify_official_match_runs_every_target(tmp_path):
    results = verify_official_match(
        targets=[TARGET, VerificationTarget("ua-personal-data-protection", "2297-17", "5")],
        fetcher=FakeFetcher(),
        store=seed(tmp_path),
    )

    assert [result.status for result in results] == [
        VerificationStatus.MATCH,
        VerificationStatus.MISSING_SOURCE,
    ]
