"""Tests for title, issuance date and status resolution."""

import pytest

from lexua.core.text import parse_html
from lexua.legislation.models import ActStatus
from lexua.legislation.parser.metadata import (
    detect_not_yet_in_force,
    detect_repealed_badge,
    detect_status_label,
    detect_valid_badge,
    extract_english_title,
    is_english_title,
    resolve_issued_date,
    resolve_status,
    resolve_title,
)


def soup_of(html: str):
    return parse_html(html)


class TestResolveTitle:
    def test_page_header_wins(self):
        soup = soup_of(
            "<title>Other | Законодавство</title>"
            "<div class='page-header'><h1>Про хмарні послуги</h1></div>"
        )
        assert resolve_title(soup, fallback="fallback") == "Про хмарні послуги"

    def test_title_element_suffix_is_stripped(self):
        soup = soup_of("<title>Про захист персональних даних від 01.06.2010 № 2297-VI | Законодавство України</title>")
        assert resolve_title(soup, fallback="fallback") == "Про захист персональних даних"

    def test_truncated_title_uses_fallback(self):
        soup = soup_of("<h1>Про основні засади забезпечення кібер…</h1>")
        assert resolve_title(soup, fallback="Про кібербезпеку") == "Про кібербезпеку"

    def test_missing_title_uses_fallback(self):
        assert resolve_title(soup_of("<p>no title</p>"), fallback="Fallback") == "Fallback"

    def test_custom_detector_chain(self):
        soup = soup_of("<h1>Header</h1>")
        assert resolve_title(soup, detectors=(lambda s: "Custom",)) == "Custom"


class TestResolveIssuedDate:
    def test_date_is_reformatted(self):
        soup = soup_of("<title>Про доступ до публічної інформації від 13.01.2011 № 2939-VI</title>")
        assert resolve_issued_date(soup) == "2011-01-13"

    def test_no_date(self):
        assert resolve_issued_date(soup_of("<title>Закон</title>")) is None

    def test_impossible_date_is_ignored(self):
        assert resolve_issued_date(soup_of("<title>Закон від 31.02.2011</title>")) is None


class TestStatusDetectors:
    def test_valid_badge(self):
        assert detect_valid_badge(soup_of("<span class='valid'>Чинний</span>")) == ActStatus.IN_FORCE

    def test_repealed_badges(self):
        for css_class in ("invalid", "obsolete", "disabled"):
            soup = soup_of(f"<span class='{css_class}'>x</span>")
            assert detect_repealed_badge(soup) == ActStatus.REPEALED

    @pytest.mark.parametrize(
        "html, expected",
        [
            ("<span class='doc-status'>Втратив чинність</span>", ActStatus.REPEALED),
            ("<span class='doc-status'>No longer in force</span>", ActStatus.REPEALED),
            ("<span class='status'>Чинний</span>", ActStatus.IN_FORCE),
            ("<span class='status'>Не набрав чинності</span>", ActStatus.NOT_YET_IN_FORCE),
            ("<span class='status-nochange'>—</span>", None),
        ],
    )
    def test_status_label(self, html, expected):
        assert detect_status_label(soup_of(html)) == expected

    def test_not_yet_in_force_scan(self):
        soup = soup_of("<p>Закон not yet in force until 2026</p>")
        assert detect_not_yet_in_force(soup) == ActStatus.NOT_YET_IN_FORCE

    def test_not_yet_in_force_scan_decodes_entities(self):
        soup = soup_of("<p>Закон не набрав&nbsp;чинності</p>")
        assert detect_not_yet_in_force(soup) == ActStatus.NOT_YET_IN_FORCE


class TestResolveStatus:
    def test_first_detector_wins(self):
        soup = soup_of("<span class='valid'></span><span class='invalid'></span>")
        assert resolve_status(soup) == ActStatus.IN_FORCE

    def test_badge_beats_keyword_scan(self):
        soup = soup_of("<span class='obsolete'></span><p>не набрав чинності</p>")
        assert resolve_status(soup) == ActStatus.REPEALED

    def test_default_is_in_force(self):
        assert resolve_status(soup_of("<p>text</p>")) == ActStatus.IN_FORCE

    def test_caller_default_is_used_when_nothing_matches(self):
        assert resolve_status(soup_of("<p>text</p>"), default=ActStatus.AMENDED) == ActStatus.AMENDED

    def test_custom_chain_is_extensible(self):
        chain = (lambda soup: None, lambda soup: ActStatus.AMENDED)
        assert resolve_status(soup_of("<span class='valid'></span>"), detectors=chain) == ActStatus.AMENDED


class TestEnglishTitle:
    def test_latin_title_is_accepted(self):
        soup = soup_of("<title>On Cloud Services | Legislation of Ukraine</title>")
        assert extract_english_title(soup) == "On Cloud Services"

    def test_cyrillic_title_is_rejected(self):
        soup = soup_of("<title>Про хмарні послуги | Законодавство</title>")
        assert extract_english_title(soup) is None

    def test_no_page(self):
        assert extract_english_title(None) is None

    def test_mixed_script_is_not_english(self):
        assert not is_english_title("On Захист")
        assert not is_english_title("2297-17")
        assert is_english_title("On Personal Data Protection")
