"""Tests for chapter and division attribution."""

from lexua.legislation.parser.chapters import POLISH_HEADINGS, UKRAINIAN_HEADINGS, resolve_heading
from lexua.settings import CHAPTER_LOOKBACK_CHARS

CHAPTER_HTML = (
    '<div class="unit unit_chpt" id="chpt_1"><h3>Rozdział&nbsp;1</h3>'
    '<span class="pro-title-unit">Przepisy ogólne</span></div>'
)


def test_chapter_with_title():
    html = CHAPTER_HTML + "<div>article</div>"
    assert resolve_heading(html, len(html) - 5, POLISH_HEADINGS) == "Rozdział 1 - Przepisy ogólne"


def test_chapter_without_title():
    html = "<h3>Rozdział&nbsp;2a</h3><div>article</div>"
    assert resolve_heading(html, len(html), POLISH_HEADINGS) == "Rozdział 2a"


def test_division_with_roman_numeral():
    html = "<h3>Dział&nbsp;IV</h3><div>article</div>"
    assert resolve_heading(html, len(html), POLISH_HEADINGS) == "Dział IV"


def test_last_marker_in_window_wins():
    html = (
        "<h3>Dział&nbsp;II</h3>"
        + CHAPTER_HTML
        + "<h3>Rozdział&nbsp;3</h3><span class=\"pro-title-unit\">Kary</span>"
        + "<div>article</div>"
    )
    assert resolve_heading(html, len(html), POLISH_HEADINGS) == "Rozdział 3 - Kary"


def test_marker_after_position_is_ignored():
    html = "<div>article</div>" + CHAPTER_HTML
    assert resolve_heading(html, 10, POLISH_HEADINGS) is None


def test_marker_outside_lookback_window_is_not_attributed():
    html = "<h3>Rozdział&nbsp;1</h3>" + "x" * (CHAPTER_LOOKBACK_CHARS + 10)
    assert resolve_heading(html, len(html), POLISH_HEADINGS) is None


def test_marker_just_inside_lookback_window_is_attributed():
    html = "<h3>Rozdział&nbsp;1</h3>" + "x" * (CHAPTER_LOOKBACK_CHARS - 100)
    assert resolve_heading(html, len(html), POLISH_HEADINGS) == "Rozdział 1"


def test_custom_window():
    html = "<h3>Rozdział&nbsp;1</h3>" + "x" * 50
    assert resolve_heading(html, len(html), POLISH_HEADINGS, window=20) is None


def test_title_is_bounded_by_position():
    html = '<h3>Rozdział&nbsp;1</h3><div>article</div><span class="pro-title-unit">Later</span>'
    position = html.index("<div>")
    assert resolve_heading(html, position, POLISH_HEADINGS) == "Rozdział 1"


def test_lowercase_reference_is_not_a_heading():
    html = "<p>przepisy rozdział 5 stosuje się</p><div>article</div>"
    assert resolve_heading(html, len(html), POLISH_HEADINGS) is None


class TestUkrainianHeadings:
    def test_section_banner_with_title(self):
        text = "РОЗДІЛ I\nЗАГАЛЬНІ ПОЛОЖЕННЯ\nСтаття 1. Сфера дії"
        position = text.index("Стаття")
        assert resolve_heading(text, position, UKRAINIAN_HEADINGS) == "Розділ I - ЗАГАЛЬНІ ПОЛОЖЕННЯ"

    def test_chapter_banner_without_title(self):
        text = "Глава 2\nСтаття 4. Суб'єкти"
        position = text.index("Стаття")
        assert resolve_heading(text, position, UKRAINIAN_HEADINGS) == "Глава 2"

    def test_inner_chapter_wins_over_section(self):
        text = "Розділ II\nОСОБЛИВА ЧАСТИНА\nГлава 3\nПравопорушення\nСтаття 9. Відповідальність"
        position = text.index("Стаття")
        assert resolve_heading(text, position, UKRAINIAN_HEADINGS) == "Глава 3 - Правопорушення"

    def test_mid_line_mention_is_not_a_heading(self):
        text = "відповідно до Розділу I цього Закону\nСтаття 2. Визначення"
        position = text.index("Стаття")
        assert resolve_heading(text, position, UKRAINIAN_HEADINGS) is None

    def test_cyrillic_roman_numerals_are_folded(self):
        text = "Розділ ІІ\nПРИКІНЦЕВІ ПОЛОЖЕННЯ\nГлава ХІ\nСтаття 9. Відповідальність"
        position = text.index("Стаття")
        assert resolve_heading(text, position, UKRAINIAN_HEADINGS) == "Глава XI"
        assert resolve_heading(text, text.index("Глава"), UKRAINIAN_HEADINGS) == "Розділ II - ПРИКІНЦЕВІ ПОЛОЖЕННЯ"
