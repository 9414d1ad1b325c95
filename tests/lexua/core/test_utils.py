"""Tests for the cached-file helpers."""

from lexua.core.utils import read_html_file, write_text_file


def test_write_creates_parent_directories(tmp_path):
    path = tmp_path / "rada" / "2075-20" / "text.html"

    write_text_file(path, "<p>Стаття 1. Сфера дії</p>")

    assert path.exists()
    assert read_html_file(path) == "<p>Стаття 1. Сфера дії</p>"


def test_read_accepts_string_paths(tmp_path):
    path = tmp_path / "page.html"
    path.write_text("Закон «Про хмарні послуги»", encoding="utf-8")

    assert read_html_file(str(path)) == "Закон «Про хмарні послуги»"
