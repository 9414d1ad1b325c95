"""Entity decoding and whitespace normalisation for portal HTML fragments.

``normalize`` is lossy but total: any input string resolves to some text.
Entities without a mapping (and numeric references to code points that
cannot be represented) are passed through literally.

Markup is parsed with BeautifulSoup. ``parse_html`` escapes every ampersand
before parsing so entity references survive as literal text and are decoded
exactly once, by ``decode_entities``, with the fixed mapping below.
"""

import re
from typing import Iterator, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

NAMED_ENTITIES = {
    "nbsp": " ",
    "amp": "&",
    "lt": "<",
    "gt": ">",
    "quot": '"',
    "apos": "'",
    "laquo": "«",
    "raquo": "»",
    "ldquo": "“",
    "rdquo": "”",
    "bdquo": "„",
    "lsquo": "‘",
    "rsquo": "’",
    "sbquo": "‚",
    "ndash": "–",
    "mdash": "—",
    "minus": "−",
    "hellip": "…",
    "sect": "§",
    "shy": "",
}

# U+2010 hyphen, U+2011 non-breaking hyphen, U+2012 figure dash, U+2013 en dash,
# U+2014 em dash, U+2212 minus sign
HYPHEN_VARIANTS = "\u2010\u2011\u2012\u2013\u2014\u2212"
_HYPHEN_TABLE = str.maketrans({char: "-" for char in HYPHEN_VARIANTS})

BLOCK_TAGS = frozenset(
    {
        "address", "article", "blockquote", "dd", "div", "dl", "dt", "footer",
        "h1", "h2", "h3", "h4", "h5", "h6", "header", "hr", "li", "ol", "p",
        "pre", "section", "table", "tbody", "thead", "tr", "ul",
    }
)
CELL_TAGS = frozenset({"td", "th"})
SKIPPED_TAGS = frozenset({"script", "style", "template", "noscript"})

_ENTITY = re.compile(r"&(#[0-9]{1,7}|#[xX][0-9a-fA-F]{1,6}|[A-Za-z][A-Za-z0-9]{1,31});")
_HORIZONTAL_WS = re.compile(r"[ \t\f\v\u00a0\u2000-\u200a\u202f\u205f\u3000]+")
_ZERO_WIDTH = re.compile(r"[\u00ad\u200b\u200c\u200d\u2060\ufeff]")

_LATIN = re.compile(r"[A-Za-z]")
_CYRILLIC = re.compile(r"[\u0400-\u04ff]")

BRACKET_CHARS = "{}[]()"


def _replace_entity(match: re.Match) -> str:
    body = match.group(1)
    if body[0] != "#":
        return NAMED_ENTITIES.get(body, match.group(0))

    if body[1] in "xX":
        code_point = int(body[2:], 16)
    else:
        code_point = int(body[1:])

    # NUL, surrogates and out-of-range values cannot be emitted as UTF-8 text
    if code_point == 0 or 0xD800 <= code_point <= 0xDFFF or code_point > 0x10FFFF:
        return match.group(0)
    return chr(code_point)


def decode_entities(text: str) -> str:
    """Decode the fixed named entities plus decimal and hex references."""
    return _ENTITY.sub(_replace_entity, text)


def parse_html(html: str) -> BeautifulSoup:
    """Parse markup, leaving entity references undecoded for ``normalize``."""
    return BeautifulSoup(html.replace("&", "&amp;"), "html.parser")


def _iter_text(element: Tag) -> Iterator[str]:
    # Explicit stack: portal pages nest deeply enough to exhaust recursion.
    pending: list = list(reversed(element.contents))
    while pending:
        node = pending.pop()
        if isinstance(node, Tag):
            name = node.name.lower()
            if name in SKIPPED_TAGS:
                continue
            if name == "br":
                yield "\n"
                continue

            separator = "\n" if name in BLOCK_TAGS else " " if name in CELL_TAGS else ""
            if separator:
                yield separator
                pending.append(separator)
            pending.extend(reversed(node.contents))
        elif isinstance(node, PreformattedString):
            # comments, doctypes, declarations, CDATA and processing instructions
            continue
        elif isinstance(node, NavigableString):
            yield str(node)
        else:
            yield node


def strip_tags(html_fragment: Union[str, Tag]) -> str:
    """Drop markup, turning line breaks and block boundaries into newlines."""
    element = parse_html(html_fragment) if isinstance(html_fragment, str) else html_fragment
    return "".join(_iter_text(element))


def normalize(html_fragment: Union[str, Tag, None]) -> str:
    """Convert an HTML fragment into clean text.

    Accepts markup or an element from a tree built by ``parse_html``. Tags are
    removed (``<br>`` and block boundaries become newlines), entities decoded,
    horizontal whitespace collapsed, every line trimmed and empty lines
    dropped.
    """
    if html_fragment is None or (isinstance(html_fragment, str) and not html_fragment):
        return ""

    return tidy_text(decode_entities(strip_tags(html_fragment)))


def tidy_text(text: str) -> str:
    """Whitespace cleanup of already tag-free text, one trimmed line per line."""
    text = _ZERO_WIDTH.sub("", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _HORIZONTAL_WS.sub(" ", text)

    lines = [line.strip() for line in text.split("\n")]
    return "\n".join(line for line in lines if line)


def collapse_whitespace(text: str) -> str:
    """Collapse every whitespace run (newlines included) into one space."""
    return " ".join(text.split())


def fold_hyphens(text: str) -> str:
    """Fold every Unicode hyphen or dash variant into an ASCII hyphen."""
    return text.translate(_HYPHEN_TABLE)


def strip_brackets(text: str) -> str:
    """Remove bracket characters and tidy the remaining whitespace."""
    for char in BRACKET_CHARS:
        text = text.replace(char, " ")
    return collapse_whitespace(text)


def has_latin(text: str) -> bool:
    return bool(_LATIN.search(text))


def has_cyrillic(text: str) -> bool:
    return bool(_CYRILLIC.search(text))


# Cyrillic letters typed in place of Latin roman digits: І, Х, С, М
_ROMAN_LOOKALIKES = str.maketrans({"І": "I", "Х": "X", "С": "C", "М": "M"})
ROMAN_DIGITS = "IVXLCDMІХСМ"


def fold_roman_numeral(text: str) -> str:
    """Replace Cyrillic look-alikes in a roman numeral with Latin letters."""
    return text.translate(_ROMAN_LOOKALIKES)
