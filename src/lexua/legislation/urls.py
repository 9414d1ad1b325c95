from urllib.parse import quote

from lexua.settings import RADA_BASE_URL, SEJM_API_BASE_URL


def _path_reference(reference: str) -> str:
    return quote(reference.strip().strip("/"), safe="/")


def rada_document_url(reference: str) -> str:
    """Human-readable page of a law on zakon.rada.gov.ua."""
    return f"{RADA_BASE_URL}/laws/show/{_path_reference(reference)}"


def rada_print_url(reference: str) -> str:
    """Print rendition carrying the authoritative article text."""
    return f"{rada_document_url(reference)}/print"


def rada_english_url(reference: str) -> str:
    """Metadata page rendered in English, used for the English title."""
    return f"{rada_document_url(reference)}?lang=en"


def eli_act_url(reference: str) -> str:
    """ELI metadata endpoint, e.g. ``DU/2018/1000``."""
    return f"{SEJM_API_BASE_URL}/acts/{_path_reference(reference)}"


def eli_text_url(reference: str) -> str:
    """ELI HTML text endpoint."""
    return f"{eli_act_url(reference)}/text.html"
