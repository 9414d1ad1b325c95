import os

# Portal endpoints
RADA_BASE_URL = os.environ.get("RADA_BASE_URL", "https://zakon.rada.gov.ua")
SEJM_API_BASE_URL = os.environ.get("SEJM_API_BASE_URL", "https://api.sejm.gov.pl/eli")
ISAP_BASE_URL = os.environ.get("ISAP_BASE_URL", "https://isap.sejm.gov.pl")

# HTTP client configuration
USER_AGENT = os.environ.get(
    "LEXUA_USER_AGENT",
    "lexua/0.1 (legislation ingestion; https://github.com/lexua/lexua)",
)
HTTP_MIN_DELAY = float(os.environ.get("HTTP_MIN_DELAY", "0.5"))
HTTP_TIMEOUT = float(os.environ.get("HTTP_TIMEOUT", "30"))
HTTP_MAX_RETRIES = int(os.environ.get("HTTP_MAX_RETRIES", "3"))
HTTP_CACHE_TTL = int(os.environ.get("HTTP_CACHE_TTL", "28800"))  # 8 hours in seconds

# Local data directories
DATA_DIR = os.environ.get("LEXUA_DATA_DIR", os.path.join(os.getcwd(), "data"))
SOURCE_DIR = os.environ.get("LEXUA_SOURCE_DIR", os.path.join(DATA_DIR, "source"))
SEED_DIR = os.environ.get("LEXUA_SEED_DIR", os.path.join(DATA_DIR, "seed"))
HTTP_CACHE_DIR = os.environ.get("LEXUA_HTTP_CACHE_DIR", os.path.join(DATA_DIR, "cache", "http"))

# Parser constants
CHAPTER_LOOKBACK_CHARS = 10_000
CHAPTER_TITLE_LOOKAHEAD_CHARS = 600
MAX_PROVISION_CHARS = 12_000
MIN_PROVISION_CHARS = 5
FALLBACK_SECTION = "0"

SOURCE_NAME_MAPPING = {
    "rada": "Verkhovna Rada of Ukraine legislation portal (zakon.rada.gov.ua)",
    "sejm": "Sejm ELI API (api.sejm.gov.pl)",
}
