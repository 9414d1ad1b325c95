import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


def set_logging_level(
    level: int,
    service_name: Optional[str] = None,
) -> None:
    """Set logging level for all lexua loggers.

    Args:
        level: The logging level to set
        service_name: Name of the service (e.g., "ingest", "verify")
    """
    loggers = [logging.getLogger(name) for name in logging.root.manager.loggerDict]
    for logger in loggers:
        if "lexua" in logger.name or "__main__" == logger.name:
            logger.setLevel(level)
    logging.getLogger("lexua").setLevel(level)

    logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    if service_name:
        logging.getLogger("lexua").debug(f"Logging configured for {service_name}")


def read_html_file(filepath: Union[str, Path]) -> str:
    """Read a cached HTML file as UTF-8 text."""
    with open(filepath, "r", encoding="utf-8") as f:
        return f.read()


def write_text_file(filepath: Union[str, Path], text: str) -> None:
    """Write UTF-8 text, creating parent directories as needed."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
