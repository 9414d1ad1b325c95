from abc import ABC, abstractmethod

from .models import LexModel


class LexParser(ABC):
    """Abstract base class for Lex parsers."""

    @abstractmethod
    def parse_content(self, document) -> LexModel | list[LexModel]:
        """Parse a loaded source document into a LexModel."""
        pass
