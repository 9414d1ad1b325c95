from abc import ABC, abstractmethod

from .models import LexModel


class LexLoader(ABC):
    """Abstract base class for Lex loaders and scrapers."""

    @abstractmethod
    def load_document(self, config: LexModel) -> LexModel:
        """Load the raw content described by one source configuration."""
        pass
