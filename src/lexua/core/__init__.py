from .exceptions import (
    EmptyResultError,
    FetchError,
    LexParsingError,
    ProcessedException,
    RateLimitException,
    ServerError,
    StructuralParsingError,
)
from .utils import set_logging_level

__all__ = [
    "EmptyResultError",
    "FetchError",
    "LexParsingError",
    "ProcessedException",
    "RateLimitException",
    "ServerError",
    "StructuralParsingError",
    "set_logging_level",
]
