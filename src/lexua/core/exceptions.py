class LexParsingError(Exception):
    def __init__(self, message: str):
        super().__init__(message)


class RateLimitException(Exception):
    """Raised when a portal answers with HTTP 429."""

    def __init__(self, message: str, retry_after: int = None, body: str = ""):
        super().__init__(message)
        self.retry_after = retry_after
        self.body = body


class ServerError(Exception):
    """Raised on a transient 5xx answer so the retry policy can pick it up."""

    def __init__(self, message: str, status_code: int, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ProcessedException(Exception):
    """
    Exception that marks a document as processed even though it failed.

    Use this for failures where retrying the same document is pointless
    (e.g. missing content container, non-200 final answer, empty result).
    A multi-document run records the failure and continues with the next one.
    """

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.url = url


class StructuralParsingError(LexParsingError, ProcessedException):
    """The top-level content container of a print page could not be located."""

    def __init__(self, message: str, url: str = None, reference: str = None):
        LexParsingError.__init__(self, message)
        self.url = url
        self.reference = reference


class FetchError(ProcessedException):
    """The portal answered with a final non-200 status."""

    def __init__(self, message: str, url: str = None, status_code: int = None):
        super().__init__(message, url)
        self.status_code = status_code


class EmptyResultError(ProcessedException):
    """Raised by the ingestion pipeline when a parsed act has no provisions."""
