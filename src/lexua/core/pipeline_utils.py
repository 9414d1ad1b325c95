"""Pipeline utilities for cross-cutting concerns like monitoring and logging."""

import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, Iterator, TypeVar

from lexua.core.models import LexModel

T = TypeVar("T", bound=LexModel)


class PipelineMonitor:
    """Decorator for pipeline monitoring and structured logging."""

    def __init__(self, doc_type: str, track_progress: bool = True, progress_interval: int = 10):
        """Initialize the pipeline monitor.

        Args:
            doc_type: The type of document being processed (e.g., 'legislation')
            track_progress: Whether to log progress updates
            progress_interval: Seconds between progress updates
        """
        self.doc_type = doc_type
        self.track_progress = track_progress
        self.progress_interval = progress_interval

    def __call__(self, func: Callable[..., Iterator[T]]) -> Callable[..., Iterator[T]]:
        """Wrap the pipeline function with monitoring capabilities."""

        @wraps(func)
        def wrapper(*args, **kwargs) -> Iterator[T]:
            logger = logging.getLogger(func.__module__)
            start_time = time.time()
            doc_count = 0
            last_progress_time = start_time

            params_info = self._extract_params_info(kwargs)

            logger.info(
                f"Starting {self.doc_type} pipeline",
                extra={"doc_type": self.doc_type, "pipeline_status": "started", **params_info},
            )

            try:
                for doc in func(*args, **kwargs):
                    doc_count += 1

                    logger.info(
                        f"Processed {self.doc_type} document: {doc.id}",
                        extra={
                            "doc_type": self.doc_type,
                            "processing_status": "success",
                            **self._extract_doc_metadata(doc),
                        },
                    )

                    if self.track_progress:
                        current_time = time.time()
                        if current_time - last_progress_time >= self.progress_interval:
                            elapsed = current_time - start_time
                            logger.info(
                                f"Pipeline progress: {doc_count} documents processed",
                                extra={
                                    "doc_type": self.doc_type,
                                    "pipeline_status": "in_progress",
                                    "doc_count": doc_count,
                                    "elapsed_seconds": elapsed,
                                },
                            )
                            last_progress_time = current_time

                    yield doc

            except Exception as e:
                logger.error(
                    f"Pipeline failure in {self.doc_type}: {str(e)}",
                    exc_info=True,
                    extra={
                        "doc_type": self.doc_type,
                        "pipeline_status": "failed",
                        "error_type": type(e).__name__,
                    },
                )
                raise

            finally:
                elapsed = time.time() - start_time
                logger.info(
                    f"Completed {self.doc_type} pipeline: {doc_count} documents in {elapsed:.2f}s",
                    extra={
                        "doc_type": self.doc_type,
                        "pipeline_status": "completed",
                        "total_docs": doc_count,
                        "elapsed_seconds": elapsed,
                        **params_info,
                    },
                )

        return wrapper

    def _extract_params_info(self, kwargs: dict) -> Dict[str, Any]:
        """Extract relevant parameters for logging."""
        info = {}
        for key in ("source", "limit"):
            if key in kwargs:
                value = kwargs[key]
                info[key] = getattr(value, "value", value)
        return info

    def _extract_doc_metadata(self, doc: T) -> Dict[str, Any]:
        """Extract metadata from a document for logging."""
        metadata = {"doc_id": getattr(doc, "id", None)}

        if hasattr(doc, "title"):
            metadata["doc_title"] = doc.title[:100]
        if hasattr(doc, "provisions"):
            metadata["provision_count"] = len(doc.provisions)
        if hasattr(doc, "definitions"):
            metadata["definition_count"] = len(doc.definitions)

        return metadata
