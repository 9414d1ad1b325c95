"""Check stored provision text against a fresh parse of the official print page.

A freshly fetched page is parsed with definition extraction disabled and one
section's content is compared character by character with the stored seed
record. Parsing is deterministic, so any difference means either the portal
text changed or the stored record is stale.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from lexua.core.http import HttpClient
from lexua.legislation.catalog import SourceCatalog, default_catalog
from lexua.legislation.parser import PrintPageParser
from lexua.legislation.pipeline import Fetcher, SeedStore
from lexua.legislation.urls import rada_print_url

logger = logging.getLogger(__name__)


class VerificationStatus(str, Enum):
    MATCH = "MATCH"
    MISMATCH = "MISMATCH"
    MISSING_DB = "MISSING_DB"
    MISSING_SOURCE = "MISSING_SOURCE"
    FETCH_ERROR = "FETCH_ERROR"


@dataclass(frozen=True)
class VerificationTarget:
    document_id: str
    reference: str
    section: str


@dataclass(frozen=True)
class VerificationResult:
    target: VerificationTarget
    status: VerificationStatus
    details: str

    def __str__(self) -> str:
        return (
            f"{self.target.document_id} section {self.target.section} "
            f"({self.target.reference}): {self.status.value} -- {self.details}"
        )


VERIFICATION_TARGETS = (
    VerificationTarget("ua-personal-data-protection", "2297-17", "1"),
    VerificationTarget("ua-access-public-information", "2939-17", "5"),
    VerificationTarget("ua-electronic-trust-services", "2155-19", "10"),
)


def first_difference(a: str, b: str) -> int:
    """Index of the first differing character, or -1 when the strings are equal."""
    for index in range(max(len(a), len(b))):
        if index >= len(a) or index >= len(b) or a[index] != b[index]:
            return index
    return -1


def verify_target(
    target: VerificationTarget,
    fetcher: Fetcher,
    store: SeedStore,
    catalog: SourceCatalog,
) -> VerificationResult:
    url = rada_print_url(target.reference)
    status, body = fetcher.fetch(url)
    if status != 200:
        return VerificationResult(target, VerificationStatus.FETCH_ERROR, f"HTTP {status} for {url}")

    config = catalog.resolve(target.reference)
    act = PrintPageParser(extract_definitions=False).parse(body, config)

    source_provision = act.get_provision(target.section)
    if source_provision is None:
        return VerificationResult(
            target,
            VerificationStatus.MISSING_SOURCE,
            f"Section {target.section} not found in official source parse",
        )

    stored_act = store.load(target.document_id)
    stored_provision = stored_act.get_provision(target.section) if stored_act else None
    if stored_provision is None:
        return VerificationResult(
            target,
            VerificationStatus.MISSING_DB,
            f"Section {target.section} not found in stored records",
        )

    stored, fresh = stored_provision.content, source_provision.content
    if stored == fresh:
        return VerificationResult(target, VerificationStatus.MATCH, f"Exact match ({len(stored)} chars)")

    return VerificationResult(
        target,
        VerificationStatus.MISMATCH,
        f"First diff at char {first_difference(stored, fresh)}; "
        f"stored={len(stored)} chars, source={len(fresh)} chars",
    )


def verify_official_match(
    targets: Iterable[VerificationTarget] = VERIFICATION_TARGETS,
    fetcher: Optional[Fetcher] = None,
    store: Optional[SeedStore] = None,
    catalog: Optional[SourceCatalog] = None,
) -> list[VerificationResult]:
    fetcher = fetcher or HttpClient()
    store = store or SeedStore()
    catalog = catalog or default_catalog()

    results = []
    for target in targets:
        result = verify_target(target, fetcher, store, catalog)
        log = logger.info if result.status == VerificationStatus.MATCH else logger.warning
        log(str(result), extra={"doc_id": target.document_id, "verification_status": result.status.value})
        results.append(result)
    return results
