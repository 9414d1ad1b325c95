import logging
from typing import Iterable, Optional, Sequence

from lexua.core.text import fold_hyphens
from lexua.legislation.models import Act, Provision, SourceConfig
from lexua.legislation.parser.definitions import DefinitionLexicon, extract_definitions
from lexua.legislation.parser.metadata import PageMetadata, is_english_title

logger = logging.getLogger(__name__)


def normalize_section(section: str) -> str:
    """Canonical form of a section number used for comparisons."""
    return "".join(fold_hyphens(str(section)).replace("^", "-").split())


def apply_allow_list(
    provisions: Sequence[Provision], sections: Optional[Iterable[str]]
) -> list[Provision]:
    """Keep only the allowed sections; no allow-list keeps everything."""
    if sections is None:
        return list(provisions)

    allowed = {normalize_section(section) for section in sections}
    return [provision for provision in provisions if normalize_section(provision.section) in allowed]


def deduplicate_provisions(provisions: Iterable[Provision]) -> list[Provision]:
    """Keep the first provision for each reference, preserving source order."""
    unique = []
    seen_refs = set()
    for provision in provisions:
        if provision.provision_ref in seen_refs:
            logger.debug(f"Dropping repeated provision {provision.provision_ref}")
            continue
        seen_refs.add(provision.provision_ref)
        unique.append(provision)
    return unique


def resolve_english_title(candidate: Optional[str], fallback: str) -> str:
    """Accept the candidate only when it is written in Latin script alone."""
    if candidate and is_english_title(candidate):
        return candidate
    return fallback or ""


def assemble_act(
    config: SourceConfig,
    metadata: PageMetadata,
    provisions: Sequence[Provision],
    url: str,
    lexicon: DefinitionLexicon,
    extract: bool = True,
) -> Act:
    """Merge resolved metadata, provisions and definitions into the canonical act.

    The allow-list is applied once, to the provisions, before definitions are
    mined, so definitions only ever come from retained provisions.
    """
    retained = deduplicate_provisions(apply_allow_list(provisions, config.sections))
    if config.sections is not None:
        logger.debug(
            f"Allow-list kept {len(retained)} of {len(provisions)} provisions",
            extra={"doc_id": config.id, "allow_list": list(config.sections)},
        )

    definitions = extract_definitions(retained, lexicon) if extract else []

    return Act(
        id=config.id,
        title=metadata.title,
        title_en=resolve_english_title(metadata.title_en, config.title_en),
        short_name=config.short_name,
        status=metadata.status,
        issued_date=metadata.issued_date,
        in_force_date=metadata.in_force_date,
        url=config.url or url,
        description=config.description,
        provisions=retained,
        definitions=definitions,
    )
