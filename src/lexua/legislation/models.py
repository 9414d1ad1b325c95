import re
from enum import Enum
from typing import List, Literal, Optional, Tuple

from pydantic import ConfigDict, Field, field_validator

from lexua.core.models import LexModel
from lexua.settings import FALLBACK_SECTION

ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ActStatus(str, Enum):
    """Legal-force status of an act.

    - IN_FORCE: the act currently has legal force
    - AMENDED: in force, but the published text has been amended
    - REPEALED: the act has lost force
    - NOT_YET_IN_FORCE: published, but not yet in force
    """

    IN_FORCE = "in_force"
    AMENDED = "amended"
    REPEALED = "repealed"
    NOT_YET_IN_FORCE = "not_yet_in_force"


class LegislationSource(str, Enum):
    """Portals whose HTML the parsers understand."""

    RADA = "rada"
    SEJM = "sejm"


def _validate_iso_date(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if not ISO_DATE_PATTERN.match(value):
        raise ValueError(f"Expected an ISO YYYY-MM-DD date, got {value!r}")
    return value


class Provision(LexModel):
    """One addressable article of an act."""

    provision_ref: str = Field(description="ASCII reference token derived from the section.")
    chapter: Optional[str] = Field(default=None, description="Enclosing chapter or division.")
    section: str = Field(description="Section number as it appears in the source.")
    title: str = Field(default_factory=str)
    content: str = Field(default="")


class Definition(LexModel):
    """A term and its statutory meaning."""

    term: str
    definition: str
    source_provision: Optional[str] = None


class Act(LexModel):
    """The canonical record of one legislative instrument."""

    id: str
    type: Literal["statute"] = "statute"
    title: str
    title_en: str = ""
    short_name: str = ""
    status: ActStatus = ActStatus.IN_FORCE
    issued_date: Optional[str] = None
    in_force_date: Optional[str] = None
    url: str = ""
    description: str = ""
    provisions: List[Provision] = Field(default_factory=list)
    definitions: List[Definition] = Field(default_factory=list)

    @field_validator("issued_date", "in_force_date")
    @classmethod
    def check_iso_date(cls, value: Optional[str]) -> Optional[str]:
        return _validate_iso_date(value)

    @property
    def is_empty(self) -> bool:
        """No provision survived segmentation, not even the whole-document fallback."""
        return len(self.provisions) == 0

    @property
    def has_fallback_provision(self) -> bool:
        return len(self.provisions) == 1 and self.provisions[0].section == FALLBACK_SECTION

    def get_provision(self, section: str) -> Optional[Provision]:
        """Return the provision with the given section number, if any."""
        for provision in self.provisions:
            if provision.section == section:
                return provision
        return None

    def __str__(self) -> str:
        return (
            f"{self.title} ({self.id})\n"
            f"Status: {self.status.value}\n"
            f"Issued: {self.issued_date}\n"
            f"Provisions: {len(self.provisions)}\n"
            f"Definitions: {len(self.definitions)}"
        )


class SourceConfig(LexModel):
    """Caller-supplied description of one document to parse.

    The titles, short name, description, status and dates are fallbacks used
    only when extraction does not find better data. ``sections`` is an
    optional allow-list restricting which sections are kept.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    reference: str = Field(description="Reference token of the document in the source portal.")
    title: str = ""
    title_en: str = ""
    short_name: str = ""
    description: str = ""
    sections: Optional[Tuple[str, ...]] = None
    status: Optional[ActStatus] = None
    issued_date: Optional[str] = None
    in_force_date: Optional[str] = None
    url: Optional[str] = None
    order: str = "00"

    @field_validator("issued_date", "in_force_date")
    @classmethod
    def check_iso_date(cls, value: Optional[str]) -> Optional[str]:
        return _validate_iso_date(value)

    @field_validator("sections", mode="before")
    @classmethod
    def coerce_sections(cls, value):
        """Accept any iterable of section numbers (lists from JSON included)."""
        if value is None:
            return None
        if isinstance(value, str):
            return (value,)
        return tuple(str(section) for section in value)


class SourceDocument(LexModel):
    """Raw HTML for one configured document, as fetched or loaded from disk."""

    config: SourceConfig
    source: LegislationSource
    url: str
    html: str
    metadata_html: Optional[str] = None
