import json
from typing import Any

from pydantic import BaseModel, ConfigDict


class LexModel(BaseModel):
    """Base class for all lexua models.

    Canonical records carry no wall-clock fields, so dumping the same parse
    twice yields byte-identical JSON.
    """

    model_config = ConfigDict(use_enum_values=False, validate_assignment=True)

    def to_record(self) -> dict[str, Any]:
        """Return the JSON-compatible record in field declaration order."""
        return self.model_dump(mode="json")

    def to_json(self) -> str:
        """Serialise the record deterministically (UTF-8 text, two-space indent)."""
        return json.dumps(self.to_record(), ensure_ascii=False, indent=2)
