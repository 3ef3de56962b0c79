"""Identifier references used throughout the Management API."""

from dataclasses import dataclass
from typing import Any, Dict
from enum import Enum


class ReferenceKind(str, Enum):
    """How a reference identifies its target."""
    ID = "id"
    CODENAME = "codename"
    EXTERNAL_ID = "external_id"


# URL path prefixes used by the Management API for each kind
_PATH_PREFIXES = {
    ReferenceKind.ID: "",
    ReferenceKind.CODENAME: "codename/",
    ReferenceKind.EXTERNAL_ID: "external-id/",
}


@dataclass(frozen=True)
class Reference:
    """
    Reference to an item, type, element, language or workflow step.

    A reference only carries identity. Exactly one of the three identifier
    kinds is used; `value` is the raw identifier string for any kind.
    """
    kind: ReferenceKind
    value: str

    @classmethod
    def by_id(cls, value: str) -> "Reference":
        return cls(ReferenceKind.ID, value)

    @classmethod
    def by_codename(cls, value: str) -> "Reference":
        return cls(ReferenceKind.CODENAME, value)

    @classmethod
    def by_external_id(cls, value: str) -> "Reference":
        return cls(ReferenceKind.EXTERNAL_ID, value)

    def to_dict(self) -> Dict[str, str]:
        """Convert to the API wire format, e.g. {"codename": "article"}."""
        return {self.kind.value: self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reference":
        """Create from the API wire format."""
        keys = [kind for kind in ReferenceKind if data.get(kind.value)]
        if len(keys) != 1:
            raise ValueError(f"Reference must carry exactly one identifier: {data}")
        kind = keys[0]
        return cls(kind, str(data[kind.value]))

    def path_segment(self) -> str:
        """Render the reference as a Management API URL segment."""
        return f"{_PATH_PREFIXES[self.kind]}{self.value}"

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.value}"
