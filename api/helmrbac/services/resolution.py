"""Outcome of deriving RBAC object names."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

# Legacy failure value: three empty segments joined by "/"
EMPTY_OBJECT = "//"


class ResolutionStatus(str, Enum):
    """Whether object names could be derived."""

    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True)
class Resolution:
    """Resolved object names, or the reason they could not be derived.

    ``secondary`` is empty when no second object applies to the context.
    """

    status: ResolutionStatus
    primary: str = ""
    secondary: str = ""
    reason: str = ""

    @classmethod
    def resolved(cls, primary: str, secondary: str = "") -> "Resolution":
        return cls(status=ResolutionStatus.RESOLVED, primary=primary, secondary=secondary)

    @classmethod
    def unresolved(cls, reason: str) -> "Resolution":
        return cls(status=ResolutionStatus.UNRESOLVED, reason=reason)

    @property
    def is_resolved(self) -> bool:
        return self.status == ResolutionStatus.RESOLVED

    @property
    def names(self) -> List[str]:
        """Non-empty object names, primary first."""
        if not self.is_resolved:
            return []
        return [name for name in (self.primary, self.secondary) if name]

    def as_object(self, sentinel: str = EMPTY_OBJECT) -> str:
        """Render the primary name, or ``sentinel`` when unresolved."""
        return self.primary if self.is_resolved else sentinel

    def as_pair(self, sentinel: str = EMPTY_OBJECT) -> Tuple[str, str]:
        """Render both names, or ``(sentinel, sentinel)`` when unresolved."""
        if not self.is_resolved:
            return sentinel, sentinel
        return self.primary, self.secondary


def is_sentinel(name: str) -> bool:
    """True for the empty values returned in place of a failed lookup."""
    return name in ("", EMPTY_OBJECT)


def object_name(project: str, scope: str, app_name: str) -> str:
    """Join the three segments of an RBAC object name."""
    return f"{project}/{scope}/{app_name}"
