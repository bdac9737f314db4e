"""Pattern queries over an AtomSpace.

Matching is by atom type only: every atom of the pattern's type whose
confidence reaches QUERY_CONFIDENCE_THRESHOLD is returned, in creation
order. The pattern's name and truth value are not consulted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Protocol

from plnspace.schema import AtomType

if TYPE_CHECKING:
    from .atom_store import Atom, AtomSpace

__all__ = [
    "AtomPattern",
    "QueryResult",
    "QUERY_CONFIDENCE_THRESHOLD",
    "query",
]

QUERY_CONFIDENCE_THRESHOLD = 0.5


class TypedPattern(Protocol):
    type: AtomType


@dataclass(frozen=True)
class AtomPattern:
    """Query pattern. Only ``type`` takes part in matching."""

    type: AtomType
    name: str | None = None


@dataclass
class QueryResult:
    """Atoms matching a query.

    Attributes:
        atoms: Matching atoms in creation order
    """

    atoms: list["Atom"] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.atoms)

    @property
    def found(self) -> bool:
        return bool(self.atoms)

    def __len__(self) -> int:
        return len(self.atoms)

    def __iter__(self) -> Iterator["Atom"]:
        return iter(self.atoms)


def query(space: "AtomSpace", pattern: TypedPattern) -> QueryResult:
    """Find atoms of the pattern's type with confidence >= 0.5.

    Args:
        space: The AtomSpace to scan
        pattern: AtomPattern, Atom, or anything with a ``type``

    Returns:
        QueryResult, possibly empty
    """
    return QueryResult(
        atoms=[
            atom
            for atom in space
            if atom.type == pattern.type
            and atom.truth_value.confidence >= QUERY_CONFIDENCE_THRESHOLD
        ]
    )
