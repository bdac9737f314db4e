"""plnspace: a PLN-style AtomSpace with a forward-chaining rule engine.

Flow:
    AtomSpace (atoms + truth values) -> URE (registered rules)
        -> forward_chain() -> derived atoms -> query()
"""

from plnspace.schema import (
    AtomType,
    TruthValue,
    DEFAULT_TRUTH,
    AtomSpaceConfig,
    UREConfig,
)
from plnspace.atomspace import (
    Atom,
    AtomSpace,
    URE,
    AtomPattern,
    QueryResult,
    query,
    tv_create,
    tv_and,
    tv_or,
    tv_not,
)

__version__ = "0.1.0"

__all__ = [
    # Schema
    "AtomType",
    "TruthValue",
    "DEFAULT_TRUTH",
    "AtomSpaceConfig",
    "UREConfig",
    # AtomSpace
    "Atom",
    "AtomSpace",
    "URE",
    "AtomPattern",
    "QueryResult",
    "query",
    "tv_create",
    "tv_and",
    "tv_or",
    "tv_not",
]
