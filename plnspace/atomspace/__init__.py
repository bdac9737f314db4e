"""AtomSpace: probabilistic knowledge graph with PLN forward chaining.

This module provides a bounded store of typed atoms (nodes and links),
each carrying a PLN truth value (strength, confidence, count), and a
Unified Rule Engine that derives new knowledge by exhaustively applying
inference rules to pairs of atoms.

Key features:
- Fixed-capacity arena with handle-based links
- PLN truth value algebra (AND, OR, NOT) with clamping
- Modus ponens and inheritance transitivity rules
- Deterministic forward chaining to a fixpoint
- Type-based pattern queries

Example usage:
    from plnspace.schema import AtomType
    from plnspace.atomspace import (
        AtomSpace, URE, InheritanceTransitivityRule, AtomPattern, query, tv_create,
    )

    space = AtomSpace(capacity=100, embedding_dim=32)
    dog = space.create_atom(AtomType.CONCEPT_NODE, "Dog")
    mammal = space.create_atom(AtomType.CONCEPT_NODE, "Mammal")
    animal = space.create_atom(AtomType.CONCEPT_NODE, "Animal")
    space.add_inheritance_edge(dog, mammal, tv_create(0.95, 0.9, 10))
    space.add_inheritance_edge(mammal, animal, tv_create(0.95, 0.9, 10))

    ure = URE(space, max_iterations=10, min_confidence=0.5)
    ure.add_rule(InheritanceTransitivityRule())
    inferences = ure.forward_chain()

    links = query(space, AtomPattern(AtomType.INHERITANCE_LINK))
    print(f"{links.count} inheritance links")
"""

from .truth_functions import (
    tv_create,
    tv_and,
    tv_or,
    tv_not,
    DEFAULT_TRUTH,
)
from .embeddings import EmbeddingBuffer
from .atom_store import (
    Atom,
    AtomSpace,
)
from .rule import (
    InferenceRule,
    FunctionRule,
    ModusPonensRule,
    InheritanceTransitivityRule,
    TRANSITIVITY_DECAY,
    BUILTIN_RULES,
    get_rule,
)
from .engine import (
    URE,
    ChainStats,
    StopReason,
)
from .query import (
    AtomPattern,
    QueryResult,
    QUERY_CONFIDENCE_THRESHOLD,
    query,
)
from .kb_loader import (
    KBLoader,
    KB_DIR,
)

__all__ = [
    # Truth functions
    "tv_create",
    "tv_and",
    "tv_or",
    "tv_not",
    "DEFAULT_TRUTH",
    # Storage
    "EmbeddingBuffer",
    "Atom",
    "AtomSpace",
    # Rules
    "InferenceRule",
    "FunctionRule",
    "ModusPonensRule",
    "InheritanceTransitivityRule",
    "TRANSITIVITY_DECAY",
    "BUILTIN_RULES",
    "get_rule",
    # Engine
    "URE",
    "ChainStats",
    "StopReason",
    # Query
    "AtomPattern",
    "QueryResult",
    "QUERY_CONFIDENCE_THRESHOLD",
    "query",
    # Knowledge Base
    "KBLoader",
    "KB_DIR",
]
