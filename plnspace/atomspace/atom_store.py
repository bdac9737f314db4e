"""Bounded atom storage with PLN truth values.

This module provides the AtomSpace: a fixed-capacity arena of atoms kept
in creation order. Links refer to their outgoing atoms by handle (index
into the arena), so every reference stays valid for the lifetime of the
space and cannot point into another space.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Sequence

import numpy as np

from plnspace.schema import DEFAULT_TRUTH, AtomSpaceConfig, AtomType, TruthValue

from .embeddings import EmbeddingBuffer

__all__ = [
    "Atom",
    "AtomSpace",
]

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Atom:
    """A node or link in the knowledge graph.

    Atoms compare by identity: two nodes with the same name are distinct
    atoms. Only the truth value changes after creation.

    Attributes:
        handle: Position in the owning AtomSpace (creation order)
        type: Atom type
        name: Node name (None for links)
        truth_value: Current truth value
        outgoing: Handles of outgoing atoms (empty for nodes)
        data: Opaque payload, not used by reasoning
        embedding: Row view into the space's embedding buffer
    """

    handle: int
    type: AtomType
    name: str | None
    truth_value: TruthValue
    outgoing: tuple[int, ...] = ()
    data: Any = None
    embedding: Optional[np.ndarray] = field(default=None, repr=False)

    @property
    def is_link(self) -> bool:
        """True if this atom has outgoing atoms."""
        return bool(self.outgoing)

    def __str__(self) -> str:
        if self.name is not None:
            return f"({self.type.label} \"{self.name}\") {self.truth_value}"
        targets = " ".join(f"#{h}" for h in self.outgoing)
        return f"({self.type.label} {targets}) {self.truth_value}"


class AtomSpace:
    """Fixed-capacity store owning all atoms.

    Atoms are appended in creation order and never removed individually;
    close() tears down the whole space. Creation beyond capacity returns
    None rather than growing the store.

    Example:
        space = AtomSpace(capacity=100, embedding_dim=32)
        dog = space.create_atom(AtomType.CONCEPT_NODE, "Dog")
        mammal = space.create_atom(AtomType.CONCEPT_NODE, "Mammal")
        space.add_inheritance_edge(dog, mammal, tv_create(0.95, 0.9, 10))
    """

    def __init__(
        self,
        capacity: int,
        embedding_dim: int = 32,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """Initialize an empty space.

        Args:
            capacity: Maximum number of atoms
            embedding_dim: Width of each atom's embedding row
            rng: Random generator for embedding initialization (None = zeros)

        Raises:
            ValueError: If capacity or embedding_dim is negative
        """
        self.capacity = capacity
        self.embedding_dim = embedding_dim
        self._embeddings: Optional[EmbeddingBuffer] = EmbeddingBuffer(
            capacity, embedding_dim, rng=rng
        )
        self._atoms: list[Atom] = []

    @classmethod
    def from_config(cls, config: AtomSpaceConfig) -> "AtomSpace":
        """Create a space from a validated config."""
        rng = np.random.default_rng(config.seed) if config.seed is not None else None
        return cls(config.capacity, config.embedding_dim, rng=rng)

    def __enter__(self) -> "AtomSpace":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def __len__(self) -> int:
        return len(self._atoms)

    def __iter__(self) -> Iterator[Atom]:
        return iter(self._atoms)

    def __getitem__(self, handle: int) -> Atom:
        return self._atoms[handle]

    def __repr__(self) -> str:
        return (
            f"AtomSpace({len(self._atoms)}/{self.capacity} atoms, "
            f"embedding_dim={self.embedding_dim})"
        )

    @property
    def atoms(self) -> list[Atom]:
        """Snapshot of all atoms in creation order."""
        return list(self._atoms)

    @property
    def is_full(self) -> bool:
        """Whether the space has reached capacity."""
        return len(self._atoms) >= self.capacity

    @property
    def embeddings(self) -> Optional[EmbeddingBuffer]:
        """The embedding buffer (None after close())."""
        return self._embeddings

    def create_atom(
        self,
        type: AtomType,
        name: str | None = None,
        truth_value: TruthValue | None = None,
        data: Any = None,
    ) -> Atom | None:
        """Create a node.

        Names are not required to be unique.

        Args:
            type: Atom type
            name: Node name
            truth_value: Initial truth value (default: DEFAULT_TRUTH)
            data: Opaque payload

        Returns:
            The new atom, or None if the space is full or type is a link type
        """
        if type.is_link:
            logger.warning(f"Refusing node of link type {type.label}")
            return None

        return self._append(type, name, truth_value, (), data)

    def create_link(
        self,
        type: AtomType,
        outgoing: Sequence[Atom],
        truth_value: TruthValue | None = None,
        data: Any = None,
    ) -> Atom | None:
        """Create a link over existing atoms.

        Args:
            type: Link type
            outgoing: Ordered outgoing atoms, all owned by this space
            truth_value: Initial truth value (default: DEFAULT_TRUTH)
            data: Opaque payload

        Returns:
            The new link, or None if the space is full, type is a node type,
            outgoing is empty, or an outgoing atom belongs to another space
        """
        if not type.is_link:
            logger.warning(f"Refusing link of node type {type.label}")
            return None

        if not outgoing:
            logger.warning(f"Refusing {type.label} with no outgoing atoms")
            return None

        for atom in outgoing:
            if not self.owns(atom):
                logger.warning(f"Refusing {type.label}: outgoing atom {atom} is not in this space")
                return None

        return self._append(type, None, truth_value, tuple(a.handle for a in outgoing), data)

    def add_inheritance_edge(
        self,
        source: Atom,
        target: Atom,
        truth_value: TruthValue | None = None,
    ) -> Atom | None:
        """Create ``source -> target`` as an InheritanceLink."""
        return self.create_link(AtomType.INHERITANCE_LINK, [source, target], truth_value)

    def get(self, name: str) -> Atom | None:
        """Look up an atom by name.

        Linear, case-sensitive scan in creation order.

        Args:
            name: The name to look up

        Returns:
            The earliest atom with this name, None if there is none
        """
        for atom in self._atoms:
            if atom.name == name:
                return atom
        return None

    def owns(self, atom: Atom) -> bool:
        """Check that an atom was created by this space."""
        return 0 <= atom.handle < len(self._atoms) and self._atoms[atom.handle] is atom

    def outgoing(self, atom: Atom) -> list[Atom]:
        """Resolve a link's outgoing handles to atoms."""
        return [self._atoms[h] for h in atom.outgoing]

    def close(self) -> None:
        """Tear down the space, dropping all atoms and the embedding buffer."""
        logger.debug(f"Closing {self!r}")
        self._atoms.clear()
        if self._embeddings is not None:
            self._embeddings.close()
            self._embeddings = None

    def _append(
        self,
        type: AtomType,
        name: str | None,
        truth_value: TruthValue | None,
        outgoing: tuple[int, ...],
        data: Any,
    ) -> Atom | None:
        """Append a new atom if there is room."""
        if self._embeddings is None:
            logger.warning(f"AtomSpace is closed, cannot create {type.label}")
            return None
        if self.is_full:
            logger.debug(f"AtomSpace full ({self.capacity} atoms), cannot create {type.label}")
            return None

        handle = len(self._atoms)
        embedding = self._embeddings.view(handle) if self.embedding_dim > 0 else None

        atom = Atom(
            handle=handle,
            type=type,
            name=name,
            truth_value=truth_value if truth_value is not None else DEFAULT_TRUTH,
            outgoing=outgoing,
            data=data,
            embedding=embedding,
        )
        self._atoms.append(atom)
        logger.debug(f"Created #{handle} {atom}")
        return atom
