"""Pydantic models for the PLN AtomSpace.

This module defines the value types and configuration shared by the
AtomSpace store and the rule engine:

- AtomType: stable integer codes for node and link types
- TruthValue: PLN-style (strength, confidence, count) triple
- AtomSpaceConfig / UREConfig: validated construction parameters
- KBNode / KBLink / KBModule: JSON fixture format for knowledge base modules

Example knowledge base module (JSON):
    {
        "name": "animals",
        "nodes": [
            {"type": "ConceptNode", "name": "Dog"},
            {"type": "ConceptNode", "name": "Mammal"}
        ],
        "links": [
            {
                "type": "InheritanceLink",
                "outgoing": ["Dog", "Mammal"],
                "truth_value": {"strength": 0.95, "confidence": 0.9, "count": 10}
            }
        ]
    }
"""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, Field, field_validator

__all__ = [
    "AtomType",
    "TruthValue",
    "DEFAULT_TRUTH",
    "AtomSpaceConfig",
    "UREConfig",
    "KBNode",
    "KBLink",
    "KBModule",
]


class AtomType(IntEnum):
    """Atom type codes.

    The integer values are stable and must not be reordered: fixtures may
    refer to types by code.
    """

    CONCEPT_NODE = 0
    PREDICATE_NODE = 1
    LINK_NODE = 2
    INHERITANCE_LINK = 3
    SIMILARITY_LINK = 4
    IMPLICATION_LINK = 5
    EVALUATION_LINK = 6

    @property
    def label(self) -> str:
        """OpenCog-style label, e.g. ``ConceptNode``."""
        return "".join(part.capitalize() for part in self.name.split("_"))

    @property
    def is_link(self) -> bool:
        """True for link types (those that carry outgoing atoms)."""
        return self >= AtomType.INHERITANCE_LINK

    @classmethod
    def from_label(cls, label: str) -> "AtomType":
        """Parse an OpenCog label (``InheritanceLink``) or member name.

        Raises:
            ValueError: If the label names no atom type
        """
        for member in cls:
            if label in (member.label, member.name):
                return member
        raise ValueError(f"Unknown atom type: {label}")


def _clamp_unit(v: float) -> float:
    return max(0.0, min(1.0, v))


class TruthValue(BaseModel):
    """PLN truth value: strength, confidence and evidence count.

    Construction never fails on range: out-of-range fields are clamped
    (strength and confidence to [0, 1], count to [0, inf)).

    Example:
        - TruthValue(strength=0.9, confidence=0.8, count=10) means
          "very likely, well supported by ten observations"
        - TruthValue(strength=1.5, confidence=-0.5) is stored as (1.0, 0.0)
    """

    model_config = {"frozen": True}

    strength: float = Field(
        default=0.8,
        description="Probability that the atom holds [0.0, 1.0]",
    )
    confidence: float = Field(
        default=0.9,
        description="Amount of evidence behind the strength [0.0, 1.0]",
    )
    count: float = Field(
        default=1.0,
        description="Supporting evidence count [0.0, inf)",
    )

    @field_validator("strength", "confidence")
    @classmethod
    def clamp_unit_interval(cls, v: float) -> float:
        """Clamp strength and confidence into [0, 1]."""
        return _clamp_unit(v)

    @field_validator("count")
    @classmethod
    def clamp_count(cls, v: float) -> float:
        """Clamp count to be non-negative."""
        return max(0.0, v)

    def expectation(self) -> float:
        """Probability reading of this truth value.

        Low-confidence values are pulled towards 0.5:
        ``strength * confidence + 0.5 * (1 - confidence)``.
        """
        return self.strength * self.confidence + 0.5 * (1.0 - self.confidence)

    def as_tuple(self) -> tuple[float, float, float]:
        """Return ``(strength, confidence, count)``."""
        return (self.strength, self.confidence, self.count)

    def __str__(self) -> str:
        return f"<{self.strength:.3f}, {self.confidence:.3f}, {self.count:g}>"


# Truth value given to atoms created without one
DEFAULT_TRUTH = TruthValue(strength=0.8, confidence=0.9, count=1.0)


class AtomSpaceConfig(BaseModel):
    """Construction parameters for an AtomSpace."""

    capacity: int = Field(default=1000, ge=0, description="Maximum number of atoms")
    embedding_dim: int = Field(
        default=32, ge=0, description="Width of each atom's embedding row"
    )
    seed: int | None = Field(
        default=None,
        description="Seed for random embedding initialization (None = zeros)",
    )


class UREConfig(BaseModel):
    """Construction parameters for the Unified Rule Engine."""

    max_iterations: int = Field(
        default=100, ge=0, description="Maximum forward-chaining iterations"
    )
    min_confidence: float = Field(
        default=0.01,
        ge=0.0,
        le=1.0,
        description="Minimum confidence for a conclusion to count as an inference",
    )
    rules: list[str] = Field(
        default_factory=lambda: ["modus_ponens", "inheritance_transitivity"],
        description="Built-in rules to register, in order",
    )


def _parse_atom_type(v: object) -> object:
    if isinstance(v, str):
        return AtomType.from_label(v)
    return v


class KBNode(BaseModel):
    """A node entry in a knowledge base module."""

    type: AtomType = Field(default=AtomType.CONCEPT_NODE, description="Node type")
    name: str = Field(description="Node name")
    truth_value: TruthValue | None = Field(
        default=None, description="Truth value (default: DEFAULT_TRUTH)"
    )

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, v: object) -> object:
        """Accept type labels as well as integer codes."""
        return _parse_atom_type(v)

    @field_validator("type")
    @classmethod
    def check_node_type(cls, v: AtomType) -> AtomType:
        if v.is_link:
            raise ValueError(f"{v.label} is a link type, not a node type")
        return v


class KBLink(BaseModel):
    """A link entry in a knowledge base module.

    Outgoing atoms are referenced by node name; resolution uses the
    AtomSpace's first-match name lookup.
    """

    type: AtomType = Field(description="Link type")
    outgoing: list[str] = Field(min_length=1, description="Names of outgoing atoms")
    truth_value: TruthValue | None = Field(
        default=None, description="Truth value (default: DEFAULT_TRUTH)"
    )

    @field_validator("type", mode="before")
    @classmethod
    def parse_type(cls, v: object) -> object:
        """Accept type labels as well as integer codes."""
        return _parse_atom_type(v)

    @field_validator("type")
    @classmethod
    def check_link_type(cls, v: AtomType) -> AtomType:
        if not v.is_link:
            raise ValueError(f"{v.label} is a node type, not a link type")
        return v


class KBModule(BaseModel):
    """A knowledge base module: nodes first, then links between them."""

    name: str
    version: str = "unknown"
    description: str = ""
    nodes: list[KBNode] = Field(default_factory=list)
    links: list[KBLink] = Field(default_factory=list)
