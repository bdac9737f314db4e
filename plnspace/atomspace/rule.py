"""PLN inference rules.

A rule is a precondition/conclusion pair over an ordered list of premise
atoms. The built-in rules take exactly two premises:

- modus_ponens: P, P => Q  |-  Q (evidence merged into Q)
- inheritance_transitivity: A -> B, B -> C  |-  A -> C (new link)

A conclusion always re-checks its own precondition and returns None
without touching the AtomSpace when it does not hold.

Usage:
    from plnspace.atomspace.rule import get_rule

    rule = get_rule("modus_ponens")
    if rule.precondition(space, [p, implication]):
        q = rule.conclusion(space, [p, implication])
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Sequence

from plnspace.schema import AtomType

from .truth_functions import tv_create, tv_or

if TYPE_CHECKING:
    from .atom_store import Atom, AtomSpace

__all__ = [
    "InferenceRule",
    "FunctionRule",
    "ModusPonensRule",
    "InheritanceTransitivityRule",
    "TRANSITIVITY_DECAY",
    "BUILTIN_RULES",
    "get_rule",
]

logger = logging.getLogger(__name__)

# Confidence lost on each transitive hop
TRANSITIVITY_DECAY = 0.9

Premises = Sequence["Atom"]


class InferenceRule(ABC):
    """Abstract base for inference rules.

    Attributes:
        name: Rule name, used in logs only
        confidence_boost: Reserved; not used when computing conclusions
    """

    name: str = "rule"
    confidence_boost: float = 0.0

    @abstractmethod
    def precondition(self, space: "AtomSpace", premises: Premises) -> bool:
        """Check whether the rule applies to the premises.

        Args:
            space: The AtomSpace the premises live in
            premises: Ordered premise atoms

        Returns:
            True if conclusion() would derive something
        """
        pass

    @abstractmethod
    def conclusion(self, space: "AtomSpace", premises: Premises) -> "Atom | None":
        """Apply the rule.

        Args:
            space: The AtomSpace to derive into
            premises: Ordered premise atoms

        Returns:
            The concluded atom, or None if the precondition does not hold
            or the conclusion could not be stored
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class FunctionRule(InferenceRule):
    """Rule built from a caller-supplied precondition/conclusion pair.

    Example:
        rule = FunctionRule(
            name="always_first",
            precondition=lambda space, premises: True,
            conclusion=lambda space, premises: premises[0],
        )
    """

    def __init__(
        self,
        name: str,
        precondition: Callable[["AtomSpace", Premises], bool],
        conclusion: Callable[["AtomSpace", Premises], "Atom | None"],
        confidence_boost: float = 0.0,
    ) -> None:
        self.name = name
        self.confidence_boost = confidence_boost
        self._precondition = precondition
        self._conclusion = conclusion

    def precondition(self, space: "AtomSpace", premises: Premises) -> bool:
        return bool(self._precondition(space, premises))

    def conclusion(self, space: "AtomSpace", premises: Premises) -> "Atom | None":
        if not self.precondition(space, premises):
            return None
        return self._conclusion(space, premises)


class ModusPonensRule(InferenceRule):
    """Modus ponens over implication links.

    Premises: [P, ImplicationLink(P, Q)] where the implication's first
    outgoing atom is P itself.

    Derived truth for Q:
        s = sP * sI
        c = cP * cI
        n = min(nP, nI)

    The derived value is OR-merged into Q's existing truth value, so
    repeated derivations accumulate evidence in place.
    """

    name = "modus_ponens"

    def precondition(self, space: "AtomSpace", premises: Premises) -> bool:
        if len(premises) != 2:
            return False

        p, implication = premises
        if implication.type != AtomType.IMPLICATION_LINK:
            return False
        if len(implication.outgoing) != 2:
            return False
        if not space.owns(implication):
            return False

        return space[implication.outgoing[0]] is p

    def conclusion(self, space: "AtomSpace", premises: Premises) -> "Atom | None":
        if not self.precondition(space, premises):
            logger.debug(f"{self.name}: precondition unmet, nothing derived")
            return None

        p, implication = premises
        q = space[implication.outgoing[1]]

        tv_p, tv_imp = p.truth_value, implication.truth_value
        derived = tv_create(
            tv_p.strength * tv_imp.strength,
            tv_p.confidence * tv_imp.confidence,
            min(tv_p.count, tv_imp.count),
        )

        q.truth_value = tv_or(q.truth_value, derived)
        return q


class InheritanceTransitivityRule(InferenceRule):
    """Transitivity of inheritance.

    Premises: [InheritanceLink(A, B), InheritanceLink(B, C)] where the end
    of the first link is the start of the second.

    Creates a new InheritanceLink(A, C) with:
        s = s1 * s2
        c = c1 * c2 * TRANSITIVITY_DECAY
        n = min(n1, n2)
    """

    name = "inheritance_transitivity"

    def precondition(self, space: "AtomSpace", premises: Premises) -> bool:
        if len(premises) != 2:
            return False

        first, second = premises
        if first.type != AtomType.INHERITANCE_LINK:
            return False
        if second.type != AtomType.INHERITANCE_LINK:
            return False
        if len(first.outgoing) != 2 or len(second.outgoing) != 2:
            return False
        if not (space.owns(first) and space.owns(second)):
            return False

        return first.outgoing[1] == second.outgoing[0]

    def conclusion(self, space: "AtomSpace", premises: Premises) -> "Atom | None":
        if not self.precondition(space, premises):
            logger.debug(f"{self.name}: precondition unmet, nothing derived")
            return None

        first, second = premises
        a = space[first.outgoing[0]]
        c = space[second.outgoing[1]]

        tv1, tv2 = first.truth_value, second.truth_value
        derived = tv_create(
            tv1.strength * tv2.strength,
            tv1.confidence * tv2.confidence * TRANSITIVITY_DECAY,
            min(tv1.count, tv2.count),
        )

        return space.create_link(AtomType.INHERITANCE_LINK, [a, c], derived)


# Built-in rule classes, by registration name
BUILTIN_RULES: dict[str, type[InferenceRule]] = {
    ModusPonensRule.name: ModusPonensRule,
    InheritanceTransitivityRule.name: InheritanceTransitivityRule,
}


def get_rule(name: str) -> InferenceRule:
    """Instantiate a built-in rule by name.

    Args:
        name: Rule name ("modus_ponens", "inheritance_transitivity")

    Returns:
        New rule instance

    Raises:
        KeyError: If the rule name is unknown
    """
    if name not in BUILTIN_RULES:
        raise KeyError(f"Unknown rule: {name}. Valid: {list(BUILTIN_RULES.keys())}")
    return BUILTIN_RULES[name]()
