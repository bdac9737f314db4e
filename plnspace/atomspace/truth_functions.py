"""PLN truth value functions.

This module implements the truth value algebra used by the inference
rules to combine evidence:

- tv_create: Clamped construction
- tv_and: Conjunction under an independence assumption
- tv_or: Probabilistic union, never more confident than its weakest operand
- tv_not: Strength inversion

Every function is pure and returns a new clamped TruthValue.
"""

from __future__ import annotations

from plnspace.schema import DEFAULT_TRUTH, TruthValue

__all__ = [
    "tv_create",
    "tv_and",
    "tv_or",
    "tv_not",
    "DEFAULT_TRUTH",
]


def tv_create(strength: float, confidence: float, count: float) -> TruthValue:
    """Create a truth value, clamping out-of-range fields.

    Args:
        strength: Probability, clamped to [0, 1]
        confidence: Evidence weight, clamped to [0, 1]
        count: Evidence count, clamped to [0, inf)

    Returns:
        New TruthValue
    """
    return TruthValue(strength=strength, confidence=confidence, count=count)


def tv_and(tv1: TruthValue, tv2: TruthValue) -> TruthValue:
    """PLN conjunction.

    Formula (independent events):
        s = s1 * s2
        c = c1 * c2
        n = n1 + n2

    Args:
        tv1: First conjunct
        tv2: Second conjunct

    Returns:
        Truth value for "both hold"
    """
    return tv_create(
        tv1.strength * tv2.strength,
        tv1.confidence * tv2.confidence,
        tv1.count + tv2.count,
    )


def tv_or(tv1: TruthValue, tv2: TruthValue) -> TruthValue:
    """PLN disjunction, also used to accumulate evidence into an atom.

    Formula:
        s = s1 + s2 - s1 * s2
        c = min(c1, c2)
        n = max(n1, n2)

    Combining a truth value with an identical one returns it unchanged:
    the same evidence seen twice is not new evidence. This applies only
    when all three fields are exactly equal; values that differ by any
    amount, however small, go through the formula, so tv_or is not
    continuous at tv1 == tv2.

    Args:
        tv1: First disjunct
        tv2: Second disjunct

    Returns:
        Truth value for "either holds"
    """
    if tv1 == tv2:
        return tv1

    s1, s2 = tv1.strength, tv2.strength
    return tv_create(
        s1 + s2 - s1 * s2,
        min(tv1.confidence, tv2.confidence),
        max(tv1.count, tv2.count),
    )


def tv_not(tv: TruthValue) -> TruthValue:
    """PLN negation: invert strength, preserve confidence and count."""
    return tv_create(1.0 - tv.strength, tv.confidence, tv.count)
