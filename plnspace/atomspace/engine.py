"""Unified Rule Engine (URE) with exhaustive forward chaining.

This module implements the engine that drives inference over an
AtomSpace. Key properties:

- Exhaustive pair matching: every registered rule is tried on every
  ordered pair (atoms[i], atoms[j]) with i < j
- Deterministic order: rule registration order, then ascending i, then j
- Atoms concluded during an iteration are matched in that same iteration
- Stops on the target atom, on a fixpoint, or at the iteration cap

Matching is O(iterations * rules * n^2) and meant for small graphs.
The engine is not thread-safe: conclusions mutate the space while it is
being scanned, so concurrent callers must hold one lock around a whole
chaining call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from plnspace.schema import UREConfig

from .rule import InferenceRule, get_rule

if TYPE_CHECKING:
    from .atom_store import Atom, AtomSpace

__all__ = [
    "URE",
    "ChainStats",
    "StopReason",
]

logger = logging.getLogger(__name__)


class StopReason(str, Enum):
    """Why a forward-chaining run stopped."""

    TARGET_REACHED = "target_reached"
    FIXPOINT = "fixpoint"
    MAX_ITERATIONS = "max_iterations"


@dataclass
class ChainStats:
    """Summary of the last chaining run.

    Attributes:
        iterations: Iterations started (including the last, possibly partial, one)
        inferences: Accepted inferences
        stop_reason: Why the run stopped
    """

    iterations: int = 0
    inferences: int = 0
    stop_reason: StopReason | None = None


class URE:
    """Unified Rule Engine bound to one AtomSpace.

    The engine references the space but does not own it; it may be used
    for any number of chaining calls.

    Example:
        space = AtomSpace(capacity=100)
        ure = URE(space, max_iterations=10, min_confidence=0.5)
        ure.add_rule(InheritanceTransitivityRule())
        inferences = ure.forward_chain()
    """

    def __init__(
        self,
        atomspace: "AtomSpace",
        max_iterations: int = 100,
        min_confidence: float = 0.01,
    ) -> None:
        """Initialize the engine.

        Args:
            atomspace: The space to reason over
            max_iterations: Maximum forward-chaining iterations per call
            min_confidence: Minimum confidence for a conclusion to count
                as an inference
        """
        self.atomspace = atomspace
        self.max_iterations = max_iterations
        self.min_confidence = min_confidence
        self._rules: list[InferenceRule] = []
        self.last_run: ChainStats | None = None

    @classmethod
    def from_config(cls, atomspace: "AtomSpace", config: UREConfig) -> "URE":
        """Create an engine and register the configured built-in rules.

        Raises:
            KeyError: If the config names an unknown rule
        """
        ure = cls(
            atomspace,
            max_iterations=config.max_iterations,
            min_confidence=config.min_confidence,
        )
        for name in config.rules:
            ure.add_rule(get_rule(name))
        return ure

    @property
    def rules(self) -> list[InferenceRule]:
        """Registered rules in registration order."""
        return list(self._rules)

    def add_rule(self, rule: InferenceRule) -> None:
        """Register a rule. Rules are tried in registration order."""
        self._rules.append(rule)
        logger.debug(f"Registered rule {rule.name} ({len(self._rules)} rules)")

    def forward_chain(self, target: "Atom | None" = None) -> int:
        """Derive new atoms until target, fixpoint, or iteration cap.

        Stopping conditions, in priority order:
        1. The target atom is produced as an accepted conclusion
        2. An iteration makes no accepted inference (fixpoint)
        3. max_iterations iterations have run

        Args:
            target: Atom whose derivation ends the run early

        Returns:
            Number of accepted inferences
        """
        stats = ChainStats()
        self.last_run = stats
        was_full = self.atomspace.is_full

        for iteration in range(self.max_iterations):
            stats.iterations = iteration + 1
            accepted, reached = self._run_iteration(target)
            stats.inferences += accepted

            if reached:
                stats.stop_reason = StopReason.TARGET_REACHED
                logger.debug(
                    f"Target reached in iteration {iteration + 1}, "
                    f"{stats.inferences} inferences"
                )
                break

            if accepted == 0:
                stats.stop_reason = StopReason.FIXPOINT
                logger.debug(
                    f"Fixpoint reached in {iteration + 1} iterations, "
                    f"{stats.inferences} inferences, {len(self.atomspace)} atoms"
                )
                break
        else:
            stats.stop_reason = StopReason.MAX_ITERATIONS
            logger.warning(f"Max iterations ({self.max_iterations}) reached")

        if self.atomspace.is_full and not was_full:
            logger.warning(
                f"AtomSpace reached capacity ({self.atomspace.capacity}) during "
                f"chaining; later conclusions were dropped"
            )

        return stats.inferences

    def backward_chain(self, query: "Atom") -> int:
        """Chain towards a query atom.

        This is not a goal-directed search: it runs forward chaining with
        the query as the target.

        Args:
            query: Atom to derive

        Returns:
            Number of accepted inferences
        """
        logger.debug("Backward chaining runs forward chaining towards the query")
        return self.forward_chain(target=query)

    def inference_step(self) -> int:
        """Run forward chaining without a target.

        Equivalent to forward_chain(None): runs to a fixpoint or the
        iteration cap, and records last_run.

        Returns:
            Number of accepted inferences
        """
        return self.forward_chain(None)

    def _run_iteration(self, target: "Atom | None") -> tuple[int, bool]:
        """Try every rule on every atom pair once.

        Both loop bounds are read from the live atom count, so atoms
        created by a conclusion are matched later in the same pass.

        Returns:
            (accepted inferences, whether the target was produced)
        """
        space = self.atomspace
        accepted = 0

        for rule in self._rules:
            i = 0
            while i < len(space):
                j = i + 1
                while j < len(space):
                    premises = [space[i], space[j]]

                    if rule.precondition(space, premises):
                        conclusion = rule.conclusion(space, premises)

                        if (
                            conclusion is not None
                            and conclusion.truth_value.confidence >= self.min_confidence
                        ):
                            accepted += 1
                            if target is not None and conclusion is target:
                                return accepted, True
                    j += 1
                i += 1

        return accepted, False
