"""Literals, patterns and rules over a binarized table.

A literal is a test of a single boolean feature and is identified by a dense id
``2 * feature + (0 if polarity else 1)``. A pattern is a conjunction of literals
stored as a bitset of those ids in a Python int, so set operations, hashing and
sub-pattern enumeration are all plain integer operations.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from typing import Iterable
from typing import Iterator
from typing import Optional
from typing import Sequence

import numpy as np


def _iter_bits(mask: int) -> Iterator[int]:
    while mask:
        lowest: int = mask & -mask
        yield lowest.bit_length() - 1
        mask ^= lowest


@dataclass(frozen=True, order=True)
class Literal:
    feature: int
    polarity: bool = True

    @property
    def id(self) -> int:
        return 2 * self.feature + (0 if self.polarity else 1)

    @staticmethod
    def from_id(literal_id: int) -> Literal:
        return Literal(feature=literal_id >> 1, polarity=(literal_id & 1) == 0)

    def __invert__(self) -> Literal:
        return Literal(feature=self.feature, polarity=not self.polarity)

    def holds(self, X_bin: np.ndarray) -> np.ndarray:
        column: np.ndarray = X_bin[:, self.feature]
        return column if self.polarity else ~column

    def describe(self, feature_names: Optional[Sequence[str]] = None) -> str:
        name: str = (
            f"x{self.feature}" if feature_names is None else feature_names[self.feature]
        )
        return name if self.polarity else f"NOT {name}"


@dataclass(frozen=True)
class Pattern:
    """Conjunction of literals with at most one literal per feature"""

    mask: int = 0

    @staticmethod
    def from_literals(literals: Iterable[Literal]) -> Pattern:
        pattern = Pattern()
        for literal in literals:
            extended: Optional[Pattern] = pattern.with_literal(literal)
            if extended is None:
                raise ValueError(
                    f"Pattern already contains a literal of feature {literal.feature}"
                )
            pattern = extended
        return pattern

    @property
    def degree(self) -> int:
        return self.mask.bit_count()

    def __len__(self) -> int:
        return self.degree

    @property
    def literals(self) -> tuple[Literal, ...]:
        return tuple(Literal.from_id(literal_id) for literal_id in _iter_bits(self.mask))

    def __iter__(self) -> Iterator[Literal]:
        return iter(self.literals)

    def __contains__(self, literal: Literal) -> bool:
        return bool(self.mask >> literal.id & 1)

    def has_feature(self, feature: int) -> bool:
        return bool(self.mask >> (2 * feature) & 0b11)

    def with_literal(self, literal: Literal) -> Optional[Pattern]:
        """Returns the pattern extended with given literal or None when the pattern
        already tests the literal's feature (either polarity).
        """
        if self.has_feature(literal.feature):
            return None
        return Pattern(self.mask | (1 << literal.id))

    def sub_patterns(self) -> Iterator[Pattern]:
        """Yields all patterns obtained by removing exactly one literal"""
        for literal_id in _iter_bits(self.mask):
            yield Pattern(self.mask & ~(1 << literal_id))

    def covered_mask(self, X_bin: np.ndarray) -> np.ndarray:
        """
        Args:
            X_bin (np.ndarray): boolean matrix of shape (n_rows, n_features)

        Returns:
            np.ndarray: boolean mask of rows satisfying every literal, all true for
            the empty pattern
        """
        covered = np.ones(X_bin.shape[0], dtype=bool)
        for literal in self.literals:
            covered &= literal.holds(X_bin)
        return covered

    def describe(self, feature_names: Optional[Sequence[str]] = None) -> str:
        if self.mask == 0:
            return "TRUE"
        return " AND ".join(literal.describe(feature_names) for literal in self.literals)

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class Rule:
    """Prime pattern paired with the label of the only class it covered when it was
    discovered. ``claimed`` is the number of rows it removed from that class.
    """

    label: Any
    pattern: Pattern
    claimed: int = 0

    @property
    def degree(self) -> int:
        return self.pattern.degree

    def covered_mask(self, X_bin: np.ndarray) -> np.ndarray:
        return self.pattern.covered_mask(X_bin)

    def describe(
        self,
        feature_names: Optional[Sequence[str]] = None,
        decision_attribute: Any = "label",
    ) -> str:
        return (
            f"IF {self.pattern.describe(feature_names)} "
            f"THEN {decision_attribute} = {self.label}"
        )

    def __str__(self) -> str:
        return self.describe()
