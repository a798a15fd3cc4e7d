"""Contains code for caching patterns coverage. A candidate pattern is always
built by adding one literal to a pattern of the previous degree, so its coverage
is computed from the cached coverage of that parent instead of from scratch.
"""
from __future__ import annotations

from typing import Iterable
from typing import Optional

import numpy as np

from ladrules.rules.patterns import Literal
from ladrules.rules.patterns import Pattern


class PatternCoverageCache:
    """Cache for storing coverage masks of frontier patterns over a binarized
    table. Negated feature columns are materialized once so every literal column
    is a plain array lookup.
    """

    def __init__(self, X_bin: np.ndarray):
        self.X_bin: np.ndarray = X_bin
        self.X_neg: np.ndarray = ~X_bin
        self.cache: dict[int, np.ndarray] = {
            Pattern().mask: np.ones(X_bin.shape[0], dtype=bool)
        }

        self.hits_count: int = 0
        self.misses_count: int = 0

    def literal_column(self, literal: Literal) -> np.ndarray:
        source: np.ndarray = self.X_bin if literal.polarity else self.X_neg
        return source[:, literal.feature]

    def get(self, pattern: Pattern) -> Optional[np.ndarray]:
        coverage: Optional[np.ndarray] = self.cache.get(pattern.mask)
        if coverage is None:
            self.misses_count += 1
        else:
            self.hits_count += 1
        return coverage

    def get_or_calculate(
        self, pattern: Pattern, save_to_cache: bool = True
    ) -> np.ndarray:
        coverage: Optional[np.ndarray] = self.get(pattern)
        if coverage is None:
            coverage = self._calculate(pattern)
            if save_to_cache:
                self.set(pattern, coverage)
        return coverage

    def _calculate(self, pattern: Pattern) -> np.ndarray:
        # try extending any cached parent before computing from scratch
        for parent in pattern.sub_patterns():
            parent_coverage: Optional[np.ndarray] = self.cache.get(parent.mask)
            if parent_coverage is not None:
                added = Literal.from_id((pattern.mask ^ parent.mask).bit_length() - 1)
                return parent_coverage & self.literal_column(added)
        return pattern.covered_mask(self.X_bin)

    def set(self, pattern: Pattern, value: np.ndarray):
        self.cache[pattern.mask] = value

    def retain(self, patterns: Iterable[Pattern]):
        """Drops all entries except the ones of given patterns"""
        self.cache = {
            pattern.mask: self.cache[pattern.mask]
            for pattern in patterns
            if pattern.mask in self.cache
        }

    def __len__(self) -> int:
        return len(self.cache)
