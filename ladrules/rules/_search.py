"""Level-synchronous search of prime patterns.

Degree ``d`` extends every pattern of the degree ``d - 1`` frontier with one
literal. Coverage masks of a batch of candidates only read the binarized table
and the cached frontier coverages, so they are computed in parallel. Counting
covered rows per class and claiming rows for new rules then runs sequentially in
candidate order, and the next frontier is swapped in only once the whole degree
has been processed.
"""
from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from logging import Logger
from logging import getLogger
from typing import Any
from typing import Callable
from typing import NamedTuple
from typing import Optional
from typing import TypeAlias

import numpy as np
from joblib import Parallel
from joblib import delayed
from joblib import effective_n_jobs

from ladrules.rules._partitions import ClassPartitions
from ladrules.rules.cache import PatternCoverageCache
from ladrules.rules.patterns import Literal
from ladrules.rules.patterns import Pattern
from ladrules.rules.patterns import Rule

ProgressCallback: TypeAlias = Callable[[int, dict[Any, int]], None]


class Candidate(NamedTuple):
    pattern: Pattern
    parent: Pattern
    literal: Literal


@dataclass
class DegreeSummary:
    degree: int
    candidates_count: int
    rules_count: int
    frontier_size: int
    remaining_counts: dict[Any, int]


@dataclass
class SearchResult:
    rules: list[Rule]
    fallback_label: Any
    degrees: list[DegreeSummary] = field(default_factory=list)


def generate_candidates(frontier: list[Pattern], features_count: int) -> list[Candidate]:
    """Extends every frontier pattern with every literal of a feature it does not
    test yet. A candidate is kept only if all of its sub-patterns belong to the
    frontier; a candidate reachable from several parents is returned once, with
    its first parent.

    Args:
        frontier (list[Pattern]): patterns of the previous degree, in order
        features_count (int): number of boolean features

    Returns:
        list[Candidate]: candidates in generation order
    """
    frontier_masks: set[int] = {pattern.mask for pattern in frontier}
    seen: set[int] = set()
    candidates: list[Candidate] = []
    for parent in frontier:
        for feature in range(features_count):
            for polarity in (True, False):
                literal = Literal(feature, polarity)
                pattern: Optional[Pattern] = parent.with_literal(literal)
                if pattern is None or pattern.mask in seen:
                    continue
                seen.add(pattern.mask)
                if all(sub.mask in frontier_masks for sub in pattern.sub_patterns()):
                    candidates.append(Candidate(pattern, parent, literal))
    return candidates


def _extend_coverages(
    parents: list[np.ndarray], literal_columns: list[np.ndarray]
) -> list[np.ndarray]:
    return [parent & column for parent, column in zip(parents, literal_columns)]


class PrimePatternSearch:
    """Finds prime patterns isolating rows of a single class, degree by degree"""

    def __init__(
        self,
        X_bin: np.ndarray,
        codes: np.ndarray,
        labels: list[Any],
        max_degree: int,
        n_jobs: int = 1,
        batch_size: int = 256,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """
        Args:
            X_bin (np.ndarray): boolean matrix of shape (n_rows, n_features)
            codes (np.ndarray): class code of every row
            labels (list[Any]): labels indexed by class code
            max_degree (int): last degree to search, already clamped to the number
                of features
            n_jobs (int, optional): number of threads computing coverage masks.
                Defaults to 1.
            batch_size (int, optional): number of candidates whose coverages are
                computed together before being committed. Defaults to 256.
            progress_callback (Optional[ProgressCallback], optional): called after
                every degree with the degree and remaining rows of each class.
                Defaults to None.
        """
        self.X_bin: np.ndarray = X_bin
        self.codes: np.ndarray = codes
        self.labels: list[Any] = labels
        self.max_degree: int = max_degree
        self.n_jobs: int = n_jobs
        self.batch_size: int = max(1, batch_size)
        self.progress_callback: Optional[ProgressCallback] = progress_callback
        self.logger: Logger = getLogger(self.__class__.__name__)

    def run(self) -> SearchResult:
        features_count: int = self.X_bin.shape[1]
        partitions = ClassPartitions(self.codes, self.labels)
        cache = PatternCoverageCache(self.X_bin)
        result = SearchResult(rules=[], fallback_label=partitions.largest_label())
        frontier: list[Pattern] = [Pattern()]

        with Parallel(n_jobs=self.n_jobs, prefer="threads") as parallel:
            for degree in range(1, self.max_degree + 1):
                candidates: list[Candidate] = generate_candidates(
                    frontier, features_count
                )
                rules_count_before: int = len(result.rules)
                next_frontier: list[Pattern] = []
                for start in range(0, len(candidates), self.batch_size):
                    batch: list[Candidate] = candidates[start : start + self.batch_size]
                    coverages: list[np.ndarray] = self._compute_coverages(
                        parallel, cache, batch
                    )
                    for candidate, coverage in zip(batch, coverages):
                        self._commit(
                            candidate.pattern,
                            coverage,
                            partitions,
                            cache,
                            result.rules,
                            next_frontier,
                        )
                # barrier: parents are no longer needed
                cache.retain(next_frontier)
                frontier = next_frontier

                summary = DegreeSummary(
                    degree=degree,
                    candidates_count=len(candidates),
                    rules_count=len(result.rules) - rules_count_before,
                    frontier_size=len(frontier),
                    remaining_counts=partitions.remaining_counts(),
                )
                result.degrees.append(summary)
                self.logger.info(
                    "Degree %d: %d candidates, %d new rules, %d patterns in frontier, "
                    "%d rows remaining",
                    degree,
                    summary.candidates_count,
                    summary.rules_count,
                    summary.frontier_size,
                    partitions.total_remaining,
                )
                if self.progress_callback is not None:
                    self.progress_callback(degree, summary.remaining_counts)

                if partitions.total_remaining == 0:
                    break
                if degree == self.max_degree or len(frontier) == 0:
                    # rows no rule isolated go to the largest remaining class
                    result.fallback_label = partitions.largest_label()
                    break
        self.logger.debug(
            "Coverage cache: %d hits, %d misses",
            cache.hits_count,
            cache.misses_count,
        )
        return result

    def _compute_coverages(
        self,
        parallel: Parallel,
        cache: PatternCoverageCache,
        batch: list[Candidate],
    ) -> list[np.ndarray]:
        parents: list[np.ndarray] = [
            cache.get_or_calculate(candidate.parent, save_to_cache=False)
            for candidate in batch
        ]
        columns: list[np.ndarray] = [
            cache.literal_column(candidate.literal) for candidate in batch
        ]
        chunks_count: int = min(len(batch), effective_n_jobs(self.n_jobs))
        if chunks_count < 2:
            return _extend_coverages(parents, columns)
        bounds: np.ndarray = np.linspace(0, len(batch), chunks_count + 1, dtype=int)
        chunks: list[list[np.ndarray]] = parallel(
            delayed(_extend_coverages)(parents[lo:hi], columns[lo:hi])
            for lo, hi in zip(bounds[:-1], bounds[1:])
        )
        return [coverage for chunk in chunks for coverage in chunk]

    def _commit(
        self,
        pattern: Pattern,
        coverage: np.ndarray,
        partitions: ClassPartitions,
        cache: PatternCoverageCache,
        rules: list[Rule],
        next_frontier: list[Pattern],
    ):
        counts: np.ndarray = partitions.counts(coverage)
        covered_classes: np.ndarray = np.flatnonzero(counts)
        if covered_classes.shape[0] == 0:
            return
        if covered_classes.shape[0] == 1:
            class_code: int = int(covered_classes[0])
            claimed: int = partitions.claim(class_code, coverage)
            rule = Rule(label=self.labels[class_code], pattern=pattern, claimed=claimed)
            rules.append(rule)
            self.logger.debug('Prime pattern found: "%s" (%d rows)', rule, claimed)
            return
        next_frontier.append(pattern)
        cache.set(pattern, coverage)
