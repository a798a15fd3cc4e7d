from __future__ import annotations

from typing import Any

import numpy as np


class ClassPartitions:
    """Shrinking per-class sets of rows not yet claimed by any rule.

    All partitions share one owner array over the rows of the training table:
    ``owner[i]`` is the class code of row ``i`` while the row remains and
    ``claimed_code`` (one past the last class code) once a rule has claimed it.
    Coverage counts of every partition are then a single bincount.
    """

    def __init__(self, codes: np.ndarray, labels: list[Any]):
        self.labels: list[Any] = labels
        self.claimed_code: int = len(labels)
        self.owner: np.ndarray = np.array(codes, dtype=np.intp)
        self.original_sizes: np.ndarray = np.bincount(
            self.owner, minlength=len(labels)
        )
        self.sizes: np.ndarray = self.original_sizes.copy()

    def counts(self, coverage: np.ndarray) -> np.ndarray:
        """
        Args:
            coverage (np.ndarray): coverage mask over all training rows

        Returns:
            np.ndarray: number of remaining rows of each class covered by the mask
        """
        return np.bincount(self.owner[coverage], minlength=self.claimed_code + 1)[
            : self.claimed_code
        ]

    def claim(self, class_code: int, coverage: np.ndarray) -> int:
        """Removes covered rows of given class from its partition.

        Returns:
            int: number of claimed rows
        """
        claimed: np.ndarray = coverage & (self.owner == class_code)
        claimed_count: int = int(np.count_nonzero(claimed))
        self.owner[claimed] = self.claimed_code
        self.sizes[class_code] -= claimed_count
        return claimed_count

    @property
    def total_remaining(self) -> int:
        return int(self.sizes.sum())

    def largest_label(self) -> Any:
        # argmax returns the first maximum, ties go to the first observed label
        return self.labels[int(np.argmax(self.sizes))]

    def remaining_counts(self) -> dict[Any, int]:
        return {label: int(size) for label, size in zip(self.labels, self.sizes)}
