"""Per-column boolean encodings learned by the Binarizer."""
from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any
from typing import Hashable

import numpy as np
import pandas as pd

from ladrules._helpers import NUMERIC


@dataclass(frozen=True)
class IndicatorEncoding:
    """Encodes a column as one equality test per observed value.

    Values are kept in first-observed order, missing values are not encoded.
    """

    column: Hashable
    kind: str
    values: tuple[Any, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.values)

    @property
    def feature_names(self) -> tuple[str, ...]:
        return tuple(f"{self.column} == {value!r}" for value in self.values)

    def is_compatible(self, kind: str) -> bool:
        return kind == self.kind

    def apply(self, column: pd.Series) -> list[np.ndarray]:
        return [
            np.asarray((column == value).fillna(False), dtype=bool)
            for value in self.values
        ]


@dataclass(frozen=True)
class ThresholdEncoding:
    """Encodes a numerical column as one ``column > cutpoint`` test per cutpoint.

    Cutpoints are sorted by descending separation score, each one paired with the
    score that selected it. Missing values never exceed a cutpoint.
    """

    column: Hashable
    cutpoints: tuple[float, ...] = field(default_factory=tuple)
    scores: tuple[float, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if len(self.cutpoints) != len(self.scores):
            raise ValueError(
                f'Column "{self.column}" has {len(self.cutpoints)} cutpoints '
                f"but {len(self.scores)} scores"
            )

    def __len__(self) -> int:
        return len(self.cutpoints)

    @property
    def kind(self) -> str:
        return NUMERIC

    @property
    def feature_names(self) -> tuple[str, ...]:
        return tuple(f"{self.column} > {cutpoint!r}" for cutpoint in self.cutpoints)

    def is_compatible(self, kind: str) -> bool:
        return kind == NUMERIC

    def apply(self, column: pd.Series) -> list[np.ndarray]:
        values: np.ndarray = column.to_numpy(dtype=float, na_value=np.nan)
        # comparisons with NaN are always False
        return [values > cutpoint for cutpoint in self.cutpoints]
