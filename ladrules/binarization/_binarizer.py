from __future__ import annotations

from logging import Logger
from logging import getLogger
from typing import Any
from typing import Hashable
from typing import Optional
from typing import Union

import numpy as np
import pandas as pd

from ladrules import _helpers
from ladrules._params import DEFAULT_PARAMS_VALUES
from ladrules._params import validate_binarization_params
from ladrules.binarization._encodings import IndicatorEncoding
from ladrules.binarization._encodings import ThresholdEncoding
from ladrules.binarization._scoring import find_cutpoints_candidates
from ladrules.binarization._scoring import rank_cutpoints
from ladrules.exceptions import ColumnTypeUnsupportedError
from ladrules.exceptions import InsufficientClassesError
from ladrules.exceptions import NotFittedError
from ladrules.exceptions import SchemaMismatchError

FeatureEncoding = Union[IndicatorEncoding, ThresholdEncoding]


class Binarizer:
    """Learns a boolean encoding of every column of a labeled table and applies it
    to compatible tables.

    Boolean and nominal columns, as well as numerical columns with at most
    ``nominal_size`` distinct values, get an indicator encoding (one
    ``column == value`` feature per observed value). Other numerical columns get
    a threshold encoding: up to ``max_cutpoints`` cutpoints selected by their
    separation score, each producing a ``column > cutpoint`` feature.
    """

    def __init__(
        self,
        threshold: float = DEFAULT_PARAMS_VALUES["threshold"],
        nominal_size: int = DEFAULT_PARAMS_VALUES["nominal_size"],
        max_cutpoints: int = DEFAULT_PARAMS_VALUES["max_cutpoints"],
    ):
        """
        Args:
            threshold (float, optional): Minimum separation score of a cutpoint.
                Defaults to DEFAULT_PARAMS_VALUES["threshold"].
            nominal_size (int, optional): Numerical columns with at most that many
                distinct values are encoded with indicators. Defaults to
                DEFAULT_PARAMS_VALUES["nominal_size"].
            max_cutpoints (int, optional): Maximum number of cutpoints kept for a
                single column. Defaults to DEFAULT_PARAMS_VALUES["max_cutpoints"].
        """
        self.threshold: float = threshold
        self.nominal_size: int = nominal_size
        self.max_cutpoints: int = max_cutpoints

        self.encodings_: Optional[tuple[FeatureEncoding, ...]] = None
        self.feature_names_in_: Optional[tuple[Hashable, ...]] = None
        self.logger: Logger = getLogger(self.__class__.__name__)

    def fit(
        self,
        X: pd.DataFrame,
        y: pd.Series,
        threshold: Optional[float] = None,
        nominal_size: Optional[int] = None,
        max_cutpoints: Optional[int] = None,
    ) -> Binarizer:
        """Learns encodings of all columns of given data. Parameters passed here
        override the ones given to the constructor for this call only.

        Previously fitted encodings are replaced only if fitting succeeds.

        Args:
            X (pd.DataFrame): data
            y (pd.Series): labels, aligned with rows of X by position

        Raises:
            RowCountMismatchError: when X and y lengths differ
            InsufficientClassesError: when a column needs cutpoints and y has less
                than 2 distinct labels
            ColumnTypeUnsupportedError: when a column has no defined encoding

        Returns:
            Binarizer: fitted binarizer
        """
        threshold = self.threshold if threshold is None else threshold
        nominal_size = self.nominal_size if nominal_size is None else nominal_size
        max_cutpoints = self.max_cutpoints if max_cutpoints is None else max_cutpoints
        validate_binarization_params(threshold, nominal_size, max_cutpoints)

        X = _helpers.to_frame(X)
        y = _helpers.to_label_series(y, index=X.index)
        _helpers.check_row_count(X, y)
        if X.columns.has_duplicates:
            raise ValueError("Data contains duplicated column names")
        codes, classes = _helpers.encode_labels(y)
        total: np.ndarray = np.bincount(codes, minlength=len(classes))

        encodings: list[FeatureEncoding] = []
        for column_name in X.columns:
            encoding = self._encode_column(
                X[column_name],
                codes,
                total,
                threshold=threshold,
                nominal_size=nominal_size,
                max_cutpoints=max_cutpoints,
            )
            self.logger.debug(
                'Column "%s" encoded with %d %s features',
                column_name,
                len(encoding),
                encoding.__class__.__name__,
            )
            encodings.append(encoding)

        self.encodings_ = tuple(encodings)
        self.feature_names_in_ = tuple(X.columns)
        return self

    def _encode_column(
        self,
        column: pd.Series,
        codes: np.ndarray,
        total: np.ndarray,
        threshold: float,
        nominal_size: int,
        max_cutpoints: int,
    ) -> FeatureEncoding:
        kind: str = _helpers.get_column_kind(column)
        values: list[Any] = _helpers.unique_stable(column)
        if kind != _helpers.NUMERIC or len(values) <= nominal_size:
            return IndicatorEncoding(
                column=column.name,
                kind=kind,
                values=tuple(_helpers.to_python_scalar(v) for v in values),
            )
        if total.shape[0] < 2:
            raise InsufficientClassesError(
                f'Cannot select cutpoints for column "{column.name}": label column '
                f"has {total.shape[0]} distinct value(s), at least 2 are required"
            )
        cutpoints, scores = find_cutpoints_candidates(
            column.to_numpy(dtype=float, na_value=np.nan), codes, total, threshold
        )
        cutpoints, scores = rank_cutpoints(cutpoints, scores, max_cutpoints)
        return ThresholdEncoding(column=column.name, cutpoints=cutpoints, scores=scores)

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        """Applies learned encodings to given data.

        Columns without a stored encoding are ignored.

        Args:
            X (pd.DataFrame): data

        Raises:
            NotFittedError: when called before fit
            SchemaMismatchError: when an encoded column is missing or its type is
                incompatible with its encoding

        Returns:
            pd.DataFrame: boolean table with one column per feature, in encoding
            order, sharing the index of X
        """
        encodings: tuple[FeatureEncoding, ...] = self.get_encodings()
        X = _helpers.to_frame(X)

        names: list[str] = []
        features: list[np.ndarray] = []
        for encoding in encodings:
            if encoding.column not in X.columns:
                raise SchemaMismatchError(
                    f'Column "{encoding.column}" is missing from the data'
                )
            column: pd.Series = X[encoding.column]
            try:
                kind: str = _helpers.get_column_kind(column)
            except ColumnTypeUnsupportedError as error:
                raise SchemaMismatchError(str(error)) from error
            if not encoding.is_compatible(kind):
                raise SchemaMismatchError(
                    f'Column "{encoding.column}" is {kind} but was encoded as '
                    f"{encoding.kind} column"
                )
            names.extend(encoding.feature_names)
            features.extend(encoding.apply(column))

        if len(features) == 0:
            return pd.DataFrame(index=X.index)
        return pd.DataFrame(np.column_stack(features), index=X.index, columns=names)

    def fit_transform(self, X: pd.DataFrame, y: pd.Series, **fit_params) -> pd.DataFrame:
        return self.fit(X, y, **fit_params).transform(X)

    def get_encodings(self) -> tuple[FeatureEncoding, ...]:
        if self.encodings_ is None:
            raise NotFittedError(
                "This Binarizer instance is not fitted yet. Call 'fit' first."
            )
        return self.encodings_

    def get_cutpoints(self) -> dict[Hashable, tuple[float, ...]]:
        return {
            encoding.column: encoding.cutpoints
            for encoding in self.get_encodings()
            if isinstance(encoding, ThresholdEncoding)
        }

    @property
    def feature_names_(self) -> tuple[str, ...]:
        names: list[str] = []
        for encoding in self.get_encodings():
            names.extend(encoding.feature_names)
        return tuple(names)

    @property
    def n_features_out_(self) -> int:
        return sum(len(encoding) for encoding in self.get_encodings())

    def feature_origins(self) -> list[tuple[FeatureEncoding, int]]:
        """Returns, for every output feature, the encoding that produces it and
        the position of its value or cutpoint inside this encoding.
        """
        return [
            (encoding, position)
            for encoding in self.get_encodings()
            for position in range(len(encoding))
        ]
