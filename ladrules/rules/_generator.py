from __future__ import annotations

from logging import Logger
from logging import getLogger
from typing import Any
from typing import Optional

import numpy as np
import pandas as pd

from ladrules import _helpers
from ladrules._params import DEFAULT_PARAMS_VALUES
from ladrules._params import resolve_max_degree
from ladrules._params import validate_search_params
from ladrules._timing import FittingTimes
from ladrules._timing import PerformanceTimer
from ladrules.binarization import Binarizer
from ladrules.exceptions import NotFittedError
from ladrules.exceptions import SchemaMismatchError
from ladrules.rules._search import DegreeSummary
from ladrules.rules._search import PrimePatternSearch
from ladrules.rules._search import ProgressCallback
from ladrules.rules._search import SearchResult
from ladrules.rules.patterns import Rule


class RuleGenerator:
    """Mines an ordered list of prime patterns from a table binarized by an already
    fitted Binarizer and classifies new rows with them.

    Rules are kept in discovery order: ascending degree, then discovery order within
    a degree. A row is classified by the first rule covering it, rows covered by no
    rule get the fallback label.
    """

    def __init__(
        self,
        binarizer: Binarizer,
        max_degree: int = DEFAULT_PARAMS_VALUES["max_degree"],
        n_jobs: int = DEFAULT_PARAMS_VALUES["n_jobs"],
        batch_size: int = 256,
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """
        Args:
            binarizer (Binarizer): fitted binarizer used to encode data
            max_degree (int, optional): Maximum number of literals in a pattern,
                0 means no limit. Defaults to DEFAULT_PARAMS_VALUES["max_degree"].
            n_jobs (int, optional): Number of threads computing coverages of
                candidate patterns, joblib semantics. Defaults to
                DEFAULT_PARAMS_VALUES["n_jobs"].
            batch_size (int, optional): Number of candidates evaluated together.
                Defaults to 256.
            progress_callback (Optional[ProgressCallback], optional): Called after
                every search degree with the degree and the number of remaining
                rows of each class. Defaults to None.
        """
        self.binarizer: Binarizer = binarizer
        self.max_degree: int = max_degree
        self.n_jobs: int = n_jobs
        self.batch_size: int = batch_size
        self.progress_callback: Optional[ProgressCallback] = progress_callback

        self.rules_: Optional[tuple[Rule, ...]] = None
        self.fallback_label_: Any = None
        self.classes_: Optional[np.ndarray] = None
        self.feature_names_: Optional[tuple[str, ...]] = None
        self.label_name_: Any = None
        self.degrees_: Optional[tuple[DegreeSummary, ...]] = None
        self.fitting_times_: Optional[FittingTimes] = None
        self.logger: Logger = getLogger(self.__class__.__name__)

    def fit(self, X: pd.DataFrame, y: pd.Series) -> RuleGenerator:
        """Mines prime patterns from given data. Previously learned rules are
        replaced only if fitting succeeds.

        Args:
            X (pd.DataFrame): data, encoded with the fitted binarizer
            y (pd.Series): labels, aligned with rows of X by position

        Raises:
            RowCountMismatchError: when X and y lengths differ
            NotFittedError: when the binarizer is not fitted

        Returns:
            RuleGenerator: fitted rule generator
        """
        validate_search_params(self.max_degree, self.n_jobs)
        with PerformanceTimer() as total_timer:
            X = _helpers.to_frame(X)
            y = _helpers.to_label_series(y, index=X.index)
            _helpers.check_row_count(X, y)
            if X.shape[0] == 0:
                raise ValueError("Cannot generate rules from an empty table")

            with PerformanceTimer() as binarization_timer:
                X_bin: pd.DataFrame = self.binarizer.transform(X)
            codes, labels = _helpers.encode_labels(y)
            max_degree: int = resolve_max_degree(self.max_degree, X_bin.shape[1])
            self.logger.info(
                "Searching prime patterns up to degree %d over %d boolean features",
                max_degree,
                X_bin.shape[1],
            )
            search = PrimePatternSearch(
                X_bin.to_numpy(dtype=bool),
                codes,
                labels,
                max_degree=max_degree,
                n_jobs=self.n_jobs,
                batch_size=self.batch_size,
                progress_callback=self.progress_callback,
            )
            with PerformanceTimer() as search_timer:
                result: SearchResult = search.run()

        self.rules_ = tuple(result.rules)
        self.fallback_label_ = result.fallback_label
        self.classes_ = np.array(labels)
        self.feature_names_ = tuple(X_bin.columns)
        self.label_name_ = y.name
        self.degrees_ = tuple(result.degrees)
        self.fitting_times_ = FittingTimes(
            binarization_time=binarization_timer.timedelta,
            search_time=search_timer.timedelta,
            total_fitting_time=total_timer.timedelta,
        )
        self.logger.info(
            "Found %d rules, fallback label: %s", len(self.rules_), self.fallback_label_
        )
        return self

    def _check_is_fitted(self):
        if self.rules_ is None:
            raise NotFittedError(
                "This RuleGenerator instance is not fitted yet. Call 'fit' first."
            )

    def get_rules(self) -> tuple[Rule, ...]:
        self._check_is_fitted()
        return self.rules_

    def binarize(self, X: pd.DataFrame) -> np.ndarray:
        """Encodes data with the binarizer and checks it still produces the
        features the rules were mined on.
        """
        self._check_is_fitted()
        X_bin: pd.DataFrame = self.binarizer.transform(X)
        if tuple(X_bin.columns) != self.feature_names_:
            raise SchemaMismatchError(
                "Binarizer produces different features than the ones rules were "
                "generated on, it was probably refitted"
            )
        return X_bin.to_numpy(dtype=bool)

    def apply(self, X: pd.DataFrame) -> np.ndarray:
        """Returns, for every row, the index of the first rule covering it or -1 when
        no rule does.
        """
        X_bin: np.ndarray = self.binarize(X)
        fired = np.full(X_bin.shape[0], -1, dtype=np.intp)
        for i, rule in enumerate(self.rules_):
            newly_covered: np.ndarray = (fired == -1) & rule.covered_mask(X_bin)
            fired[newly_covered] = i
        return fired

    def predict(self, X: pd.DataFrame) -> pd.Series:
        """Classifies rows with the first rule covering them, falling back to the
        fallback label.

        Args:
            X (pd.DataFrame): data

        Returns:
            pd.Series: predicted labels sharing the index of X
        """
        X = _helpers.to_frame(X)
        fired: np.ndarray = self.apply(X)
        outcomes: list[Any] = [rule.label for rule in self.rules_] + [
            self.fallback_label_
        ]
        # index -1 picks the fallback label
        predictions = np.empty(len(outcomes), dtype=object)
        predictions[:] = outcomes
        return pd.Series(
            predictions[fired], index=X.index, name=self.label_name_
        ).infer_objects()

    def describe_rules(self) -> list[str]:
        return [
            rule.describe(
                self.feature_names_,
                "label" if self.label_name_ is None else self.label_name_,
            )
            for rule in self.get_rules()
        ]
