from __future__ import annotations

from typing import Any
from typing import Optional

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator
from sklearn.base import ClassifierMixin

from ladrules import _helpers
from ladrules._params import DEFAULT_PARAMS_VALUES
from ladrules._params import AlgorithmParams
from ladrules._params import adjust_params_on_dataset
from ladrules._params import validate_binarization_params
from ladrules._params import validate_search_params
from ladrules._timing import FittingTimes
from ladrules._timing import PerformanceTimer
from ladrules.binarization import Binarizer
from ladrules.exceptions import NotFittedError
from ladrules.rules import ProgressCallback
from ladrules.rules import Rule
from ladrules.rules import RuleGenerator


class LADClassifier(ClassifierMixin, BaseEstimator):
    """Logical Analysis of Data classifier. It binarizes data and mines prime
    patterns in the following form:
        IF l1 AND l2 ... AND lN THEN label = ...

    Where each literal ``l`` is either a threshold test (``attr > cutpoint``), an
    equality test (``attr == value``) or a negation of one of them. Maximum number
    of literals in a pattern could be controlled by :code:`max_degree` parameter.
    """

    def __init__(
        self,
        threshold: float = DEFAULT_PARAMS_VALUES["threshold"],
        nominal_size: int = DEFAULT_PARAMS_VALUES["nominal_size"],
        max_cutpoints: int = DEFAULT_PARAMS_VALUES["max_cutpoints"],
        max_degree: int = DEFAULT_PARAMS_VALUES["max_degree"],
        n_jobs: int = DEFAULT_PARAMS_VALUES["n_jobs"],
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """
        Args:
            threshold (float, optional): Minimum separation score of a cutpoint.
                Defaults to DEFAULT_PARAMS_VALUES["threshold"].
            nominal_size (int, optional): Numerical attributes with at most that many
                distinct values are treated as nominal ones. Defaults to
                DEFAULT_PARAMS_VALUES["nominal_size"].
            max_cutpoints (int, optional): Maximum number of cutpoints selected for a
                single numerical attribute. Defaults to
                DEFAULT_PARAMS_VALUES["max_cutpoints"].
            max_degree (int, optional): Maximum number of literals in a rule, 0 means
                no limit. Defaults to DEFAULT_PARAMS_VALUES["max_degree"].
            n_jobs (int, optional): Number of threads used during patterns search.
                Defaults to DEFAULT_PARAMS_VALUES["n_jobs"].
            progress_callback (Optional[ProgressCallback], optional): Called after
                each search degree with the degree and the number of remaining rows
                of each class. Defaults to None.
        """
        self.threshold = threshold
        self.nominal_size = nominal_size
        self.max_cutpoints = max_cutpoints
        self.max_degree = max_degree
        self.n_jobs = n_jobs
        self.progress_callback = progress_callback

    def _algorithm_params(self) -> AlgorithmParams:
        return AlgorithmParams(
            threshold=self.threshold,
            nominal_size=self.nominal_size,
            max_cutpoints=self.max_cutpoints,
            max_degree=self.max_degree,
            n_jobs=self.n_jobs,
        )

    def fit(self, X: pd.DataFrame, y: pd.Series) -> LADClassifier:
        """Trains a binarizer and a ruleset on given data. Fitted state of the
        classifier changes only if both steps succeed.

        Args:
            X (pd.DataFrame): dataset
            y (pd.Series): label column

        Returns:
            LADClassifier: fitted classifier
        """
        params: AlgorithmParams = self._algorithm_params()
        validate_binarization_params(
            params["threshold"], params["nominal_size"], params["max_cutpoints"]
        )
        validate_search_params(params["max_degree"], params["n_jobs"])

        X = _helpers.to_frame(X)
        y = _helpers.to_label_series(y, index=X.index)
        with PerformanceTimer() as total_timer:
            with PerformanceTimer() as binarization_timer:
                binarizer = Binarizer(
                    threshold=params["threshold"],
                    nominal_size=params["nominal_size"],
                    max_cutpoints=params["max_cutpoints"],
                ).fit(X, y)
            adjusted_params: AlgorithmParams = adjust_params_on_dataset(
                params, binarizer.n_features_out_
            )
            rule_generator = RuleGenerator(
                binarizer,
                max_degree=adjusted_params["max_degree"],
                n_jobs=adjusted_params["n_jobs"],
                progress_callback=self.progress_callback,
            ).fit(X, y)

        self.binarizer_: Binarizer = binarizer
        self.rule_generator_: RuleGenerator = rule_generator
        self.classes_: np.ndarray = rule_generator.classes_
        self.n_features_in_: int = X.shape[1]
        self.feature_names_in_: np.ndarray = np.asarray(X.columns, dtype=object)
        self.fitting_times_ = FittingTimes(
            binarization_time=binarization_timer.timedelta,
            search_time=rule_generator.fitting_times_.search_time,
            total_fitting_time=total_timer.timedelta,
        )
        return self

    def _check_is_fitted(self):
        if not hasattr(self, "rule_generator_"):
            raise NotFittedError(
                f"This {self.__class__.__name__} instance is not fitted yet. "
                "Call 'fit' with appropriate arguments before using this estimator."
            )

    @property
    def rules_(self) -> tuple[Rule, ...]:
        self._check_is_fitted()
        return self.rule_generator_.get_rules()

    @property
    def fallback_label_(self) -> Any:
        self._check_is_fitted()
        return self.rule_generator_.fallback_label_

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        self._check_is_fitted()
        return self.binarizer_.transform(X)

    def predict(self, X: pd.DataFrame) -> pd.Series:
        self._check_is_fitted()
        return self.rule_generator_.predict(X)

    def __str__(self) -> str:
        if not hasattr(self, "rule_generator_"):
            return super().__repr__()
        lines: list[str] = self.rule_generator_.describe_rules()
        lines.append(f"ELSE {self.fallback_label_}")
        return "\n".join(lines)
