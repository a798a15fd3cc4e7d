import math
from typing import TypedDict


class AlgorithmParams(TypedDict):
    threshold: float
    nominal_size: int
    max_cutpoints: int
    max_degree: int
    n_jobs: int


DEFAULT_PARAMS_VALUES: AlgorithmParams = AlgorithmParams(
    threshold=0.0,
    nominal_size=2,
    max_cutpoints=10,
    max_degree=0,
    n_jobs=1,
)


def validate_binarization_params(
    threshold: float, nominal_size: int, max_cutpoints: int
):
    if threshold is None or not math.isfinite(threshold):
        raise ValueError(f"threshold must be a finite number, got {threshold}")
    if nominal_size < 0:
        raise ValueError(f"nominal_size must be non-negative, got {nominal_size}")
    if max_cutpoints < 0:
        raise ValueError(f"max_cutpoints must be non-negative, got {max_cutpoints}")


def validate_search_params(max_degree: int, n_jobs: int):
    if max_degree < 0:
        raise ValueError(f"max_degree must be non-negative, got {max_degree}")
    if n_jobs == 0:
        raise ValueError("n_jobs == 0 has no meaning, use 1 for sequential search")


def resolve_max_degree(max_degree: int, features_count: int) -> int:
    """Returns the number of search degrees to run. 0 or any value exceeding the
    number of boolean features means "all features".
    """
    if max_degree == 0 or max_degree > features_count:
        return features_count
    return max_degree


def adjust_params_on_dataset(
    params: AlgorithmParams,
    features_count: int,
) -> AlgorithmParams:
    new_params: AlgorithmParams = params.copy()
    new_params["max_degree"] = resolve_max_degree(
        params["max_degree"], features_count
    )
    return new_params
