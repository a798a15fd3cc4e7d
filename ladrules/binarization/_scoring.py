"""Separation score and cutpoints candidates search for numerical columns."""
import itertools
import math

import numpy as np

from ladrules.exceptions import InsufficientClassesError


def separation_scores(running: np.ndarray, total: np.ndarray) -> np.ndarray:
    """Vectorized separation score for many split points at once.

    For each class ``i`` the rate ``r_i = running[i] / total[i]`` is the fraction
    of that class's rows seen before the split point. The score is the mean
    squared rate difference over all pairs of classes:

        2 / (L * (L - 1)) * sum_{i < j} (r_i - r_j) ** 2

    It is 0 when all classes were seen in the same proportion and 1 when one class
    was seen entirely and the other not at all.

    Args:
        running (np.ndarray): array of shape (n_split_points, L) with counts of rows
            of each class seen before every split point
        total (np.ndarray): array of shape (L,) with counts of rows of each class

    Raises:
        InsufficientClassesError: when L < 2

    Returns:
        np.ndarray: scores of shape (n_split_points,)
    """
    running = np.atleast_2d(np.asarray(running, dtype=float))
    total = np.asarray(total, dtype=float)
    classes_count: int = total.shape[0]
    if classes_count < 2:
        raise InsufficientClassesError(
            f"Separation score requires at least 2 classes, got {classes_count}"
        )
    with np.errstate(divide="ignore", invalid="ignore"):
        rates: np.ndarray = running / total
    squared_diffs_sum = np.zeros(rates.shape[0], dtype=float)
    for i, j in itertools.combinations(range(classes_count), 2):
        squared_diffs_sum += np.square(rates[:, i] - rates[:, j])
    return 2.0 / (classes_count * (classes_count - 1)) * squared_diffs_sum


def separation_score(running: np.ndarray, total: np.ndarray) -> float:
    return float(separation_scores(np.asarray(running)[np.newaxis, :], total)[0])


def find_cutpoints_candidates(
    values: np.ndarray,
    codes: np.ndarray,
    total: np.ndarray,
    threshold: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Scans a numerical column sorted by value and returns midpoints between
    adjacent rows with different classes and different values whose separation
    score is at least ``threshold``.

    Args:
        values (np.ndarray): column values, rows with NaN are skipped
        codes (np.ndarray): class code of each row (0..L-1)
        total (np.ndarray): number of rows of each class in the whole label column
        threshold (float): minimum separation score

    Returns:
        tuple[np.ndarray, np.ndarray]: cutpoints and their scores in scan order
    """
    present: np.ndarray = ~np.isnan(values)
    values, codes = values[present], codes[present]
    if values.shape[0] < 2:
        return np.empty(0, dtype=float), np.empty(0, dtype=float)

    order: np.ndarray = np.argsort(values, kind="stable")
    values, codes = values[order], codes[order]

    one_hot = np.zeros((values.shape[0], total.shape[0]), dtype=np.int64)
    one_hot[np.arange(values.shape[0]), codes] = 1
    # running[k] counts rows 0..k of each class
    running: np.ndarray = np.cumsum(one_hot, axis=0)

    is_boundary: np.ndarray = (codes[1:] != codes[:-1]) & (values[1:] != values[:-1])
    current: np.ndarray = np.flatnonzero(is_boundary) + 1
    # counts from before the current row was included
    scores: np.ndarray = separation_scores(running[current - 1], total)
    midpoints: np.ndarray = (values[current - 1] + values[current]) / 2.0

    selected: np.ndarray = scores >= threshold
    return midpoints[selected], scores[selected]


def rank_cutpoints(
    cutpoints: np.ndarray, scores: np.ndarray, max_cutpoints: int
) -> tuple[tuple[float, ...], tuple[float, ...]]:
    """Sorts cutpoints by descending score and keeps at most ``max_cutpoints``
    of them. NaN scores go after all numerical ones, equal scores keep their
    scan order.
    """
    order: list[int] = sorted(
        range(len(scores)),
        key=lambda i: (
            math.isnan(scores[i]),
            0.0 if math.isnan(scores[i]) else -scores[i],
        ),
    )[:max_cutpoints]
    return (
        tuple(float(cutpoints[i]) for i in order),
        tuple(float(scores[i]) for i in order),
    )
