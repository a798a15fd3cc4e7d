from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import timedelta


class PerformanceTimer:
    """Context manager measuring wall time of a code block with
    time.perf_counter().

    Example:
    >>> with PerformanceTimer() as timer:
    ...     binarizer.fit(X, y)
    >>> print(timer.timedelta)
    """

    def __init__(self) -> None:
        self.start_time: float = None
        self.end_time: float = None

    def __enter__(self) -> PerformanceTimer:
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args, **kwargs):
        self.end_time = time.perf_counter()

    def __str__(self) -> str:
        return str(self.timedelta)

    @property
    def time(self) -> float:
        """
        Returns:
            float: elapsed time in seconds
        """
        return self.end_time - self.start_time

    @property
    def timedelta(self) -> timedelta:
        """
        Returns:
            timedelta: elapsed time as datetime timedelta object
        """
        return timedelta(seconds=self.time)


@dataclass
class FittingTimes:
    binarization_time: timedelta = timedelta()
    search_time: timedelta = timedelta()
    total_fitting_time: timedelta = timedelta()

    def __repr__(self) -> str:
        return (
            f"binarization_time={self.binarization_time.total_seconds()}, "
            f"search_time={self.search_time.total_seconds()}, "
            f"total_fitting_time={self.total_fitting_time.total_seconds()}"
        )
