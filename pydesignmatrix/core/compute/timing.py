"""
Stage timing for backend solves.

A backend wraps its whole solve in a Timer and each stage (decomposition,
back substitution, covariance, statistics) in a named section; the
breakdown is stored in Result.timing.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Wall-clock timer with named, accumulating sections.

    Usage:
        with Timer() as timer:
            with timer.section('qr_decomposition'):
                decomposition = qr_cpu(X)
            with timer.section('solve'):
                beta = qr_solve_cpu(decomposition, y)

        timer.result()
        # {'total_seconds': 4.1e-05, 'qr_decomposition': 2.9e-05, 'solve': 6.0e-06}
    """

    def __init__(self):
        self._stages: dict[str, float] = {}
        self._started: float | None = None
        self._elapsed: float | None = None

    def __enter__(self) -> 'Timer':
        self._started = time.perf_counter()
        self._elapsed = None
        return self

    def __exit__(self, *exc_info) -> None:
        self._elapsed = time.perf_counter() - self._started

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Time one stage; a stage entered twice accumulates."""
        began = time.perf_counter()
        try:
            yield
        finally:
            self._stages[name] = self._stages.get(name, 0.0) + time.perf_counter() - began

    def result(self) -> dict[str, float]:
        """
        Total and per-stage seconds.

        Raises:
            RuntimeError: If the timer has not been exited yet
        """
        if self._elapsed is None:
            raise RuntimeError("Timer.result() needs a completed 'with Timer()' block")
        return {'total_seconds': self._elapsed, **self._stages}
