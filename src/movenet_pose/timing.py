"""
Misure di latenza per la pipeline.

Tutti i tempi usano time.perf_counter (monotono), quindi non sono mai negativi.
"""

import time


class Timer:
    """
    Context manager che misura il tempo trascorso in millisecondi.

    Example:
        with Timer() as t:
            run()
        print(t.elapsed_ms)
    """

    def __init__(self):
        self._start: float | None = None
        self.elapsed_ms = 0.0

    def __enter__(self):
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = max(0.0, (time.perf_counter() - self._start) * 1000.0)
        return False


class FpsCounter:
    """
    Stima degli FPS dal delta wall-clock tra due chiamate successive a tick().

    Il timestamp precedente è stato esplicito dell'istanza, uno per sessione.
    La prima chiamata restituisce 0.0.
    """

    def __init__(self, clock=time.perf_counter):
        self._clock = clock
        self._previous: float | None = None

    def tick(self) -> float:
        now = self._clock()
        previous, self._previous = self._previous, now
        if previous is None or now <= previous:
            return 0.0
        return 1.0 / (now - previous)

    def reset(self) -> None:
        self._previous = None


class TimingStats:
    """Accumula i tempi per frame e ne calcola le medie (ms)."""

    FIELDS = ("time_pre_process", "time_inference", "time_post_process")

    def __init__(self):
        self.count = 0
        self._totals = {name: 0.0 for name in self.FIELDS}

    def add(self, result) -> None:
        """Aggiunge un risultato con gli attributi time_pre_process/inference/post_process."""
        self.count += 1
        for name in self.FIELDS:
            self._totals[name] += float(getattr(result, name))

    def averages(self) -> dict[str, float]:
        if self.count == 0:
            return {name: 0.0 for name in self.FIELDS}
        return {name: total / self.count for name, total in self._totals.items()}
