"""
Wall-clock timing for the stages of one recognition run.

A run has two timed stages, "submit" (the upload POST) and "poll" (the
fixed delay plus the single result GET). The totals end up in
`OperationOutcome.timings` and the `duration_ms` log fields.
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator


class StageTimers:
    """
    Elapsed seconds per stage name for a single run.

    Re-entering `timer` with the same name adds to that stage's total, so
    a retried stage reports its combined time.
    """

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self.totals: Dict[str, float] = {}

    @contextmanager
    def timer(self, name: str) -> Iterator[None]:
        """
        Time the enclosed block and add it to the stage total.

        The elapsed time is recorded even when the block raises, so a
        failed poll still shows how long it waited.

        Args:
          name: Stage identifier, "submit" or "poll".

        Yields:
          Nothing; the block runs while the clock is running.
        """
        started = self._clock()
        try:
            yield
        finally:
            self.totals[name] = self.totals.get(name, 0.0) + (self._clock() - started)

    def duration_ms(self, name: str) -> int:
        """
        Whole milliseconds spent in one stage.

        Returns:
          The truncated total, or 0 for a stage that never ran.
        """
        return int(self.totals.get(name, 0.0) * 1000)

    def total_ms(self) -> int:
        """Whole milliseconds across every stage of the run."""
        return int(sum(self.totals.values()) * 1000)
