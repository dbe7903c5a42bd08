"""Trace reporters for the suspending resolution mode."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class ThrottledReporter:
    """Async progress callback that yields to the event loop every ``every`` lines.

    A resolution pass over hundreds of calls produces a trace line per
    heuristic; yielding lets a live consumer (e.g. a progress view) keep up.
    """

    def __init__(self, sink: Callable[[str], None], every: int = 1) -> None:
        if every < 1:
            msg = f"every must be >= 1, got {every}"
            raise ValueError(msg)
        self._sink = sink
        self._every = every
        self._pending = 0
        self.lines_emitted = 0

    async def __call__(self, line: str) -> None:
        self._sink(line)
        self.lines_emitted += 1
        self._pending += 1
        if self._pending >= self._every:
            self._pending = 0
            await asyncio.sleep(0)


__all__ = ["ThrottledReporter"]
