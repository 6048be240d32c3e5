from __future__ import annotations

from typing import Iterable, List, Optional

import pytest

from hpa_core.interfaces import EventKind


class ScriptedSource:
    """RandomSource replaying fixed events, edge sizes, and integer draws."""

    def __init__(
        self,
        events: Iterable[EventKind],
        sizes: Iterable[int] = (),
        integers: Optional[Iterable[int]] = None,
    ) -> None:
        self.events: List[EventKind] = list(events)
        self.sizes: List[int] = list(sizes)
        self.ints: Optional[List[int]] = list(integers) if integers is not None else None
        self.integer_calls: List[tuple] = []

    def uniform(self) -> float:
        return 0.5

    def integers(self, low: int, high: int) -> int:
        self.integer_calls.append((low, high))
        if self.ints:
            return self.ints.pop(0)
        return low

    def draw_event(self, pv: float, pe: float, pd: float) -> EventKind:
        return self.events.pop(0)

    def draw_edge_size(self, step_index: int) -> int:
        return self.sizes.pop(0)


@pytest.fixture
def scripted():
    return ScriptedSource
