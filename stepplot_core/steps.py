from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Sequence

LOGGER = logging.getLogger(__name__)

StepListener = Callable[[int], None]

NEXT_KEYS = frozenset({"ArrowRight", "ArrowDown", " ", "Space", "Spacebar"})
PREV_KEYS = frozenset({"ArrowLeft", "ArrowUp"})


@dataclass(frozen=True)
class Step:
    id: str
    index: int


def _build_steps(step_ids: Sequence[str]) -> tuple[Step, ...]:
    if not step_ids:
        raise ValueError("a step controller needs at least one step")
    seen: set[str] = set()
    for step_id in step_ids:
        if not str(step_id).strip():
            raise ValueError("step ids must be non-empty")
        if step_id in seen:
            raise ValueError(f"duplicate step id `{step_id}`")
        seen.add(step_id)
    return tuple(Step(id=step_id, index=i) for i, step_id in enumerate(step_ids))


class StepController:
    """Cumulative step reveal over a fixed, ordered list of step ids.

    Every transition saturates at the ends of the list. Listeners are told the
    new index only when it actually changes. Not thread-safe: one presentation
    owner drives one controller.
    """

    def __init__(
        self,
        step_ids: Sequence[str],
        *,
        initial_step: int = 0,
        on_step_change: StepListener | None = None,
    ) -> None:
        self._steps = _build_steps(step_ids)
        self._by_id = {step.id: step for step in self._steps}
        self._index = self._clamp(initial_step)
        self._listeners: list[StepListener] = []
        if on_step_change is not None:
            self._listeners.append(on_step_change)

    @property
    def steps(self) -> tuple[Step, ...]:
        return self._steps

    @property
    def total_steps(self) -> int:
        return len(self._steps)

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def current_step(self) -> Step:
        return self._steps[self._index]

    @property
    def can_go_next(self) -> bool:
        return self._index < len(self._steps) - 1

    @property
    def can_go_prev(self) -> bool:
        return self._index > 0

    @property
    def is_last(self) -> bool:
        return self._index == len(self._steps) - 1

    @property
    def progress(self) -> float:
        if len(self._steps) <= 1:
            return 100.0
        return self._index / (len(self._steps) - 1) * 100.0

    def _clamp(self, index: int) -> int:
        return max(0, min(int(index), len(self._steps) - 1))

    def _move_to(self, index: int) -> int:
        target = self._clamp(index)
        if target != self._index:
            self._index = target
            for listener in tuple(self._listeners):
                listener(target)
        return self._index

    def next(self) -> int:
        return self._move_to(self._index + 1)

    def prev(self) -> int:
        return self._move_to(self._index - 1)

    def jump_to(self, index: int) -> int:
        if self._clamp(index) != index:
            LOGGER.debug("step %s is outside 0..%s; clamping", index, len(self._steps) - 1)
        return self._move_to(index)

    def reset(self) -> int:
        return self._move_to(0)

    def is_visible(self, step_id: str) -> bool:
        step = self._by_id.get(step_id)
        return step is not None and step.index <= self._index

    def is_current(self, step_id: str) -> bool:
        step = self._by_id.get(step_id)
        return step is not None and step.index == self._index

    def index_of(self, step_id: str) -> int | None:
        step = self._by_id.get(step_id)
        return None if step is None else step.index

    def subscribe(self, listener: StepListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update_steps(self, step_ids: Sequence[str]) -> None:
        """Replace the step list, keeping the current index clamped into the new one."""

        self._steps = _build_steps(step_ids)
        self._by_id = {step.id: step for step in self._steps}
        self._move_to(self._index)

    def handle_key(self, key: str) -> bool:
        if key in NEXT_KEYS:
            self.next()
        elif key in PREV_KEYS:
            self.prev()
        elif key == "Home":
            self.jump_to(0)
        elif key == "End":
            self.jump_to(len(self._steps) - 1)
        else:
            return False
        return True

    def __repr__(self) -> str:
        return f"StepController(current={self._index}, steps={[s.id for s in self._steps]})"
