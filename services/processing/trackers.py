from __future__ import annotations

from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class RunningExtremum(Generic[T]):
    """Tracks the best item offered so far according to ``key``.

    Only items whose key passes ``qualifies`` are considered (positive by
    default). A later item must be strictly better to replace the current
    one, so the first item in input order wins ties.
    """

    def __init__(
        self,
        key: Callable[[T], float],
        lowest: bool = False,
        qualifies: Optional[Callable[[float], bool]] = None,
    ) -> None:
        self._key = key
        self._lowest = lowest
        self._qualifies = qualifies or (lambda value: value > 0)
        self.best: Optional[T] = None
        self.value: Optional[float] = None

    def offer(self, item: T) -> bool:
        value = self._key(item)
        if not self._qualifies(value):
            return False
        if self.value is not None:
            better = value < self.value if self._lowest else value > self.value
            if not better:
                return False
        self.best = item
        self.value = value
        return True

    def map(self, fn: Callable[[T], object]):
        return fn(self.best) if self.best is not None else None
