"""Hook points fired around cart mutations.

Observers are plain callables registered against a ``HookPoint``.  They
run synchronously in registration order.  An observer vetoes the current
operation by returning a ``Veto``; the first veto stops dispatch and the
cart manager aborts with the veto's message.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any


class HookPoint(Enum):
    ON_START_ORDER = "on_start_order"
    BEFORE_ADD = "before_add"
    AFTER_ADD = "after_add"
    BEFORE_REMOVE = "before_remove"
    AFTER_REMOVE = "after_remove"
    BEFORE_SET_QUANTITY = "before_set_quantity"
    AFTER_SET_QUANTITY = "after_set_quantity"


@dataclass(frozen=True)
class Veto:
    message: str


Observer = Callable[..., "Veto | None"]


class HookDispatcher:

    def __init__(self) -> None:
        self._observers: dict[HookPoint, list[Observer]] = defaultdict(list)

    def register(self, hook: HookPoint, observer: Observer) -> None:
        self._observers[hook].append(observer)

    def register_extension(self, extension: Any) -> None:
        """Register every method of *extension* named after a hook point.

        e.g. an object with ``before_add`` and ``after_remove`` methods is
        subscribed to exactly those two hooks.
        """
        for hook in HookPoint:
            method = getattr(extension, hook.value, None)
            if callable(method):
                self.register(hook, method)

    def dispatch(self, hook: HookPoint, *args: Any) -> Veto | None:
        for observer in list(self._observers[hook]):
            result = observer(*args)
            if isinstance(result, Veto):
                return result
        return None
