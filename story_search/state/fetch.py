"""Reducer-style lifecycle of remote search results.

``apply`` is a pure transition function over :class:`FetchResult`; the
:class:`FetchStateMachine` wrapper owns the current value and is the only
place that replaces it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Union

from story_search.domain.models import Item

FetchStatus = Literal["idle", "loading", "success", "error"]


class InvalidAction(TypeError):
    """Raised when a transition is requested with an unknown action."""


@dataclass(frozen=True, slots=True)
class FetchResult:
    status: FetchStatus = "idle"
    items: tuple[Item, ...] = ()

    @property
    def is_loading(self) -> bool:
        return self.status == "loading"

    @property
    def is_error(self) -> bool:
        return self.status == "error"


@dataclass(frozen=True, slots=True)
class FetchStart:
    pass


@dataclass(frozen=True, slots=True)
class FetchSuccess:
    items: tuple[Item, ...]

    @classmethod
    def of(cls, items: Iterable[Item]) -> "FetchSuccess":
        return cls(items=tuple(items))


@dataclass(frozen=True, slots=True)
class FetchFailure:
    pass


@dataclass(frozen=True, slots=True)
class RemoveItem:
    item_id: str


FetchAction = Union[FetchStart, FetchSuccess, FetchFailure, RemoveItem]


def apply(state: FetchResult, action: FetchAction) -> FetchResult:
    """Return the state that follows ``state`` after ``action``."""

    # Exact type checks: subclasses or look-alikes are not part of the action set.
    action_type = type(action)
    if action_type is FetchStart:
        return FetchResult(status="loading", items=state.items)
    if action_type is FetchSuccess:
        return FetchResult(status="success", items=tuple(action.items))
    if action_type is FetchFailure:
        return FetchResult(status="error", items=state.items)
    if action_type is RemoveItem:
        kept = tuple(item for item in state.items if item.id != action.item_id)
        if len(kept) == len(state.items):
            return state
        return FetchResult(status=state.status, items=kept)
    raise InvalidAction(f"Unsupported fetch action: {action!r}")


class FetchStateMachine:
    """Holds the current :class:`FetchResult` and applies actions to it."""

    def __init__(self, initial: FetchResult | None = None) -> None:
        self._state = initial or FetchResult()

    @property
    def state(self) -> FetchResult:
        return self._state

    def dispatch(self, action: FetchAction) -> FetchResult:
        # apply() raises before anything is assigned, so a rejected action
        # leaves the previous state in place.
        self._state = apply(self._state, action)
        return self._state


__all__ = [
    "FetchAction",
    "FetchFailure",
    "FetchResult",
    "FetchStart",
    "FetchStateMachine",
    "FetchStatus",
    "FetchSuccess",
    "InvalidAction",
    "RemoveItem",
    "apply",
]
