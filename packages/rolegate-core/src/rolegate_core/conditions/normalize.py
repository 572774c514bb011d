"""Normalization of ``when`` conditions into one async predicate contract.

A ``when`` value may be a boolean, an awaitable resolving to a boolean, a
Node-style callback ``(params, done)`` or a sync/async predicate ``(params)``.
Each shape becomes a :class:`Condition` once, when the role map is built, so
permission checks never inspect condition shapes.

Every condition fails closed: errors, rejections and falsy results all
evaluate to ``False``.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

DoneCallback = Callable[..., None]
WhenCallback = Callable[[Any, DoneCallback], None]
WhenPredicate = Callable[[Any], Any]
When = bool | Awaitable[bool] | WhenCallback | WhenPredicate


class Condition(ABC):
    """A normalized ``when`` condition."""

    @abstractmethod
    async def evaluate(self, params: Any = None) -> bool:
        """Resolve to True when the grant applies. Never raises."""
        ...


class Always(Condition):
    """A constant condition."""

    def __init__(self, value: bool) -> None:
        self.value = value

    async def evaluate(self, params: Any = None) -> bool:
        return self.value

    def __repr__(self) -> str:
        return f"Always({self.value})"


ALLOW = Always(True)
DENY = Always(False)


class AwaitableCondition(Condition):
    """Wraps an awaitable that is resolved once and shared by every evaluation."""

    def __init__(self, awaitable: Awaitable[Any]) -> None:
        self._awaitable = awaitable
        self._future: asyncio.Future[Any] | None = None

    async def evaluate(self, params: Any = None) -> bool:
        if self._future is None:
            self._future = asyncio.ensure_future(self._awaitable)
        # cancelled by its owner, or by the shutdown of the loop that ran it
        if self._future.cancelled():
            logger.debug("Awaitable condition was cancelled")
            return False
        try:
            # shield: a cancelled caller must not cancel the shared future
            return bool(await asyncio.shield(self._future))
        except asyncio.CancelledError:
            if self._future.cancelled():
                logger.debug("Awaitable condition was cancelled")
                return False
            raise
        except Exception:
            logger.debug("Awaitable condition failed", exc_info=True)
            return False


class CallbackCondition(Condition):
    """Wraps a ``(params, done)`` callback; ``done(err, result)`` settles it.

    ``done`` may be called synchronously, later on the event loop, or from
    another thread. Only the first call counts.
    """

    def __init__(self, callback: WhenCallback) -> None:
        self._callback = callback

    async def evaluate(self, params: Any = None) -> bool:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[bool] = loop.create_future()

        def settle(err: Any, result: Any) -> None:
            if future.done():
                return
            if err:
                logger.debug("Callback condition reported an error: %r", err)
                future.set_result(False)
            else:
                future.set_result(bool(result))

        def done(err: Any = None, result: Any = None) -> None:
            loop.call_soon_threadsafe(settle, err, result)

        try:
            self._callback(params, done)
            return await future
        except Exception:
            logger.debug("Callback condition failed", exc_info=True)
            return False


class PredicateCondition(Condition):
    """Wraps a sync or async predicate called with the check's params."""

    def __init__(self, predicate: WhenPredicate) -> None:
        self._predicate = predicate
        self._takes_params = _accepts_positional(predicate)

    async def evaluate(self, params: Any = None) -> bool:
        try:
            result = self._predicate(params) if self._takes_params else self._predicate()
            if inspect.isawaitable(result):
                result = await result
            return bool(result)
        except Exception:
            logger.debug("Predicate condition failed", exc_info=True)
            return False


def _positional_params(fn: Callable[..., Any]) -> list[inspect.Parameter] | None:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return None
    return [
        p
        for p in signature.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.VAR_POSITIONAL)
    ]


def _accepts_positional(fn: Callable[..., Any]) -> bool:
    params = _positional_params(fn)
    return params is None or bool(params)


def is_callback(fn: Callable[..., Any]) -> bool:
    """True for non-async callables with two or more required positional params."""
    if inspect.iscoroutinefunction(fn):
        return False
    params = _positional_params(fn)
    if params is None:
        return False
    required = [
        p for p in params if p.kind != p.VAR_POSITIONAL and p.default is p.empty
    ]
    return len(required) >= 2


def normalize_when(when: Any) -> Condition:
    """Convert any supported ``when`` shape into a :class:`Condition`.

    Unknown shapes fall back to their truthiness.
    """
    if isinstance(when, Condition):
        return when
    if when is True:
        return ALLOW
    if inspect.isawaitable(when):
        return AwaitableCondition(when)
    if callable(when):
        if is_callback(when):
            return CallbackCondition(when)
        return PredicateCondition(when)
    return ALLOW if when else DENY
