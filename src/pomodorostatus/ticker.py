"""One-second tick sources.

Tickers are cooperative: nothing runs in the background. Whoever owns the
loop (the CLI, a dashboard rerun, a test) decides when seconds pass and
calls ``advance`` or ``poll``.
"""
from __future__ import annotations

import time
from typing import Callable, List, Optional, Protocol

TickCallback = Callable[[], None]


class Subscription:
    """Handle returned by ``Ticker.subscribe``; cancel it to stop ticks."""

    def __init__(self, callback: TickCallback):
        self._callback: Optional[TickCallback] = callback

    @property
    def active(self) -> bool:
        return self._callback is not None

    def cancel(self) -> None:
        self._callback = None

    def fire(self) -> None:
        callback = self._callback
        if callback is not None:
            callback()


class Ticker(Protocol):
    def subscribe(self, callback: TickCallback) -> Subscription:
        ...


class ManualTicker:
    """Ticker advanced explicitly, one whole second at a time."""

    def __init__(self) -> None:
        self._subscriptions: List[Subscription] = []

    @property
    def has_subscribers(self) -> bool:
        return any(sub.active for sub in self._subscriptions)

    def subscribe(self, callback: TickCallback) -> Subscription:
        self._subscriptions = [sub for sub in self._subscriptions if sub.active]
        subscription = Subscription(callback)
        self._subscriptions.append(subscription)
        return subscription

    def advance(self, seconds: int = 1) -> None:
        for _ in range(max(0, seconds)):
            # subscriptions made during this second wait for the next one
            due = [sub for sub in self._subscriptions if sub.active]
            for subscription in due:
                subscription.fire()
            self._subscriptions = [sub for sub in self._subscriptions if sub.active]


class MonotonicTicker(ManualTicker):
    """Ticker that delivers the whole ticks elapsed on a monotonic clock.

    ``tick_length`` is the real time one tick takes; values below 1 make the
    timer run faster than the wall clock.
    """

    def __init__(self, tick_length: float = 1.0, clock: Callable[[], float] = time.monotonic):
        if tick_length <= 0:
            raise ValueError("tick_length must be positive")
        super().__init__()
        self.tick_length = tick_length
        self._clock = clock
        self._anchor: Optional[float] = None

    def subscribe(self, callback: TickCallback) -> Subscription:
        if not self.has_subscribers:
            self._anchor = self._clock()
        return super().subscribe(callback)

    def poll(self) -> int:
        """Deliver every tick that is due and return how many were delivered."""
        if self._anchor is None or not self.has_subscribers:
            self._anchor = None
            return 0
        due = int((self._clock() - self._anchor) // self.tick_length)
        if due <= 0:
            return 0
        self._anchor += due * self.tick_length
        self.advance(due)
        return due

    def seconds_until_next_tick(self) -> float:
        if self._anchor is None:
            return self.tick_length
        return max(0.0, self._anchor + self.tick_length - self._clock())
