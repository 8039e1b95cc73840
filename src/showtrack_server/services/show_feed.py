"""Live fan-out of show collection snapshots to connected sessions."""

import asyncio
import logging
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from ..models.show import Show

logger = logging.getLogger(__name__)

_CLOSED = object()


class Subscription:
    """A session's stream of show collection snapshots."""

    def __init__(self, user_id: str, maxsize: int):
        self.user_id = user_id
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.closed = False

    def push(self, shows: list[Show]) -> None:
        """Queue a snapshot, dropping the oldest one if the queue is full."""
        if self.closed:
            return
        if self._queue.full():
            self._queue.get_nowait()
            logger.debug(f"Subscriber for {self.user_id} lagging, dropped a snapshot")
        self._queue.put_nowait(shows)

    def close(self) -> None:
        """End the stream after any queued snapshots."""
        if self.closed:
            return
        self.closed = True
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(_CLOSED)

    async def next(self, timeout: Optional[float] = None) -> Optional[list[Show]]:
        """
        Wait for the next snapshot.

        Returns:
            Snapshot, or None if the subscription is closed or timeout expires
        """
        try:
            item = await asyncio.wait_for(self._queue.get(), timeout)
        except asyncio.TimeoutError:
            return None
        if item is _CLOSED:
            return None
        return item

    def __aiter__(self) -> AsyncIterator[list[Show]]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[list[Show]]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                return
            yield item


class ShowFeed:
    """Delivers each user's latest show collection to all their subscribers."""

    def __init__(self, queue_size: int = 16):
        """
        Initialize show feed.

        Args:
            queue_size: Snapshots buffered per subscriber
        """
        self.queue_size = queue_size
        self._subscribers: dict[str, set[Subscription]] = defaultdict(set)

    @asynccontextmanager
    async def subscribe(self, user_id: str) -> AsyncIterator[Subscription]:
        """Open a subscription for a user, removed again on exit."""
        subscription = Subscription(user_id, self.queue_size)
        self._subscribers[user_id].add(subscription)
        logger.debug(f"Feed subscriber added for {user_id}")
        try:
            yield subscription
        finally:
            subscription.close()
            self._remove(subscription)

    def _remove(self, subscription: Subscription) -> None:
        subscribers = self._subscribers.get(subscription.user_id)
        if subscribers is None:
            return
        subscribers.discard(subscription)
        if not subscribers:
            del self._subscribers[subscription.user_id]
        logger.debug(f"Feed subscriber removed for {subscription.user_id}")

    def publish(self, user_id: str, shows: list[Show]) -> int:
        """
        Send a snapshot to every subscriber of a user.

        Returns:
            Number of subscribers the snapshot was delivered to
        """
        subscribers = list(self._subscribers.get(user_id, ()))
        for subscription in subscribers:
            subscription.push(shows)
        return len(subscribers)

    def close_user(self, user_id: str) -> None:
        """End all of a user's subscriptions, as on sign-out."""
        for subscription in list(self._subscribers.pop(user_id, ())):
            subscription.close()
        logger.info(f"Closed feed subscriptions for {user_id}")

    def user_ids(self) -> list[str]:
        """Users with at least one open subscription."""
        return list(self._subscribers)

    def subscriber_count(self, user_id: Optional[str] = None) -> int:
        """Count subscribers for one user, or all users."""
        if user_id is not None:
            return len(self._subscribers.get(user_id, ()))
        return sum(len(subs) for subs in self._subscribers.values())
