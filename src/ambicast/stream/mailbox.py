"""
Mailbox
=======

Thread-safe single-slot channel between the Poller and one Sender.

Design Rules:
    - Capacity is exactly one item
    - put() never blocks: a pending, unsent item is overwritten
    - get() blocks until an item arrives or the mailbox is closed
    - Exposes minimal metrics for observability
"""

import logging
import threading
from typing import Generic, Optional, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


class Mailbox(Generic[T]):
    """
    Latest-value-wins slot.

    Only the newest item is ever delivered. Overwritten items are lost
    for good and counted in dropped_count.

    Example:
        mailbox = Mailbox()

        # Producer
        mailbox.put(frame)

        # Consumer
        frame = mailbox.get()
        if frame is None:
            return  # closed
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._item: Optional[T] = None
        self._closed: bool = False
        self._dropped_count: int = 0
        self._total_put: int = 0

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dropped_count(self) -> int:
        """Number of items overwritten before they were taken."""
        return self._dropped_count

    @property
    def total_put(self) -> int:
        return self._total_put

    def put(self, item: T) -> bool:
        """
        Replace the pending item.

        Args:
            item: Item to hand over

        Returns:
            True if the slot was empty, False if a pending item was dropped
            or the mailbox is closed.
        """
        with self._cond:
            if self._closed:
                return False
            self._total_put += 1
            dropped = self._item is not None
            if dropped:
                self._dropped_count += 1
            self._item = item
            self._cond.notify()
        return not dropped

    def get(self, timeout: Optional[float] = None) -> Optional[T]:
        """
        Take the pending item, waiting for one if necessary.

        Args:
            timeout: Maximum seconds to wait. None = wait until closed.

        Returns:
            The item, or None if the mailbox was closed or the wait timed out.
        """
        with self._cond:
            self._cond.wait_for(
                lambda: self._item is not None or self._closed,
                timeout=timeout,
            )
            if self._closed:
                return None
            item, self._item = self._item, None
            return item

    def close(self) -> None:
        """Close the mailbox and wake every waiting consumer."""
        with self._cond:
            self._closed = True
            self._item = None
            self._cond.notify_all()

    def metrics(self) -> dict:
        with self._cond:
            return {
                "pending": self._item is not None,
                "dropped_count": self._dropped_count,
                "total_put": self._total_put,
            }
