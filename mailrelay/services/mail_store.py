"""
Mail Store Service

In-memory, time-limited storage of received messages.

Each entry carries its own deadline. Reads check the deadline and never
modify the store; a periodic sweep reclaims expired entries. Everything
runs on one event loop, so there is no locking.
"""

import asyncio
import time
from typing import Callable, Dict, Optional, Tuple

from mailrelay.core.logging import get_logger
from mailrelay.core.metrics import record_message_stored, record_messages_expired
from mailrelay.core.security import generate_message_id
from mailrelay.schemas.message import MessageSnapshot

logger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 15 * 60


class MailStore:
    """
    Mapping of message id to snapshot with a fixed time-to-live.

    Lifetime is counted from insertion and is never extended by reads.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[MessageSnapshot, float]] = {}

    def put(self, snapshot: MessageSnapshot) -> str:
        """
        Store a snapshot under a fresh id.

        Args:
            snapshot: Message snapshot

        Returns:
            str: Opaque message id
        """
        message_id = generate_message_id()
        self._entries[message_id] = (snapshot, self._clock() + self.ttl_seconds)
        record_message_stored()
        logger.debug(f"Stored message {message_id} for {self.ttl_seconds}s")
        return message_id

    def get(self, message_id) -> Optional[MessageSnapshot]:
        """
        Look up a snapshot.

        Args:
            message_id: Id returned by put(); anything else is a miss

        Returns:
            MessageSnapshot or None if unknown or expired
        """
        if not isinstance(message_id, str):
            return None

        entry = self._entries.get(message_id)
        if entry is None:
            return None

        snapshot, deadline = entry
        if self._clock() >= deadline:
            return None
        return snapshot

    def sweep(self) -> int:
        """
        Remove every expired entry.

        Returns:
            int: Number of entries removed
        """
        now = self._clock()
        expired = [key for key, (_, deadline) in self._entries.items() if now >= deadline]
        for key in expired:
            del self._entries[key]

        record_messages_expired(len(expired))
        if expired:
            logger.info(f"Swept {len(expired)} expired messages, {len(self._entries)} remaining")
        return len(expired)

    async def run_sweeper(self, interval_seconds: float):
        """
        Sweep the store forever at a fixed interval.

        Runs until cancelled.
        """
        logger.info(f"Expired mail sweeper running every {interval_seconds}s")
        while True:
            await asyncio.sleep(interval_seconds)
            try:
                self.sweep()
            except Exception as e:
                logger.error(f"Sweep failed: {str(e)}", exc_info=True)

    def __contains__(self, message_id) -> bool:
        return self.get(message_id) is not None

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for _, deadline in self._entries.values() if now < deadline)

