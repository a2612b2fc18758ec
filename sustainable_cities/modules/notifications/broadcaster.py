import asyncio
import logging
from typing import Dict, Set
from uuid import UUID

logger = logging.getLogger(__name__)

# Per-stream backlog; a client that stops reading loses pushes, not rows
QUEUE_SIZE = 100

class NotificationBroadcaster:
    """
    Fans notifications out to every open SSE stream of a user.

    All methods run on the event loop without awaiting in between,
    so the connection map needs no lock.
    """

    def __init__(self):
        # user_id -> one queue per open tab
        self.connections: Dict[UUID, Set[asyncio.Queue]] = {}

    def connect(self, user_id: UUID) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=QUEUE_SIZE)
        self.connections.setdefault(user_id, set()).add(queue)
        logger.info(f"[Broadcaster] User {user_id} connected. Open streams: {len(self.connections[user_id])}")
        return queue

    def disconnect(self, user_id: UUID, queue: asyncio.Queue) -> None:
        queues = self.connections.get(user_id)
        if queues is None:
            return
        queues.discard(queue)
        if not queues:
            del self.connections[user_id]
        logger.info(f"[Broadcaster] User {user_id} disconnected.")

    def connection_count(self, user_id: UUID) -> int:
        return len(self.connections.get(user_id, ()))

    async def broadcast(self, user_id: UUID, message: dict) -> int:
        """Push ``message`` to every open stream of ``user_id``; returns how many got it."""
        queues = self.connections.get(user_id)
        if not queues:
            return 0

        delivered = 0
        for queue in list(queues):
            try:
                queue.put_nowait(message)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(f"[Broadcaster] Dropping message for slow stream of {user_id}")
        return delivered

broadcaster = NotificationBroadcaster()
