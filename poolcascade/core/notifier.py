"""Fire-and-forget "start monitoring" notifications for new Meteora pools.

Publishing happens on a detached asyncio task after the creating
transaction committed. The caller's response never waits for, or fails
because of, the publish.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Protocol

from loguru import logger

from config.settings import settings


class Publisher(Protocol):
    async def publish(self, topic: str, payload: dict[str, Any]) -> None: ...


class RedisPublisher:
    """Publishes JSON payloads on a Redis pub/sub channel."""

    def __init__(self, redis=None) -> None:
        self._redis = redis

    async def publish(self, topic: str, payload: dict[str, Any]) -> None:
        if self._redis is None:
            from poolcascade.db.redis import get_redis

            self._redis = await get_redis()
        receivers = await self._redis.publish(topic, json.dumps(payload))
        logger.debug(f"[NOTIFY] {topic} delivered to {receivers} subscribers")


def build_monitor_message(project_id: int, dbc: Any, cpmm: Any | None = None) -> dict[str, Any]:
    """Payload telling the pool monitor to start watching a curve (and successor)."""
    message: dict[str, Any] = {
        "action": "start_monitoring",
        "meteoradbc_address": dbc.pool_address,
        "project_id": project_id,
        "base_token_mint": dbc.base_mint,
        "quote_token_mint": dbc.quote_mint,
        "meteora_dbc_authority": settings.meteora_dbc_authority,
        "meteora_cpmm_authority": settings.meteora_cpmm_authority,
    }
    if cpmm is not None:
        message["meteoracpmm_address"] = cpmm.pool_address
        if cpmm.base_mint:
            message["base_token_mint"] = cpmm.base_mint
        if cpmm.quote_mint:
            message["quote_token_mint"] = cpmm.quote_mint
    return message


class MonitorNotifier:
    def __init__(
        self,
        publisher: Publisher | None,
        *,
        topic: str | None = None,
    ) -> None:
        self._publisher = publisher
        self._topic = topic or settings.monitor_topic
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def submit(self, message: dict[str, Any]) -> asyncio.Task | None:
        """Schedule publication; never raises."""
        if self._publisher is None:
            logger.warning(f"[NOTIFY] No publisher configured, dropping {message.get('action')}")
            return None
        try:
            task = asyncio.get_running_loop().create_task(self._publish(message))
        except RuntimeError as e:
            logger.warning(f"[NOTIFY] No running loop, dropping message: {e}")
            return None
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _publish(self, message: dict[str, Any]) -> None:
        try:
            await self._publisher.publish(self._topic, message)
            logger.info(
                f"[NOTIFY] {message.get('action')} sent for project {message.get('project_id')}"
            )
        except Exception as e:
            logger.error(f"[NOTIFY] Publish to {self._topic} failed: {e}")

    async def drain(self) -> None:
        """Wait for in-flight publishes (shutdown, tests)."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
