"""Fire-and-forget monitor notifications."""

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from poolcascade.core.notifier import MonitorNotifier, RedisPublisher, build_monitor_message


class RecordingPublisher:
    def __init__(self, fail: bool = False):
        self.sent: list[tuple[str, dict]] = []
        self.fail = fail

    async def publish(self, topic, payload):
        if self.fail:
            raise ConnectionError("redis down")
        self.sent.append((topic, payload))


def _dbc(**overrides):
    defaults = dict(pool_address="DBC1", base_mint="MINT1", quote_mint="WSOL")
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


class TestBuildMessage:
    def test_dbc_only(self):
        msg = build_monitor_message(7, _dbc())

        assert msg["action"] == "start_monitoring"
        assert msg["meteoradbc_address"] == "DBC1"
        assert msg["project_id"] == 7
        assert msg["base_token_mint"] == "MINT1"
        assert msg["quote_token_mint"] == "WSOL"
        assert "meteoracpmm_address" not in msg
        assert msg["meteora_dbc_authority"]
        assert msg["meteora_cpmm_authority"]

    def test_with_cpmm_prefers_its_mints(self):
        cpmm = SimpleNamespace(pool_address="CPMM1", base_mint="MINT2", quote_mint="")

        msg = build_monitor_message(7, _dbc(), cpmm)

        assert msg["meteoracpmm_address"] == "CPMM1"
        assert msg["base_token_mint"] == "MINT2"
        # Empty cpmm value keeps the curve's mint.
        assert msg["quote_token_mint"] == "WSOL"


class TestMonitorNotifier:
    @pytest.mark.asyncio
    async def test_submit_publishes_on_topic(self):
        publisher = RecordingPublisher()
        notifier = MonitorNotifier(publisher, topic="monitor_test")

        task = notifier.submit({"action": "start_monitoring", "project_id": 1})
        assert task is not None
        await notifier.drain()

        assert publisher.sent == [("monitor_test", {"action": "start_monitoring", "project_id": 1})]
        assert notifier.pending == 0

    @pytest.mark.asyncio
    async def test_default_topic_from_settings(self):
        publisher = RecordingPublisher()
        notifier = MonitorNotifier(publisher)

        notifier.submit({"action": "start_monitoring"})
        await notifier.drain()

        assert publisher.sent[0][0] == "meteora_pool_monitor"

    @pytest.mark.asyncio
    async def test_publish_failure_is_swallowed(self):
        notifier = MonitorNotifier(RecordingPublisher(fail=True))

        task = notifier.submit({"action": "start_monitoring"})
        await notifier.drain()

        assert task.done()
        assert task.exception() is None

    @pytest.mark.asyncio
    async def test_submit_does_not_wait_for_publish(self):
        gate = asyncio.Event()

        class SlowPublisher:
            async def publish(self, topic, payload):
                await gate.wait()

        notifier = MonitorNotifier(SlowPublisher())
        notifier.submit({"action": "start_monitoring"})

        assert notifier.pending == 1
        gate.set()
        await notifier.drain()
        assert notifier.pending == 0

    def test_without_publisher_drops_message(self):
        assert MonitorNotifier(None).submit({"action": "start_monitoring"}) is None

    def test_without_running_loop_drops_message(self):
        assert MonitorNotifier(RecordingPublisher()).submit({"action": "x"}) is None


@pytest.mark.asyncio
async def test_redis_publisher_sends_json():
    redis = AsyncMock()
    redis.publish.return_value = 1

    await RedisPublisher(redis).publish("chan", {"project_id": 3})

    redis.publish.assert_awaited_once_with("chan", json.dumps({"project_id": 3}))
