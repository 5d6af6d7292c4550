import asyncio

import pytest

from hashtag_trends.engine.service import TrendService
from hashtag_trends.models import Settings

TICK = 0.2


def test_record_and_top_trending():
    service = TrendService()
    service.activate(1, interval=0)
    service.record(1, "#Go and #go and #rust")
    service.record(1, "plain text, no tags")
    assert service.top_trending(1, 10) == [("#go", 2), ("#rust", 1)]
    assert service.top_trending(1, 1) == [("#go", 2)]


def test_unknown_chats_are_harmless():
    service = TrendService()
    assert service.record(9, "#ignored") == []
    assert service.top_trending(9, 10) == []
    assert service.reset(9) is False


def test_reset_then_top_trending_is_empty():
    service = TrendService()
    service.activate(1, interval=0)
    service.record(1, "#a #b")
    assert service.reset(1) is True
    assert service.top_trending(1, 10) == []


def test_top_trending_defaults_to_configured_size():
    service = TrendService(Settings(top_k=2))
    service.activate(1, interval=0)
    service.record(1, "#a #b #c")
    assert len(service.top_trending(1)) == 2


def test_record_uses_entity_spans_when_given():
    service = TrendService()
    service.activate(1, interval=0)
    tags = service.record(1, "😀 #Emoji", [{"type": "hashtag", "offset": 3, "length": 6}])
    assert tags == ["#emoji"]
    assert service.top_trending(1, 10) == [("#emoji", 1)]


def test_chat_limit_from_settings():
    service = TrendService(Settings(max_chats=1))
    assert service.activate(1, interval=0) is not None
    assert service.activate(2, interval=0) is None
    assert service.record(2, "#a") == []


def test_before_reset_callback_receives_leaderboard():
    reports = []

    async def scenario():
        service = TrendService()

        @service.on_trending_before_reset
        async def collect(chat_id, ranking):
            reports.append((chat_id, ranking))

        service.activate(100, interval=2 * TICK)
        service.record(100, "#a")
        service.record(100, "#a #b")
        await asyncio.sleep(TICK)
        assert service.top_trending(100, 10) == [("#a", 2), ("#b", 1)]
        await asyncio.sleep(1.5 * TICK)
        assert service.top_trending(100, 10) == []
        await service.aclose()

    asyncio.run(scenario())
    assert reports == [(100, [("#a", 2), ("#b", 1)])]


def test_default_interval_is_a_day():
    async def scenario():
        service = TrendService()
        state = service.activate(1)
        interval = state._scheduler.interval
        await service.aclose()
        return interval

    assert asyncio.run(scenario()) == 24 * 60 * 60


def test_activate_without_event_loop_leaves_registry_unchanged():
    service = TrendService()
    with pytest.raises(RuntimeError):
        service.activate(5)
    assert 5 not in service.registry
    assert len(service.registry) == 0
    assert service.record(5, "#lost") == []


def test_failed_rearm_keeps_existing_chat():
    service = TrendService()
    service.activate(5, interval=0)
    service.record(5, "#kept")
    with pytest.raises(ValueError):
        service.activate(5, interval=-1)
    assert service.top_trending(5, 10) == [("#kept", 1)]
