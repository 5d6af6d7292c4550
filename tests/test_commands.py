import asyncio

from hashtag_trends.engine.service import TrendService
from hashtag_trends.ui import commands

ADMIN = 42
MEMBER = 7
GROUP = -100


def make_commands(sent=None):
    async def is_admin(chat_id, user_id):
        return user_id == ADMIN

    def send(chat_id, text):
        if sent is not None:
            sent.append((chat_id, text))

    return commands.TrendCommands(TrendService(), is_admin, send)


def test_start_in_private_chat_welcomes():
    bot = make_commands()
    assert asyncio.run(bot.start(ADMIN, ADMIN, private=True)) == commands.WELCOME_TEXT


def test_group_commands_are_admin_only():
    async def scenario():
        bot = make_commands()
        assert await bot.start(GROUP, MEMBER) is None
        assert await bot.show(GROUP, MEMBER) is None
        assert await bot.reset(GROUP, MEMBER) is None
        assert GROUP not in bot.service.registry

    asyncio.run(scenario())


def test_start_show_reset_flow():
    async def scenario():
        bot = make_commands()
        assert await bot.start(GROUP, ADMIN) == commands.STARTED_TEXT
        bot.message(GROUP, "#Trend #trend #other")
        shown = await bot.show(GROUP, ADMIN)
        assert "1️⃣ #trend - used: 2" in shown
        assert await bot.reset(GROUP, ADMIN) == commands.RESET_TEXT
        assert await bot.show(GROUP, ADMIN) == commands.EMPTY_TEXT
        await bot.service.aclose()

    asyncio.run(scenario())


def test_reset_unwatched_group_and_no_group():
    async def scenario():
        bot = make_commands()
        assert await bot.reset(GROUP, ADMIN) == commands.NOT_WATCHING_TEXT
        assert await bot.show(None, ADMIN) == commands.NOT_IN_GROUP_TEXT

    asyncio.run(scenario())


def test_failing_admin_check_denies():
    def broken(chat_id, user_id):
        raise RuntimeError("api down")

    bot = commands.TrendCommands(TrendService(), broken, lambda chat_id, text: None)
    assert asyncio.run(bot.show(GROUP, ADMIN)) is None


def test_auto_reset_sends_leaderboard_to_group():
    sent = []

    async def scenario():
        bot = make_commands(sent)
        await bot.start(GROUP, ADMIN)
        bot.service.activate(GROUP, interval=0.2)
        bot.message(GROUP, "#news #news")
        await asyncio.sleep(0.3)
        await bot.service.aclose()

    asyncio.run(scenario())
    assert sent == [(GROUP, "🔥 Trending hashtag:\n\n1️⃣ #news - used: 2\n")]


def test_help_returns_pages():
    pages = make_commands().help()
    assert len(pages) == 3
    assert "/show" in pages[0]
