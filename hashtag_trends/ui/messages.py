from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

NUMBER_EMOJI = ["0️⃣", "1️⃣", "2️⃣", "3️⃣", "4️⃣", "5️⃣", "6️⃣", "7️⃣", "8️⃣", "9️⃣", "🔟"]
TRENDING_HEADER = "🔥 Trending hashtag:"


def rank_label(position: int) -> str:
    if 0 <= position < len(NUMBER_EMOJI):
        return NUMBER_EMOJI[position]
    return f"{position}."


def format_trending(ranking: Sequence[Tuple[str, int]]) -> Optional[str]:
    """Render a leaderboard as the chat message, or ``None`` when it is empty."""

    if not ranking:
        return None
    lines = [TRENDING_HEADER, ""]
    for position, (tag, count) in enumerate(ranking, start=1):
        lines.append(f"{rank_label(position)} {tag} - used: {count}")
    return "\n".join(lines) + "\n"


def format_page(title: str, page: int, total: int, lines: Sequence[str]) -> str:
    body = "\n".join(lines)
    return f"*{title.upper()}*\n\n{body}\n\n` -- page {page}/{total}` 📄"


HELP_SECTIONS: List[Tuple[str, List[str]]] = [
    (
        "Command list",
        [
            "👤 *Private commands*:",
            "/start - Welcome message",
            "/help - How to use the bot and its info. What you are seeing right now",
            "\n👥 *Group commands* (admin only):",
            "/start - Start listening for hashtags on the current group and turn auto-reset on",
            "/show - Shows the top 10 most popular hashtags for the current group",
            "/reset - Reset the hashtag counter and turn off auto-reset for the current group",
        ],
    ),
    (
        "What is auto-reset mode",
        [
            "This mode will cause the reset of all saved hashtags every 24h since the last /start command has been sent.",
            "It's on by default but you can easily turn it off using /reset and on again with /start.",
            "When auto-reset is on the bot will show to the group the top 10 most used hashtags just before they reset",
        ],
    ),
    (
        "Why use this bot",
        [
            "⏱ *Ready to go* - Just add this bot to a group to stay up-to-date with the trending hashtags.",
            "\n🔒 *Privacy focused* - No log of the sent messages is kept and there is no database",
        ],
    ),
]


def help_pages() -> List[str]:
    total = len(HELP_SECTIONS)
    return [format_page(title, index, total, lines) for index, (title, lines) in enumerate(HELP_SECTIONS, start=1)]
