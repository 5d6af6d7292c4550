from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .engine.ranker import rank_counts


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Settings(BaseModel):
    """Runtime settings for the trend engine."""

    marker: str = Field("#", description="Character that opens a hashtag")
    reset_interval_hours: float = Field(24.0, ge=0, description="Auto-reset period; 0 disables auto-reset")
    top_k: int = Field(10, ge=1, le=100, description="Leaderboard size for /show and reset reports")
    max_chats: Optional[int] = Field(None, ge=1, description="Refuse new chats beyond this many")
    max_tags_per_chat: Optional[int] = Field(None, ge=1, description="Drop unseen tags beyond this vocabulary size")
    log_level: str = Field("INFO", description="Logging level")

    @field_validator("marker")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1 or value.isspace():
            raise ValueError("marker must be a single non-space character")
        return value

    @property
    def reset_interval(self) -> timedelta:
        return timedelta(hours=self.reset_interval_hours)


class TrendSnapshot(BaseModel):
    """Immutable copy of a chat's counters taken at ``taken_at``."""

    model_config = ConfigDict(frozen=True)

    chat_id: int
    counts: Dict[str, int] = Field(default_factory=dict)
    taken_at: datetime = Field(default_factory=_utcnow)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def rank(self, k: int) -> List[Tuple[str, int]]:
        return rank_counts(self.counts, k)


class MessageEntity(BaseModel):
    """A typed span of a message, offsets in UTF-16 code units."""

    type: str = "hashtag"
    offset: int = Field(..., ge=0)
    length: int = Field(..., ge=1)


class ChatMessage(BaseModel):
    """One inbound chat message as stored in a replay log."""

    chat_id: int
    text: Optional[str] = None
    entities: Optional[List[MessageEntity]] = None
