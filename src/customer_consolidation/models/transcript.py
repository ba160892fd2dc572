"""Meeting transcript models parsed from the Fireflies API."""

import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


def seconds_to_minutes(seconds: Optional[float]) -> int:
    """Round (half up, not truncate) a duration in seconds to whole minutes."""
    if not seconds:
        return 0
    return int(math.floor(float(seconds) / 60 + 0.5))


class Utterance(BaseModel):
    """One speaker turn."""

    model_config = ConfigDict(frozen=True)

    speaker_name: str = ""
    text: str = ""
    start_time: Optional[float] = None


class Transcript(BaseModel):
    """A parsed call transcript. Immutable once parsed."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str = ""
    date: str = Field(default="", description="Provider date string (dateString)")
    duration_minutes: int = 0
    participants: list[str] = Field(default_factory=list)
    sentences: list[Utterance] = Field(default_factory=list)
    audio_url: Optional[str] = None
    transcript_url: Optional[str] = None

    @property
    def full_text(self) -> str:
        """Speaker-labelled transcript, one utterance per line."""
        return "\n".join(f"{s.speaker_name}: {s.text}" for s in self.sentences)

    @classmethod
    def from_api(cls, record: dict[str, Any]) -> "Transcript":
        """Build from one raw `transcripts` item of the GraphQL response."""
        sentences = [
            Utterance(
                speaker_name=s.get("speaker_name") or "",
                text=s.get("text") or "",
                start_time=s.get("start_time"),
            )
            for s in (record.get("sentences") or [])
        ]
        return cls(
            id=str(record.get("id") or ""),
            title=record.get("title") or "",
            date=str(record.get("dateString") or record.get("date") or ""),
            duration_minutes=seconds_to_minutes(record.get("duration")),
            participants=[p for p in (record.get("participants") or []) if p],
            sentences=sentences,
            audio_url=record.get("audio_url"),
            transcript_url=record.get("transcript_url"),
        )


class Channel(BaseModel):
    """A Fireflies channel discovered from recent transcripts."""

    id: str
    transcript_titles: list[str] = Field(default_factory=list)
