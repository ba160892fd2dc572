"""Fireflies.ai transcript client.

The Fireflies GraphQL endpoint accepts a single `query` string and a bearer
API key. Only `limit` and `channel_id` are sent as server-side filters; the
since-date and participant filters run on the parsed result set.
"""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from customer_consolidation.errors import (
    CredentialMissingError,
    MalformedResponseError,
    TranscriptSourceError,
)
from customer_consolidation.models.settings import DEFAULT_FIREFLIES_ENDPOINT
from customer_consolidation.models.transcript import Channel, Transcript
from customer_consolidation.sources.base import TranscriptFilter, TranscriptSource

logger = logging.getLogger(__name__)

TRANSCRIPT_FIELDS = """
        id
        title
        dateString
        date
        duration
        participants
        sentences {
          speaker_name
          text
          start_time
        }
        audio_url
        transcript_url"""

CHANNEL_FIELDS = """
        id
        title
        channels {
          id
        }"""

MAX_SAMPLE_TITLES = 3


def build_transcripts_query(
    limit: Optional[int] = None,
    channel_id: Optional[str] = None,
    fields: str = TRANSCRIPT_FIELDS,
) -> str:
    """Build the fixed transcripts query with optional limit/channel arguments."""
    args: list[str] = []
    if limit:
        args.append(f"limit: {limit}")
    if channel_id:
        args.append(f'channel_id: "{channel_id}"')
    args_str = f"({', '.join(args)})" if args else ""
    return f"query {{\n  transcripts{args_str} {{{fields}\n  }}\n}}"


def parse_transcripts_response(payload: Any) -> list[Transcript]:
    """Validate the response envelope and parse every transcript record."""
    data = payload.get("data") if isinstance(payload, dict) else None
    records = data.get("transcripts") if isinstance(data, dict) else None
    if not isinstance(records, list):
        raise MalformedResponseError("Invalid Fireflies response: missing data or transcripts")
    try:
        return [Transcript.from_api(r) for r in records]
    except (ValueError, TypeError, AttributeError, ValidationError) as e:
        raise MalformedResponseError(f"Invalid Fireflies transcript record: {e}") from e


def parse_transcript_date(value: Any) -> Optional[datetime]:
    """
    Parse a Fireflies date (ISO string, with or without 'Z', or epoch millis)
    into a naive local datetime comparable with tracker cursors.
    """
    if value is None or value == "":
        return None
    try:
        if isinstance(value, (int, float)) or str(value).isdigit():
            return datetime.fromtimestamp(float(value) / 1000)
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    except (ValueError, TypeError, OverflowError, OSError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


class FirefliesClient(TranscriptSource):
    """Transcript source backed by the Fireflies GraphQL API."""

    source_id = "fireflies"

    DEFAULT_HEADERS = {
        "User-Agent": "customer-consolidation/0.1",
        "Accept": "application/json",
    }

    def __init__(
        self,
        api_key: Optional[str],
        *,
        endpoint: str = DEFAULT_FIREFLIES_ENDPOINT,
        client: Optional[httpx.Client] = None,
    ):
        self._api_key = api_key
        self._endpoint = endpoint
        self._client = client or httpx.Client(
            timeout=60.0,
            headers=self.DEFAULT_HEADERS,
        )

    def check_credentials(self) -> None:
        if not self._api_key:
            raise CredentialMissingError("FIREFLIES_API_KEY is not configured")

    def _post_query(self, query: str) -> dict:
        """POST one GraphQL query and return the decoded envelope."""
        self.check_credentials()
        try:
            resp = self._client.post(
                self._endpoint,
                json={"query": query},
                headers={"Authorization": f"Bearer {self._api_key}"},
            )
        except httpx.RequestError as e:
            raise TranscriptSourceError(f"Fireflies API request failed: {e}") from e

        if resp.status_code != 200:
            raise TranscriptSourceError(f"Fireflies API error: HTTP {resp.status_code} - {resp.text}")

        try:
            payload = resp.json()
        except ValueError as e:
            raise TranscriptSourceError(f"Fireflies API request failed: invalid JSON ({e})") from e

        errors = payload.get("errors") if isinstance(payload, dict) else None
        if errors:
            messages = ", ".join(str(err.get("message", err)) if isinstance(err, dict) else str(err) for err in errors)
            raise TranscriptSourceError(f"Fireflies GraphQL errors: {messages}")
        return payload

    def fetch_transcripts(self, filter: Optional[TranscriptFilter] = None) -> list[Transcript]:
        """Fetch transcripts, then apply the client-side since/participant filters."""
        filter = filter or TranscriptFilter()
        query = build_transcripts_query(limit=filter.limit, channel_id=filter.channel_id)
        transcripts = parse_transcripts_response(self._post_query(query))
        logger.debug("Fireflies returned %d transcripts (channel=%s)", len(transcripts), filter.channel_id)

        if filter.since is not None:
            since = filter.since
            if since.tzinfo is not None:
                since = since.astimezone().replace(tzinfo=None)
            kept: list[Transcript] = []
            for t in transcripts:
                when = parse_transcript_date(t.date)
                if when is None:
                    logger.warning("Dropping transcript %s with unparseable date %r", t.id, t.date)
                    continue
                if when >= since:
                    kept.append(t)
            transcripts = kept

        if filter.participant_domain:
            suffix = "@" + filter.participant_domain.lower().lstrip("@")
            transcripts = [
                t for t in transcripts
                if any(p.lower().endswith(suffix) for p in t.participants)
            ]
        return transcripts

    def list_channels(self, limit: int = 50) -> list[Channel]:
        """
        List channel ids seen on recent transcripts, with up to three sample
        titles each. Fireflies exposes no channel query, only ids on transcripts.
        """
        query = build_transcripts_query(limit=limit, fields=CHANNEL_FIELDS)
        payload = self._post_query(query)
        data = payload.get("data") or {}
        channels: dict[str, Channel] = {}
        for record in data.get("transcripts") or []:
            for ch in record.get("channels") or []:
                ch_id = ch.get("id")
                if not ch_id:
                    continue
                channel = channels.setdefault(ch_id, Channel(id=ch_id))
                title = record.get("title")
                if title and len(channel.transcript_titles) < MAX_SAMPLE_TITLES:
                    channel.transcript_titles.append(title)
        return list(channels.values())
