"""Gmail thread search client.

Builds a Gmail search expression from filter options, runs it through the
Gmail REST API and normalizes each thread's messages. Result size is capped;
callers needing more narrow the date window themselves.
"""

import base64
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Optional

from customer_consolidation.errors import MailSearchError
from customer_consolidation.formatting import format_message_date, format_search_date
from customer_consolidation.models.email import EmailMessage, EmailThread
from customer_consolidation.sources.base import MailFilter, MailSource

logger = logging.getLogger(__name__)

MAX_THREADS = 50


def build_search_query(filter: Optional[MailFilter] = None) -> str:
    """One term per present field, joined by single spaces (implicit AND)."""
    filter = filter or MailFilter()
    terms: list[str] = []
    if filter.label:
        terms.append(f"label:{filter.label}")
    if filter.from_domain:
        terms.append(f"from:*@{filter.from_domain}")
    if filter.from_address:
        terms.append(f"from:{filter.from_address}")
    if filter.after:
        terms.append(f"after:{format_search_date(filter.after)}")
    if filter.before:
        terms.append(f"before:{format_search_date(filter.before)}")
    return " ".join(terms)


def _decode_body(data: str) -> str:
    padded = data + "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(padded).decode("utf-8", errors="replace")


def extract_plain_body(payload: dict) -> str:
    """Return the first text/plain body found, recursing into multipart parts."""
    if payload.get("mimeType", "").startswith("text/plain"):
        data = (payload.get("body") or {}).get("data")
        if data:
            return _decode_body(data)
    for part in payload.get("parts") or []:
        body = extract_plain_body(part)
        if body:
            return body
    return ""


def _message_date(message: dict, headers: dict[str, str]) -> datetime:
    """Date header, falling back to internalDate; returned in local time."""
    raw = headers.get("date")
    when: Optional[datetime] = None
    if raw:
        try:
            when = parsedate_to_datetime(raw)
        except (TypeError, ValueError, IndexError):
            when = None
    if when is None:
        millis = int(message.get("internalDate") or 0)
        when = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    return when.astimezone()


def parse_message(message: dict) -> EmailMessage:
    """Normalize one Gmail API message resource (format=full)."""
    payload = message.get("payload") or {}
    headers = {h["name"].lower(): h.get("value", "") for h in payload.get("headers") or []}
    when = _message_date(message, headers)
    body = extract_plain_body(payload) or message.get("snippet", "")
    return EmailMessage(
        sender=headers.get("from", ""),
        recipient=headers.get("to", ""),
        date=when,
        date_formatted=format_message_date(when),
        subject=headers.get("subject", ""),
        body=body,
    )


def parse_thread(thread: dict) -> EmailThread:
    """Normalize one Gmail API thread resource, keeping message order."""
    messages = [parse_message(m) for m in thread.get("messages") or []]
    return EmailThread.from_messages(messages)


class GmailClient(MailSource):
    """Mail source backed by the Gmail API (`users.threads`)."""

    source_id = "gmail"

    def __init__(self, service: Any, *, user_id: str = "me", max_threads: int = MAX_THREADS):
        """
        Args:
            service: googleapiclient Gmail v1 resource
            user_id: mailbox to search ('me' for the authenticated user)
            max_threads: result cap per search
        """
        self._service = service
        self._user_id = user_id
        self._max_threads = max_threads

    def _list_thread_ids(self, query: str) -> list[str]:
        resp = (
            self._service.users()
            .threads()
            .list(userId=self._user_id, q=query, maxResults=self._max_threads)
            .execute()
        )
        return [t["id"] for t in resp.get("threads") or []][: self._max_threads]

    def _get_thread(self, thread_id: str) -> dict:
        return (
            self._service.users()
            .threads()
            .get(userId=self._user_id, id=thread_id, format="full")
            .execute()
        )

    def search_threads(self, filter: Optional[MailFilter] = None) -> list[EmailThread]:
        query = build_search_query(filter)
        logger.debug("Gmail search: %r", query)
        try:
            thread_ids = self._list_thread_ids(query)
            return [parse_thread(self._get_thread(tid)) for tid in thread_ids]
        except MailSearchError:
            raise
        except Exception as e:
            raise MailSearchError(f"Gmail search failed: {e}") from e
