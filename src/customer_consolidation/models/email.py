"""Email thread models normalized from mail search results."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class EmailMessage(BaseModel):
    """One message of a thread."""

    model_config = ConfigDict(frozen=True)

    sender: str = ""
    recipient: str = ""
    date: datetime
    date_formatted: str = ""
    subject: str = ""
    body: str = ""


class EmailThread(BaseModel):
    """An ordered email thread. Immutable once parsed."""

    model_config = ConfigDict(frozen=True)

    subject: str = ""
    message_count: int = 0
    messages: list[EmailMessage] = Field(default_factory=list)

    @classmethod
    def from_messages(cls, messages: list[EmailMessage]) -> "EmailThread":
        """Thread subject is the first message's subject."""
        return cls(
            subject=messages[0].subject if messages else "",
            message_count=len(messages),
            messages=messages,
        )

    @property
    def full_text(self) -> str:
        from customer_consolidation.formatting import format_thread

        return format_thread(self)
