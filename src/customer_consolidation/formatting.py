"""Pure text formatting for consolidation documents and tracker cells."""

from datetime import datetime
from typing import Optional

from customer_consolidation.models.email import EmailThread
from customer_consolidation.models.transcript import Transcript

CALL_TRANSCRIPTS = "CALL TRANSCRIPTS"
EMAIL_CORRESPONDENCE = "EMAIL CORRESPONDENCE"
TECHNICAL_REQUIREMENTS = "TECHNICAL REQUIREMENTS"
TIMELINE_COMMITMENTS = "TIMELINE & COMMITMENTS"

SECTION_NAMES = [
    CALL_TRANSCRIPTS,
    EMAIL_CORRESPONDENCE,
    TECHNICAL_REQUIREMENTS,
    TIMELINE_COMMITMENTS,
]

SECTION_EMOJI = {
    CALL_TRANSCRIPTS: "📞",
    EMAIL_CORRESPONDENCE: "📧",
    TECHNICAL_REQUIREMENTS: "🔧",
    TIMELINE_COMMITMENTS: "📅",
}
DEFAULT_SECTION_EMOJI = "📋"

TITLE_SUFFIX = " - Customer Consolidation"
CRM_LABEL = "Salesforce Opportunity: "
HORIZONTAL_RULE = "━" * 47
SEPARATOR = "\n---\n"

SYNC_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
_SYNC_TIMESTAMP_FORMATS = (
    SYNC_TIMESTAMP_FORMAT,
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y",
)
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def document_title(opportunity_name: str) -> str:
    return opportunity_name + TITLE_SUFFIX


def header_lines(opportunity_name: str, crm_url: str) -> list[str]:
    """Header block written at the top of a freshly structured document."""
    return [
        document_title(opportunity_name),
        "",
        CRM_LABEL + crm_url,
        "",
        HORIZONTAL_RULE,
        "",
    ]


def section_header(section_name: str) -> str:
    emoji = SECTION_EMOJI.get(section_name, DEFAULT_SECTION_EMOJI)
    return f"{emoji} {section_name}"


def format_participants(participants: list[str]) -> str:
    return ", ".join(participants or [])


def format_transcript(transcript: Transcript) -> str:
    """Section body for one call transcript."""
    lines = [f"{transcript.title} - {transcript.date}"]
    if transcript.participants:
        lines.append("Participants: " + format_participants(transcript.participants))
    lines.append(f"Duration: {transcript.duration_minutes} min")
    lines.append("")
    lines.append(transcript.full_text)
    return "\n".join(lines)


def format_thread(thread: EmailThread) -> str:
    """Section body for one email thread; messages are separated by '---'."""
    count = thread.message_count
    plural = "" if count == 1 else "s"
    lines = [f'Thread: "{thread.subject}" ({count} message{plural})', ""]
    for index, message in enumerate(thread.messages):
        if index > 0:
            lines.extend(["---", ""])
        lines.append(f"From: {message.sender}")
        lines.append(f"Date: {message.date_formatted}")
        lines.append(f"Subject: {message.subject}")
        lines.append("")
        lines.append(message.body)
        lines.append("")
    return "\n".join(lines)


def format_entry(body: str) -> str:
    """Suffix an appended entry with the separator block."""
    return body + SEPARATOR


def format_sync_timestamp(when: datetime) -> str:
    """Cursor format written to the tracker: YYYY-MM-DD HH:MM:SS."""
    return when.strftime(SYNC_TIMESTAMP_FORMAT)


def parse_sync_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a tracker cursor cell. Returns None when blank or unparseable."""
    if not value or not str(value).strip():
        return None
    value = str(value).strip()
    for fmt in _SYNC_TIMESTAMP_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    return None


def format_search_date(when: datetime) -> str:
    """Mail search date term format: YYYY/MM/DD."""
    return f"{when.year:04d}/{when.month:02d}/{when.day:02d}"


def format_message_date(when: datetime) -> str:
    """Display date for a message, e.g. 'Jan 5, 2025 09:07'."""
    return f"{_MONTHS[when.month - 1]} {when.day}, {when.year} {when.hour:02d}:{when.minute:02d}"


def format_error_log(message: str, when: datetime) -> str:
    return f"[{format_sync_timestamp(when)}] {message}"
