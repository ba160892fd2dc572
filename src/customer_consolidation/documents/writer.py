"""Section-structured writing on top of a flat paragraph document.

Sections are located by substring match on the section name, so body text
that happens to contain a section name would also match. Matching only bold
header paragraphs would be stricter; the substring rule is kept so existing
documents keep working.
"""

import logging
from typing import Optional

from customer_consolidation.documents.base import Document, DocumentStore
from customer_consolidation.errors import DocumentResolutionError
from customer_consolidation.formatting import (
    CALL_TRANSCRIPTS,
    CRM_LABEL,
    EMAIL_CORRESPONDENCE,
    SECTION_NAMES,
    format_entry,
    format_thread,
    format_transcript,
    header_lines,
    section_header,
)
from customer_consolidation.models.email import EmailThread
from customer_consolidation.models.opportunity import OpportunityConfig
from customer_consolidation.models.transcript import Transcript

logger = logging.getLogger(__name__)

# Lines inserted below a section header land after the header and its blank line.
SECTION_BODY_OFFSET = 2


def get_or_create(store: DocumentStore, handle: str, name: str) -> tuple[Document, bool]:
    """
    Open the document by handle, or create one named `name` when the handle is
    blank or cannot be opened. Returns (document, created).
    A creation failure propagates as DocumentResolutionError.
    """
    if handle and handle.strip():
        try:
            return store.open(handle.strip()), False
        except DocumentResolutionError as e:
            logger.warning("Could not open doc %s, creating new: %s", handle, e)
    return store.create(name), True


def find_section(doc: Document, section_name: str) -> Optional[int]:
    """Index of the first paragraph containing `section_name`, or None."""
    for index, text in enumerate(doc.paragraphs()):
        if section_name in text:
            return index
    return None


def has_structure(doc: Document) -> bool:
    """Section probe: a structured document has a CALL TRANSCRIPTS header."""
    return find_section(doc, CALL_TRANSCRIPTS) is not None


def init_structure(doc: Document, config: OpportunityConfig) -> None:
    """Clear the document and write the header block plus the four empty sections."""
    doc.clear()

    lines = header_lines(config.name, config.crm_url)
    doc.insert_paragraphs(0, lines)
    doc.set_bold(0, 0, len(lines[0]))
    if config.crm_url:
        link_line = lines.index(CRM_LABEL + config.crm_url)
        start = len(CRM_LABEL)
        doc.set_link(link_line, start, start + len(config.crm_url), config.crm_url)

    index = len(lines)
    for name in SECTION_NAMES:
        header = section_header(name)
        doc.insert_paragraphs(index, [header, ""])
        doc.set_bold(index, 0, len(header))
        index += 2


def append_to_section(doc: Document, section_name: str, text: str) -> bool:
    """
    Insert each line of `text` below the section header, keeping line order.
    Returns False, without touching the document, when the section is missing.
    """
    section_index = find_section(doc, section_name)
    if section_index is None:
        logger.warning("Section not found: %s", section_name)
        return False
    doc.insert_paragraphs(section_index + SECTION_BODY_OFFSET, text.split("\n"))
    return True


def append_transcript(doc: Document, transcript: Transcript) -> bool:
    return append_to_section(doc, CALL_TRANSCRIPTS, format_entry(format_transcript(transcript)))


def append_thread(doc: Document, thread: EmailThread) -> bool:
    return append_to_section(doc, EMAIL_CORRESPONDENCE, format_entry(format_thread(thread)))
