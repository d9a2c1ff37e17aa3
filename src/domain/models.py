"""
Data models for ticket processing domain.

These type-safe data structures define clear contracts between components.
"""

import base64
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Dict, Any

from .errors import InvalidRecipientError, UnknownCategoryError

TICKET_SUBJECT = "Your Ticket"
TICKET_TEXT_TEMPLATE = "Here is your ticket: {ticket_number}"


class TicketCategory(IntEnum):
    """Ticket types, each with its own template and numbering sequence."""
    CATEGORY_1 = 1
    CATEGORY_2 = 2
    CATEGORY_3 = 3
    CATEGORY_4 = 4
    CATEGORY_5 = 5
    CATEGORY_6 = 6
    CATEGORY_7 = 7
    CATEGORY_8 = 8
    CATEGORY_9 = 9

    @classmethod
    def parse(cls, value: Any) -> "TicketCategory":
        """
        Convert a raw ``type`` field into a category.

        Accepts integers and ASCII digit strings ("3"). Booleans, floats and
        anything outside 1-9 are rejected.

        Raises:
            UnknownCategoryError: If value is not a known category
        """
        if isinstance(value, bool):
            raise UnknownCategoryError(f"Unknown ticket category: {value!r}")
        if isinstance(value, str) and value.strip().isascii() and value.strip().isdecimal():
            value = int(value.strip())
        if not isinstance(value, int):
            raise UnknownCategoryError(f"Unknown ticket category: {value!r}")
        try:
            return cls(value)
        except ValueError:
            raise UnknownCategoryError(f"Unknown ticket category: {value!r}")

    @property
    def template_filename(self) -> str:
        """Template document filename for this category."""
        return TEMPLATE_FILENAMES[self]

    def format_ticket_number(self, sequence: int) -> str:
        """Format a ticket number, e.g. C01001 for category 1, sequence 1."""
        return f"C0{self.value}{sequence:03d}"


TEMPLATE_FILENAMES: Dict[TicketCategory, str] = {
    category: f"30{category.value}-3.pdf" for category in TicketCategory
}


@dataclass
class RecipientRequest:
    """
    A single recipient record from the request payload.

    Attributes:
        email: Recipient email address
        category: Ticket category
    """
    email: str
    category: TicketCategory

    @classmethod
    def from_dict(cls, data: Any) -> "RecipientRequest":
        """
        Validate a raw recipient record.

        Raises:
            InvalidRecipientError: If the record is not a mapping or has no email
            UnknownCategoryError: If the type is not a known category
        """
        if not isinstance(data, dict):
            raise InvalidRecipientError(
                f"Recipient must be an object, got {type(data).__name__}"
            )

        email = data.get('email')
        if not isinstance(email, str) or not email.strip():
            raise InvalidRecipientError("Recipient email is missing or empty")

        category = TicketCategory.parse(data.get('type'))
        return cls(email=email.strip(), category=category)


@dataclass
class TicketJob:
    """A validated recipient with its allocated ticket number."""
    recipient: RecipientRequest
    ticket_number: str

    @property
    def category(self) -> TicketCategory:
        return self.recipient.category


@dataclass
class MessageAttachment:
    """
    Email attachment in the mail queue record format.

    Attributes:
        filename: Attachment filename
        content: Base64-encoded content
        encoding: Content encoding (always "base64")
    """
    filename: str
    content: str
    encoding: str = "base64"

    def to_dict(self) -> Dict[str, str]:
        return {
            'filename': self.filename,
            'content': self.content,
            'encoding': self.encoding,
        }


@dataclass
class OutboundMessage:
    """
    Email record handed to the delivery worker through the mail queue.

    Attributes:
        to: Recipient email address
        subject: Email subject line
        text: Plain text body
        attachments: List of MessageAttachment objects
    """
    to: str
    subject: str
    text: str
    attachments: List[MessageAttachment] = field(default_factory=list)

    @classmethod
    def for_ticket(cls, email: str, ticket_number: str, pdf_bytes: bytes) -> "OutboundMessage":
        """Build the ticket email with the stamped PDF attached."""
        return cls(
            to=email,
            subject=TICKET_SUBJECT,
            text=TICKET_TEXT_TEMPLATE.format(ticket_number=ticket_number),
            attachments=[
                MessageAttachment(
                    filename=f"{ticket_number}.pdf",
                    content=base64.b64encode(pdf_bytes).decode('ascii'),
                )
            ]
        )

    def to_record(self) -> Dict[str, Any]:
        """
        Convert to the queue record format.

        Returns:
            Dict with ``to`` and a nested ``message`` holding subject, text
            and attachments
        """
        return {
            'to': self.to,
            'message': {
                'subject': self.subject,
                'text': self.text,
                'attachments': [a.to_dict() for a in self.attachments],
            }
        }


@dataclass
class TicketBatchResult:
    """
    Summary of a completed batch.

    Attributes:
        tickets: Ticket numbers produced, in input order
        success: Always True; failed batches raise instead
    """
    tickets: List[str] = field(default_factory=list)
    success: bool = True

    @property
    def count(self) -> int:
        return len(self.tickets)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'count': self.count,
            'tickets': list(self.tickets),
        }

    def __repr__(self) -> str:
        """Human-readable representation for logging."""
        return f"TicketBatchResult(success={self.success}, count={self.count})"
