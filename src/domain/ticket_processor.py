"""
Ticket batch pipeline - core business logic.

This module handles the end-to-end processing of a ticket request:
1. Validate the request payload and each recipient
2. Allocate ticket numbers in input order
3. Render tickets concurrently (fetch template from S3, stamp ticket number)
4. Queue one email per ticket concurrently
5. Return the batch summary

Rendering finishes for every recipient before any email is queued, so a
missing or broken template fails the batch without sending anything.
"""

import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, TypeVar

from .errors import InternalError, InvalidArgumentError, InvalidRecipientError
from .models import OutboundMessage, RecipientRequest, TicketBatchResult, TicketJob
from .ticket_allocator import TicketNumberAllocator
from services import s3 as s3_service
from services import pdf as pdf_service
from services import mail_queue as mail_queue_service

logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')

DEFAULT_MAX_WORKERS = 8


def _read_max_workers() -> int:
    """
    Read TICKET_MAX_WORKERS from the environment.

    Falls back to DEFAULT_MAX_WORKERS when the value is missing, not an
    integer, or below 1.
    """
    raw = os.environ.get('TICKET_MAX_WORKERS', '')
    if not raw:
        return DEFAULT_MAX_WORKERS

    try:
        value = int(raw)
    except ValueError:
        logger.warning(
            f"Invalid TICKET_MAX_WORKERS={raw!r}, using default {DEFAULT_MAX_WORKERS}"
        )
        return DEFAULT_MAX_WORKERS

    if value < 1:
        logger.warning(
            f"TICKET_MAX_WORKERS must be at least 1, got {value}; "
            f"using default {DEFAULT_MAX_WORKERS}"
        )
        return DEFAULT_MAX_WORKERS
    return value


MAX_WORKERS = _read_max_workers()


@dataclass
class RenderedTicket:
    """A ticket job with its stamped PDF."""
    job: TicketJob
    pdf_bytes: bytes


class TicketProcessor:
    """
    Handles end-to-end ticket batch processing.

    The processor itself holds no batch state; every call to send_tickets
    builds its own TicketNumberAllocator.
    """

    def __init__(self, max_workers: Optional[int] = None):
        """
        Initialize ticket processor.

        Args:
            max_workers: Thread pool size for per-recipient I/O
                         (defaults to TICKET_MAX_WORKERS)
        """
        self.max_workers = max_workers or MAX_WORKERS

    def send_tickets(self, payload: Any) -> TicketBatchResult:
        """
        Generate and queue tickets for every valid recipient in payload.

        Args:
            payload: Request dict with a ``recipients`` list of
                     {"email": ..., "type": ...} records

        Returns:
            TicketBatchResult with ticket numbers in input order

        Raises:
            InvalidArgumentError: If recipients is missing or empty
            InternalError: If any template fetch, stamp or enqueue fails
        """
        recipients = self._validate_payload(payload)
        logger.info(f"Received {len(recipients)} recipient(s)")

        jobs = self._allocate_jobs(recipients)
        if not jobs:
            logger.warning("No valid recipients in request, nothing to send")
            return TicketBatchResult(tickets=[])

        start_time = time.time()

        try:
            rendered = self._fan_out(self._render_ticket, jobs)
            self._fan_out(self._queue_ticket, rendered)
        except InternalError:
            raise
        except Exception as e:
            logger.error(f"Ticket batch failed: {e}", exc_info=True)
            raise InternalError(str(e) or 'Unknown error') from e

        tickets = [job.ticket_number for job in jobs]
        logger.info(
            f"All tickets sent: {tickets} "
            f"({time.time() - start_time:.3f}s)"
        )
        return TicketBatchResult(tickets=tickets)

    def _validate_payload(self, payload: Any) -> List[Any]:
        """
        Check the request shape.

        Raises:
            InvalidArgumentError: If payload or its recipients list is invalid
        """
        recipients = payload.get('recipients') if isinstance(payload, dict) else None

        if not isinstance(recipients, list) or not recipients:
            logger.error("No recipients array provided or array is empty")
            raise InvalidArgumentError("Missing or invalid recipients array")

        return recipients

    def _allocate_jobs(self, recipients: Sequence[Any]) -> List[TicketJob]:
        """
        Validate recipients and assign ticket numbers in input order.

        Invalid recipients are logged and skipped without consuming a number.
        """
        allocator = TicketNumberAllocator()
        jobs = []

        for index, raw in enumerate(recipients):
            try:
                recipient = RecipientRequest.from_dict(raw)
            except InvalidRecipientError as e:
                logger.warning(f"Skipping invalid recipient #{index}: {raw!r} ({e})")
                continue

            ticket_number = allocator.next_ticket_number(recipient.category)
            logger.info(f"Generating ticket {ticket_number} for {recipient.email}")
            jobs.append(TicketJob(recipient=recipient, ticket_number=ticket_number))

        return jobs

    def _fan_out(self, func: Callable[[T], R], items: Sequence[T]) -> List[R]:
        """
        Run func over items on a thread pool.

        Results are returned in input order. The first failure (in input
        order) is raised once submitted work settles; work that has not
        started yet is cancelled.
        """
        workers = max(1, min(self.max_workers, len(items)))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(func, item) for item in items]
            try:
                return [future.result() for future in futures]
            except Exception:
                for future in futures:
                    future.cancel()
                raise

    def _render_ticket(self, job: TicketJob) -> RenderedTicket:
        """Fetch the category template and stamp the ticket number on it."""
        template_bytes = s3_service.fetch_template(job.category)
        pdf_bytes = pdf_service.stamp_text(template_bytes, job.ticket_number)
        return RenderedTicket(job=job, pdf_bytes=pdf_bytes)

    def _queue_ticket(self, rendered: RenderedTicket) -> str:
        """Queue the ticket email for delivery."""
        job = rendered.job
        message = OutboundMessage.for_ticket(
            email=job.recipient.email,
            ticket_number=job.ticket_number,
            pdf_bytes=rendered.pdf_bytes
        )
        return mail_queue_service.enqueue_message(message)
