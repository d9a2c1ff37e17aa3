"""
Per-invocation ticket number allocation.

Each batch builds its own allocator, so numbering restarts at 1 for every
category on every invocation.
"""

import threading
from typing import Dict

from .models import TicketCategory


class TicketNumberAllocator:
    """Hands out 1-based sequence numbers per ticket category."""

    def __init__(self):
        self._lock = threading.Lock()
        self._next: Dict[TicketCategory, int] = {category: 1 for category in TicketCategory}

    def allocate(self, category: TicketCategory) -> int:
        """Return the current sequence number for category and advance it."""
        with self._lock:
            sequence = self._next[category]
            self._next[category] = sequence + 1
        return sequence

    def next_ticket_number(self, category: TicketCategory) -> str:
        """Allocate a sequence number and format it as a ticket number."""
        return category.format_ticket_number(self.allocate(category))
