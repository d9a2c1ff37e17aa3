"""
Domain layer for ticket processing business logic.

This layer contains:
- Data models (recipients, categories, outbound messages)
- Error types (batch-level and recipient-level)
- Business logic (ticket allocation and the batch pipeline)
"""
