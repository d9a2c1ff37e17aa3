"""
Service functions for ticket processing.

This package contains the external-facing operations: template retrieval
from S3, PDF stamping, and mail queue writes.
"""

__all__ = ['s3', 'pdf', 'mail_queue']
