"""
S3 operations for ticket templates.

Templates are read-only PDFs stored under a fixed key prefix, one per ticket
category. They are fetched fresh for every ticket (no caching).
"""

import logging
import os

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from domain.errors import InternalError, TemplateNotFoundError
from domain.models import TicketCategory

logger = logging.getLogger(__name__)

# Configure S3 client with timeouts to prevent infinite hangs
s3_config = Config(
    retries={
        'max_attempts': 1,  # 1 attempt total (no retries)
        'mode': 'standard'
    },
    connect_timeout=10,  # 10 seconds to establish connection
    read_timeout=60      # 60 seconds max for reading response
)

# Initialize S3 client at module level (thread-safe, reused across invocations)
s3_client = boto3.client('s3', config=s3_config)
logger.info("S3 client initialized with timeouts: connect=10s, read=60s, max_attempts=1")

# Configuration from environment variables
TEMPLATE_BUCKET = os.environ.get('TEMPLATE_BUCKET', '')
TEMPLATE_KEY_PREFIX = os.environ.get('TEMPLATE_KEY_PREFIX', 'ticketData/')


def is_configured() -> bool:
    """Check if the template bucket is set."""
    return bool(TEMPLATE_BUCKET)


def template_key(category: TicketCategory) -> str:
    """
    Build the S3 object key for a category template.

    Example:
        >>> template_key(TicketCategory(1))
        'ticketData/301-3.pdf'
    """
    return f"{TEMPLATE_KEY_PREFIX}{category.template_filename}"


def fetch_template(category: TicketCategory) -> bytes:
    """
    Fetch the template PDF for a ticket category.

    Args:
        category: Ticket category

    Returns:
        bytes: The raw template document

    Raises:
        TemplateNotFoundError: If the template object or bucket does not exist
        InternalError: If the bucket is not configured or S3 fails otherwise
    """
    if not is_configured():
        raise InternalError("TEMPLATE_BUCKET environment variable is not set")

    key = template_key(category)

    try:
        response = s3_client.get_object(Bucket=TEMPLATE_BUCKET, Key=key)
        content = response['Body'].read()
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', '')
        if error_code in ('NoSuchKey', 'NoSuchBucket', '404'):
            logger.error(
                f"Template not found: s3://{TEMPLATE_BUCKET}/{key} "
                f"(error_code={error_code})"
            )
            raise TemplateNotFoundError(f"Template {key} not found")
        logger.error(f"Failed to fetch template s3://{TEMPLATE_BUCKET}/{key}: {e}")
        raise InternalError(f"Failed to fetch template {key}: {e}")

    logger.info(f"Fetched template s3://{TEMPLATE_BUCKET}/{key}: {len(content):,} bytes")
    return content
