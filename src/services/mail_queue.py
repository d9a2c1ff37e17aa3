"""
Outbound mail queue.

Ticket emails are written to an SQS queue as JSON records. A separate
delivery worker consumes the queue and sends the actual email; this module
only guarantees that SQS accepted the record.
"""

import json
import logging
import os

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from domain.errors import EnqueueError
from domain.models import OutboundMessage

logger = logging.getLogger(__name__)

# Configure SQS client with timeouts
sqs_config = Config(
    retries={
        'max_attempts': 1,
        'mode': 'standard'
    },
    connect_timeout=10,
    read_timeout=60
)

# Get region from environment or use default
region = os.environ.get('AWS_REGION', os.environ.get('AWS_DEFAULT_REGION', 'us-east-1'))

# Module-level client (reused across invocations)
sqs_client = boto3.client('sqs', region_name=region, config=sqs_config)

# Configuration from environment
MAIL_QUEUE_URL = os.environ.get('MAIL_QUEUE_URL', '')


def is_configured() -> bool:
    """Check if the mail queue URL is set."""
    return bool(MAIL_QUEUE_URL)


def enqueue_message(message: OutboundMessage) -> str:
    """
    Append an outbound email record to the mail queue.

    Args:
        message: Email to queue for delivery

    Returns:
        str: SQS message ID

    Raises:
        EnqueueError: If the queue is not configured or SQS rejects the message
    """
    if not is_configured():
        raise EnqueueError("MAIL_QUEUE_URL environment variable is not set")

    body = json.dumps(message.to_record())

    try:
        response = sqs_client.send_message(
            QueueUrl=MAIL_QUEUE_URL,
            MessageBody=body
        )
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', 'Unknown')
        error_message = e.response.get('Error', {}).get('Message', str(e))

        logger.error(
            f"Failed to enqueue mail: "
            f"queue={MAIL_QUEUE_URL}, to={message.to}, "
            f"error_code={error_code}, error_message={error_message}"
        )
        raise EnqueueError(f"Failed to enqueue mail for {message.to}: {error_message}")

    message_id = response.get('MessageId', '')
    logger.info(f"Queued mail for {message.to}: message_id={message_id}, size={len(body):,} bytes")
    return message_id
