"""
AWS Lambda handler for sending PDF tickets by email.

Thin orchestration layer that delegates to TicketProcessor.
Accepts a direct invocation payload or an API Gateway proxy event.
"""

import base64
import binascii
import json
import logging
import os
from typing import Dict, Any

from domain.errors import InvalidArgumentError, TicketError
from domain.ticket_processor import TicketProcessor
from services import s3 as s3_service
from services import mail_queue as mail_queue_service

ENVIRONMENT = os.environ.get('ENVIRONMENT', 'dev')
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

# Configure logging
logger = logging.getLogger()
logger.setLevel(LOG_LEVEL)

# Add console handler for local testing (AWS Lambda provides handlers automatically)
if not logger.handlers:
    console_handler = logging.StreamHandler()
    console_handler.setLevel(LOG_LEVEL)
    formatter = logging.Formatter('%(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

# Initialize processor once at module level (reused across invocations)
ticket_processor = TicketProcessor()

RESPONSE_HEADERS = {
    'Content-Type': 'application/json',
    'Access-Control-Allow-Origin': '*'
}


def _extract_payload(event: Any) -> Any:
    """
    Get the request payload from a Lambda event.

    API Gateway proxy events carry the payload as a JSON string in ``body``;
    direct invocations pass the payload itself.

    Raises:
        InvalidArgumentError: If the body is not valid JSON
    """
    if not isinstance(event, dict) or 'body' not in event:
        return event

    body = event.get('body')
    if body is None or body == '':
        return None

    try:
        if event.get('isBase64Encoded'):
            body = base64.b64decode(body).decode('utf-8')
        return json.loads(body) if isinstance(body, str) else body
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        raise InvalidArgumentError(f"Request body is not valid JSON: {e}")


def _response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'statusCode': status_code,
        'headers': RESPONSE_HEADERS,
        'body': json.dumps(body)
    }


def _error_response(status_code: int, kind: str, message: str) -> Dict[str, Any]:
    return _response(status_code, {
        'error': {
            'status': kind,
            'message': message
        }
    })


def lambda_handler(event: Any, context: Any) -> Dict[str, Any]:
    """
    Generate tickets for the requested recipients and queue their emails.

    Expected payload:
    {
        "recipients": [
            {"email": "a@example.com", "type": 1},
            ...
        ]
    }

    Returns:
        200 with {"success": true, "count": N, "tickets": [...]},
        400 with status "invalid-argument", or 500 with status "internal"
    """
    logger.info("=" * 70)
    logger.info(f"Ticket Sender - Started (environment={ENVIRONMENT})")
    logger.info("=" * 70)

    try:
        payload = _extract_payload(event)
        logger.info(f"Function called with data: {json.dumps(payload, default=str)[:1000]}")

        result = ticket_processor.send_tickets(payload)

        logger.info("=" * 70)
        logger.info(f"Batch processing complete: {result.count} ticket(s) sent")
        logger.info("=" * 70)

        return _response(200, result.to_dict())

    except InvalidArgumentError as e:
        logger.error(f"Validation error: {e.message}")
        return _error_response(400, e.kind, e.message)

    except TicketError as e:
        logger.error(f"Error sending tickets: {e.message}")
        return _error_response(500, e.kind, e.message)

    except Exception as e:
        logger.error(f"Unexpected error sending tickets: {str(e)}", exc_info=True)
        return _error_response(500, 'internal', str(e) or 'Unknown error')


def health_check(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Simple health check endpoint for monitoring.
    """
    return _response(200, {
        'status': 'healthy',
        'environment': ENVIRONMENT,
        'templateBucketConfigured': s3_service.is_configured(),
        'mailQueueConfigured': mail_queue_service.is_configured()
    })
