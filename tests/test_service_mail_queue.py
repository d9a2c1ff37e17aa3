"""
Tests for mail queue service.
"""

import json
import pytest
from unittest.mock import patch
from botocore.exceptions import ClientError
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from domain.errors import EnqueueError
from domain.models import OutboundMessage
from services import mail_queue

QUEUE_URL = 'https://sqs.us-east-1.amazonaws.com/123456789012/ticket-mail'


@pytest.fixture
def ticket_message():
    """Sample ticket email."""
    return OutboundMessage.for_ticket(
        email='a@x.com',
        ticket_number='C01001',
        pdf_bytes=b'%PDF-1.4 stamped'
    )


class TestEnqueueMessage:
    """Test writing email records to SQS."""

    @patch('services.mail_queue.MAIL_QUEUE_URL', QUEUE_URL)
    @patch('services.mail_queue.sqs_client')
    def test_enqueue_success(self, mock_sqs_client, ticket_message):
        """Test message is sent as a JSON record."""
        mock_sqs_client.send_message.return_value = {'MessageId': 'msg-123'}

        message_id = mail_queue.enqueue_message(ticket_message)

        assert message_id == 'msg-123'
        mock_sqs_client.send_message.assert_called_once()
        call_kwargs = mock_sqs_client.send_message.call_args[1]
        assert call_kwargs['QueueUrl'] == QUEUE_URL

        record = json.loads(call_kwargs['MessageBody'])
        assert record == {
            'to': 'a@x.com',
            'message': {
                'subject': 'Your Ticket',
                'text': 'Here is your ticket: C01001',
                'attachments': [
                    {
                        'filename': 'C01001.pdf',
                        'content': 'JVBERi0xLjQgc3RhbXBlZA==',
                        'encoding': 'base64'
                    }
                ]
            }
        }

    @patch('services.mail_queue.MAIL_QUEUE_URL', QUEUE_URL)
    @patch('services.mail_queue.sqs_client')
    def test_enqueue_client_error(self, mock_sqs_client, ticket_message):
        """Test SQS errors are raised as EnqueueError."""
        mock_sqs_client.send_message.side_effect = ClientError(
            {'Error': {'Code': 'AWS.SimpleQueueService.NonExistentQueue',
                       'Message': 'The specified queue does not exist.'}},
            'SendMessage'
        )

        with pytest.raises(EnqueueError, match="The specified queue does not exist"):
            mail_queue.enqueue_message(ticket_message)

    @patch('services.mail_queue.MAIL_QUEUE_URL', '')
    @patch('services.mail_queue.sqs_client')
    def test_enqueue_not_configured(self, mock_sqs_client, ticket_message):
        """Test enqueue without a queue URL fails before calling SQS."""
        with pytest.raises(EnqueueError, match="MAIL_QUEUE_URL"):
            mail_queue.enqueue_message(ticket_message)

        mock_sqs_client.send_message.assert_not_called()


class TestIsConfigured:
    """Test mail queue configuration check."""

    @patch('services.mail_queue.MAIL_QUEUE_URL', QUEUE_URL)
    def test_configured(self):
        assert mail_queue.is_configured() is True

    @patch('services.mail_queue.MAIL_QUEUE_URL', '')
    def test_not_configured(self):
        assert mail_queue.is_configured() is False


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
