"""
Queue Repository Implementation.

Azure Storage Queue access for order notifications and stock updates.
Message bodies are JSON text; pydantic models are serialized by alias so
consumers see PascalCase keys.

When queue_base64_encoding is enabled (default) the SDK's
TextBase64EncodePolicy/TextBase64DecodePolicy wrap every body, which is
what Azure Functions queue triggers expect.

Usage:
    queue_repo = QueueRepository.instance()
    queue_repo.send_message("order-notifications", message)

Exports:
    QueueRepository: Singleton queue repository
"""

import threading
from typing import Any, Dict, List, Optional, Union

from azure.core.exceptions import ResourceExistsError
from azure.identity import DefaultAzureCredential
from azure.storage.queue import (
    QueueClient,
    QueueServiceClient,
    TextBase64DecodePolicy,
    TextBase64EncodePolicy,
)
from pydantic import BaseModel

from config import StorageConfig, get_config
from exceptions import ContractViolationError
from .base import BaseRepository


class QueueRepository(BaseRepository):
    """
    Centralized queue repository.

    Queue clients are created lazily, cached per queue name, and the queue
    is created on first use (idempotent).
    """

    _instance: Optional['QueueRepository'] = None
    _lock = threading.Lock()

    def __init__(self, service_client: Optional[QueueServiceClient] = None,
                 config: Optional[StorageConfig] = None):
        super().__init__()
        config = config or get_config().storage
        self.base64_encoding = config.queue_base64_encoding
        if service_client is None:
            config.require_credentials()
            if config.connection_string:
                self.logger.info("🔐 Initializing QueueRepository with connection string")
                service_client = QueueServiceClient.from_connection_string(config.connection_string)
            else:
                self.logger.info(
                    f"🔐 Initializing QueueRepository with DefaultAzureCredential for account: {config.account_name}"
                )
                service_client = QueueServiceClient(
                    account_url=config.account_url("queue"),
                    credential=DefaultAzureCredential()
                )
        self.queue_service = service_client
        self._queue_clients: Dict[str, QueueClient] = {}

    @classmethod
    def instance(cls) -> 'QueueRepository':
        """Get singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def _get_queue_client(self, queue_name: str) -> QueueClient:
        """
        Get or create a queue client.

        Lazily creates and caches queue clients; the queue itself is
        created if it does not exist yet.
        """
        if queue_name not in self._queue_clients:
            self.logger.debug(f"📦 Creating queue client for: {queue_name}")
            policies = {}
            if self.base64_encoding:
                policies = {
                    "message_encode_policy": TextBase64EncodePolicy(),
                    "message_decode_policy": TextBase64DecodePolicy(),
                }
            queue_client = self.queue_service.get_queue_client(queue_name, **policies)

            with self._error_context("queue creation", queue_name):
                try:
                    queue_client.create_queue()
                    self.logger.info(f"✅ Created queue: {queue_name}")
                except ResourceExistsError:
                    self.logger.debug(f"Queue already exists: {queue_name}")

            self._queue_clients[queue_name] = queue_client

        return self._queue_clients[queue_name]

    def create_queue(self, queue_name: str) -> bool:
        """
        Create a queue if it does not exist.

        Returns:
            True if created, False if it already existed
        """
        with self._error_context("queue creation", queue_name):
            try:
                self.queue_service.create_queue(queue_name)
                self.logger.info(f"✅ Created queue: {queue_name}")
                return True
            except ResourceExistsError:
                self.logger.debug(f"Queue already exists: {queue_name}")
                return False

    def send_message(self, queue_name: str, message: Union[str, BaseModel]) -> str:
        """
        Send a message to the specified queue.

        Args:
            queue_name: Target queue name
            message: Text body, or a pydantic model serialized to JSON by alias

        Returns:
            Message ID
        """
        if isinstance(message, BaseModel):
            body = message.model_dump_json(by_alias=True)
        elif isinstance(message, str):
            body = message
        else:
            raise ContractViolationError(
                f"Queue message must be str or BaseModel, got {type(message).__name__}"
            )

        queue_client = self._get_queue_client(queue_name)
        self.logger.info(f"📤 Sending message to queue: {queue_name}")
        self.logger.debug(f"Message size: {len(body)} bytes")

        with self._error_context("queue send", queue_name):
            response = queue_client.send_message(body)

        self.logger.info(f"✅ Message sent successfully. ID: {response.id}")
        return response.id

    def receive_message(self, queue_name: str) -> Optional[str]:
        """
        Receive one message and delete it.

        Returns:
            Message text, or None when the queue is empty
        """
        queue_client = self._get_queue_client(queue_name)
        with self._error_context("queue receive", queue_name):
            message = queue_client.receive_message()
            if message is None:
                self.logger.debug(f"📭 Queue {queue_name} is empty")
                return None
            queue_client.delete_message(message)

        self.logger.info(f"📥 Received message {message.id} from {queue_name}")
        return message.content

    def peek_messages(self, queue_name: str, max_messages: int = 5) -> List[Dict[str, Any]]:
        """
        Peek at messages without removing them from queue.

        Args:
            queue_name: Queue to peek at
            max_messages: Maximum messages to peek (1-32)

        Returns:
            List of message dictionaries
        """
        queue_client = self._get_queue_client(queue_name)
        with self._error_context("queue peek", queue_name):
            messages = queue_client.peek_messages(max_messages=max(1, min(max_messages, 32)))

        result = [
            {
                'id': msg.id,
                'content': msg.content,
                'dequeue_count': msg.dequeue_count,
                'inserted_on': msg.inserted_on.isoformat() if msg.inserted_on else None,
            }
            for msg in messages
        ]
        self.logger.debug(f"👀 Peeked at {len(result)} messages in {queue_name}")
        return result

    def get_queue_length(self, queue_name: str) -> int:
        """
        Get approximate number of messages in queue.

        Note: Count is approximate due to distributed nature of Azure Queues.
        """
        queue_client = self._get_queue_client(queue_name)
        with self._error_context("queue length", queue_name):
            properties = queue_client.get_queue_properties()
        count = properties.approximate_message_count or 0
        self.logger.debug(f"📊 Queue {queue_name} has ~{count} messages")
        return count
