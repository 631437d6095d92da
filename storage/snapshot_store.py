"""DynamoDB-backed storage for the latest event snapshot."""
import json
import logging
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import ClientError

from processor.models import Snapshot, empty_snapshot_payload

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Stores the serialized snapshot as a single DynamoDB item."""

    KEY_ATTRIBUTE = 'store_key'
    PAYLOAD_ATTRIBUTE = 'payload'

    def __init__(self, table_name: str, snapshot_key: str = 'events.json'):
        """
        Initialize DynamoDB client and table reference.

        Args:
            table_name: Name of the DynamoDB table
            snapshot_key: Fixed key of the snapshot item
        """
        self.table_name = table_name
        self.snapshot_key = snapshot_key
        self.dynamodb = boto3.resource('dynamodb')
        self.table = self.dynamodb.Table(table_name)
        logger.info(f"Initialized SnapshotStore for table: {table_name}")

    def save_snapshot(self, snapshot: Snapshot) -> None:
        """
        Overwrite the stored snapshot.

        Args:
            snapshot: Snapshot to persist

        Raises:
            ClientError: If the write fails
        """
        try:
            self.table.put_item(Item={
                self.KEY_ATTRIBUTE: self.snapshot_key,
                self.PAYLOAD_ATTRIBUTE: json.dumps(snapshot.to_dict())
            })
        except ClientError as e:
            logger.error(f"Error writing snapshot to DynamoDB: {e}")
            raise

        logger.info(f"Stored snapshot with {snapshot.count} events")

    def get_raw(self) -> Optional[str]:
        """
        Read the stored snapshot text.

        Returns:
            JSON text, or None if no snapshot has been written

        Raises:
            ClientError: If the read fails
        """
        try:
            response = self.table.get_item(Key={self.KEY_ATTRIBUTE: self.snapshot_key})
        except ClientError as e:
            logger.error(f"Error reading snapshot from DynamoDB: {e}")
            raise

        item = response.get('Item')
        if not item:
            return None
        return item.get(self.PAYLOAD_ATTRIBUTE)

    def load_payload(self) -> Dict[str, Any]:
        """
        Read the stored snapshot as a JSON-ready dict.

        A missing or unreadable payload yields the empty snapshot.

        Returns:
            Snapshot payload dict
        """
        raw = self.get_raw()
        if raw is None:
            logger.info("No snapshot stored yet")
            return empty_snapshot_payload()

        try:
            payload = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Stored snapshot is not valid JSON: {e}")
            return empty_snapshot_payload()

        if not isinstance(payload, dict):
            logger.warning("Stored snapshot is not a JSON object")
            return empty_snapshot_payload()
        return payload
