"""DynamoDB repository for interactive chat transcripts."""

import os
from typing import Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Key


class DynamoDbRepository:
    """Session-keyed message log (partition ``session_id``, sort ``timestamp``)."""

    def __init__(self, table_name: Optional[str] = None, table: Any = None):
        if table is None:
            name = table_name or os.environ.get("CONVERSATIONS_TABLE", "voice-conversations")
            table = boto3.resource("dynamodb").Table(name)
        self.table = table

    def put(self, item: Dict[str, Any]) -> None:
        """Insert an item."""
        self.table.put_item(Item=item)

    def query_session(
        self, session_id: str, limit: int = 50, newest_first: bool = False
    ) -> List[Dict[str, Any]]:
        """Messages of one session in timestamp order."""
        resp = self.table.query(
            KeyConditionExpression=Key("session_id").eq(session_id),
            ScanIndexForward=not newest_first,
            Limit=limit,
        )
        return resp.get("Items", [])

    def delete_session(self, session_id: str) -> int:
        """Delete every message of a session; returns how many were removed."""
        deleted = 0
        kwargs: Dict[str, Any] = {
            "KeyConditionExpression": Key("session_id").eq(session_id),
            "ProjectionExpression": "session_id, #ts",
            "ExpressionAttributeNames": {"#ts": "timestamp"},
        }
        with self.table.batch_writer() as batch:
            while True:
                resp = self.table.query(**kwargs)
                for item in resp.get("Items", []):
                    batch.delete_item(
                        Key={"session_id": item["session_id"], "timestamp": item["timestamp"]}
                    )
                    deleted += 1
                last_key = resp.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        return deleted
