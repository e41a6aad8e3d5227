"""Base repository with common Redis patterns and type-safe operations."""

import json
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from redis import Redis
from redis.exceptions import RedisError

from helmrbac.core.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class RepositoryError(Exception):
    """Raised when a record cannot be read from the store."""


class RecordNotFoundError(RepositoryError):
    """Raised when a record is absent or no longer active."""

    def __init__(self, kind: str, key: Any):
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} not found: {key}")


class RedisRepository:
    """Base repository with common Redis operations."""

    def __init__(self, redis_client: Redis):
        self.redis = redis_client

    def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        """Get and parse JSON from Redis key, None when the key is missing."""
        try:
            data = self.redis.get(key)
        except RedisError as e:
            logger.error(f"Error reading {key}: {e}")
            raise RepositoryError(f"error reading {key}: {e}") from e

        if not data:
            return None

        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON stored at {key}: {e}")
            raise RepositoryError(f"invalid JSON at {key}") from e

    def get_index(self, key: str) -> Optional[int]:
        """Read an index key holding a record id."""
        try:
            data = self.redis.get(key)
        except RedisError as e:
            logger.error(f"Error reading index {key}: {e}")
            raise RepositoryError(f"error reading {key}: {e}") from e

        if not data:
            return None

        try:
            return int(data)
        except ValueError as e:
            raise RepositoryError(f"invalid id stored at {key}: {data!r}") from e

    def get_record(self, key: str, model: Type[ModelT], kind: str, ident: Any) -> ModelT:
        """Load an active record into its model.

        Raises:
            RecordNotFoundError: the key is missing or the record is inactive
            RepositoryError: the store failed or the record is malformed
        """
        data = self.get_json(key)
        if data is None:
            raise RecordNotFoundError(kind, ident)

        try:
            record = model(**data)
        except ValidationError as e:
            logger.error(f"Malformed {kind} record at {key}: {e}")
            raise RepositoryError(f"malformed {kind} record at {key}") from e

        if not getattr(record, "active", True):
            raise RecordNotFoundError(kind, ident)
        return record
