"""Repositories package for data access layer."""

from .app import AppRepository, InstalledAppRepository
from .cluster import ClusterRepository
from .redis_base import RecordNotFoundError, RedisRepository, RepositoryError
from .team import TeamRepository

__all__ = [
    "AppRepository",
    "ClusterRepository",
    "InstalledAppRepository",
    "RedisRepository",
    "RecordNotFoundError",
    "RepositoryError",
    "TeamRepository",
]
