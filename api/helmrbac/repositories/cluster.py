"""Cluster repository for Redis data access."""

from helmrbac.models.entities import Cluster

from .redis_base import RedisRepository


class ClusterRepository(RedisRepository):
    """Repository for cluster records."""

    def find_by_id(self, cluster_id: int) -> Cluster:
        """Get an active cluster by id."""
        return self.get_record(f"cluster:{cluster_id}", Cluster, "cluster", cluster_id)
