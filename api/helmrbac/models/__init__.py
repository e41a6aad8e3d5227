"""Data models package."""

from .auth import User
from .entities import (UNASSIGNED_PROJECT, App, Cluster, Environment,
                       InstalledApp, Team, cluster_namespace_token)

__all__ = [
    "User",
    "UNASSIGNED_PROJECT",
    "App",
    "Cluster",
    "Environment",
    "InstalledApp",
    "Team",
    "cluster_namespace_token",
]
