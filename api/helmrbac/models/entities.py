"""Records the resolver reads: clusters, projects, apps and their installs."""

from typing import Optional

from pydantic import BaseModel, Field

# Project name used when an app is not linked to any team
UNASSIGNED_PROJECT = "unassigned-project"


class Cluster(BaseModel):
    """Cluster record."""

    id: int
    cluster_name: str
    active: bool = True


class Team(BaseModel):
    """Team (project) record."""

    id: int
    name: str
    active: bool = True


class App(BaseModel):
    """Application record, optionally carrying its owning team."""

    id: int
    app_name: str
    team_id: int = Field(0, description="Owning team id, 0 when unassigned")
    active: bool = True
    team: Optional[Team] = None

    @property
    def team_name(self) -> str:
        return self.team.name if self.team else ""

    @property
    def is_unassigned(self) -> bool:
        return self.team_id == 0


class Environment(BaseModel):
    """Deployment environment backed by a cluster namespace."""

    id: int = 0
    environment_identifier: str = ""
    namespace: str = ""
    cluster_id: int = 0
    is_virtual_environment: bool = False
    active: bool = True
    cluster: Optional[Cluster] = None

    @property
    def cluster_name(self) -> str:
        return self.cluster.cluster_name if self.cluster else ""

    @property
    def namespace_token(self) -> str:
        """Scope token synthesized from the backing cluster and namespace."""
        return cluster_namespace_token(self.cluster_name, self.namespace)


class InstalledApp(BaseModel):
    """Link between an app and the environment it is deployed to."""

    id: int
    app_id: int
    environment_id: int = Field(
        0, description="Target environment id, 0 until the environment is provisioned"
    )
    active: bool = True
    app: Optional[App] = None
    environment: Environment = Field(default_factory=Environment)


def cluster_namespace_token(cluster_name: str, namespace: str) -> str:
    """Build the `<cluster>__<namespace>` scope token."""
    return f"{cluster_name}__{namespace}"
