"""RBAC object-name resolution for Helm installed apps.

Object names have the form ``<project>/<scope>/<app>``, where the scope is
either an environment identifier or a ``<cluster>__<namespace>`` token.
Lookup failures never raise: the ``resolve_*`` methods return an unresolved
``Resolution`` and the string methods render it as the legacy sentinel
(``"//"``, or ``""`` for the cluster/namespace/app pair).
"""

from typing import Tuple

import redis

from helmrbac.core.logging import get_logger
from helmrbac.models.entities import UNASSIGNED_PROJECT, cluster_namespace_token
from helmrbac.repositories import (AppRepository, ClusterRepository,
                                   InstalledAppRepository, RecordNotFoundError,
                                   RepositoryError, TeamRepository)

from .resolution import Resolution, object_name

logger = get_logger(__name__)


class HelmRBACResolver:
    """Derives authorization object names from cluster, team and app records."""

    def __init__(
        self,
        cluster_repository: ClusterRepository,
        team_repository: TeamRepository,
        app_repository: AppRepository,
        installed_app_repository: InstalledAppRepository,
    ):
        self.clusters = cluster_repository
        self.teams = team_repository
        self.apps = app_repository
        self.installed_apps = installed_app_repository

    # =========================================================================
    # Cluster scoped names
    # =========================================================================

    def resolve_by_cluster(
        self, cluster_id: int, namespace: str, app_name: str
    ) -> Resolution:
        """Name an app in a cluster namespace under the unassigned project."""
        try:
            cluster = self.clusters.find_by_id(cluster_id)
        except RepositoryError as e:
            logger.error(
                f"Error fetching cluster for rbac object: {e}",
                extra={"cluster_id": cluster_id},
            )
            return Resolution.unresolved(f"cluster lookup failed: {e}")

        scope = cluster_namespace_token(cluster.cluster_name, namespace)
        return Resolution.resolved(object_name(UNASSIGNED_PROJECT, scope, app_name))

    def object_by_cluster(self, cluster_id: int, namespace: str, app_name: str) -> str:
        return self.resolve_by_cluster(cluster_id, namespace, app_name).as_object()

    def resolve_by_team_and_cluster(
        self, team_id: int, cluster_id: int, namespace: str, app_name: str
    ) -> Resolution:
        """Name an app in a cluster namespace under a given team."""
        try:
            cluster = self.clusters.find_by_id(cluster_id)
            team = self.teams.find_one(team_id)
        except RepositoryError as e:
            logger.error(
                f"Error fetching team or cluster for rbac object: {e}",
                extra={"cluster_id": cluster_id},
            )
            return Resolution.unresolved(f"team or cluster lookup failed: {e}")

        scope = cluster_namespace_token(cluster.cluster_name, namespace)
        return Resolution.resolved(object_name(team.name, scope, app_name))

    def object_by_team_and_cluster(
        self, team_id: int, cluster_id: int, namespace: str, app_name: str
    ) -> str:
        return self.resolve_by_team_and_cluster(
            team_id, cluster_id, namespace, app_name
        ).as_object()

    def resolve_by_cluster_namespace_and_app_name(
        self, cluster_id: int, namespace: str, app_name: str
    ) -> Resolution:
        """Name a Helm release found by cluster, namespace and release name.

        Releases installed from the CLI have no installed-app record until
        they are linked, so the project comes from the app record instead.
        """
        installed_app = None
        try:
            installed_app = self.installed_apps.get_installed_application_by_cluster_id_and_namespace_and_app_name(
                cluster_id, namespace, app_name
            )
        except RecordNotFoundError:
            pass
        except RepositoryError as e:
            logger.error(
                f"Error fetching installed app for rbac object: {e}",
                extra={"cluster_id": cluster_id},
            )
            return Resolution.unresolved(f"installed app lookup failed: {e}")

        try:
            cluster = self.clusters.find_by_id(cluster_id)
        except RepositoryError as e:
            logger.error(
                f"Error fetching cluster for rbac object: {e}",
                extra={"cluster_id": cluster_id},
            )
            return Resolution.unresolved(f"cluster lookup failed: {e}")

        namespace_scope = cluster_namespace_token(cluster.cluster_name, namespace)

        if installed_app is None:
            try:
                app = self.apps.find_app_and_project_by_app_name(app_name)
                project = UNASSIGNED_PROJECT if app.is_unassigned else app.team_name
            except RecordNotFoundError:
                project = UNASSIGNED_PROJECT
            except RepositoryError as e:
                logger.error(f"Error fetching app {app_name} for rbac object: {e}")
                return Resolution.unresolved(f"app lookup failed: {e}")
            return Resolution.resolved(object_name(project, namespace_scope, app_name))

        app = installed_app.app
        environment = installed_app.environment

        if app.is_unassigned:
            return Resolution.resolved(
                object_name(UNASSIGNED_PROJECT, namespace_scope, app_name),
                object_name(
                    UNASSIGNED_PROJECT, environment.environment_identifier, app_name
                ),
            )

        if installed_app.environment_id == 0:
            # Environment is not provisioned yet for this install
            return Resolution.resolved(object_name(app.team_name, namespace_scope, app_name))

        rbac_one = object_name(app.team_name, environment.environment_identifier, app_name)
        if environment.is_virtual_environment:
            return Resolution.resolved(rbac_one)
        rbac_two = object_name(app.team_name, namespace_scope, app_name)
        return Resolution.resolved(rbac_one, rbac_two)

    def object_by_cluster_namespace_and_app_name(
        self, cluster_id: int, namespace: str, app_name: str
    ) -> Tuple[str, str]:
        return self.resolve_by_cluster_namespace_and_app_name(
            cluster_id, namespace, app_name
        ).as_pair(sentinel="")

    # =========================================================================
    # Installed app names
    # =========================================================================

    def resolve_by_installed_app_id(self, installed_app_id: int) -> Resolution:
        """Name an installed app by its environment, plus its namespace token."""
        try:
            installed_app = self.installed_apps.get_installed_app(installed_app_id)
        except RepositoryError as e:
            logger.error(
                f"Error fetching installed app for rbac name: {e}",
                extra={"installed_app_id": installed_app_id},
            )
            return Resolution.unresolved(f"installed app lookup failed: {e}")

        app = installed_app.app
        environment = installed_app.environment
        rbac_one = object_name(
            app.team_name, environment.environment_identifier, app.app_name
        )

        if environment.is_virtual_environment:
            return Resolution.resolved(rbac_one)

        # No namespace scope without a provisioned environment on a cluster
        if installed_app.environment_id == 0 or environment.cluster is None:
            return Resolution.resolved(rbac_one)

        # Skip the namespace name when it is the same scope as the environment
        namespace_scope = environment.namespace_token
        if namespace_scope == environment.environment_identifier:
            return Resolution.resolved(rbac_one)
        return Resolution.resolved(
            rbac_one, object_name(app.team_name, namespace_scope, app.app_name)
        )

    def names_by_installed_app_id(self, installed_app_id: int) -> Tuple[str, str]:
        return self.resolve_by_installed_app_id(installed_app_id).as_pair()

    def resolve_by_installed_app_and_team(
        self, installed_app_id: int, team_id: int
    ) -> Resolution:
        """Name an installed app as if it belonged to ``team_id``."""
        try:
            installed_app = self.installed_apps.get_installed_app(installed_app_id)
        except RepositoryError as e:
            logger.error(
                f"Error fetching installed app for rbac name: {e}",
                extra={"installed_app_id": installed_app_id},
            )
            return Resolution.unresolved(f"installed app lookup failed: {e}")

        try:
            project = self.teams.find_one(team_id)
        except RepositoryError as e:
            logger.error(f"Error fetching project {team_id} for rbac name: {e}")
            return Resolution.unresolved(f"team lookup failed: {e}")

        return Resolution.resolved(
            object_name(
                project.name,
                installed_app.environment.environment_identifier,
                installed_app.app.app_name,
            )
        )

    def name_by_installed_app_and_team(self, installed_app_id: int, team_id: int) -> str:
        return self.resolve_by_installed_app_and_team(
            installed_app_id, team_id
        ).as_object()


def create_helm_rbac_resolver(redis_client: redis.Redis) -> HelmRBACResolver:
    """Factory function to create a resolver over Redis-backed repositories."""
    return HelmRBACResolver(
        ClusterRepository(redis_client),
        TeamRepository(redis_client),
        AppRepository(redis_client),
        InstalledAppRepository(redis_client),
    )
