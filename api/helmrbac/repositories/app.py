"""App and installed-app repositories for Redis data access."""

from helmrbac.models.entities import (App, Cluster, Environment, InstalledApp,
                                      Team)

from .redis_base import RecordNotFoundError, RedisRepository, RepositoryError


class AppRepository(RedisRepository):
    """Repository for app records and their owning project."""

    def find_by_id(self, app_id: int) -> App:
        """Get an active app by id with its team attached."""
        app = self.get_record(f"app:{app_id}", App, "app", app_id)
        return self._attach_team(app)

    def find_app_and_project_by_app_name(self, app_name: str) -> App:
        """Get an active app by name with its team attached."""
        app_id = self.get_index(f"app:name:{app_name}")
        if app_id is None:
            raise RecordNotFoundError("app", app_name)
        return self.find_by_id(app_id)

    def _attach_team(self, app: App) -> App:
        if app.is_unassigned:
            return app
        try:
            app.team = self.get_record(f"team:{app.team_id}", Team, "team", app.team_id)
        except RecordNotFoundError as e:
            # The app row exists, so a dangling team is a broken record, not a miss
            raise RepositoryError(f"app {app.id} references missing team {app.team_id}") from e
        return app


class InstalledAppRepository(RedisRepository):
    """Repository for installed apps with app, team and environment attached."""

    def __init__(self, redis_client):
        super().__init__(redis_client)
        self.apps = AppRepository(redis_client)

    def get_installed_app(self, installed_app_id: int) -> InstalledApp:
        """Get an active installed app by id."""
        installed_app = self.get_record(
            f"installed_app:{installed_app_id}",
            InstalledApp,
            "installed app",
            installed_app_id,
        )
        return self._hydrate(installed_app)

    def get_installed_application_by_cluster_id_and_namespace_and_app_name(
        self, cluster_id: int, namespace: str, app_name: str
    ) -> InstalledApp:
        """Get the installed app deployed as `app_name` into a cluster namespace."""
        key = f"installed_app:by:cluster:{cluster_id}:{namespace}:{app_name}"
        installed_app_id = self.get_index(key)
        if installed_app_id is None:
            raise RecordNotFoundError(
                "installed app", f"{cluster_id}/{namespace}/{app_name}"
            )
        return self.get_installed_app(installed_app_id)

    def _hydrate(self, installed_app: InstalledApp) -> InstalledApp:
        try:
            installed_app.app = self.apps.find_by_id(installed_app.app_id)
            if installed_app.environment_id:
                environment = self.get_record(
                    f"environment:{installed_app.environment_id}",
                    Environment,
                    "environment",
                    installed_app.environment_id,
                )
                environment.cluster = self.get_record(
                    f"cluster:{environment.cluster_id}",
                    Cluster,
                    "cluster",
                    environment.cluster_id,
                )
                installed_app.environment = environment
        except RecordNotFoundError as e:
            raise RepositoryError(
                f"installed app {installed_app.id} has a dangling reference: {e}"
            ) from e
        return installed_app
