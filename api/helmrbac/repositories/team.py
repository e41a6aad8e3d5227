"""Team (project) repository for Redis data access."""

from helmrbac.models.entities import Team

from .redis_base import RedisRepository


class TeamRepository(RedisRepository):
    """Repository for team records."""

    def find_one(self, team_id: int) -> Team:
        """Get an active team by id."""
        return self.get_record(f"team:{team_id}", Team, "team", team_id)
