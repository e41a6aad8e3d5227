"""Authentication models for callers of the resolver API."""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, validator


class User(BaseModel):
    """User model extracted from OAuth proxy headers."""

    username: str = Field(..., description="User's username")
    email: Optional[str] = Field(None, description="User's email address or identifier")
    groups: List[str] = Field(default_factory=list, description="User's groups")

    authenticated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    auth_provider: str = Field("oauth-proxy", description="Authentication provider")

    @validator("groups", pre=True)
    def parse_groups(cls, v):
        """Accept the comma-separated form the proxy forwards."""
        if v is None:
            return []
        if isinstance(v, str):
            return [group.strip() for group in v.split(",") if group.strip()]
        return v

    @property
    def id(self) -> str:
        """Get user ID (username)."""
        return self.username