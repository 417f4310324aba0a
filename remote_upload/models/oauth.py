"""
Domain models for the OAuth credential lifecycle.
"""

from typing import FrozenSet, Iterable

from pydantic import BaseModel, Field


class Credential(BaseModel):
    """Token pair produced by a consent flow or a silent refresh."""

    access_token: str = Field(..., repr=False, description="Short-lived; kept in memory only.")
    refresh_token: str = Field(..., repr=False, description="Durable; persisted by the caller.")
    expires_in: int = Field(..., description="Access token lifetime in seconds.")


class ConsentGrant(BaseModel):
    """What the user actually approved during one consent round-trip."""

    authorization_code: str = Field(..., repr=False)
    scopes_granted: FrozenSet[str] = Field(default_factory=frozenset)

    def covers(self, required: Iterable[str]) -> bool:
        return set(required) <= self.scopes_granted


__all__ = ["ConsentGrant", "Credential"]
