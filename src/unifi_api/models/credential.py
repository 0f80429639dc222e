"""Credential and session cookie models."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from unifi_api.utils.timestamps import normalize_timestamp


def _strip_required(v: str) -> str:
    """Reject blank values and strip surrounding whitespace."""
    if not v.strip():
        raise ValueError("must not be blank")
    return v.strip()


class Credential(BaseModel):
    """Login identity for one UniFi controller.

    Immutable once loaded. The password is kept out of ``repr`` so that
    accidental logging of the model does not leak it.
    """

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., min_length=1, description="Local admin username")
    password: str = Field(..., repr=False, description="Admin password")
    controller_host: str = Field(
        ..., min_length=1, description="Controller hostname or IP address (no port)"
    )

    @field_validator("username", "controller_host")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return _strip_required(v)


class SessionCookie(BaseModel):
    """A single cookie held for the controller origin."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    domain: str = ""
    path: str = "/"
    expires: Optional[datetime] = Field(
        default=None, description="Expiry in UTC; None for a session cookie"
    )
    secure: bool = False

    @field_validator("expires", mode="before")
    @classmethod
    def normalize_expires(cls, v: Any) -> Optional[datetime]:
        """Accept Unix seconds, ISO strings or datetimes."""
        if v is None or v == "":
            return None
        return normalize_timestamp(v)

    def expires_timestamp(self) -> Optional[int]:
        """Expiry as Unix seconds, the form the cookie jar stores."""
        if self.expires is None:
            return None
        return int(self.expires.timestamp())


class AuthRecord(BaseModel):
    """Everything the credential store persists: identity plus session cookies."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., repr=False)
    controller_host: str = Field(..., min_length=1)
    cookies: List[SessionCookie] = Field(default_factory=list)

    @field_validator("username", "controller_host")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        return _strip_required(v)

    @classmethod
    def from_credential(
        cls, credential: Credential, cookies: List[SessionCookie]
    ) -> "AuthRecord":
        return cls(
            username=credential.username,
            password=credential.password,
            controller_host=credential.controller_host,
            cookies=list(cookies),
        )

    def credential(self) -> Credential:
        return Credential(
            username=self.username,
            password=self.password,
            controller_host=self.controller_host,
        )
