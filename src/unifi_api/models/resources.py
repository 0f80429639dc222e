"""Resource records decoded from envelope payloads."""

from datetime import datetime
from typing import Any, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from unifi_api.utils.timestamps import normalize_timestamp

logger = structlog.get_logger(__name__)


class Station(BaseModel):
    """A client device (station) connected to the managed network.

    Built from ``/api/s/{site}/stat/sta``. Fields the controller sends but
    this model does not declare are ignored.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="_id", description="Controller object ID")
    name: str = Field(default="", description="User-assigned alias")
    hostname: str = Field(default="", description="Hostname reported by the device")
    wired: bool = Field(default=False, alias="is_wired")
    mac: str = Field(default="")
    ip: str = Field(default="")
    last_seen: Optional[datetime] = Field(
        default=None, description="Last time the controller saw the station (UTC)"
    )

    @field_validator("last_seen", mode="before")
    @classmethod
    def normalize_last_seen(cls, v: Any) -> Optional[datetime]:
        """Convert the controller's Unix seconds to UTC datetime."""
        if v is None or v == "":
            return None
        try:
            return normalize_timestamp(v)
        except (ValueError, TypeError, OverflowError) as e:
            logger.warning(
                "timestamp_parse_failed",
                field="last_seen",
                value=repr(v)[:100],
                error=str(e),
            )
            return None

    @property
    def display_name(self) -> str:
        return self.name or self.hostname or self.mac


class WirelessNetwork(BaseModel):
    """A wireless network (WLAN) configuration from ``list/wlanconf``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str = Field(..., alias="_id")
    name: str = Field(default="")
    enabled: bool = Field(default=False)
    security: str = Field(default="")
    wpa_mode: str = Field(default="")
    guest: bool = Field(default=False, alias="is_guest")
