"""Credential value types: resolved credentials, forward actions, endpoint format."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from bbb_tenancy.core.constants import BBB_API_PATH_SUFFIX, BBB_PATH_SUFFIX


class ForwardAction(str, Enum):
    """BigBlueButton actions whose extra parameters the broker may forward."""

    JOIN = "join"
    CREATE = "create"


class ResolvedCredentials(BaseModel):
    """Endpoint, shared secret and broker settings for one tenant.

    Stored in the credential cache as JSON (apiURL/secret/settings) and
    returned to callers with api_url normalized.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_url: str = Field(alias="apiURL")
    secret: str
    settings: dict[str, Any] | None = None

    def to_cache(self) -> dict[str, Any]:
        """Return the JSON-serializable cache record (wire key names)."""
        return self.model_dump(mode="json", by_alias=True)

    def normalized(self) -> "ResolvedCredentials":
        """Return a copy with api_url in canonical API base form."""
        return self.model_copy(update={"api_url": normalize_endpoint(self.api_url)})


def normalize_endpoint(endpoint: str) -> str:
    """Return endpoint as a BigBlueButton API base URL ending in bigbluebutton/api/.

    Administrators enter the host, the bigbluebutton/ path, or the full
    API path; all three map to the same result. Idempotent.

    Examples:
        https://host -> https://host/bigbluebutton/api/
        https://host/bigbluebutton/ -> https://host/bigbluebutton/api/
        https://host/bigbluebutton/api -> https://host/bigbluebutton/api/
    """
    if not endpoint.endswith("/"):
        endpoint += "/"
    if endpoint.endswith(BBB_PATH_SUFFIX):
        endpoint += "api/"
    if not endpoint.endswith(BBB_API_PATH_SUFFIX):
        endpoint += BBB_API_PATH_SUFFIX
    return endpoint
