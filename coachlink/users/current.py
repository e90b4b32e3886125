"""Current user as cached in the local store."""

from typing import Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

from coachlink.storage.base import USER_KEY, KeyValueStore
from coachlink.storage.blobs import read_json

UserRole = Literal["coach", "athlete"]

DEFAULT_ROLE: UserRole = "coach"


class CurrentUser(BaseModel):
    """Subset of the cached user record the services rely on."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str | None = None
    role: UserRole = DEFAULT_ROLE


def get_current_user(store: KeyValueStore) -> CurrentUser:
    """Read the cached user, defaulting to a coach when absent or corrupt."""
    data = read_json(store, USER_KEY, default=None)
    if not isinstance(data, dict):
        return CurrentUser()

    # Accept MongoDB-style identifiers as well
    if "id" not in data and "_id" in data:
        data = {**data, "id": data["_id"]}
    if data.get("id") is not None:
        data = {**data, "id": str(data["id"])}
    if not data.get("role"):
        data = {**data, "role": DEFAULT_ROLE}

    try:
        return CurrentUser.model_validate(data)
    except ValidationError as e:
        logger.bind(error=str(e)).warning("Cached user record is invalid, defaulting role to coach")
        return CurrentUser()
