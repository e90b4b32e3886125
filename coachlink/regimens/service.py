"""Regimen service.

Fetches regimens from the API, normalizes them into Regimen models and
keeps the last successful list per role in the local store so dashboards
can render stale data when the API is unreachable.
"""

from __future__ import annotations

from typing import Any

from loguru import logger
from pydantic import ValidationError

from coachlink.api.client import ApiClient
from coachlink.core.errors import NetworkError
from coachlink.core.result import OperationResult
from coachlink.regimens.intensity import get_overall_intensity
from coachlink.regimens.types import Regimen
from coachlink.storage.base import KeyValueStore
from coachlink.storage.blobs import purge_prefixes, read_json, write_json
from coachlink.users.current import UserRole, get_current_user

REGIMENS_KEY_PREFIX = "regimens_"


def _regimens_key(role: UserRole) -> str:
    return f"{REGIMENS_KEY_PREFIX}{role}"


def _extract_regimen_list(payload: Any) -> list[Any]:
    """Pull the regimen array out of the shapes the API is known to return.

    Accepted: a bare list, {"data": [...]}, {"data": {"regimens": [...]}}.
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, list):
            return data
        if isinstance(data, dict) and isinstance(data.get("regimens"), list):
            return data["regimens"]
    logger.bind(payload_type=type(payload).__name__).warning("Unexpected regimen list payload shape")
    return []


def _extract_regimen(payload: Any) -> Any:
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, dict) and isinstance(data.get("regimen"), dict):
            return data["regimen"]
        if isinstance(data, dict) and ("id" in data or "_id" in data):
            return data
        if "id" in payload or "_id" in payload:
            return payload
    return None


def _parse_regimens(raw_items: list[Any]) -> list[Regimen]:
    regimens: list[Regimen] = []
    for raw in raw_items:
        try:
            regimens.append(Regimen.model_validate(raw))
        except ValidationError as e:
            logger.bind(error=str(e)).warning("Skipping invalid regimen record")
    return regimens


class RegimenService:
    """Regimen CRUD with a per-role local cache."""

    def __init__(self, store: KeyValueStore, api: ApiClient) -> None:
        self._store = store
        self._api = api

    def _resolve_role(self, role: UserRole | None) -> UserRole:
        return role or get_current_user(self._store).role

    def get_cached_regimens(self, role: UserRole | None = None) -> list[Regimen]:
        """Regimens from the last successful fetch, without touching the network."""
        cached = read_json(self._store, _regimens_key(self._resolve_role(role)), default=[])
        if not isinstance(cached, list):
            return []
        return _parse_regimens(cached)

    async def list_regimens(self, role: UserRole | None = None) -> list[Regimen]:
        """Fetch regimens for a role, refreshing the cache.

        Falls back to the cached list when the API call fails.
        """
        resolved_role = self._resolve_role(role)
        try:
            payload = await self._api.get(f"/regimens/{resolved_role}")
        except NetworkError as e:
            logger.bind(role=resolved_role, error=str(e)).warning("Failed to fetch regimens, serving cached copy")
            return self.get_cached_regimens(resolved_role)

        raw_items = _extract_regimen_list(payload)
        regimens = _parse_regimens(raw_items)
        if raw_items and not regimens:
            logger.bind(role=resolved_role, received=len(raw_items)).warning("No valid regimens in response, serving cached copy")
            return self.get_cached_regimens(resolved_role)

        write_json(
            self._store,
            _regimens_key(resolved_role),
            [regimen.model_dump(mode="json", by_alias=True) for regimen in regimens],
        )
        logger.bind(role=resolved_role, count=len(regimens)).debug("Fetched regimens")
        return regimens

    async def get_regimen(self, regimen_id: str) -> Regimen | None:
        """Fetch a single regimen. Returns None when unavailable or invalid."""
        try:
            payload = await self._api.get(f"/regimens/{regimen_id}")
        except NetworkError as e:
            logger.bind(regimen_id=regimen_id, status_code=e.status_code).warning("Failed to fetch regimen")
            return None

        raw = _extract_regimen(payload)
        if raw is None:
            logger.bind(regimen_id=regimen_id).warning("Unexpected regimen payload shape")
            return None
        try:
            regimen = Regimen.model_validate(raw)
        except ValidationError as e:
            logger.bind(regimen_id=regimen_id, error=str(e)).warning("Received invalid regimen data")
            return None
        if not regimen.id:
            logger.bind(regimen_id=regimen_id).warning("Regimen record has no identifier")
            return None
        return regimen

    async def get_overall_intensity(self, regimen_id: str) -> int:
        """Overall intensity of a regimen, preferring the cached copy."""
        for regimen in self.get_cached_regimens():
            if regimen.id == regimen_id:
                return get_overall_intensity(regimen.days)
        regimen = await self.get_regimen(regimen_id)
        return get_overall_intensity(regimen.days if regimen else None)

    async def create_regimen(self, regimen: Regimen) -> OperationResult[Regimen]:
        return await self._save("POST", "/regimens", regimen)

    async def update_regimen(self, regimen: Regimen) -> OperationResult[Regimen]:
        return await self._save("PATCH", f"/regimens/{regimen.id}", regimen)

    async def _save(self, method: str, path: str, regimen: Regimen) -> OperationResult[Regimen]:
        body = regimen.model_dump(mode="json", by_alias=True, exclude={"id"} if method == "POST" else None)
        try:
            payload = await self._api.request(method, path, json=body)
        except NetworkError as e:
            logger.bind(path=path, status_code=e.status_code).warning("Failed to save regimen")
            return OperationResult.failure(e)

        raw = _extract_regimen(payload)
        if raw is None:
            return OperationResult.success(regimen)
        try:
            return OperationResult.success(Regimen.model_validate(raw))
        except ValidationError as e:
            logger.bind(path=path, error=str(e)).warning("Saved regimen came back invalid")
            return OperationResult.success(regimen)

    async def delete_regimen(self, regimen_id: str) -> OperationResult[None]:
        """Delete a regimen and drop it from the cached list."""
        try:
            await self._api.delete(f"/regimens/{regimen_id}")
        except NetworkError as e:
            logger.bind(regimen_id=regimen_id, status_code=e.status_code).warning("Failed to delete regimen")
            return OperationResult.failure(e)

        role = self._resolve_role(None)
        remaining = [r for r in self.get_cached_regimens(role) if r.id != regimen_id]
        write_json(self._store, _regimens_key(role), [r.model_dump(mode="json", by_alias=True) for r in remaining])
        return OperationResult.success()

    def reset_all(self) -> OperationResult[int]:
        """Purge every cached regimen list. Never raises."""
        return purge_prefixes(self._store, (REGIMENS_KEY_PREFIX,))
