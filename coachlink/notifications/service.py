"""Notification service with locally latched read state.

The server is the source of truth for notifications. The local store keeps
two blobs:

- notification_read_status: {notification_id: true} for notifications this
  client has marked read and the server does not yet report as read
- notification_pending_read: ids marked read locally whose server
  acknowledgement has not been received yet

Core invariant: a notification is read if the server OR the local map says
so. Merging never turns a read notification back to unread.

Every operation here is safe to retry and never raises. Reads degrade to
empty values; writes return OperationResult / BatchResult.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from loguru import logger
from pydantic import ValidationError

from coachlink.api.client import ApiClient
from coachlink.core.errors import NetworkError
from coachlink.core.result import BatchResult, OperationResult
from coachlink.notifications.schemas import Notification, NotificationPage
from coachlink.storage.base import (
    NOTIFICATION_PENDING_READ_KEY,
    NOTIFICATION_READ_STATUS_KEY,
    KeyValueStore,
)
from coachlink.storage.blobs import purge_prefixes, read_json, write_json

NOTIFICATION_KEY_PREFIXES = ("notification_",)


def _page_field(payload: dict[str, Any], key: str, default: int) -> int:
    value = payload.get(key)
    if not value:
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        logger.bind(field=key, value=repr(value)).warning("Ignoring malformed pagination field")
        return default


def _parse_page(payload: Any, page: int) -> NotificationPage:
    """Parse {"data": {"notifications": [...]}, "totalPages", "currentPage", "total"}."""
    if not isinstance(payload, dict):
        logger.bind(payload_type=type(payload).__name__).warning("Unexpected notifications payload shape")
        return NotificationPage.empty(page)

    data = payload.get("data")
    raw_items = data.get("notifications") if isinstance(data, dict) else None
    if not isinstance(raw_items, list):
        raw_items = []

    notifications: list[Notification] = []
    for raw in raw_items:
        try:
            notifications.append(Notification.model_validate(raw))
        except ValidationError as e:
            logger.bind(error=str(e)).warning("Skipping invalid notification record")

    return NotificationPage(
        notifications=notifications,
        total_pages=_page_field(payload, "totalPages", 0),
        current_page=_page_field(payload, "currentPage", page),
        total=_page_field(payload, "total", len(notifications)),
    )


class NotificationService:
    """Notifications for the current user."""

    def __init__(self, store: KeyValueStore, api: ApiClient) -> None:
        self._store = store
        self._api = api

    def get_read_status(self) -> dict[str, bool]:
        """Local read map. Corrupt or unreadable data reads as empty."""
        status = read_json(self._store, NOTIFICATION_READ_STATUS_KEY, default={})
        if not isinstance(status, dict):
            return {}
        return {str(k): v is True for k, v in status.items()}

    def get_pending_ids(self) -> list[str]:
        pending = read_json(self._store, NOTIFICATION_PENDING_READ_KEY, default=[])
        if not isinstance(pending, list):
            return []
        return [str(item) for item in pending]

    def apply_read_status(self, notifications: Iterable[Notification]) -> list[Notification]:
        """Merge the local read map into server records (OR latch).

        Ids the server already reports read are pruned from the local map and
        the pending list.
        """
        status = self.get_read_status()
        merged: list[Notification] = []
        server_read: set[str] = set()
        for n in notifications:
            if n.read:
                server_read.add(n.id)
                merged.append(n)
            elif status.get(n.id):
                merged.append(n.model_copy(update={"read": True}))
            else:
                merged.append(n)

        self._forget(server_read)
        return merged

    def _forget(self, notification_ids: set[str]) -> None:
        status = self.get_read_status()
        if notification_ids & status.keys():
            write_json(
                self._store,
                NOTIFICATION_READ_STATUS_KEY,
                {k: v for k, v in status.items() if k not in notification_ids},
            )

        pending = self.get_pending_ids()
        if notification_ids & set(pending):
            write_json(
                self._store,
                NOTIFICATION_PENDING_READ_KEY,
                [item for item in pending if item not in notification_ids],
            )

    async def get_notifications(self, page: int = 1, limit: int = 10) -> NotificationPage:
        """Fetch one page of notifications with local read state applied.

        Returns an empty page when the API is unavailable.
        """
        try:
            payload = await self._api.get("/notifications", params={"page": page, "limit": limit})
        except NetworkError as e:
            logger.bind(page=page, status_code=e.status_code).warning("Failed to fetch notifications")
            return NotificationPage.empty(page)

        result = _parse_page(payload, page)
        return result.model_copy(update={"notifications": self.apply_read_status(result.notifications)})

    def _latch_read(self, notification_id: str) -> None:
        # No await between reading and writing a key
        status = self.get_read_status()
        if not status.get(notification_id):
            status[notification_id] = True
            write_json(self._store, NOTIFICATION_READ_STATUS_KEY, status)

        pending = self.get_pending_ids()
        if notification_id not in pending:
            pending.append(notification_id)
            write_json(self._store, NOTIFICATION_PENDING_READ_KEY, pending)

    def _acknowledge(self, notification_id: str) -> None:
        pending = self.get_pending_ids()
        if notification_id in pending:
            write_json(
                self._store,
                NOTIFICATION_PENDING_READ_KEY,
                [item for item in pending if item != notification_id],
            )

    async def _push_read(self, notification_id: str) -> OperationResult[None]:
        try:
            await self._api.patch(f"/notifications/{notification_id}/mark-read")
        except NetworkError as e:
            logger.bind(notification_id=notification_id, status_code=e.status_code).warning(
                "Failed to mark notification as read on server"
            )
            return OperationResult.failure(e)
        self._acknowledge(notification_id)
        return OperationResult.success()

    async def mark_as_read(self, notification_id: str) -> OperationResult[None]:
        """Mark one notification read, locally first and then on the server.

        The local latch survives a server failure; sync_read_statuses retries
        the acknowledgement later.
        """
        self._latch_read(notification_id)
        return await self._push_read(notification_id)

    async def mark_all_as_read(self, notification_ids: Iterable[str]) -> BatchResult:
        """Mark every id read. Each id succeeds or fails on its own."""
        ids = list(dict.fromkeys(notification_ids))
        for notification_id in ids:
            self._latch_read(notification_id)

        results: dict[str, OperationResult[None]] = {}
        for notification_id in ids:
            results[notification_id] = await self._push_read(notification_id)

        batch = BatchResult(results=results)
        if not batch.ok:
            logger.bind(failed=batch.failed, succeeded=len(batch.succeeded)).warning("Some notifications were not marked read")
        return batch

    async def sync_read_statuses(self) -> BatchResult:
        """Push every locally read but unacknowledged notification to the server."""
        pending = self.get_pending_ids()
        if not pending:
            logger.debug("No pending notification read statuses to sync")
            return BatchResult()

        results: dict[str, OperationResult[None]] = {}
        for notification_id in pending:
            results[notification_id] = await self._push_read(notification_id)

        batch = BatchResult(results=results)
        logger.bind(synced=len(batch.succeeded), failed=len(batch.failed)).info("Synced notification read statuses")
        return batch

    def reset_all(self) -> OperationResult[int]:
        """Remove all notification data from the local store. Never raises."""
        return purge_prefixes(self._store, NOTIFICATION_KEY_PREFIXES)
