"""Service wiring.

Builds one store, one API client and the services sharing them, so a host
application holds a single object per signed-in user.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from coachlink.api.client import ApiClient
from coachlink.config.settings import Settings, settings as default_settings
from coachlink.core.logger import setup_logger
from coachlink.core.result import OperationResult
from coachlink.messages.service import MessagesService
from coachlink.notifications.service import NotificationService
from coachlink.regimens.service import RegimenService
from coachlink.storage.base import TOKEN_KEY, USER_KEY, KeyValueStore
from coachlink.storage.blobs import remove_key
from coachlink.storage.factory import build_store


@dataclass
class ClientServices:
    store: KeyValueStore
    api: ApiClient
    messages: MessagesService
    notifications: NotificationService
    regimens: RegimenService

    def reset_all(self) -> dict[str, OperationResult[int]]:
        """Purge every cached record, e.g. on logout or account switch."""
        results = {
            "messages": self.messages.reset_all(),
            "notifications": self.notifications.reset_all(),
            "regimens": self.regimens.reset_all(),
        }
        logger.bind(removed={name: r.value for name, r in results.items() if r.ok}).info("Local caches reset")
        return results

    def sign_out(self) -> dict[str, OperationResult[int]]:
        """Reset all caches and forget the cached user and token."""
        results = self.reset_all()
        remove_key(self.store, USER_KEY)
        remove_key(self.store, TOKEN_KEY)
        return results

    async def aclose(self) -> None:
        await self.api.aclose()


def build_services(
    store: KeyValueStore | None = None,
    api: ApiClient | None = None,
    config: Settings | None = None,
) -> ClientServices:
    """Configure logging and wire services around a shared store and API client."""
    config = config or default_settings
    setup_logger(level=config.log_level, log_file=config.log_file)
    store = store if store is not None else build_store(config)
    api = api or ApiClient(
        store,
        base_url=config.api_base_url,
        timeout=config.api_timeout_seconds,
        max_retries=config.api_max_retries,
        retry_delay=config.api_retry_delay_seconds,
    )
    return ClientServices(
        store=store,
        api=api,
        messages=MessagesService(store, api),
        notifications=NotificationService(store, api),
        regimens=RegimenService(store, api),
    )
