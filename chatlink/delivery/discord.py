"""Discord REST delivery client — webhooks as delivery endpoints.

Implements :class:`~chatlink.delivery.EndpointResolver` and
:class:`~chatlink.delivery.EndpointProvisioner` on top of
``httpx.AsyncClient``.  Every request carries the bounded timeout from
configuration so an unresponsive endpoint cannot hold a relay forever.

Rate limiting is left to the platform: a 429 surfaces as a
``DeliveryError`` like any other rejected call.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from chatlink.config import ChatlinkConfig
from chatlink.delivery import DeliveryError
from chatlink.models.messages import DeliveryPayload

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://discord.com/api/v10"
USER_AGENT = "DiscordBot (chatlink, 0.1.0)"

# Statuses that mean a cached webhook token is no longer usable.
_STALE_HANDLE_STATUSES = frozenset({401, 403, 404})


def _json(response: httpx.Response, *, action: str, endpoint_id: str = "") -> Any:
    """Decode a 2xx body, mapping a malformed one to ``DeliveryError``."""
    try:
        return response.json()
    except ValueError as exc:
        raise DeliveryError(
            f"{action} returned an unreadable body (HTTP {response.status_code})",
            endpoint_id=endpoint_id,
            status_code=response.status_code,
        ) from exc


def _field(data: Any, key: str, *, action: str, endpoint_id: str = "") -> Any:
    if not isinstance(data, dict) or data.get(key) is None:
        raise DeliveryError(
            f"{action} returned a body without '{key}'",
            endpoint_id=endpoint_id,
        )
    return data[key]


class DiscordWebhook:
    """A resolved Discord webhook, ready to execute.

    Parameters
    ----------
    client:
        The owning ``DiscordRestClient`` (shares its HTTP connection pool).
    webhook_id:
        The webhook's snowflake id.
    token:
        The webhook's secret token.  Never logged.
    channel_id:
        The channel the webhook posts into.
    """

    def __init__(
        self,
        client: DiscordRestClient,
        webhook_id: str,
        token: str,
        channel_id: str = "",
    ) -> None:
        self._client = client
        self._webhook_id = webhook_id
        self._token = token
        self.channel_id = channel_id

    @property
    def endpoint_id(self) -> str:
        return self._webhook_id

    async def execute(self, payload: DeliveryPayload) -> None:
        """Post *payload* through the webhook.

        Mentions in relayed text are never resolved, so a relayed
        ``@everyone`` stays plain text in the sibling channels.
        """
        body: dict[str, Any] = {
            "content": payload.content,
            "username": payload.username,
            "allowed_mentions": {"parse": []},
        }
        if payload.avatar_url:
            body["avatar_url"] = payload.avatar_url

        try:
            await self._client.request(
                "POST",
                f"/webhooks/{self._webhook_id}/{self._token}",
                action=f"execute webhook {self._webhook_id}",
                endpoint_id=self._webhook_id,
                authenticated=False,
                json=body,
            )
        except DeliveryError as exc:
            if exc.status_code in _STALE_HANDLE_STATUSES:
                self._client.forget(self._webhook_id)
            raise
        logger.debug(
            "Executed webhook %s as %s (%d chars).",
            self._webhook_id,
            payload.username,
            len(payload.content),
        )


class DiscordRestClient:
    """Minimal Discord REST client for webhook-based relaying.

    Parameters
    ----------
    bot_token:
        Bot token used for authenticated calls (webhook lookup, creation,
        command registration).  Webhook execution uses the webhook token.
    api_base_url:
        REST API root, e.g. ``https://discord.com/api/v10``.
    timeout_seconds:
        Per-request timeout applied to every call.
    http_client:
        Optional pre-built ``httpx.AsyncClient`` (tests inject one backed
        by ``httpx.MockTransport``).  The client is closed by ``aclose``
        only when it was created here.
    cache_handles:
        Keep resolved webhooks in memory so each relay does not re-fetch
        them.  Handles are evicted when the platform reports them gone.
    """

    def __init__(
        self,
        bot_token: str,
        *,
        api_base_url: str = DEFAULT_API_BASE_URL,
        timeout_seconds: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
        cache_handles: bool = True,
    ) -> None:
        self._bot_token = bot_token
        self._api_base_url = api_base_url.rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_seconds),
            headers={"User-Agent": USER_AGENT},
        )
        self._cache_handles = cache_handles
        self._handles: dict[str, DiscordWebhook] = {}

    @classmethod
    def from_config(cls, config: ChatlinkConfig) -> DiscordRestClient:
        return cls(
            config.bot_token,
            api_base_url=config.api_base_url,
            timeout_seconds=config.delivery_timeout_seconds,
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        *,
        action: str,
        endpoint_id: str = "",
        authenticated: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send one REST call, mapping every failure to ``DeliveryError``.

        *action* is the human-readable label used in errors and logs;
        *path* may contain secrets and is never included in messages.
        """
        headers: dict[str, str] = {}
        if authenticated and self._bot_token:
            headers["Authorization"] = f"Bot {self._bot_token}"

        try:
            response = await self._http.request(
                method, f"{self._api_base_url}{path}", headers=headers, **kwargs
            )
        except httpx.HTTPError as exc:
            raise DeliveryError(
                f"{action} failed: {type(exc).__name__}: {exc}",
                endpoint_id=endpoint_id,
            ) from exc

        if response.is_error:
            raise DeliveryError(
                f"{action} returned HTTP {response.status_code}",
                endpoint_id=endpoint_id,
                status_code=response.status_code,
            )
        return response

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> DiscordRestClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # EndpointResolver
    # ------------------------------------------------------------------

    async def resolve(self, endpoint_id: str) -> DiscordWebhook:
        """Fetch a webhook (with its token) by id."""
        cached = self._handles.get(endpoint_id)
        if cached is not None:
            return cached

        action = f"fetch webhook {endpoint_id}"
        response = await self.request(
            "GET",
            f"/webhooks/{endpoint_id}",
            action=action,
            endpoint_id=endpoint_id,
        )
        data = _json(response, action=action, endpoint_id=endpoint_id)
        if not isinstance(data, dict):
            raise DeliveryError(
                f"{action} returned an unexpected body", endpoint_id=endpoint_id
            )
        token = data.get("token")
        if not token:
            raise DeliveryError(
                f"Webhook {endpoint_id} has no token; it was not created by this bot.",
                endpoint_id=endpoint_id,
            )

        handle = DiscordWebhook(
            self,
            str(data.get("id", endpoint_id)),
            token,
            channel_id=str(data.get("channel_id") or ""),
        )
        if self._cache_handles:
            self._handles[endpoint_id] = handle
        return handle

    def forget(self, endpoint_id: str) -> None:
        """Drop a cached handle so the next relay re-fetches it."""
        if self._handles.pop(endpoint_id, None) is not None:
            logger.info("Evicted cached webhook %s.", endpoint_id)

    # ------------------------------------------------------------------
    # EndpointProvisioner
    # ------------------------------------------------------------------

    async def create_endpoint(self, channel_id: str, name: str) -> str:
        """Create a webhook in *channel_id* and return its id."""
        action = f"create webhook in channel {channel_id}"
        response = await self.request(
            "POST",
            f"/channels/{channel_id}/webhooks",
            action=action,
            json={"name": name},
        )
        data = _json(response, action=action)
        webhook_id = str(_field(data, "id", action=action))
        if self._cache_handles and data.get("token"):
            self._handles[webhook_id] = DiscordWebhook(
                self, webhook_id, data["token"], channel_id=channel_id
            )
        logger.info("Created webhook %s in channel %s.", webhook_id, channel_id)
        return webhook_id

    async def delete_endpoint(self, endpoint_id: str) -> None:
        await self.request(
            "DELETE",
            f"/webhooks/{endpoint_id}",
            action=f"delete webhook {endpoint_id}",
            endpoint_id=endpoint_id,
        )
        self.forget(endpoint_id)
        logger.info("Deleted webhook %s.", endpoint_id)

    # ------------------------------------------------------------------
    # Application commands
    # ------------------------------------------------------------------

    async def register_commands(
        self,
        application_id: str,
        definitions: list[dict[str, Any]],
    ) -> list[dict[str, Any]]:
        """Overwrite the application's global slash commands."""
        action = f"register commands for application {application_id}"
        response = await self.request(
            "PUT",
            f"/applications/{application_id}/commands",
            action=action,
            json=definitions,
        )
        registered = _json(response, action=action)
        if not isinstance(registered, list):
            raise DeliveryError(f"{action} returned an unexpected body")
        logger.info(
            "Registered %d global command(s) for application %s.",
            len(registered),
            application_id,
        )
        return registered
