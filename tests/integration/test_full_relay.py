"""Integration test: commands, registry, relay engine and Discord client together.

Walks the lounge scenario end to end: create a group, link two channels,
relay a message, reject a link into a missing group.  The second half runs
the same flow against the Discord REST client over ``httpx.MockTransport``.
"""

from __future__ import annotations

import asyncio
import itertools
import json

import httpx
import pytest

from chatlink.commands import CommandSurface
from chatlink.core.registry import GroupNotFoundError, GroupRegistry
from chatlink.core.relay import RelayEngine
from chatlink.delivery.discord import DiscordRestClient
from chatlink.delivery.memory import InMemoryDeliveryClient
from chatlink.models.commands import CommandInvocation
from chatlink.models.messages import InboundMessage

AVATAR = "https://cdn.example.com/bob.png"


def _invoke(name: str, **options: str) -> CommandInvocation:
    return CommandInvocation(
        name=name,
        user_id="user1",
        guild_id="guild1",
        can_manage_channels=True,
        options=options,
    )


class TestLoungeScenario:
    def test_registry_and_engine(self):
        registry = GroupRegistry()
        client = InMemoryDeliveryClient()
        engine = RelayEngine(registry, client)

        registry.create_group("lounge", "Lounge", "chat", "user1")
        registry.link_channel("lounge", "chan100", "hook100")
        registry.link_channel("lounge", "chan200", "hook200")

        report = asyncio.run(
            engine.relay(
                InboundMessage(
                    channel_id="chan100",
                    author_display_name="bob",
                    author_avatar_url=AVATAR,
                    content="hello world",
                )
            )
        )

        assert len(client.deliveries) == 1
        endpoint_id, payload = client.deliveries[0]
        assert endpoint_id == "hook200"
        assert payload.content == "hello world"
        assert payload.username == "bob"
        assert payload.avatar_url == AVATAR
        assert len(report.delivered) == 1

        with pytest.raises(GroupNotFoundError):
            registry.link_channel("missing", "chan300", "hook300")
        assert len(registry.list_groups()) == 1

    def test_through_command_surface(self):
        registry = GroupRegistry()
        client = InMemoryDeliveryClient()
        surface = CommandSurface(registry, client)
        engine = RelayEngine(registry, client)

        async def scenario() -> list[str]:
            replies = [
                await surface.handle(
                    _invoke("new", link_id="lounge", title="Lounge", description="chat")
                ),
                await surface.handle(_invoke("link", link_id="lounge", channel="chan100")),
                await surface.handle(_invoke("link", link_id="lounge", channel="chan200")),
                await surface.handle(_invoke("link", link_id="missing", channel="chan300")),
            ]
            await engine.relay(
                InboundMessage(
                    channel_id="chan100",
                    author_display_name="bob",
                    author_avatar_url=AVATAR,
                    content="hello world",
                )
            )
            listing = await surface.handle(_invoke("list"))
            assert len(listing.embed_fields) == 1
            assert "2 channels linked" in listing.embed_fields[0].value
            return [r.content for r in replies]

        contents = asyncio.run(scenario())

        assert contents == [
            "Link `lounge` successfully created",
            "Successfully linked channel <#chan100> to `lounge`",
            "Successfully linked channel <#chan200> to `lounge`",
            "Link missing doesn't exist!",
        ]
        assert [eid for eid, _ in client.deliveries] == ["hook2"]


class _FakeDiscordApi:
    """Tiny in-process stand-in for the webhook REST endpoints."""

    def __init__(self) -> None:
        self._ids = itertools.count(900)
        self.webhooks: dict[str, tuple[str, str]] = {}  # id -> (token, channel)
        self.posts: list[tuple[str, dict]] = []
        self.broken: set[str] = set()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        parts = request.url.path.split("/")[3:]  # drop "", "api", "v10"
        if request.method == "POST" and parts[0] == "channels":
            webhook_id = str(next(self._ids))
            token = f"tok{webhook_id}"
            self.webhooks[webhook_id] = (token, parts[1])
            return httpx.Response(200, json={"id": webhook_id, "token": token})
        if request.method == "GET" and parts[0] == "webhooks":
            webhook_id = parts[1]
            if webhook_id not in self.webhooks:
                return httpx.Response(404)
            token, channel = self.webhooks[webhook_id]
            return httpx.Response(
                200, json={"id": webhook_id, "token": token, "channel_id": channel}
            )
        if request.method == "POST" and parts[0] == "webhooks":
            webhook_id, token = parts[1], parts[2]
            if webhook_id in self.broken:
                return httpx.Response(429, json={"retry_after": 1.0})
            if self.webhooks.get(webhook_id, ("",))[0] != token:
                return httpx.Response(401)
            _, channel = self.webhooks[webhook_id]
            self.posts.append((channel, json.loads(request.content)))
            return httpx.Response(204)
        return httpx.Response(405)


class TestDiscordBackedRelay:
    def test_fan_out_over_http_with_one_rate_limited_channel(self):
        api = _FakeDiscordApi()
        http = httpx.AsyncClient(transport=httpx.MockTransport(api))
        client = DiscordRestClient(
            "bot-token", api_base_url="https://discord.test/api/v10", http_client=http
        )
        registry = GroupRegistry()
        surface = CommandSurface(registry, client)
        engine = RelayEngine(registry, client)

        async def scenario():
            await surface.handle(
                _invoke("new", link_id="lounge", title="Lounge", description="chat")
            )
            for channel in ("c1", "c2", "c3"):
                await surface.handle(_invoke("link", link_id="lounge", channel=channel))
            group = registry.get_group("lounge")
            assert group is not None
            api.broken.add(group.members[1].endpoint_id)
            report = await engine.relay(
                InboundMessage(
                    channel_id="c1",
                    author_display_name="bob",
                    author_avatar_url=AVATAR,
                    content="hello world",
                )
            )
            await http.aclose()
            return report

        report = asyncio.run(scenario())

        assert api.posts == [
            (
                "c3",
                {
                    "content": "hello world",
                    "username": "bob",
                    "avatar_url": AVATAR,
                    "allowed_mentions": {"parse": []},
                },
            )
        ]
        assert [o.channel_id for o in report.failed] == ["c2"]
        assert "429" in report.failed[0].error
