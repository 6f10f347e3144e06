"""Shared test fixtures for chatlink."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from chatlink.commands import CommandSurface
from chatlink.core.registry import GroupRegistry
from chatlink.core.relay import RelayEngine
from chatlink.delivery.memory import InMemoryDeliveryClient
from chatlink.models.commands import CommandInvocation
from chatlink.models.messages import InboundMessage


@pytest.fixture
def registry() -> GroupRegistry:
    """Provide an empty GroupRegistry."""
    return GroupRegistry()


@pytest.fixture
def delivery_client() -> InMemoryDeliveryClient:
    """Provide an in-memory resolver/provisioner with no latency."""
    return InMemoryDeliveryClient()


@pytest.fixture
def engine(registry: GroupRegistry, delivery_client: InMemoryDeliveryClient) -> RelayEngine:
    """Provide a RelayEngine wired to the test registry and client."""
    return RelayEngine(registry, delivery_client)


@pytest.fixture
def surface(
    registry: GroupRegistry, delivery_client: InMemoryDeliveryClient
) -> CommandSurface:
    """Provide a CommandSurface wired to the test registry and client."""
    return CommandSurface(registry, delivery_client)


@pytest.fixture
def lounge(registry: GroupRegistry) -> GroupRegistry:
    """Registry holding group ``lounge`` with channels A, B and C linked."""
    registry.create_group("lounge", "Lounge", "chat", "user1")
    for channel in ("A", "B", "C"):
        registry.link_channel("lounge", channel, f"e{channel}")
    return registry


# ---------------------------------------------------------------------------
# Factories — shared across test modules
# ---------------------------------------------------------------------------


@pytest.fixture
def make_message() -> Callable[..., InboundMessage]:
    """Factory fixture: build an InboundMessage with sensible defaults."""

    def _factory(
        channel_id: str = "A",
        content: str = "hi",
        **overrides: Any,
    ) -> InboundMessage:
        defaults: dict[str, Any] = {
            "channel_id": channel_id,
            "author_display_name": "alice",
            "author_avatar_url": "https://cdn.example.com/alice.png",
            "content": content,
        }
        defaults.update(overrides)
        return InboundMessage(**defaults)

    return _factory


@pytest.fixture
def make_invocation() -> Callable[..., CommandInvocation]:
    """Factory fixture: build a CommandInvocation from a server member."""

    def _factory(name: str, **options: str) -> CommandInvocation:
        return CommandInvocation(
            name=name,
            user_id="user1",
            guild_id="guild1",
            can_manage_channels=True,
            options=options,
        )

    return _factory
