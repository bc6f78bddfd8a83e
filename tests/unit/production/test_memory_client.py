"""Tests for the in-memory production client."""

from __future__ import annotations

import pytest

from stageforge.core.errors import (
    ContainerExistsError,
    ContainerNotFoundError,
    NotConnectedError,
    ProductionConnectionError,
    ProductionRequestError,
)
from stageforge.core.events import EventType, RecordingEventSink
from stageforge.core.production import (
    BindingTransform,
    BoundsMode,
    InMemoryProductionClient,
    SourceKind,
)


class TestConnection:
    """Tests for session lifecycle."""

    async def test_connect_emits_event(
        self, client: InMemoryProductionClient, events: RecordingEventSink
    ):
        await client.connect("ws://obs.local:4455")

        assert client.connected
        assert client.address == "ws://obs.local:4455"
        assert events.types() == [EventType.CONNECTED]

    async def test_unreachable_raises(self):
        client = InMemoryProductionClient(reachable=False)

        with pytest.raises(ProductionConnectionError, match="unreachable"):
            await client.connect("ws://obs.local:4455")
        assert not client.connected

    async def test_wrong_password_raises(self):
        client = InMemoryProductionClient(expected_password="secret")

        with pytest.raises(ProductionConnectionError, match="authentication"):
            await client.connect("ws://obs.local:4455", "guess")

    async def test_disconnect_is_idempotent(
        self, connected_client: InMemoryProductionClient, events: RecordingEventSink
    ):
        await connected_client.disconnect()
        await connected_client.disconnect()

        assert events.types() == [EventType.CONNECTED, EventType.DISCONNECTED]

    async def test_requests_require_session(self, client: InMemoryProductionClient):
        with pytest.raises(NotConnectedError):
            await client.create_container("SF_deck_Act1")


class TestContainers:
    """Tests for container creation, removal and switching."""

    async def test_create_duplicate_raises(self, connected_client: InMemoryProductionClient):
        await connected_client.create_container("A")

        with pytest.raises(ContainerExistsError):
            await connected_client.create_container("A")

    async def test_remove_missing_raises(self, connected_client: InMemoryProductionClient):
        with pytest.raises(ContainerNotFoundError):
            await connected_client.remove_container("ghost")

    async def test_removing_active_container_clears_output(
        self, connected_client: InMemoryProductionClient
    ):
        await connected_client.create_container("A")
        await connected_client.switch_active_container("A")
        await connected_client.remove_container("A")

        assert await connected_client.query_active_container() == ""

    async def test_switch_emits_only_on_change(
        self, connected_client: InMemoryProductionClient, events: RecordingEventSink
    ):
        await connected_client.create_container("A")
        await connected_client.switch_active_container("A")
        await connected_client.switch_active_container("A")

        changes = events.of_type(EventType.ACTIVE_CONTAINER_CHANGED)
        assert [e.payload for e in changes] == ["A"]
        assert await connected_client.query_active_container() == "A"

    async def test_switch_to_missing_raises(self, connected_client: InMemoryProductionClient):
        with pytest.raises(ContainerNotFoundError):
            await connected_client.switch_active_container("ghost")


class TestBindings:
    """Tests for source bindings and transforms."""

    async def test_default_source_names(self, connected_client: InMemoryProductionClient):
        await connected_client.create_container("A")
        await connected_client.bind_image_source("A", "/img/1.png")
        await connected_client.bind_window_capture("A")

        names = [b.source_name for b in await connected_client.list_source_bindings("A")]
        assert names == ["A_Image", "A_WindowCapture"]

    async def test_media_source_settings(self, connected_client: InMemoryProductionClient):
        await connected_client.create_container("V")
        await connected_client.bind_media_source("V", "/v/intro.mp4")

        (binding,) = await connected_client.list_source_bindings("V")
        assert binding.kind == SourceKind.MEDIA
        assert binding.settings["local_file"] == "/v/intro.mp4"
        assert binding.settings["looping"] is False
        assert binding.settings["restart_on_activate"] is True

    async def test_duplicate_source_name_rejected(
        self, connected_client: InMemoryProductionClient
    ):
        await connected_client.create_container("A")
        await connected_client.bind_color_source("A", 0xFF000000, source_name="Black")

        with pytest.raises(ProductionRequestError, match="already exists"):
            await connected_client.bind_color_source("A", 0xFF000000, source_name="Black")

    async def test_transform_round_trip(self, connected_client: InMemoryProductionClient):
        await connected_client.create_container("A")
        binding_id = await connected_client.bind_image_source("A", "/img/1.png")
        transform = BindingTransform(bounds_mode=BoundsMode.STRETCH, width=1280, height=720)

        await connected_client.set_binding_transform("A", binding_id, transform)

        (binding,) = await connected_client.list_source_bindings("A")
        assert binding.transform == transform

    async def test_transform_unknown_binding(self, connected_client: InMemoryProductionClient):
        await connected_client.create_container("A")

        with pytest.raises(ProductionRequestError, match="No binding 99"):
            await connected_client.set_binding_transform("A", 99, BindingTransform())


class TestFailureInjection:
    """Tests for the one-shot failure hook."""

    async def test_failure_fires_once(self, connected_client: InMemoryProductionClient):
        connected_client.inject_failure("create_container")

        with pytest.raises(ProductionRequestError):
            await connected_client.create_container("A")
        await connected_client.create_container("A")

        assert connected_client.container_names() == ["A"]

    async def test_failure_scoped_to_container(self, connected_client: InMemoryProductionClient):
        connected_client.inject_failure(
            "create_container", ContainerExistsError("B"), container="B"
        )

        await connected_client.create_container("A")
        with pytest.raises(ContainerExistsError):
            await connected_client.create_container("B")

    async def test_calls_are_logged(self, connected_client: InMemoryProductionClient):
        await connected_client.create_container("A")

        assert connected_client.calls[-1] == ("create_container", ("A",))
