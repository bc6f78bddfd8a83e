"""Shared pytest fixtures for stageforge tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from stageforge.core.config.models import AppConfig
from stageforge.core.events import RecordingEventSink
from stageforge.core.production import InMemoryProductionClient
from stageforge.core.programs import Act, PlaybackMode, Program
from stageforge.core.topology import CaptureTopologyBuilder

# ============================================================================
# Program Fixtures
# ============================================================================


def make_program(
    program_id: str = "keynote",
    *,
    mode: PlaybackMode = PlaybackMode.SCENE_GRAPH,
    act_count: int = 3,
    video_acts: tuple[int, ...] = (),
) -> Program:
    """Build a program whose acts point at slide images under /decks."""
    acts = [
        Act(
            index=i,
            name=f"Slide {i + 1}",
            image_path=f"/decks/{program_id}/slide_{i + 1}.png",
            video_path=f"/decks/{program_id}/video_{i + 1}.mp4" if i in video_acts else None,
            has_video=i in video_acts,
        )
        for i in range(act_count)
    ]
    return Program(
        id=program_id,
        name=program_id.title(),
        file_path=f"/decks/{program_id}.pptx",
        mode=mode,
        slide_count=act_count,
        acts=acts,
    )


def program_metadata(program: Program) -> dict[str, Any]:
    """Serialize a program the way the import pipeline writes metadata.json."""
    return program.model_dump(mode="json", by_alias=True)


def write_program(data_dir: Path, metadata: dict[str, Any]) -> Path:
    """Write metadata.json for a program under data_dir/programs/<id>."""
    program_dir = data_dir / "programs" / metadata["id"]
    program_dir.mkdir(parents=True, exist_ok=True)
    path = program_dir / "metadata.json"
    path.write_text(json.dumps(metadata), encoding="utf-8")
    return path


@pytest.fixture
def scene_program() -> Program:
    """Three-act scene-graph program."""
    return make_program("keynote", mode=PlaybackMode.SCENE_GRAPH, act_count=3)


@pytest.fixture
def live_program() -> Program:
    """Five-slide live-render program."""
    return make_program("talk", mode=PlaybackMode.LIVE_RENDER, act_count=5)


# ============================================================================
# Component Fixtures
# ============================================================================


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """App config with in-memory production and fast renderer timings."""
    return AppConfig.model_validate(
        {
            "data_dir": str(tmp_path / "data"),
            "production": {"backend": "memory"},
            "renderer": {
                "startup_delay_s": 0.2,
                "graceful_shutdown_s": 0.05,
                "force_kill_s": 0.3,
            },
        }
    )


@pytest.fixture
def events() -> RecordingEventSink:
    """Event sink that records everything."""
    return RecordingEventSink()


@pytest.fixture
def client(events: RecordingEventSink) -> InMemoryProductionClient:
    """Disconnected in-memory production client."""
    return InMemoryProductionClient(events)


@pytest.fixture
async def connected_client(client: InMemoryProductionClient) -> InMemoryProductionClient:
    """In-memory production client with an open session."""
    await client.connect("ws://127.0.0.1:4455")
    return client


@pytest.fixture
def builder(client: InMemoryProductionClient, app_config: AppConfig) -> CaptureTopologyBuilder:
    """Topology builder over the shared client."""
    return CaptureTopologyBuilder(client, app_config)
