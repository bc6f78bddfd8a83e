"""Tests for Program and Act models."""

from __future__ import annotations

from pydantic import ValidationError
import pytest

from stageforge.core.programs import Act, PlaybackMode, Program, ProgramSummary
from stageforge.core.utils import program_id_from_path, sanitize_program_id
from tests.conftest import make_program


class TestProgramValidation:
    """Tests for Program invariants."""

    def test_parses_camel_case_metadata(self):
        program = Program.model_validate(
            {
                "id": "keynote",
                "name": "Keynote",
                "filePath": "/decks/keynote.pptx",
                "mode": "scene-graph",
                "slideCount": 2,
                "createdAt": "2026-03-01T10:00:00Z",
                "acts": [
                    {"index": 0, "name": "Intro", "imagePath": "/img/1.png"},
                    {"index": 1, "name": "Demo", "imagePath": "/img/2.png", "videoPath": "/v.mp4"},
                ],
            }
        )

        assert program.file_path == "/decks/keynote.pptx"
        assert program.mode == PlaybackMode.SCENE_GRAPH
        assert program.acts[1].declares_video
        assert not program.acts[0].declares_video

    @pytest.mark.parametrize(
        ("legacy", "expected"),
        [("renderer", PlaybackMode.LIVE_RENDER), ("scene", PlaybackMode.SCENE_GRAPH)],
    )
    def test_legacy_modes_are_normalized(self, legacy: str, expected: PlaybackMode):
        program = Program.model_validate(
            {"id": "deck", "name": "deck", "filePath": "/deck.pptx", "mode": legacy}
        )

        assert program.mode == expected

    def test_unknown_mode_rejected(self):
        with pytest.raises(ValidationError):
            Program.model_validate(
                {"id": "deck", "name": "deck", "filePath": "/deck.pptx", "mode": "hologram"}
            )

    def test_slide_count_must_match_acts(self):
        with pytest.raises(ValidationError, match="slide_count"):
            Program(
                id="deck",
                name="deck",
                file_path="/deck.pptx",
                slide_count=3,
                acts=[Act(index=0, name="only")],
            )

    def test_act_index_must_match_position(self):
        with pytest.raises(ValidationError, match="position 0"):
            Program(
                id="deck",
                name="deck",
                file_path="/deck.pptx",
                slide_count=1,
                acts=[Act(index=1, name="misplaced")],
            )

    def test_slide_count_is_estimate_without_acts(self):
        program = Program(id="deck", name="deck", file_path="/deck.pptx", slide_count=12)

        assert program.slide_count == 12
        assert program.acts == []

    def test_id_must_be_sanitized(self):
        with pytest.raises(ValidationError):
            Program(id="my deck", name="deck", file_path="/deck.pptx")

    def test_program_is_frozen(self):
        program = make_program()

        with pytest.raises(ValidationError):
            program.mode = PlaybackMode.LIVE_RENDER  # type: ignore[misc]


class TestProgramSummary:
    """Tests for listing summaries."""

    def test_from_program(self):
        summary = ProgramSummary.from_program(make_program("show", act_count=4))

        assert summary.id == "show"
        assert summary.slide_count == 4
        assert summary.act_count == 4


class TestProgramIds:
    """Tests for deterministic program id derivation."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Quarterly Review", "Quarterly_Review"),
            ("keynote-2026", "keynote-2026"),
            ("café.v2", "caf__v2"),
        ],
    )
    def test_sanitize(self, name: str, expected: str):
        assert sanitize_program_id(name) == expected

    def test_from_path_uses_stem(self):
        assert program_id_from_path("/decks/Town Hall.pptx") == "Town_Hall"
