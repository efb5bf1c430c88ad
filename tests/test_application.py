"""Tests for run wiring."""

import json
from pathlib import Path

import pytest

from docgraph.application import Application
from docgraph.config.models import DocGraphConfig, SerializerConfig
from docgraph.core.errors import ConfigError, ErrorCode
from docgraph.plugins import loader


@pytest.fixture(autouse=True)
def no_entry_points(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(loader, "entry_points", lambda group: [])


class TestApplication:
    """Converter, plugins and serializer built from one config."""

    def test_given_defaults_when_created_then_builtin_plugins_loaded(self) -> None:
        app = Application(configure_logs=False)
        assert len(app.plugins) == 3

    @pytest.mark.asyncio
    async def test_given_program_when_converted_then_plugins_applied(self, shapes_model) -> None:
        # Given
        app = Application(configure_logs=False)

        # When
        project = await app.convert(shapes_model)
        data = json.loads(app.to_json(project))

        # Then
        shapes = data["children"][0]
        assert shapes["name"] == "shapes"
        assert [c["name"] for c in shapes["children"]] == ["Color", "Shape", "Point", "Id", "area"]
        shape = next(c for c in shapes["children"] if c["name"] == "Shape")
        assert "secret" not in [c["name"] for c in shape["children"]]

    @pytest.mark.asyncio
    async def test_given_configured_entry_points_when_converted_then_only_those(self, shapes_model) -> None:
        # Given
        config = DocGraphConfig.model_validate({"converter": {"entry_points": ["/repo/src/shapes.ts"]}})
        app = Application(config, configure_logs=False)

        # When
        project = await app.convert(shapes_model)

        # Then
        assert [m.name for m in project.children] == ["shapes"]

    @pytest.mark.asyncio
    async def test_given_no_out_when_written_then_missing_required(self, shapes_model) -> None:
        # Given
        app = Application(configure_logs=False)
        project = await app.convert(shapes_model)

        # When / Then
        with pytest.raises(ConfigError) as exc_info:
            app.write_json(project)
        assert exc_info.value.code == ErrorCode.CONFIG_MISSING_REQUIRED

    @pytest.mark.asyncio
    async def test_given_configured_out_when_written_then_file_created(self, shapes_model, tmp_path: Path) -> None:
        # Given
        out = tmp_path / "api.json"
        app = Application(DocGraphConfig(serializer=SerializerConfig(out=str(out))), configure_logs=False)
        project = await app.convert(shapes_model)

        # When
        written = app.write_json(project)

        # Then
        assert written == out
        assert json.loads(out.read_text())["name"] == "shapes"
