from pathlib import Path

from click.testing import CliRunner

from buildingmap.cli import cli


def test_info_lists_schema(buildings_path: Path) -> None:
    result = CliRunner().invoke(cli, ["info", "--source", str(buildings_path)])
    assert result.exit_code == 0, result.output
    assert "Total buildings: 3" in result.output
    assert "floors_ag: int32" in result.output
    assert "Period styling: on" in result.output


def test_inspect_shows_selected_building(buildings_path: Path) -> None:
    result = CliRunner().invoke(cli, ["inspect", "--source", str(buildings_path), "0"])
    assert result.exit_code == 0, result.output
    assert "Name: Torre A" in result.output
    assert "elevation: 18.0" in result.output
    assert "[180, 48, 150, 255]" in result.output


def test_inspect_out_of_range(buildings_path: Path) -> None:
    result = CliRunner().invoke(cli, ["inspect", "--source", str(buildings_path), "7"])
    assert result.exit_code != 0
    assert "out of range" in result.output


def test_custom_period_field_disables_styling(buildings_path: Path) -> None:
    result = CliRunner().invoke(cli, ["info", "--source", str(buildings_path),
                                      "--period-field", "Periodo"])
    assert result.exit_code == 0, result.output
    assert "Period styling: off" in result.output
    assert "Extrusion: on" in result.output


def test_missing_source_is_reported(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["info", "--source", str(tmp_path / "nope.parquet")])
    assert result.exit_code == 1
    assert "Failed to read" in result.output


def test_render_writes_glb(buildings_path: Path, tmp_path: Path) -> None:
    output = tmp_path / "out.glb"
    result = CliRunner().invoke(cli, ["render", "--source", str(buildings_path), "-o", str(output)])
    assert result.exit_code == 0, result.output
    assert output.exists()
    assert "GLB written to" in result.output


def test_serve_runs_backend_app(monkeypatch) -> None:
    import uvicorn

    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    result = CliRunner().invoke(cli, ["serve", "--port", "9001"])
    assert result.exit_code == 0, result.output
    assert calls == [("backend.app:app", {"host": "127.0.0.1", "port": 9001, "reload": False})]
