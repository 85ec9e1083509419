from pathlib import Path

import pytest

from gpxrender.config import ENV_MAP, load_config
from gpxrender.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in ENV_MAP:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults(tmp_path):
    cfg = load_config(project_config_path=tmp_path / "none.toml", user_config_path=tmp_path / "none.toml")

    assert cfg.paths.input_dir == Path("gpx-files")
    assert cfg.paths.output_dir == Path("output-images")
    assert cfg.paths.log_name == "log.txt"
    assert (cfg.canvas.width, cfg.canvas.height) == (800, 600)
    assert cfg.stroke.color == "blue"
    assert cfg.stroke.width == 4
    assert cfg.output.format == "png"
    assert cfg.output.totals is False
    assert set(cfg.source.values()) == {"default"}


def test_precedence_user_over_project_env_over_user_cli_over_env(tmp_path, monkeypatch):
    project = write(tmp_path / "config" / "config.toml", """
[paths]
input_dir = "project-in"
output_dir = "project-out"

[stroke]
color = "red"
width = 2

[output]
format = "svg"
""")
    user = write(tmp_path / "home" / "config.toml", """
[paths]
input_dir = "user-in"

[output]
format = "png"
totals = true
""")
    monkeypatch.setenv("GPXRENDER_FORMAT", "svg")

    cfg = load_config(
        project_config_path=project,
        user_config_path=user,
        overrides={"stroke.width": 6.5, "stroke.color": None},
    )

    assert cfg.paths.input_dir == Path("user-in")
    assert cfg.paths.output_dir == Path("project-out")
    assert cfg.stroke.color == "red"
    assert cfg.stroke.width == 6.5
    assert cfg.output.format == "svg"
    assert cfg.output.totals is True

    assert cfg.source["paths.input_dir"] == f"user:{user}"
    assert cfg.source["paths.output_dir"] == f"repo:{project}"
    assert cfg.source["output.format"] == "env:GPXRENDER_FORMAT"
    assert cfg.source["stroke.width"] == "cli"


def test_project_root_discovered_from_cwd(tmp_path, monkeypatch):
    write(tmp_path / "config" / "config.toml", "[canvas]\nwidth = 1024\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    monkeypatch.chdir(nested)

    cfg = load_config(user_config_path=tmp_path / "none.toml")
    assert cfg.canvas.width == 1024


def test_env_totals(tmp_path, monkeypatch):
    monkeypatch.setenv("GPXRENDER_TOTALS", "yes")
    monkeypatch.setenv("GPXRENDER_INPUT_DIR", str(tmp_path / "tracks"))
    cfg = load_config(project_config_path=tmp_path / "none.toml", user_config_path=tmp_path / "none.toml")
    assert cfg.output.totals is True
    assert cfg.paths.input_dir == tmp_path / "tracks"


def test_cli_false_overrides_config(tmp_path):
    user = write(tmp_path / "user.toml", "[output]\ntotals = true\n")
    cfg = load_config(project_config_path=tmp_path / "none.toml", user_config_path=user,
                      overrides={"output.totals": False})
    assert cfg.output.totals is False


def test_invalid_toml(tmp_path):
    bad = write(tmp_path / "bad.toml", "[canvas\nwidth = ")
    with pytest.raises(ConfigError, match="Failed to parse TOML"):
        load_config(project_config_path=bad, user_config_path=tmp_path / "none.toml")


@pytest.mark.parametrize("text", [
    "[canvas]\nwidth = 0\n",
    "[canvas]\nheight = \"tall\"\n",
    "[canvas]\nmin_range = -1.0\n",
    "[stroke]\nwidth = 0\n",
    "[output]\nformat = \"gif\"\n",
    "[output]\ntotals = \"maybe\"\n",
])
def test_invalid_values(tmp_path, text):
    cfg_path = write(tmp_path / "cfg.toml", text)
    with pytest.raises(ConfigError):
        load_config(project_config_path=cfg_path, user_config_path=tmp_path / "none.toml")


def test_unknown_override_key(tmp_path):
    with pytest.raises(ConfigError):
        load_config(project_config_path=tmp_path / "none.toml", user_config_path=tmp_path / "none.toml",
                    overrides={"canvas.depth": 3})
