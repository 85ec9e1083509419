import pytest

from conftest import make_gpx
import gpxrender.cli as cli
from gpxrender.config import ENV_MAP


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    for var in ENV_MAP:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)


def test_main_converts_directory(tmp_path, sample_gpx_path):
    src = tmp_path / "gpx-files"
    src.mkdir()
    (src / "run.gpx").write_bytes(sample_gpx_path.read_bytes())

    rc = cli.main([])

    assert rc == 0
    out = tmp_path / "output-images"
    assert (out / "2023_08_01_07_00_00.png").is_file()
    assert (out / "log.txt").read_text(encoding="utf-8") == "2023_08_01_07_00_00.png - Morning Run\n"


def test_main_svg_totals_flags(tmp_path, sample_gpx_path):
    src = tmp_path / "tracks"
    src.mkdir()
    (src / "run.gpx").write_bytes(sample_gpx_path.read_bytes())
    out = tmp_path / "images"

    rc = cli.main(["--input-dir", str(src), "--output-dir", str(out), "--format", "svg", "--totals",
                   "--stroke-color", "red", "--stroke-width", "2"])

    assert rc == 0
    svg = (out / "2023_08_01_07_00_00.svg").read_text(encoding="utf-8")
    assert 'stroke="red"' in svg
    log_line = (out / "log.txt").read_text(encoding="utf-8")
    assert "Total Time: 630s" in log_line


def test_main_reports_failures_with_exit_code(tmp_path, capsys):
    src = tmp_path / "gpx-files"
    src.mkdir()
    (src / "good.gpx").write_text(make_gpx([(1.0, 2.0), (1.1, 2.1)]), encoding="utf-8")
    (src / "bad.gpx").write_text("<gpx", encoding="utf-8")

    rc = cli.main([])

    assert rc == 1
    captured = capsys.readouterr()
    assert "Generated" in captured.out
    assert "Failed to process" in captured.err
    assert "Batch complete: 1 converted, 1 failed." in captured.out


def test_main_missing_input_dir(tmp_path):
    assert cli.main(["--input-dir", str(tmp_path / "missing")]) == 2


def test_main_bad_config(tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "config.toml").write_text("[canvas]\nwidth = -5\n", encoding="utf-8")
    assert cli.main([]) == 2


def test_main_dry_run(tmp_path, sample_gpx_path):
    src = tmp_path / "gpx-files"
    src.mkdir()
    (src / "run.gpx").write_bytes(sample_gpx_path.read_bytes())

    assert cli.main(["--dry-run", "--verbose"]) == 0
    assert not (tmp_path / "output-images").exists()
