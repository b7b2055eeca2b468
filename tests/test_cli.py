from typer.testing import CliRunner

from wavecast.cli import app

runner = CliRunner()


def test_info_reports_archive_layout(archive_path):
    result = runner.invoke(app, ["info", str(archive_path)])
    assert result.exit_code == 0, result.output
    assert "Records: 3 (2012-05-04 00:00:00 -> 2012-05-04 06:00:00)" in result.output
    assert "Grid: 4 x 3" in result.output
    assert "hs: significant height of combined wind waves and swell [m]" in result.output


def test_frames_writes_one_folder_per_channel(archive_path, tmp_path):
    out = tmp_path / "frames"
    result = runner.invoke(app, ["frames", str(archive_path), "--out", str(out), "--no-coastlines"])
    assert result.exit_code == 0, result.output
    assert "Wrote 3 frames for 1 channel(s)" in result.output
    assert sorted(path.name for path in (out / "hs").iterdir()) == [
        "hs_00000.png",
        "hs_00001.png",
        "hs_00002.png",
    ]


def test_play_rejects_negative_delay(archive_path):
    result = runner.invoke(app, ["play", str(archive_path), "--delay", "-1"])
    assert result.exit_code == 1
    assert "DELAY must be a non-negative scalar" in result.output


def test_frames_with_yaml_preset(archive_path, tmp_path):
    preset = tmp_path / "preset.yaml"
    preset.write_text("playback:\n  clim: [0, 50]\n  cmap: viridis\n")
    out = tmp_path / "frames"
    result = runner.invoke(
        app, ["frames", str(archive_path), "--out", str(out), "--config", str(preset), "--no-coastlines"]
    )
    assert result.exit_code == 0, result.output
    assert len(list((out / "hs").glob("*.png"))) == 3
