import logging

import pytest

from landing.__main__ import main


@pytest.fixture(autouse=True)
def no_supabase_env(monkeypatch):
    for key in ("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL",
                "SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"):
        monkeypatch.delenv(key, raising=False)
    yield
    logging.getLogger("landing").handlers.clear()


def test_status_prints_default_count_when_unconfigured(capsys) -> None:
    assert main(["status"]) == 0

    out = capsys.readouterr().out
    assert "72+ people already joined" in out
    assert "days |" in out


def test_join_without_configuration_fails(capsys) -> None:
    assert main(["join", "a@example.com"]) == 1
    assert "configuration is missing" in capsys.readouterr().out


def test_bad_config_file_exits_with_error(tmp_path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("nonsense: true\n")
    assert main(["--config", str(path), "status"]) == 1


def test_command_is_required() -> None:
    with pytest.raises(SystemExit):
        main([])


class RecordingOfflineRenderer:
    calls = []

    def __init__(self, width, height, samples=4):
        self.size = (width, height)

    def render_animation(self, output_path, fps=30, duration=10.0, frames_only=False):
        self.calls.append((self.size, fps, duration))
        return output_path


@pytest.mark.parametrize("extra,expected_fps", [([], 24), (["--fps", "12"], 12)])
def test_render_uses_config_fps_by_default(tmp_path, monkeypatch, extra, expected_fps) -> None:
    monkeypatch.setattr("landing.renderers.offline_renderer.OfflineRenderer", RecordingOfflineRenderer)
    monkeypatch.setattr(RecordingOfflineRenderer, "calls", [])
    path = tmp_path / "landing.yaml"
    path.write_text("fps: 24\nwidth: 320\nheight: 180\n")

    argv = ["--config", str(path), "render", "--output", str(tmp_path / "out.mp4"), "--duration", "2"]
    assert main(argv + extra) == 0

    assert RecordingOfflineRenderer.calls == [((320, 180), expected_fps, 2.0)]
