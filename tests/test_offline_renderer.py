import pytest
from PIL import Image

from landing.hosts import OffscreenHost
from landing.renderers import offline_renderer
from landing.renderers.offline_renderer import OfflineRenderer


def test_render_frames_writes_pngs_and_releases(tmp_path, fake_ctx) -> None:
    host = OffscreenHost(32, 16, ctx=fake_ctx)
    renderer = OfflineRenderer(32, 16, host=host, start_time=2.0)

    paths = renderer.render_frames(tmp_path, frame_count=4, fps=10)

    assert [p.name for p in paths] == [f"frame_{i:06d}.png" for i in range(4)]
    with Image.open(paths[0]) as img:
        assert img.size == (32, 16)
        assert img.mode == "RGBA"
    assert all(r.release_count == 1 for r in fake_ctx.resources)
    assert host.pending_frame_count == 0


def test_frame_clock_advances_one_step_per_frame(tmp_path, fake_ctx) -> None:
    host = OffscreenHost(8, 8, ctx=fake_ctx)
    renderer = OfflineRenderer(8, 8, host=host, start_time=1.0)

    renderer.render_frames(tmp_path, frame_count=5, fps=4)

    # Last frame time, as seen by the streak program before release
    program = fake_ctx.of_kind("program")[0]
    assert program["time"].value == pytest.approx(1.0 + 4 * 0.25)


def test_frames_only_skips_encoding(tmp_path, fake_ctx, monkeypatch) -> None:
    monkeypatch.setattr(offline_renderer.shutil, "which", lambda name: None)
    renderer = OfflineRenderer(8, 8, host=OffscreenHost(8, 8, ctx=fake_ctx))

    out = renderer.render_animation(str(tmp_path / "frames"), fps=5, duration=1.0, frames_only=True)

    assert len(list(out.glob("*.png"))) == 5


def test_missing_ffmpeg_raises(tmp_path, fake_ctx, monkeypatch) -> None:
    monkeypatch.setattr(offline_renderer.shutil, "which", lambda name: None)
    renderer = OfflineRenderer(8, 8, host=OffscreenHost(8, 8, ctx=fake_ctx))

    with pytest.raises(RuntimeError, match="FFmpeg"):
        renderer.render_animation(str(tmp_path / "out.mp4"))
