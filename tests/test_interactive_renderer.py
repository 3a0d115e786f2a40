from types import SimpleNamespace

from landing.renderers.interactive_renderer import WindowHost
from landing.renderers.scene_renderer import AnimatedSceneRenderer


class FakeScreen:
    def __init__(self):
        self.uses = 0

    def use(self):
        self.uses += 1


def make_window(fake_ctx, size=(640, 360)):
    fake_ctx.screen = FakeScreen()
    return SimpleNamespace(ctx=fake_ctx, wnd=SimpleNamespace(buffer_size=size))


def test_window_host_uses_window_context_and_size(fake_ctx) -> None:
    host = WindowHost(make_window(fake_ctx))

    assert host.create_context() is fake_ctx
    assert host.viewport_size() == (640, 360)


def test_window_host_blits_attached_surface(fake_ctx, clock) -> None:
    host = WindowHost(make_window(fake_ctx))
    renderer = AnimatedSceneRenderer(host, clock=clock)
    renderer.mount()

    # Mount drew frame 0 and presented it
    surface = renderer.engine.surface
    assert fake_ctx.copies[-1] == (fake_ctx.screen, surface.fbo)

    host.run_pending_frames()
    assert len(fake_ctx.copies) == 2

    host.disconnect()
    host.run_pending_frames()
    assert len(fake_ctx.copies) == 2

    renderer.unmount()
    assert fake_ctx.release_count == 0
