"""
Interactive window showing the landing background.

The moderngl-window window acts as the render host: each redraw runs the
pending frame callbacks and blits the attached surface to the screen.
"""

import logging
from typing import Optional, Tuple

import moderngl as mgl
import moderngl_window as mglw

from ..hosts import RenderHost
from ..waitlist.clock import CountdownClock
from .scene_renderer import AnimatedSceneRenderer

logger = logging.getLogger(__name__)


class WindowHost(RenderHost):
    """Render host backed by a moderngl-window WindowConfig"""

    def __init__(self, config: mglw.WindowConfig):
        super().__init__()
        self.config = config

    def viewport_size(self) -> Tuple[int, int]:
        return tuple(self.config.wnd.buffer_size)

    def create_context(self) -> Optional[mgl.Context]:
        return self.config.ctx

    def present(self, surface):
        ctx = self.config.ctx
        ctx.copy_framebuffer(ctx.screen, surface.fbo)
        ctx.screen.use()


class LandingWindow(mglw.WindowConfig):
    """
    Full-window landing background with the elapsed counter in the title.
    """

    title = "NO-CORN"
    gl_version = (3, 3)
    window_size = (1280, 720)
    aspect_ratio = None
    resizable = True
    vsync = True

    # Set by main() before the window opens
    countdown: Optional[CountdownClock] = None
    samples = 4

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        self.host = WindowHost(self)
        self.renderer = AnimatedSceneRenderer(self.host, samples=self.samples)
        self.renderer.mount()
        self._last_title = ""

    def on_render(self, time: float, frame_time: float):
        """Display refresh (called by moderngl-window)"""
        self.ctx.screen.use()
        self.ctx.clear(0.0, 0.0, 0.0, 1.0)
        self.host.run_pending_frames()
        self._update_title()

    def on_resize(self, width: int, height: int):
        self.host.notify_resize(*self.wnd.buffer_size)

    def on_close(self):
        self.host.disconnect()
        self.renderer.unmount()

    def _update_title(self):
        if self.countdown is None:
            return
        title = f"{self.title} | {self.countdown.elapsed().format()}"
        if title != self._last_title:
            self.wnd.title = title
            self._last_title = title


def main(countdown: Optional[CountdownClock] = None, samples: int = 4,
         width: int = 1280, height: int = 720):
    """Open the interactive background window"""
    LandingWindow.countdown = countdown or CountdownClock()
    LandingWindow.samples = samples
    LandingWindow.window_size = (width, height)
    mglw.run_window_config(LandingWindow, args=[])


if __name__ == "__main__":
    main()
