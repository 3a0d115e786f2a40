"""
Core rendering engine for the landing background.

Manages the OpenGL context, the offscreen surface and the draw of a scene.
"""

import logging
import moderngl as mgl
import numpy as np
from pathlib import Path
from typing import List, Optional, Tuple

from ..errors import SurfaceUnavailableError
from .camera import Camera
from .scene import Scene
from .shader_manager import ShaderManager

logger = logging.getLogger(__name__)

BLACK = (0.0, 0.0, 0.0, 1.0)

# Standalone context settings, tried in order
HEADLESS_ATTEMPTS = (
    {},                                 # platform default (X11, WGL, CGL)
    {'require': 330},                   # explicit core profile
    {'require': 330, 'backend': 'egl'},  # headless Linux without a display
)


def create_headless_context() -> mgl.Context:
    """
    Create a standalone OpenGL 3.3 context, falling back to EGL.

    Raises:
        SurfaceUnavailableError: if no attempt succeeds
    """
    errors = []
    for settings in HEADLESS_ATTEMPTS:
        try:
            ctx = mgl.create_standalone_context(**settings)
        except Exception as e:
            errors.append(f"{settings or 'default'}: {e}")
            continue
        if ctx.version_code >= 330:
            logger.debug("Created standalone context with %s", settings or "defaults")
            return ctx
        errors.append(f"{settings or 'default'}: OpenGL {ctx.version_code} < 330")
        ctx.release()

    raise SurfaceUnavailableError(
        "Cannot create a headless OpenGL 3.3 context (" + "; ".join(errors) + ")"
    )


class RenderSurface:
    """
    RGBA render target with depth, optionally multisampled.

    With samples > 0 drawing goes to multisample renderbuffers and read()
    resolves into a plain texture first.
    """

    def __init__(self, ctx: mgl.Context, width: int, height: int, samples: int = 4):
        self.ctx = ctx
        self.samples = samples
        self.width = 0
        self.height = 0
        self.fbo: Optional[mgl.Framebuffer] = None
        self.resolve_fbo: Optional[mgl.Framebuffer] = None
        self._resources: List = []
        self._released = False
        self._create(width, height)

    def _create(self, width: int, height: int):
        ctx = self.ctx
        size = (width, height)
        created = []

        def track(resource):
            created.append(resource)
            return resource

        try:
            if self.samples > 0:
                color = track(ctx.renderbuffer(size, 4, samples=self.samples))
                depth = track(ctx.depth_renderbuffer(size, samples=self.samples))
                fbo = track(ctx.framebuffer(color_attachments=[color], depth_attachment=depth))
                resolve_color = track(ctx.texture(size, 4))
                resolve_fbo = track(ctx.framebuffer(color_attachments=[resolve_color]))
            else:
                color = track(ctx.texture(size, 4))
                depth = track(ctx.depth_texture(size))
                fbo = track(ctx.framebuffer(color_attachments=[color], depth_attachment=depth))
                resolve_fbo = fbo
        except Exception:
            for resource in reversed(created):
                resource.release()
            raise

        # Framebuffers are created after their attachments; release them first
        self._resources = list(reversed(created))
        self.fbo = fbo
        self.resolve_fbo = resolve_fbo
        self.width = width
        self.height = height

    def _release_attachments(self):
        for resource in self._resources:
            resource.release()
        self._resources = []
        self.fbo = None
        self.resolve_fbo = None

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def use(self):
        self.fbo.use()

    def resolve(self) -> mgl.Framebuffer:
        """Framebuffer holding the finished single-sample image"""
        if self.resolve_fbo is not self.fbo:
            self.ctx.copy_framebuffer(self.resolve_fbo, self.fbo)
        return self.resolve_fbo

    def read(self) -> np.ndarray:
        """
        Read back the surface.

        Returns:
            Image as numpy array (height, width, 4) uint8, top row first
        """
        data = self.resolve().read(components=4)
        pixels = np.frombuffer(data, dtype=np.uint8).reshape((self.height, self.width, 4))
        return np.flipud(pixels).copy()

    def resize(self, width: int, height: int):
        """Recreate attachments at the new size"""
        if self._released or (width, height) == self.size:
            return
        self._release_attachments()
        self._create(width, height)

    def release(self):
        if self._released:
            return
        self._released = True
        self._release_attachments()

    @property
    def released(self) -> bool:
        return self._released


class RenderEngine:
    """
    Core rendering engine managing OpenGL context and rendering pipeline.

    Layers are blended additively (SRC_ALPHA, ONE) and drawn double-sided.
    """

    def __init__(self, width: int = 1280, height: int = 720,
                 ctx: Optional[mgl.Context] = None,
                 samples: int = 4,
                 clear_color: Tuple[float, float, float, float] = BLACK,
                 shader_dir: Optional[Path] = None):
        """
        Initialize render engine.

        Args:
            width: Surface width
            height: Surface height
            ctx: ModernGL context (if None, creates standalone context)
            samples: Multisample count for smoothed edges (0 disables)
            clear_color: RGBA clear color
            shader_dir: Directory containing shaders
        """
        self.clear_color = clear_color
        self._released = False

        # Create or use provided context
        self.owns_context = ctx is None
        if ctx is None:
            self.ctx = create_headless_context()
        else:
            self.ctx = ctx

        self.ctx.enable(mgl.DEPTH_TEST | mgl.BLEND)
        self.ctx.disable(mgl.CULL_FACE)
        self.ctx.blend_func = mgl.SRC_ALPHA, mgl.ONE

        self.shader_manager = ShaderManager(shader_dir, self.ctx)

        try:
            self.surface = RenderSurface(self.ctx, width, height, samples=samples)
        except Exception:
            self._release_context()
            raise

    @property
    def width(self) -> int:
        return self.surface.width

    @property
    def height(self) -> int:
        return self.surface.height

    def render_frame(self, scene: Scene, camera: Camera):
        """Clear the surface and draw every mesh in the scene"""
        self.surface.use()
        self.ctx.clear(*self.clear_color)

        view_projection = camera.get_projection_matrix() @ camera.get_view_matrix()
        for mesh in scene:
            mesh.draw(view_projection)

    def read_pixels(self) -> np.ndarray:
        return self.surface.read()

    def resize(self, width: int, height: int):
        """Resize the render surface"""
        self.surface.resize(width, height)

    def _release_context(self):
        if self.owns_context:
            self.ctx.release()

    def release(self):
        """Release surface and, if owned, the context; later calls are no-ops"""
        if self._released:
            return
        self._released = True
        self.surface.release()
        self.shader_manager.clear_cache()
        self._release_context()
        logger.debug("Render engine released")

    @property
    def released(self) -> bool:
        return self._released
