"""
Animated glow-streak background and its mount/unmount lifecycle.
"""

import logging
import math
import time
from pathlib import Path
from typing import Callable, List, Optional

from ..core.animation import AnimationLoop
from ..core.camera import PerspectiveCamera
from ..core.geometry import QuadraticBezierCurve, TubeGeometry
from ..core.render_engine import RenderEngine
from ..core.scene import Scene, TubeMesh
from ..core.shading import GLOW_SHADING, STREAK_SHADING, ShadingProgram
from ..errors import SurfaceUnavailableError
from ..hosts import RenderHost

logger = logging.getLogger(__name__)

CAMERA_FOV = 75.0
CAMERA_NEAR = 0.1
CAMERA_FAR = 1000.0
CAMERA_POSITION = (0.0, -0.8, 7.0)

TUBULAR_SEGMENTS = 200
RADIAL_SEGMENTS = 32

# (shading, tube radius), in draw order
LAYERS = (
    (STREAK_SHADING, 0.8),
    (GLOW_SHADING, 1.5),
)

SWAY_RATE = 0.2
SWAY_AMPLITUDE = 0.05


def sway_angle(t: float) -> float:
    """Rotation about the depth axis at time t, shared by every layer"""
    return math.sin(t * SWAY_RATE) * SWAY_AMPLITUDE


class AnimatedSceneRenderer:
    """
    Decorative background: two glow tubes along one curve, animated every
    display refresh while mounted.

    All GL resources are created in mount() and released in unmount();
    nothing is shared between instances.
    """

    def __init__(self, host: RenderHost,
                 samples: int = 4,
                 clock: Callable[[], float] = time.time,
                 shader_dir: Optional[Path] = None,
                 curve: Optional[QuadraticBezierCurve] = None):
        """
        Initialize renderer (nothing is acquired until mount()).

        Args:
            host: Host to mount into
            samples: Multisample count for smoothed edges
            clock: Wall-clock source in seconds
            shader_dir: Directory containing shaders
            curve: Path of the streak (default: the landing page curve)
        """
        self.host = host
        self.samples = samples
        self.clock = clock
        self.shader_dir = shader_dir
        self.curve = curve if curve is not None else QuadraticBezierCurve.streak()

        self.engine: Optional[RenderEngine] = None
        self.camera: Optional[PerspectiveCamera] = None
        self.scene = Scene()
        self.geometries: List[TubeGeometry] = []
        self.materials: List[ShadingProgram] = []
        self.loop: Optional[AnimationLoop] = None
        self.time = 0.0
        self._mounted = False

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def meshes(self) -> List[TubeMesh]:
        return list(self.scene)

    def mount(self):
        """
        Acquire the surface, build camera and meshes, start animating.

        Raises:
            SurfaceUnavailableError: if any resource cannot be acquired;
                whatever was acquired before the failure is released
        """
        if self._mounted:
            return

        width, height = self.host.viewport_size()
        try:
            self._build(width, height)
        except Exception as e:
            self._release_resources()
            if isinstance(e, SurfaceUnavailableError):
                raise
            raise SurfaceUnavailableError(f"Failed to mount scene renderer: {e}") from e

        self._mounted = True
        try:
            self.host.add_resize_listener(self._on_resize)
            self.loop = AnimationLoop(self.host, self._render_frame, clock=self.clock)
            # Draws the first frame synchronously
            self.loop.start()
        except Exception as e:
            self.unmount()
            raise SurfaceUnavailableError(f"Failed to start scene renderer: {e}") from e
        logger.debug("Scene renderer mounted at %dx%d", width, height)

    def _build(self, width: int, height: int):
        self.engine = RenderEngine(
            width, height,
            ctx=self.host.create_context(),
            samples=self.samples,
            shader_dir=self.shader_dir,
        )
        self.host.attach(self.engine.surface)

        self.camera = PerspectiveCamera(
            CAMERA_FOV, width / height, CAMERA_NEAR, CAMERA_FAR,
            position=CAMERA_POSITION,
        )

        for shading, radius in LAYERS:
            geometry = TubeGeometry(self.curve, TUBULAR_SEGMENTS, radius, RADIAL_SEGMENTS)
            self.geometries.append(geometry)
            material = ShadingProgram(self.engine.shader_manager, shading)
            self.materials.append(material)
            self.scene.add(TubeMesh(self.engine.ctx, geometry, material))

    def _render_frame(self, t: float):
        self.time = t
        angle = sway_angle(t)
        for mesh in self.scene:
            mesh.material.set_time(t)
            mesh.rotation_z = angle

        self.engine.render_frame(self.scene, self.camera)
        if self.host.holds(self.engine.surface):
            self.host.present(self.engine.surface)

    def _on_resize(self, width: int, height: int):
        if not self._mounted or not self.host.connected:
            return
        if width <= 0 or height <= 0:
            return
        self.camera.set_viewport(width, height)
        self.engine.resize(width, height)

    def _release_resources(self):
        for mesh in self.scene:
            mesh.release()
        self.scene.clear()

        for geometry in self.geometries:
            geometry.release()
        for material in self.materials:
            material.release()
        self.geometries = []
        self.materials = []

        if self.engine is not None:
            if self.host.holds(self.engine.surface):
                self.host.detach(self.engine.surface)
            self.engine.release()
            self.engine = None
        self.camera = None

    def unmount(self):
        """
        Stop animating and release everything mount() acquired.

        Safe to call more than once and after the host has gone away.
        """
        if not self._mounted:
            return

        # Stop the loop first so no frame runs against released resources
        frames = 0
        if self.loop is not None:
            self.loop.stop()
            frames = self.loop.frame_count
        self.host.remove_resize_listener(self._on_resize)

        surface = self.engine.surface
        if self.host.holds(surface):
            self.host.detach(surface)

        self._release_resources()
        self.loop = None
        self._mounted = False
        logger.debug("Scene renderer unmounted after %d frames", frames)
