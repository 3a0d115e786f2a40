"""
Core rendering components for the landing background.

Curve and tube geometry, camera, shader loading, shading programs, the
scene graph, the render engine and the animation loop.
"""

from .animation import AnimationLoop
from .camera import Camera, PerspectiveCamera
from .geometry import QuadraticBezierCurve, TubeGeometry
from .render_engine import RenderEngine, RenderSurface
from .scene import Scene, TubeMesh
from .shader_manager import ShaderManager
from .shading import GLOW_SHADING, STREAK_SHADING, GlowShading, ShadingProgram

__all__ = [
    'AnimationLoop',
    'Camera',
    'PerspectiveCamera',
    'QuadraticBezierCurve',
    'TubeGeometry',
    'RenderEngine',
    'RenderSurface',
    'Scene',
    'TubeMesh',
    'ShaderManager',
    'GLOW_SHADING',
    'STREAK_SHADING',
    'GlowShading',
    'ShadingProgram',
]
