"""
High-level renderer implementations.

The interactive window is imported from its module directly so that
moderngl-window is only needed when a window is opened.
"""

from .scene_renderer import AnimatedSceneRenderer
from .offline_renderer import OfflineRenderer

__all__ = [
    'AnimatedSceneRenderer',
    'OfflineRenderer',
]
