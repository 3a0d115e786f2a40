"""
Camera system for the landing background.

Provides the perspective camera that frames the glow streak.
"""

import numpy as np
import math
from abc import ABC, abstractmethod
from typing import Optional, Sequence


class Camera(ABC):
    """Abstract base class for cameras"""

    @abstractmethod
    def get_view_matrix(self) -> np.ndarray:
        """Get view matrix (4x4)"""
        pass

    @abstractmethod
    def get_projection_matrix(self) -> np.ndarray:
        """Get projection matrix (4x4)"""
        pass

    @abstractmethod
    def get_camera_position(self) -> np.ndarray:
        """Get camera position in world space"""
        pass

    @staticmethod
    def translation(offset: np.ndarray) -> np.ndarray:
        """Create a 4x4 translation matrix"""
        m = np.eye(4, dtype=np.float32)
        m[:3, 3] = offset
        return m

    @staticmethod
    def perspective_projection(fov: float, aspect: float, near: float, far: float) -> np.ndarray:
        """
        Create perspective projection matrix.

        Args:
            fov: Vertical field of view in radians
            aspect: Aspect ratio (width/height)
            near: Near plane distance
            far: Far plane distance

        Returns:
            4x4 projection matrix
        """
        f = 1.0 / math.tan(fov / 2.0)
        m = np.zeros((4, 4), dtype=np.float32)

        m[0, 0] = f / aspect
        m[1, 1] = f
        m[2, 2] = (far + near) / (near - far)
        m[2, 3] = (2.0 * far * near) / (near - far)
        m[3, 2] = -1.0

        return m


class PerspectiveCamera(Camera):
    """
    Fixed perspective camera looking down the -z axis.

    Only the aspect ratio changes after construction; call
    update_projection_matrix() after changing it.
    """

    def __init__(self, fov: float = 75.0, aspect: float = 1.0,
                 near: float = 0.1, far: float = 1000.0,
                 position: Optional[Sequence[float]] = None):
        """
        Initialize perspective camera.

        Args:
            fov: Vertical field of view in degrees
            aspect: Aspect ratio (width/height)
            near: Near clip plane
            far: Far clip plane
            position: Camera position (default: origin)
        """
        self.fov = fov
        self.aspect = aspect
        self.near = near
        self.far = far
        self.position = np.array(position if position is not None else (0.0, 0.0, 0.0),
                                 dtype=np.float32)

        self.projection_matrix = np.eye(4, dtype=np.float32)
        self.update_projection_matrix()

    def update_projection_matrix(self):
        """Recompute projection matrix from fov/aspect/near/far"""
        self.projection_matrix = self.perspective_projection(
            math.radians(self.fov), self.aspect, self.near, self.far
        )

    def set_viewport(self, width: int, height: int):
        """Track new viewport dimensions"""
        self.aspect = width / height
        self.update_projection_matrix()

    def get_camera_position(self) -> np.ndarray:
        """Get camera position"""
        return self.position.copy()

    def get_view_matrix(self) -> np.ndarray:
        """Get view matrix (inverse of the camera translation)"""
        return self.translation(-self.position)

    def get_projection_matrix(self) -> np.ndarray:
        """Get projection matrix"""
        return self.projection_matrix
