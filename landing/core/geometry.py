"""
Curve and tube geometry for the glow streak.

The tube is swept along an arc-length parameterised quadratic Bezier using
parallel-transported Frenet frames, so the cross-section does not twist.
"""

import math
import numpy as np
import moderngl as mgl
from typing import Optional, Sequence, Tuple, Union

ArrayLike = Union[float, np.ndarray]

# Control points of the landing page streak: left below the midline,
# middle above, right near the midline.
STREAK_CONTROL_POINTS = (
    (-15.0, -4.0, 0.0),
    (2.0, 3.0, 0.0),
    (18.0, 0.8, 0.0),
)


class QuadraticBezierCurve:
    """
    Immutable quadratic Bezier curve in 3D.

    point(t) uses the raw Bezier parameter; point_at(u) and tangent_at(u)
    use normalised arc length, which is what the tube sweep samples.
    """

    def __init__(self, v0: Sequence[float], v1: Sequence[float], v2: Sequence[float],
                 arc_length_divisions: int = 200):
        self._points = tuple(tuple(float(c) for c in v) for v in (v0, v1, v2))
        for point in self._points:
            if len(point) != 3:
                raise ValueError(f"Control points must be 3D, got {point}")
        self.arc_length_divisions = arc_length_divisions
        self._lengths: Optional[np.ndarray] = None

    @classmethod
    def streak(cls) -> "QuadraticBezierCurve":
        """Curve used by the landing page background"""
        return cls(*STREAK_CONTROL_POINTS)

    @property
    def control_points(self) -> Tuple[Tuple[float, float, float], ...]:
        return self._points

    def _arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        return tuple(np.array(p, dtype=np.float64) for p in self._points)

    def point(self, t: ArrayLike) -> np.ndarray:
        """Evaluate the curve at Bezier parameter t (scalar or array)"""
        p0, p1, p2 = self._arrays()
        t = np.asarray(t, dtype=np.float64)[..., None]
        s = 1.0 - t
        return s * s * p0 + 2.0 * s * t * p1 + t * t * p2

    def derivative(self, t: ArrayLike) -> np.ndarray:
        """First derivative with respect to t"""
        p0, p1, p2 = self._arrays()
        t = np.asarray(t, dtype=np.float64)[..., None]
        return 2.0 * (1.0 - t) * (p1 - p0) + 2.0 * t * (p2 - p1)

    def arc_lengths(self) -> np.ndarray:
        """Cumulative arc length at arc_length_divisions + 1 evenly spaced t"""
        if self._lengths is None:
            ts = np.linspace(0.0, 1.0, self.arc_length_divisions + 1)
            pts = self.point(ts)
            seg = np.linalg.norm(np.diff(pts, axis=0), axis=1)
            self._lengths = np.concatenate([[0.0], np.cumsum(seg)])
        return self._lengths

    def length(self) -> float:
        return float(self.arc_lengths()[-1])

    def u_to_t(self, u: ArrayLike) -> np.ndarray:
        """Map normalised arc length u in [0, 1] to Bezier parameter t"""
        lengths = self.arc_lengths()
        ts = np.linspace(0.0, 1.0, self.arc_length_divisions + 1)
        target = np.clip(np.asarray(u, dtype=np.float64), 0.0, 1.0) * lengths[-1]
        return np.interp(target, lengths, ts)

    def point_at(self, u: ArrayLike) -> np.ndarray:
        return self.point(self.u_to_t(u))

    def tangent_at(self, u: ArrayLike) -> np.ndarray:
        """Unit tangent at normalised arc length u"""
        d = self.derivative(self.u_to_t(u))
        return d / np.linalg.norm(d, axis=-1, keepdims=True)


def _rotate(vector: np.ndarray, axis: np.ndarray, angle: float) -> np.ndarray:
    """Rotate vector about a unit axis (Rodrigues)"""
    c = math.cos(angle)
    s = math.sin(angle)
    return vector * c + np.cross(axis, vector) * s + axis * np.dot(axis, vector) * (1.0 - c)


def compute_frenet_frames(curve: QuadraticBezierCurve,
                          segments: int) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Compute parallel-transported frames along the curve.

    Args:
        curve: Path curve
        segments: Number of tubular segments

    Returns:
        (tangents, normals, binormals), each shaped (segments + 1, 3)
    """
    us = np.arange(segments + 1) / segments
    tangents = curve.tangent_at(us)
    normals = np.zeros_like(tangents)
    binormals = np.zeros_like(tangents)

    # Initial normal: axis along the smallest tangent component
    t0 = tangents[0]
    axis = np.zeros(3)
    axis[int(np.argmin(np.abs(t0)))] = 1.0
    vec = np.cross(t0, axis)
    vec /= np.linalg.norm(vec)
    normals[0] = np.cross(t0, vec)
    binormals[0] = np.cross(t0, normals[0])

    for i in range(1, segments + 1):
        normals[i] = normals[i - 1]
        vec = np.cross(tangents[i - 1], tangents[i])
        norm = np.linalg.norm(vec)
        if norm > np.finfo(np.float64).eps:
            vec /= norm
            theta = math.acos(float(np.clip(np.dot(tangents[i - 1], tangents[i]), -1.0, 1.0)))
            normals[i] = _rotate(normals[i], vec, theta)
        binormals[i] = np.cross(tangents[i], normals[i])

    return tangents, normals, binormals


class TubeGeometry:
    """
    Open tube swept along a curve.

    Vertex layout is interleaved position (3f) + uv (2f); u runs along the
    path, v around the circumference.
    """

    def __init__(self, curve: QuadraticBezierCurve,
                 tubular_segments: int = 200,
                 radius: float = 1.0,
                 radial_segments: int = 32):
        self.curve = curve
        self.tubular_segments = tubular_segments
        self.radius = radius
        self.radial_segments = radial_segments

        self.positions, self.uvs = self._build_vertices()
        self.indices = self._build_indices()

        # GPU buffers, created by upload()
        self.vbo: Optional[mgl.Buffer] = None
        self.ibo: Optional[mgl.Buffer] = None
        self._released = False

    def _build_vertices(self) -> Tuple[np.ndarray, np.ndarray]:
        _, normals, binormals = compute_frenet_frames(self.curve, self.tubular_segments)
        us = np.arange(self.tubular_segments + 1) / self.tubular_segments
        centers = self.curve.point_at(us)

        angles = np.arange(self.radial_segments + 1) / self.radial_segments * 2.0 * math.pi
        sin = np.sin(angles)[None, :, None]
        cos = -np.cos(angles)[None, :, None]
        ring = cos * normals[:, None, :] + sin * binormals[:, None, :]
        ring /= np.linalg.norm(ring, axis=-1, keepdims=True)

        positions = centers[:, None, :] + self.radius * ring

        vs = np.arange(self.radial_segments + 1) / self.radial_segments
        uu, vv = np.meshgrid(us, vs, indexing='ij')
        uvs = np.stack([uu, vv], axis=-1)

        return (positions.reshape(-1, 3).astype(np.float32),
                uvs.reshape(-1, 2).astype(np.float32))

    def _build_indices(self) -> np.ndarray:
        stride = self.radial_segments + 1
        j, i = np.meshgrid(np.arange(1, self.tubular_segments + 1),
                           np.arange(1, self.radial_segments + 1), indexing='ij')
        a = stride * (j - 1) + (i - 1)
        b = stride * j + (i - 1)
        c = stride * j + i
        d = stride * (j - 1) + i
        faces = np.stack([a, b, d, b, c, d], axis=-1)
        return faces.reshape(-1).astype(np.uint32)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    def interleaved(self) -> np.ndarray:
        """Vertex data as (N, 5) float32: x, y, z, u, v"""
        return np.hstack([self.positions, self.uvs]).astype(np.float32)

    def upload(self, ctx: mgl.Context) -> "TubeGeometry":
        """Create GPU buffers (once)"""
        if self._released:
            raise RuntimeError("Cannot upload a released geometry")
        if self.vbo is None:
            self.vbo = ctx.buffer(self.interleaved().tobytes())
            self.ibo = ctx.buffer(self.indices.tobytes())
        return self

    def release(self):
        """Release GPU buffers; later calls are no-ops"""
        if self._released:
            return
        self._released = True
        for buffer in (self.vbo, self.ibo):
            if buffer is not None:
                buffer.release()
        self.vbo = None
        self.ibo = None

    @property
    def released(self) -> bool:
        return self._released
