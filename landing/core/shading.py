"""
Shading programs for the glow tube layers.

GlowShading describes one layer's colour ramp, glow falloff, pulse and
opacity cap. ShadingProgram uploads it as uniforms of tube.frag; shade()
is the same math in numpy, used to check and preview the layers.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import moderngl as mgl
import numpy as np

from .shader_manager import ShaderManager

logger = logging.getLogger(__name__)

Color = Tuple[float, float, float]


@dataclass(frozen=True)
class GlowShading:
    """Parameters of one tube layer's fragment shader"""
    name: str
    color_start: Color
    color_end: Color
    # Optional third stop, mixed in by u * accent_weight
    color_accent: Optional[Color]
    accent_weight: float
    falloff_exponent: float
    pulse_rate: float
    pulse_amplitude: float
    pulse_offset: float
    opacity: float
    vertex_shader: str = "tube"
    fragment_shader: str = "tube"
    fade_start: float = 0.85


STREAK_SHADING = GlowShading(
    name="streak",
    color_start=(1.0, 0.2, 0.1),
    color_end=(0.8, 0.1, 0.6),
    color_accent=(0.4, 0.05, 0.8),
    accent_weight=0.7,
    falloff_exponent=2.0,
    pulse_rate=2.0,
    pulse_amplitude=0.1,
    pulse_offset=0.9,
    opacity=0.8,
)

GLOW_SHADING = GlowShading(
    name="glow",
    color_start=(1.0, 0.3, 0.2),
    color_end=(0.6, 0.2, 0.8),
    color_accent=None,
    accent_weight=0.0,
    # Sharper falloff than the streak; the wider radius and low cap keep it soft
    falloff_exponent=4.0,
    pulse_rate=1.5,
    pulse_amplitude=0.05,
    pulse_offset=0.95,
    opacity=0.3,
)


def _mix(a, b, t):
    return a * (1.0 - t) + b * t


def smoothstep(edge0: float, edge1: float, x) -> np.ndarray:
    t = np.clip((np.asarray(x, dtype=np.float64) - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def glow_falloff(v, exponent: float) -> np.ndarray:
    return np.power(1.0 - np.abs(np.asarray(v, dtype=np.float64) - 0.5) * 2.0, exponent)


def end_fade(u, fade_start: float = 0.85) -> np.ndarray:
    u = np.asarray(u, dtype=np.float64)
    return np.where(u > fade_start, 1.0 - smoothstep(fade_start, 1.0, u), 1.0)


def pulse(time: float, rate: float, amplitude: float, offset: float) -> float:
    return float(np.sin(time * rate) * amplitude + offset)


def shade(params: GlowShading, u, v, time: float) -> np.ndarray:
    """
    Evaluate a layer's fragment colour.

    Args:
        params: Layer parameters
        u: Texture coordinate along the path (scalar or array)
        v: Texture coordinate around the tube (same shape as u)
        time: Value of the time uniform

    Returns:
        RGBA array with shape u.shape + (4,)
    """
    u = np.asarray(u, dtype=np.float64)
    v = np.asarray(v, dtype=np.float64)
    ut = u[..., None]

    color = _mix(np.array(params.color_start), np.array(params.color_end), ut)
    if params.color_accent is not None:
        color = _mix(color, np.array(params.color_accent), ut * params.accent_weight)

    glow = glow_falloff(v, params.falloff_exponent)
    fade = end_fade(u, params.fade_start)
    p = pulse(time, params.pulse_rate, params.pulse_amplitude, params.pulse_offset)

    rgb = color * (glow * p * fade)[..., None]
    alpha = glow * fade * params.opacity
    return np.concatenate([rgb, alpha[..., None]], axis=-1)


class ShadingProgram:
    """
    A compiled program configured for one layer, plus its time uniform.

    Each mesh owns its own instance; release() frees the GPU program once.
    """

    def __init__(self, shader_manager: ShaderManager, shading: GlowShading):
        self.shading = shading
        self.program: Optional[mgl.Program] = shader_manager.compile_program(
            shading.vertex_shader, shading.fragment_shader
        )
        self._time = 0.0
        self._released = False
        self._write_shading()
        self.set_time(0.0)

    def _write_shading(self):
        """Upload the layer parameters"""
        s = self.shading
        program = self.program
        program['colorStart'].value = s.color_start
        program['colorEnd'].value = s.color_end
        if s.color_accent is None:
            program['colorAccent'].value = s.color_end
            program['accentWeight'].value = 0.0
        else:
            program['colorAccent'].value = s.color_accent
            program['accentWeight'].value = s.accent_weight
        program['falloffExponent'].value = s.falloff_exponent
        program['fadeStart'].value = s.fade_start
        program['pulseParams'].value = (s.pulse_rate, s.pulse_amplitude, s.pulse_offset)
        program['opacity'].value = s.opacity

    @property
    def name(self) -> str:
        return self.shading.name

    @property
    def time(self) -> float:
        return self._time

    def set_time(self, value: float):
        """Push the time uniform"""
        self._time = value
        self.program['time'].value = value

    def write_mvp(self, mvp_matrix: np.ndarray):
        """Upload a row-major model-view-projection matrix"""
        # GLSL expects column-major
        self.program['mvpMatrix'].write(mvp_matrix.T.astype(np.float32).tobytes())

    def release(self):
        """Release the GPU program; later calls are no-ops"""
        if self._released:
            return
        self._released = True
        if self.program is not None:
            self.program.release()
        self.program = None
        logger.debug("Released shading program %s", self.name)

    @property
    def released(self) -> bool:
        return self._released
