"""
Scene graph: tube meshes and the flat list that holds them.
"""

import math
from typing import Iterator, List, Optional

import moderngl as mgl
import numpy as np

from .geometry import TubeGeometry
from .shading import ShadingProgram


def rotation_z_matrix(angle: float) -> np.ndarray:
    """4x4 rotation about the depth axis"""
    c = math.cos(angle)
    s = math.sin(angle)
    m = np.eye(4, dtype=np.float32)
    m[0, 0] = c
    m[0, 1] = -s
    m[1, 0] = s
    m[1, 1] = c
    return m


class TubeMesh:
    """
    A tube geometry drawn with its own shading program.

    The mesh does not own the geometry or program; the renderer releases
    those. It does own the vertex array binding them together.
    """

    def __init__(self, ctx: mgl.Context, geometry: TubeGeometry,
                 material: ShadingProgram, name: str = ""):
        self.geometry = geometry
        self.material = material
        self.name = name or material.name
        self.rotation_z = 0.0

        geometry.upload(ctx)
        self.vao: Optional[mgl.VertexArray] = ctx.vertex_array(
            material.program,
            [(geometry.vbo, '3f 2f', 'in_position', 'in_uv')],
            index_buffer=geometry.ibo,
            index_element_size=4,
        )

    def model_matrix(self) -> np.ndarray:
        return rotation_z_matrix(self.rotation_z)

    def draw(self, view_projection: np.ndarray):
        """Draw with the given projection @ view matrix"""
        if self.vao is None:
            return
        self.material.write_mvp(view_projection @ self.model_matrix())
        self.vao.render(mgl.TRIANGLES)

    def release(self):
        """Release the vertex array binding"""
        if self.vao is not None:
            self.vao.release()
            self.vao = None


class Scene:
    """Ordered collection of meshes; draw order is insertion order"""

    def __init__(self):
        self.meshes: List[TubeMesh] = []

    def add(self, mesh: TubeMesh):
        self.meshes.append(mesh)

    def clear(self):
        self.meshes.clear()

    def __iter__(self) -> Iterator[TubeMesh]:
        return iter(self.meshes)

    def __len__(self) -> int:
        return len(self.meshes)
