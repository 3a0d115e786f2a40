"""
Shader Manager for loading and compiling GLSL shaders.

Supports:
- Shader file loading from the package shader directory
- #include directives for shared code (common/*.glsl)
"""

import logging
import moderngl as mgl
from pathlib import Path
from typing import Dict, Optional, Union
import re

logger = logging.getLogger(__name__)

DEFAULT_SHADER_DIR = Path(__file__).parent.parent / "shaders"


class ShaderManager:
    """
    Manages shader source loading and program compilation.

    Sources are cached; compiled programs are not. Every call to
    compile_program() returns a new program owned by the caller.
    """

    def __init__(self, shader_dir: Union[str, Path, None] = None,
                 ctx: Optional[mgl.Context] = None):
        """
        Initialize ShaderManager.

        Args:
            shader_dir: Directory containing shader files
            ctx: ModernGL context (None allows loading sources only)
        """
        self.shader_dir = Path(shader_dir) if shader_dir is not None else DEFAULT_SHADER_DIR
        if not self.shader_dir.exists():
            raise FileNotFoundError(f"Shader directory does not exist: {self.shader_dir}")

        self.ctx = ctx
        self._shader_cache: Dict[str, str] = {}

    def _resolve_includes(self, source: str, base_path: Path, included_files=None) -> str:
        """
        Resolve #include directives in shader source.

        Supports:
        - #include "path/to/file.glsl"  (relative to the including file)
        - #include <common/file.glsl>  (relative to the shader directory)

        Args:
            source: Shader source code
            base_path: Path of the file being resolved
            included_files: Files already included (prevents circular includes)

        Returns:
            Source code with includes resolved
        """
        if included_files is None:
            included_files = set()
        result_lines = []

        for line in source.split('\n'):
            include_match = re.match(r'\s*#include\s+["<](.+?)[">]', line)
            if not include_match:
                result_lines.append(line)
                continue

            include_path = include_match.group(1)
            if include_path.startswith('common/'):
                include_file = self.shader_dir / include_path
            else:
                include_file = base_path.parent / include_path

            if include_file in included_files:
                continue

            if not include_file.exists():
                raise FileNotFoundError(f"Included shader file not found: {include_file}")

            included_files.add(include_file)
            resolved = self._resolve_includes(include_file.read_text(), include_file, included_files)
            result_lines.append(f"// Included from {include_file.name}")
            result_lines.extend(resolved.split('\n'))
            result_lines.append(f"// End include {include_file.name}")

        return '\n'.join(result_lines)

    def load_shader_source(self, shader_name: str, shader_type: str = 'frag') -> str:
        """
        Load shader source code with include resolution.

        Args:
            shader_name: Name of shader (without extension)
            shader_type: 'vert' or 'frag'

        Returns:
            Resolved shader source code
        """
        possible_paths = [
            self.shader_dir / f"{shader_name}.{shader_type}",
            self.shader_dir / shader_type / f"{shader_name}.{shader_type}",
        ]

        shader_path = next((p for p in possible_paths if p.exists()), None)
        if shader_path is None:
            raise FileNotFoundError(
                f"Shader not found: {shader_name}.{shader_type}. "
                f"Searched in: {[str(p) for p in possible_paths]}"
            )

        cache_key = str(shader_path)
        if cache_key in self._shader_cache:
            return self._shader_cache[cache_key]

        source = self._resolve_includes(shader_path.read_text(), shader_path)
        self._shader_cache[cache_key] = source

        return source

    def compile_program(self, vertex_shader: str, fragment_shader: str) -> mgl.Program:
        """
        Compile a new shader program.

        Args:
            vertex_shader: Name of vertex shader (without extension)
            fragment_shader: Name of fragment shader (without extension)

        Returns:
            Compiled shader program
        """
        if self.ctx is None:
            raise RuntimeError("ShaderManager has no OpenGL context to compile with")

        vert_source = self.load_shader_source(vertex_shader, 'vert')
        frag_source = self.load_shader_source(fragment_shader, 'frag')

        try:
            program = self.ctx.program(
                vertex_shader=vert_source,
                fragment_shader=frag_source
            )
        except Exception as e:
            raise RuntimeError(
                f"Failed to compile shader program ({vertex_shader}, {fragment_shader}): {e}"
            ) from e

        logger.debug("Compiled shader program %s/%s", vertex_shader, fragment_shader)
        return program

    def clear_cache(self):
        """Clear shader source cache"""
        self._shader_cache.clear()

