import pytest

from landing.core.shader_manager import ShaderManager


@pytest.fixture
def shader_dir(tmp_path):
    (tmp_path / "common").mkdir()
    (tmp_path / "common" / "util.glsl").write_text("float twice(float x) { return 2.0 * x; }")
    (tmp_path / "common" / "both.glsl").write_text('#include <common/util.glsl>\nfloat four(float x) { return twice(twice(x)); }')
    (tmp_path / "basic.vert").write_text("#version 330\nvoid main() {}")
    (tmp_path / "basic.frag").write_text("#version 330\n#include <common/util.glsl>\n#include <common/both.glsl>\nvoid main() {}")
    (tmp_path / "frag").mkdir()
    (tmp_path / "frag" / "nested.frag").write_text('#version 330\n#include "../common/util.glsl"\nvoid main() {}')
    return tmp_path


def test_missing_directory_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        ShaderManager(tmp_path / "nope")


def test_includes_are_inlined_once(shader_dir) -> None:
    source = ShaderManager(shader_dir).load_shader_source("basic", "frag")

    assert "#include" not in source
    assert source.count("float twice") == 1
    assert "float four" in source


def test_relative_include_from_subdirectory(shader_dir) -> None:
    source = ShaderManager(shader_dir).load_shader_source("nested", "frag")
    assert "float twice" in source


def test_missing_shader_raises(shader_dir) -> None:
    with pytest.raises(FileNotFoundError):
        ShaderManager(shader_dir).load_shader_source("absent", "frag")


def test_missing_include_raises(shader_dir) -> None:
    (shader_dir / "broken.frag").write_text("#include <common/missing.glsl>")
    with pytest.raises(FileNotFoundError):
        ShaderManager(shader_dir).load_shader_source("broken", "frag")


def test_compile_requires_context(shader_dir) -> None:
    with pytest.raises(RuntimeError):
        ShaderManager(shader_dir).compile_program("basic", "basic")


def test_compile_failure_is_wrapped(shader_dir, fake_ctx) -> None:
    fake_ctx.fail_on = "program"
    with pytest.raises(RuntimeError, match="basic"):
        ShaderManager(shader_dir, fake_ctx).compile_program("basic", "basic")

