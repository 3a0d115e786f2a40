"""
Test doubles for the moderngl context.

FakeContext records every GL object it creates and how many times each was
released, so lifecycle tests run without a GPU.
"""

import pytest

from landing.core.render_engine import create_headless_context
from landing.errors import SurfaceUnavailableError
from landing.hosts import OffscreenHost


class FakeResource:
    def __init__(self, ctx, kind, **info):
        self.ctx = ctx
        self.kind = kind
        self.info = info
        self.release_count = 0
        ctx.resources.append(self)

    def release(self):
        self.release_count += 1
        self.ctx.events.append(("release", self.kind))


class FakeUniform:
    def __init__(self):
        self.value = None
        self.writes = []

    def write(self, data):
        self.writes.append(data)


class FakeProgram(FakeResource):
    def __init__(self, ctx, vertex_shader, fragment_shader):
        super().__init__(ctx, "program")
        self.vertex_shader = vertex_shader
        self.fragment_shader = fragment_shader
        self.uniforms = {}

    def __getitem__(self, name):
        return self.uniforms.setdefault(name, FakeUniform())


class FakeVertexArray(FakeResource):
    def __init__(self, ctx, program, content, index_buffer, index_element_size):
        super().__init__(ctx, "vertex_array")
        self.program = program
        self.content = content
        self.index_buffer = index_buffer
        self.index_element_size = index_element_size

    def render(self, mode=None):
        self.ctx.render_calls += 1


class FakeFramebuffer(FakeResource):
    def __init__(self, ctx, color_attachments, depth_attachment=None):
        super().__init__(ctx, "framebuffer")
        self.color_attachments = color_attachments
        self.depth_attachment = depth_attachment
        self.size = color_attachments[0].info["size"]

    def use(self):
        self.ctx.bound = self

    def read(self, components=3, dtype='f1'):
        width, height = self.size
        return bytes(width * height * components)


class FakeContext:
    """Subset of moderngl.Context used by the renderer"""

    version_code = 330

    def __init__(self, fail_on=None):
        self.resources = []
        self.render_calls = 0
        self.clear_calls = 0
        self.enabled = 0
        self.disabled = 0
        self.blend_func = None
        self.bound = None
        self.copies = []
        self.release_count = 0
        self.fail_on = fail_on
        # Ordered log of releases; tests may append their own entries
        self.events = []

    def _check(self, kind):
        if self.fail_on == kind:
            raise RuntimeError(f"cannot create {kind}")

    def enable(self, flags):
        self.enabled |= flags

    def disable(self, flags):
        self.disabled |= flags

    def program(self, vertex_shader, fragment_shader):
        self._check("program")
        return FakeProgram(self, vertex_shader, fragment_shader)

    def buffer(self, data):
        self._check("buffer")
        return FakeResource(self, "buffer", size=len(data))

    def vertex_array(self, program, content, index_buffer=None, index_element_size=4):
        self._check("vertex_array")
        return FakeVertexArray(self, program, content, index_buffer, index_element_size)

    def texture(self, size, components, **kwargs):
        self._check("texture")
        return FakeResource(self, "texture", size=size, components=components)

    def depth_texture(self, size):
        return FakeResource(self, "depth_texture", size=size)

    def renderbuffer(self, size, components=4, samples=0):
        self._check("renderbuffer")
        return FakeResource(self, "renderbuffer", size=size, samples=samples)

    def depth_renderbuffer(self, size, samples=0):
        return FakeResource(self, "depth_renderbuffer", size=size, samples=samples)

    def framebuffer(self, color_attachments=(), depth_attachment=None):
        self._check("framebuffer")
        return FakeFramebuffer(self, list(color_attachments), depth_attachment)

    def copy_framebuffer(self, dst, src):
        self.copies.append((dst, src))

    def clear(self, *color):
        self.clear_calls += 1

    def release(self):
        self.release_count += 1

    def of_kind(self, kind):
        return [r for r in self.resources if r.kind == kind]


class FakeClock:
    """Clock advancing by a fixed step on every call"""

    def __init__(self, start=100.0, step=1.0 / 60.0):
        self.now = start
        self.step = step
        self.samples = []

    def __call__(self):
        value = self.now
        self.samples.append(value)
        self.now += self.step
        return value


@pytest.fixture
def fake_ctx():
    return FakeContext()


@pytest.fixture
def host(fake_ctx):
    return OffscreenHost(800, 600, ctx=fake_ctx)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def gl_ctx():
    """Real headless context; skipped where no OpenGL 3.3 driver is available"""
    try:
        ctx = create_headless_context()
    except SurfaceUnavailableError as e:
        pytest.skip(str(e))
    yield ctx
    ctx.release()
