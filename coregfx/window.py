import time

import glfw
import moderngl
import numpy as np
import skia

from coregfx.config import GraphicsConfig
from coregfx.surface import SkiaSurface
from coregfx.timers import TimerQueue
from lib import tlog

BLIT_VERT = """
#version 330
in vec2 in_pos;
in vec2 in_uv;
out vec2 uv;
void main() {
    gl_Position = vec4(in_pos, 0.0, 1.0);
    uv = in_uv;
}
"""

BLIT_FRAG = """
#version 330
in vec2 uv;
out vec4 fragColor;
uniform sampler2D tex;
void main() {
    fragColor = texture(tex, uv);
}
"""


class Window:
    """glfw window that shows a SkiaSurface and drives the timer queue each frame.

    The skia surface is rasterised on the CPU and uploaded to a texture that is
    blitted over the whole window.
    """

    def __init__(self, config: GraphicsConfig):
        self.config = config
        self.width, self.height = config.width, config.height
        self.window = None
        self.ctx = None
        self.surface = None
        self.on_resize = None
        self.frame_count = 0
        self.fps = 0.0
        self.last_heartbeat = time.perf_counter()

        with tlog.Span("window_startup"):
            tlog.info(f"Window: creating {self.width}x{self.height} '{config.title}'")

            if not glfw.init():
                tlog.err("Critical: GLFW initialization failed")
                raise RuntimeError("GLFW init failed")

            glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, 3)
            glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, 3)
            glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_CORE_PROFILE)
            glfw.window_hint(glfw.OPENGL_FORWARD_COMPAT, True)

            self.window = glfw.create_window(self.width, self.height, config.title, None, None)
            if not self.window:
                tlog.err("Critical: Window creation failed")
                glfw.terminate()
                raise RuntimeError("Window creation failed")

            glfw.make_context_current(self.window)
            glfw.swap_interval(1)
            glfw.set_framebuffer_size_callback(self.window, self._on_resize)
            glfw.set_key_callback(self.window, self._on_key)

            self.ctx = moderngl.create_context()
            tlog.info(f"GPU: {self.ctx.info['GL_RENDERER']} | OpenGL: {self.ctx.info['GL_VERSION']}")

            self._init_blit_pipeline()
            self._init_surface(self.width, self.height)

    def _init_surface(self, w, h):
        self.surface = SkiaSurface.raster(w, h)
        self.texture = self.ctx.texture((w, h), 4)
        if skia.kN32_ColorType == skia.kBGRA_8888_ColorType:
            self.texture.swizzle = "BGRA"

    def _init_blit_pipeline(self):
        # skia rows start at the top, GL textures at the bottom
        flip_verts = np.array([-1, -1, 0, 1, 1, -1, 1, 1, -1, 1, 0, 0, 1, 1, 1, 0], dtype="f4")
        self.vbo = self.ctx.buffer(flip_verts)
        self.program = self.ctx.program(vertex_shader=BLIT_VERT, fragment_shader=BLIT_FRAG)
        self.vao = self.ctx.vertex_array(self.program, [(self.vbo, "2f 2f", "in_pos", "in_uv")])

    def _on_resize(self, window, width, height):
        if width == 0 or height == 0:
            return
        tlog.info(f"Event: Window Resize -> {width}x{height}")
        self.width, self.height = width, height
        self.ctx.viewport = (0, 0, width, height)
        self.texture.release()
        self._init_surface(width, height)
        if self.on_resize:
            self.on_resize(self.surface)

    def _on_key(self, w, k, s, a, m):
        if k == glfw.KEY_ESCAPE and a == glfw.PRESS:
            glfw.set_window_should_close(self.window, True)

    def should_close(self) -> bool:
        return glfw.window_should_close(self.window)

    def present(self):
        image = self.surface.snapshot()
        self.texture.write(image.tobytes())
        self.ctx.screen.use()
        self.ctx.clear(0, 0, 0, 1)
        self.texture.use(0)
        self.vao.render(moderngl.TRIANGLE_STRIP)
        glfw.swap_buffers(self.window)

    def run_heartbeat(self, now):
        if now - self.last_heartbeat >= 5.0:
            self.fps = self.frame_count / (now - self.last_heartbeat)
            tlog.info(f"Heartbeat: FPS: {int(self.fps)}")
            self.frame_count = 0
            self.last_heartbeat = now

    def run(self, timers: TimerQueue, assets=None):
        """Poll, deliver asset completions, fire due timers, present. Until the window closes."""
        tlog.info("Entering main loop")
        while not self.should_close():
            glfw.poll_events()
            if assets is not None:
                assets.pump()
            timers.run_due()
            self.present()
            self.frame_count += 1
            self.run_heartbeat(time.perf_counter())
        tlog.info("Shutdown")

    def close(self):
        if self.window:
            glfw.destroy_window(self.window)
            self.window = None
        glfw.terminate()
