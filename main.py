from coregfx.assets import FileAssetSource
from coregfx.config import load_config
from coregfx.graphics import CoreGraphics
from coregfx.phase import Phase
from coregfx.timers import TimerQueue
from coregfx.window import Window
from lib import tlog


def main():
    config = load_config()
    tlog.init(config.log_path, echo=config.log_echo)
    tlog.sample(config.log_sample_rate)

    window = Window(config)
    timers = TimerQueue.get()
    assets = FileAssetSource()
    gfx = CoreGraphics(window.surface, ["logo"], ".png", config.asset_prefix, assets=assets, clear_color=config.clear_color)
    window.on_resize = gfx.attach

    cx, cy = config.width / 2, config.height / 2
    state = {"bounces": 0}

    def bounce(wrap):
        # ping-pong between the two ends of the screen
        state["bounces"] += 1
        x = 40 if wrap.args[0] > cx else config.width - 104
        wrap.move_animated("SMOOTH", bounce, config.fps, x, *wrap.args[1:])

    def loading_draw(phase):
        gfx.clear()
        if gfx.is_loaded():
            phase.switch_to(scene, config.fps)

    def scene_init(phase):
        gfx.set_text(font="bold 48px Inter, sans-serif", color="#00ff64", align="center", baseline="middle")
        title = gfx.ptext("coregfx", 10, cx, cy - 120)
        title.move_animated("LINEAR", None, config.fps, cx, cy - 160)
        if "logo" in gfx.failed():
            gfx.set_text(font="18px sans-serif", color="#ff3232")
            gfx.ptext("logo.png missing", 5, cx, cy)
        else:
            gfx.pdraw("logo", 5, 40, cy - 32, 64, 64).move_animated("SMOOTH", bounce, config.fps, config.width - 104, cy - 32, 64, 64)
        gfx.set_text(font="14px sans-serif", color="white", align="left", baseline="top")

    def scene_draw(phase):
        gfx.clear()
        gfx.text(f"bounces: {state['bounces']}", 100, 10, 10)
        gfx.render()

    def scene_end(phase):
        gfx.kill_all()

    loading = Phase(update=None, draw=loading_draw, name="loading", timers=timers)
    scene = Phase(init=scene_init, draw=scene_draw, end=scene_end, name="scene", timers=timers)

    gfx.load()
    loading.begin(config.fps)
    try:
        window.run(timers, assets)
    finally:
        scene.stop()
        assets.close()
        window.close()
        tlog.Logger.get().close()


if __name__ == "__main__":
    main()
