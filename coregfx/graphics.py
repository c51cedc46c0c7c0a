"""CoreGraphics: a retained draw list on top of an immediate-mode drawing surface.

Before anything is drawn, image files are registered and load() is called.
Once loading has finished, each frame follows the cycle clear(), draw calls,
render(). draw/text wraps live for a single render; pdraw/ptext wraps persist
until killed. Draw arguments follow the HTML canvas drawImage/fillText
conventions (without the image or string itself).
"""

from dataclasses import dataclass
from enum import Enum, auto
from functools import partial

from coregfx.assets import AssetSource, FileAssetSource
from coregfx.depth import Depth
from coregfx.errors import (
    AlreadyLoadedError,
    AlreadyLoadingError,
    AssetFailedError,
    NotReadyError,
    UnknownAssetError,
)
from coregfx.surface import DrawingSurface
from coregfx.wrap import DrawKind, TextStyle, Wrap
from lib import tlog

# TextStyle field -> DrawingSurface attribute
TEXT_PROP_NAMES = {
    "font": "font",
    "color": "fill_style",
    "align": "text_align",
    "baseline": "text_baseline",
}


class LoadState(Enum):
    UNLOADED = auto()
    LOADING = auto()
    LOADED = auto()


class AssetState(Enum):
    PENDING = auto()
    LOADED = auto()
    FAILED = auto()


@dataclass
class Asset:
    name: str
    path: str
    state: AssetState = AssetState.PENDING
    image: object = None
    error: BaseException | None = None


class CoreGraphics:
    def __init__(
        self,
        surface: DrawingSurface,
        filenames=(),
        extension: str = "",
        prefix: str = "",
        assets: AssetSource | None = None,
        clear_color="#000000",
    ):
        self.assets = assets
        self.clear_color = clear_color
        self.state = LoadState.UNLOADED
        self.registry: dict[str, Asset] = {}
        self.completed = 0
        self._frames = Depth()
        self._persistants = Depth()
        self.props = TextStyle()
        self.attach(surface)
        self.register_files(filenames, extension, prefix)

    def attach(self, surface: DrawingSurface):
        """Render onto surface from now on, e.g. after a window resize."""
        self.surface = surface
        self._dispatch = {
            DrawKind.IMAGE: surface.draw_image,
            DrawKind.TEXT: surface.fill_text,
        }
        # unset keys take the surface defaults so every text snapshot is complete
        defaults = TextStyle(**{key: getattr(surface, attr) for key, attr in TEXT_PROP_NAMES.items()})
        self.props = defaults.merged(dict(self.props.items()))
        self._apply_style(self.props.items())

    @property
    def frames(self) -> Depth:
        return self._frames

    @property
    def persistants(self) -> Depth:
        return self._persistants

    # -- loading --

    def register_files(self, filenames, extension: str = "", prefix: str = ""):
        """Add images to the roster. Later references use the bare name, without prefix or extension."""
        if self.state is not LoadState.UNLOADED:
            raise AlreadyLoadingError("cannot register files once load has started")
        for name in filenames:
            if name in self.registry:
                tlog.warn(f"CoreGraphics: '{name}' registered twice, keeping the latest path")
            self.registry[name] = Asset(name, prefix + name + extension)

    def load(self):
        if self.state is not LoadState.UNLOADED:
            raise AlreadyLoadedError("load() has already been called")
        if not self.registry:
            self.state = LoadState.LOADED
            tlog.info("CoreGraphics: nothing registered, loaded")
            return
        if self.assets is None:
            self.assets = FileAssetSource()

        self.state = LoadState.LOADING
        with tlog.Span("asset_load"):
            tlog.info(f"CoreGraphics: loading {len(self.registry)} images")
            for asset in list(self.registry.values()):
                self.assets.fetch(asset.path, partial(self._on_load, asset), partial(self._on_error, asset))

    def _complete(self, asset: Asset) -> bool:
        if asset.state is not AssetState.PENDING:
            tlog.warn(f"CoreGraphics: duplicate completion for '{asset.name}' ignored")
            return False
        self.completed += 1
        return True

    def _finish_if_done(self):
        if self.completed == len(self.registry):
            self.state = LoadState.LOADED
            failed = len(self.failed())
            tlog.info(f"CoreGraphics: load complete ({failed} failed)")

    def _on_load(self, asset: Asset, image):
        if self._complete(asset):
            asset.image = image
            asset.state = AssetState.LOADED
            self._finish_if_done()

    def _on_error(self, asset: Asset, error: BaseException):
        if self._complete(asset):
            asset.error = error
            asset.state = AssetState.FAILED
            tlog.err(f"CoreGraphics: failed to load '{asset.name}' from {asset.path}: {error}")
            self._finish_if_done()

    def load_progress(self) -> float:
        """-1 before load(), 0..1 while loading, 1 once every image has finished."""
        if self.state is LoadState.UNLOADED:
            return -1
        if not self.registry:
            return 1
        return self.completed / len(self.registry)

    def is_loaded(self) -> bool:
        return self.state is LoadState.LOADED

    def failed(self) -> list[str]:
        return [a.name for a in self.registry.values() if a.state is AssetState.FAILED]

    def image(self, name: str):
        asset = self.registry.get(name)
        if asset is None:
            raise UnknownAssetError(name)
        if asset.state is AssetState.FAILED:
            raise AssetFailedError(name, asset.error)
        return asset.image

    # -- drawing --

    def clear(self):
        """Erase the surface for a new frame. Draw lists are left alone."""
        self.surface.fill_rect(0, 0, self.surface.width, self.surface.height, self.clear_color)

    def _require_loaded(self, action: str):
        if self.state is not LoadState.LOADED:
            raise NotReadyError(f"cannot {action} until loaded")

    def _submit(self, kind: DrawKind, target: Depth, depth, content, style: TextStyle, args) -> Wrap:
        self._require_loaded("draw")
        wrap = Wrap(kind, style, content, *args)
        target.add(depth, wrap)
        return wrap

    def draw(self, name, depth, *args) -> Wrap:
        """Draw an image for the next render only."""
        self._require_loaded("draw")
        return self._submit(DrawKind.IMAGE, self._frames, depth, self.image(name), TextStyle(), args)

    def pdraw(self, name, depth, *args) -> Wrap:
        """Draw an image on every render until the returned wrap is killed."""
        self._require_loaded("draw")
        return self._submit(DrawKind.IMAGE, self._persistants, depth, self.image(name), TextStyle(), args)

    def text(self, txt, depth, *args) -> Wrap:
        return self._submit(DrawKind.TEXT, self._frames, depth, txt, self.props, args)

    def ptext(self, txt, depth, *args) -> Wrap:
        return self._submit(DrawKind.TEXT, self._persistants, depth, txt, self.props, args)

    def set_text(self, props=None, **kwargs):
        """Set font, color, align and/or baseline for text drawn after this call."""
        changes = {**(props or {}), **kwargs}
        self.props = self.props.merged(changes)
        self._apply_style(changes.items())

    def _apply_style(self, items):
        for key, value in items:
            if value is not None:
                setattr(self.surface, TEXT_PROP_NAMES[key], value)

    def render(self):
        self._require_loaded("render")
        depths = sorted(set(self._persistants.keys()) | set(self._frames.keys()))
        seen = set()
        for n in depths:
            for wrap in self._persistants.get(n) + self._frames.get(n):
                if not wrap.alive or wrap in seen:
                    # killed or moved deeper by an animation callback earlier this pass
                    continue
                seen.add(wrap)
                wrap.step()
                self._apply_style(wrap.style.items())
                self._dispatch[wrap.kind](wrap.content, *wrap.args)
        self._frames.clear()
        self._apply_style(self.props.items())

    def kill_all(self):
        self._frames.clear()
        self._persistants.clear()
