"""Exceptions raised by the draw-list engine."""


class CoreGraphicsError(Exception):
    """Base class for every precondition failure in coregfx."""


class AlreadyLoadingError(CoreGraphicsError):
    """Raised when files are registered after load() has started."""


class AlreadyLoadedError(CoreGraphicsError):
    """Raised when load() is called a second time."""


class NotReadyError(CoreGraphicsError):
    """Raised when drawing or rendering before every asset has finished loading."""


class DeadWrapError(CoreGraphicsError, LookupError):
    """Raised when moving or re-depthing a wrap that no longer belongs to a draw list."""

    def __init__(self, wrap: object, message: str) -> None:
        self.wrap = wrap
        super().__init__(message)


class UnknownAssetError(CoreGraphicsError, KeyError):
    """Raised when drawing an image name that was never registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"No image registered under {name!r}")


class AssetFailedError(CoreGraphicsError):
    """Raised when drawing an image whose fetch failed."""

    def __init__(self, name: str, cause: BaseException | None = None) -> None:
        self.name = name
        self.cause = cause
        super().__init__(f"Image {name!r} failed to load: {cause}")


class AssetLoadError(CoreGraphicsError):
    """Reported by asset sources when a file cannot be read or decoded."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"{path}: {reason}")
