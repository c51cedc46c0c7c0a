import os
import sys
from concurrent.futures import ThreadPoolExecutor
from queue import Empty, SimpleQueue
from typing import Callable, Protocol

import skia

from coregfx.errors import AssetLoadError
from lib import tlog

OnLoad = Callable[[object], None]
OnError = Callable[[BaseException], None]


def resource_path(relative_path):
    """Get absolute path to resource, works for dev and for PyInstaller"""
    base_path = getattr(sys, "_MEIPASS", None) or os.path.abspath(".")
    return os.path.join(base_path, relative_path)


class AssetSource(Protocol):
    """Fetches an image for a path. Exactly one of on_load / on_error fires, once."""

    def fetch(self, path: str, on_load: OnLoad, on_error: OnError) -> None: ...


def decode_image(path: str) -> skia.Image:
    full_path = resource_path(path)
    if not os.path.exists(full_path):
        raise AssetLoadError(full_path, "file not found")
    try:
        image = skia.Image.MakeFromEncoded(skia.Data.MakeFromFileName(full_path))
    except Exception as e:
        raise AssetLoadError(full_path, f"could not decode image: {e}") from e
    if image is None:
        raise AssetLoadError(full_path, "could not decode image")
    return image


class FileAssetSource:
    """Decodes image files on a worker pool.

    Completions are queued and only delivered from pump(), so callers see their
    callbacks on whichever thread drives the frame loop.
    """

    def __init__(self, max_workers: int = 4, decoder: Callable[[str], object] = decode_image):
        self.decoder = decoder
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="coregfx-assets")
        self._done = SimpleQueue()
        self.pending = 0

    def fetch(self, path, on_load, on_error):
        self.pending += 1
        self._executor.submit(self._work, path, on_load, on_error)

    def _work(self, path, on_load, on_error):
        try:
            image = self.decoder(path)
        except Exception as e:  # reported through on_error on the pumping thread
            self._done.put((on_error, e))
        else:
            self._done.put((on_load, image))

    def pump(self) -> int:
        """Deliver finished fetches. Returns how many callbacks ran."""
        delivered = 0
        while True:
            try:
                callback, value = self._done.get_nowait()
            except Empty:
                return delivered
            self.pending -= 1
            delivered += 1
            callback(value)

    def wait(self, timeout: float | None = None) -> int:
        """Block until every fetch has finished, then pump. Mostly for scripts and tests."""
        delivered = 0
        while self.pending:
            try:
                callback, value = self._done.get(timeout=timeout)
            except Empty:
                tlog.warn(f"FileAssetSource: {self.pending} fetches still pending after {timeout}s")
                break
            self.pending -= 1
            delivered += 1
            callback(value)
        return delivered

    def close(self):
        self._executor.shutdown(wait=True)
