import random
import sys
import threading
import time
from enum import Enum
from queue import Empty, Full, Queue


class Level(Enum):
    INFO = 0
    WARN = 1
    ERR = 2
    DBUG = 3


class Context(threading.local):
    def __init__(self):
        super().__init__()
        self.trace_id = 0
        self.span_id = 0
        self.tags = ""
        self.sample = True


ctx = Context()


def gen_id():
    return random.getrandbits(64)


class Logger:
    """Buffered trace logger. Lines are queued by callers and written by a daemon thread."""

    _instance = None
    _lock = threading.Lock()

    @classmethod
    def get(cls):
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = Logger()
        return cls._instance

    def __init__(self, maxsize: int = 8192):
        self.buffer = Queue(maxsize=maxsize)
        self.running = True
        self.file = None
        self.echo = False
        self.sample_rate = 1.0
        self.dropped = 0
        self.worker = threading.Thread(target=self.process, daemon=True)
        self.worker.start()

    def process(self):
        while self.running:
            try:
                line = self.buffer.get(timeout=0.1)
            except Empty:
                continue
            self._emit(line)
            if self.file and self.buffer.empty():
                self.file.flush()
            self.buffer.task_done()

        # drain what was queued before close()
        while True:
            try:
                line = self.buffer.get_nowait()
            except Empty:
                break
            self._emit(line)
            self.buffer.task_done()
        if self.file:
            self.file.flush()

    def _emit(self, line: str):
        if self.file:
            self.file.write(line)
        if self.echo:
            sys.stderr.write(line)

    def open(self, path: str):
        if self.file:
            self.file.close()
        self.file = open(path, "a")

    def set_sampling(self, rate: float):
        self.sample_rate = max(0.0, min(1.0, rate))

    def should_sample(self) -> bool:
        return random.random() <= self.sample_rate

    def format(self, level: Level, msg: str) -> str:
        now = int(time.time() * 1e9)
        tags_str = getattr(ctx, "tags", "") or "-"
        trace_id = getattr(ctx, "trace_id", 0)
        span_id = getattr(ctx, "span_id", 0)
        return f"{now:016x} {trace_id:016x} {span_id:016x} {level.value} [{tags_str}] {msg}\n"

    def write(self, level: Level, msg: str):
        # errors are never sampled out
        if not getattr(ctx, "sample", True) and level != Level.ERR:
            return
        try:
            self.buffer.put_nowait(self.format(level, msg))
        except Full:
            self.dropped += 1

    def flush(self):
        self.buffer.join()
        if self.file:
            self.file.flush()

    def close(self):
        if not self.running:
            return
        self.running = False
        self.worker.join()
        if self.file:
            self.file.close()
            self.file = None


class Span:
    def __init__(self, name):
        self.name = name
        self.prev_trace_id = getattr(ctx, "trace_id", 0)
        self.prev_span_id = getattr(ctx, "span_id", 0)
        self.prev_tags = getattr(ctx, "tags", "")
        self.prev_sample = getattr(ctx, "sample", True)

    def __enter__(self):
        if getattr(ctx, "trace_id", 0) == 0:
            ctx.trace_id = gen_id()
            ctx.sample = Logger.get().should_sample()
        ctx.span_id = gen_id()
        Logger.get().write(Level.DBUG, f"> {self.name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            Logger.get().write(Level.ERR, f"! {self.name}: {exc_type.__name__}: {exc_val}")
        Logger.get().write(Level.DBUG, f"< {self.name}")
        ctx.trace_id = self.prev_trace_id
        ctx.span_id = self.prev_span_id
        ctx.tags = self.prev_tags
        ctx.sample = self.prev_sample


def add_tag(key, value):
    k = str(key).replace(" ", "_").replace(":", "_")
    v = str(value).replace(" ", "_").replace(":", "_")
    ctx.tags = getattr(ctx, "tags", "") + f"{k}:{v};"


def init(path, echo=False):
    logger = Logger.get()
    if path:
        logger.open(path)
    logger.echo = echo


def sample(rate):
    Logger.get().set_sampling(rate)


def info(msg):
    Logger.get().write(Level.INFO, msg)


def warn(msg):
    Logger.get().write(Level.WARN, msg)


def err(msg):
    Logger.get().write(Level.ERR, msg)


def tag(k, v):
    add_tag(k, v)
