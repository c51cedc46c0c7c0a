import re
from typing import Protocol

import skia

from lib import tlog


class DrawingSurface(Protocol):
    """Immediate-mode target the draw lists are rendered onto.

    Mirrors the subset of an HTML canvas context that CoreGraphics needs. Style
    attributes apply to every fill_text call made after they are set.
    """

    font: str
    fill_style: object
    text_align: str
    text_baseline: str

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def fill_rect(self, x: float, y: float, w: float, h: float, color=None) -> None: ...

    def draw_image(self, image, *args: float) -> None: ...

    def fill_text(self, text: str, x: float, y: float, max_width: float | None = None) -> None: ...


NAMED_COLORS = {
    "black": skia.ColorBLACK,
    "white": skia.ColorWHITE,
    "red": skia.ColorRED,
    "green": skia.ColorGREEN,
    "blue": skia.ColorBLUE,
    "yellow": skia.ColorYELLOW,
    "cyan": skia.ColorCYAN,
    "magenta": skia.ColorMAGENTA,
    "gray": skia.ColorGRAY,
    "grey": skia.ColorGRAY,
    "transparent": skia.ColorTRANSPARENT,
}

ALIGNMENTS = ("start", "end", "left", "right", "center")
BASELINES = ("alphabetic", "top", "hanging", "middle", "ideographic", "bottom")

_FONT_RE = re.compile(r"^\s*(?P<style>(?:(?:bold|italic|normal|oblique)\s+)*)(?P<size>\d+(?:\.\d+)?)px\s+(?P<family>.+?)\s*$", re.I)


def parse_color(value) -> int:
    """Accept '#rgb', '#rrggbb', '#rrggbbaa', a colour name, an (r, g, b[, a]) tuple or a skia colour int."""
    if isinstance(value, int):
        return value
    if isinstance(value, (tuple, list)):
        if len(value) not in (3, 4):
            raise ValueError(f"Colour tuples need 3 or 4 channels, got {value!r}")
        return skia.Color(*(int(c) for c in value))
    text = str(value).strip().lower()
    if text in NAMED_COLORS:
        return NAMED_COLORS[text]
    if text.startswith("#"):
        digits = text[1:]
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        if len(digits) in (6, 8):
            try:
                channels = [int(digits[i:i + 2], 16) for i in range(0, len(digits), 2)]
            except ValueError:
                pass
            else:
                return skia.Color(*channels)
    raise ValueError(f"Unrecognised colour {value!r}")


def parse_font(spec: str) -> skia.Font:
    """Build a skia.Font from a CSS-like shorthand such as 'bold 18px Inter, sans-serif'."""
    m = _FONT_RE.match(spec)
    if not m:
        raise ValueError(f"Unrecognised font {spec!r}")
    words = m.group("style").lower().split()
    bold = "bold" in words
    italic = "italic" in words or "oblique" in words
    if bold and italic:
        style = skia.FontStyle.BoldItalic()
    elif bold:
        style = skia.FontStyle.Bold()
    elif italic:
        style = skia.FontStyle.Italic()
    else:
        style = skia.FontStyle.Normal()

    typeface = None
    for name in m.group("family").split(","):
        name = name.strip().strip("'\"")
        typeface = skia.Typeface.MakeFromName(name, style)
        if typeface:
            break
    return skia.Font(typeface or skia.Typeface.MakeDefault(), float(m.group("size")))


class SkiaSurface:
    """DrawingSurface over a skia raster surface."""

    def __init__(self, surface: skia.Surface):
        self.surface = surface
        self.canvas = surface.getCanvas()
        self._fonts = {}
        self.font = "10px sans-serif"
        self.fill_style = "#000000"
        self.text_align = "start"
        self.text_baseline = "alphabetic"

    @classmethod
    def raster(cls, width: int, height: int) -> "SkiaSurface":
        return cls(skia.Surface.MakeRasterN32Premul(width, height))

    @property
    def width(self) -> int:
        return self.surface.width()

    @property
    def height(self) -> int:
        return self.surface.height()

    @property
    def font(self) -> str:
        return self._font_spec

    @font.setter
    def font(self, spec: str):
        if spec not in self._fonts:
            self._fonts[spec] = parse_font(spec)
        self._font_spec = spec

    @property
    def fill_style(self):
        return self._fill_style

    @fill_style.setter
    def fill_style(self, value):
        self._color = parse_color(value)
        self._fill_style = value

    @property
    def text_align(self) -> str:
        return self._text_align

    @text_align.setter
    def text_align(self, value: str):
        if value not in ALIGNMENTS:
            raise ValueError(f"text_align must be one of {ALIGNMENTS}, got {value!r}")
        self._text_align = value

    @property
    def text_baseline(self) -> str:
        return self._text_baseline

    @text_baseline.setter
    def text_baseline(self, value: str):
        if value not in BASELINES:
            raise ValueError(f"text_baseline must be one of {BASELINES}, got {value!r}")
        self._text_baseline = value

    def snapshot(self) -> skia.Image:
        return self.surface.makeImageSnapshot()

    def fill_rect(self, x, y, w, h, color=None):
        paint = skia.Paint(Color=self._color if color is None else parse_color(color), Style=skia.Paint.kFill_Style)
        self.canvas.drawRect(skia.Rect.MakeXYWH(x, y, w, h), paint)

    def draw_image(self, image, *args):
        """Canvas drawImage conventions: (dx, dy), (dx, dy, dw, dh) or (sx, sy, sw, sh, dx, dy, dw, dh)."""
        if image is None:
            tlog.warn("SkiaSurface: draw_image called without an image")
            return
        paint = skia.Paint(AntiAlias=True)
        if len(args) == 2:
            self.canvas.drawImage(image, args[0], args[1], skia.SamplingOptions(), paint)
        elif len(args) == 4:
            dst = skia.Rect.MakeXYWH(*args)
            self.canvas.drawImageRect(image, dst, skia.SamplingOptions(), paint)
        elif len(args) == 8:
            src = skia.Rect.MakeXYWH(*args[:4])
            dst = skia.Rect.MakeXYWH(*args[4:])
            self.canvas.drawImageRect(image, src, dst, skia.SamplingOptions(), paint)
        else:
            raise ValueError(f"draw_image takes 2, 4 or 8 position arguments, got {len(args)}")

    def _baseline_offset(self, font: skia.Font) -> float:
        metrics = font.getMetrics()
        ascent, descent = metrics.fAscent, metrics.fDescent
        if self._text_baseline in ("top", "hanging"):
            return -ascent
        if self._text_baseline == "middle":
            return -(ascent + descent) / 2
        if self._text_baseline in ("bottom", "ideographic"):
            return -descent
        return 0.0

    def fill_text(self, text, x, y, max_width=None):
        font = self._fonts[self._font_spec]
        text = str(text)
        width = font.measureText(text)
        scale = 1.0
        if max_width is not None and 0 < max_width < width:
            scale = max_width / width
            width = max_width

        if self._text_align in ("right", "end"):
            x -= width
        elif self._text_align == "center":
            x -= width / 2
        y += self._baseline_offset(font)

        paint = skia.Paint(AntiAlias=True, Color=self._color)
        if scale == 1.0:
            self.canvas.drawString(text, x, y, font, paint)
            return
        self.canvas.save()
        self.canvas.translate(x, y)
        self.canvas.scale(scale, 1.0)
        self.canvas.drawString(text, 0, 0, font, paint)
        self.canvas.restore()
