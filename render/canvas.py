# render/canvas.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from pygame.math import Vector2

RGBA = Tuple[int, int, int, int]

class BlendMode(Enum):
    REPLACE = "replace"
    BLEND = "blend"

@dataclass(frozen=True)
class Pen:
    """Color + compositing rule used by every point a primitive touches."""
    color: RGBA = (255, 255, 255, 255)
    mode: BlendMode = BlendMode.REPLACE

    def with_color(self, color: RGBA) -> "Pen":
        return Pen(tuple(color), self.mode)

    def with_mode(self, mode: BlendMode) -> "Pen":
        return Pen(self.color, mode)

def hex_to_rgba(text: str) -> RGBA:
    """'#rrggbb' -> (r, g, b, 255). Alpha is always opaque."""
    h = text.strip().lstrip('#')
    if len(h) != 6:
        raise ValueError(f"Bad palette color: {text!r}")
    try:
        return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16), 255
    except ValueError:
        raise ValueError(f"Bad palette color: {text!r}") from None

class Canvas:
    """Fixed-size RGBA8 software canvas.

    The buffer is row-major, 4 bytes per pixel and never changes size. Drawing
    goes through ``draw_point`` so every primitive gets the same clipping and
    blending. Primitives take an optional ``pen``; without one the canvas'
    current pen (set by ``select_color`` / ``set_blend_mode``) is used.
    """
    def __init__(self, width: int, height: int, palette: Sequence[RGBA]):
        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas size must be positive, got {width}x{height}")
        if not palette:
            raise ValueError("Canvas palette is empty")
        self.width = int(width)
        self.height = int(height)
        self.palette: Tuple[RGBA, ...] = tuple(tuple(c) for c in palette)
        self.buffer = bytearray(self.width * self.height * 4)
        self.pen = Pen()

    @classmethod
    def from_hex(cls, width: int, height: int, palette: Sequence[str]) -> "Canvas":
        return cls(width, height, [hex_to_rgba(c) for c in palette])

    @property
    def size_bytes(self) -> int:
        return len(self.buffer)

    # ------- pen -------
    def select_color(self, index: int) -> Pen:
        self.pen = self.pen.with_color(self.palette[index % len(self.palette)])
        return self.pen

    def set_blend_mode(self, mode: BlendMode) -> Pen:
        self.pen = self.pen.with_mode(mode)
        return self.pen

    # ------- buffer -------
    def clear(self, value: int = 0):
        self.buffer[:] = bytes([value]) * len(self.buffer)

    def dim(self, amount: int):
        """Add ``amount`` (may be negative) to every byte, clamped to 0..255."""
        self.buffer[:] = bytes(min(255, max(0, v + amount)) for v in self.buffer)

    def tobytes(self) -> bytes:
        return bytes(self.buffer)

    def pixel(self, x: int, y: int) -> RGBA:
        i = self._idx(x, y)
        return tuple(self.buffer[i:i + 4])

    def display(self, sink):
        sink.present(self.buffer)

    # ------- primitives -------
    def draw_point(self, pos, pen: Optional[Pen] = None):
        x, y = pos[0], pos[1]
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return
        pen = pen or self.pen
        i = self._idx(int(x), int(y))
        if pen.mode is BlendMode.REPLACE:
            self._point_replace(i, pen.color)
        else:
            self._point_blend(i, pen.color)

    def draw_line(self, start, end, pen: Optional[Pen] = None):
        start = Vector2(start)
        delta = Vector2(end) - start
        steps = int(max(abs(delta.x), abs(delta.y)))
        if steps == 0:
            return
        direction = delta.normalize()
        for step in range(steps):
            self.draw_point(start + direction * step, pen)

    def draw_curve(self, start, control, end, pen: Optional[Pen] = None):
        start, control, end = Vector2(start), Vector2(control), Vector2(end)
        samples = start.distance_to(control) + control.distance_to(end) + end.distance_to(start)
        for i in range(1, int(samples)):
            t = i / samples
            a = start.lerp(control, t)
            b = control.lerp(end, t)
            self.draw_point(a.lerp(b, t), pen)

    def draw_circle(self, center, radius: float, pen: Optional[Pen] = None):
        center = Vector2(center)
        for x in range(int(center.x - radius), int(center.x + radius) + 1):
            for y in range(int(center.y - radius), int(center.y + radius) + 1):
                if center.distance_to((x, y)) < radius:
                    self.draw_point((x, y), pen)

    def draw_rect(self, top_left, bottom_right, pen: Optional[Pen] = None):
        x0, y0 = int(top_left[0]), int(top_left[1])
        x1, y1 = int(bottom_right[0]), int(bottom_right[1])
        for x in range(x0, x1 + 1):
            for y in range(y0, y1 + 1):
                self.draw_point((x, y), pen)

    # ------- compositing -------
    def _point_replace(self, i: int, color: RGBA):
        self.buffer[i:i + 4] = bytes(color)

    def _point_blend(self, i: int, color: RGBA):
        a = color[3]
        if a == 0:
            return
        if a == 255:
            self._point_replace(i, color)
            return
        mix = a / 255.0
        buf = self.buffer
        for c in range(4):
            buf[i + c] = int(color[c] * mix + buf[i + c] * (1.0 - mix))

    def _idx(self, x: int, y: int) -> int:
        return (x + y * self.width) * 4

    def __repr__(self):
        return f"Canvas({self.width}x{self.height}, palette={len(self.palette)})"
