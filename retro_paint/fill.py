# retro_paint/fill.py
from __future__ import annotations

"""
Span-filling flood fill with an explicit work stack.

Exports:
  Span                       : (x1, x2, y, dy) stack entry
  SpanFill(buffer, x, y, index)
    .step() -> bool          : process one span, one change notification
    .run(should_cancel=None) -> int
  flood_fill(buffer, x, y, index, *, should_cancel=None) -> int

Notes:
  - A span (x1, x2, y, dy) means: check row y, reached from a parent run that
    covered [x1, x2] on row y - dy while travelling in direction dy.
  - Each painted pixel stops matching the source colour, so every pixel is
    painted at most once and the stack drains.
  - Filling with the start pixel's own colour leaves the buffer unchanged and
    returns immediately; the span walk would otherwise revisit rows forever.
"""

from typing import TYPE_CHECKING, Callable, List, NamedTuple, Optional

from .core_types import check_palette_index

if TYPE_CHECKING:  # pragma: no cover
    from .buffer import PixelBuffer


class Span(NamedTuple):
    x1: int
    x2: int
    y: int
    dy: int


class SpanFill:
    """
    Resumable flood fill over a PixelBuffer.

    Drive it with step() to render progress span by span, or run() to finish.
    Stopping early leaves a valid, partially filled buffer.
    """

    def __init__(self, buffer: "PixelBuffer", x: int, y: int, index: int) -> None:
        self.buffer = buffer
        self.index = check_palette_index(index)
        self.steps = 0
        self.stack: List[Span] = []
        self.allowed: Optional[int] = None

        if not buffer.is_inside(x, y):
            return
        self.allowed = buffer.get_pixel(x, y)
        if self.allowed == self.index:
            return
        self.stack.append(Span(x, x, y, 1))
        self.stack.append(Span(x, x, y - 1, -1))

    @property
    def done(self) -> bool:
        return not self.stack

    def cancel(self) -> None:
        """Drop all pending spans."""
        self.stack.clear()

    def step(self) -> bool:
        """Pop and paint one span. Returns False when nothing was left to do."""
        if not self.stack:
            return False

        grid = self.buffer._pixels
        height, width = grid.shape
        allowed = self.allowed
        colour = self.index
        push = self.stack.append

        def inside(px: int, py: int) -> bool:
            return 0 <= px < width and 0 <= py < height and grid[py, px] == allowed

        x1, x2, y, dy = self.stack.pop()
        x = x1

        # extend left of the parent's run
        if inside(x, y):
            while inside(x - 1, y):
                grid[y, x - 1] = colour
                x -= 1
            if x < x1:
                push(Span(x, x1 - 1, y - dy, -dy))

        while x1 <= x2:
            while inside(x1, y):
                grid[y, x1] = colour
                x1 += 1
            if x1 > x:
                push(Span(x, x1 - 1, y + dy, dy))
            if x1 - 1 > x2:
                push(Span(x2 + 1, x1 - 1, y - dy, -dy))
            x1 += 1
            while x1 < x2 and not inside(x1, y):
                x1 += 1
            x = x1

        self.steps += 1
        self.buffer._notify()
        return True

    def run(self, should_cancel: Optional[Callable[[], bool]] = None) -> int:
        """Process spans until the stack is empty or should_cancel() is true."""
        while self.stack:
            if should_cancel is not None and should_cancel():
                self.cancel()
                break
            self.step()
        return self.steps


def flood_fill(
    buffer: "PixelBuffer",
    x: int,
    y: int,
    index: int,
    *,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> int:
    """
    Repaint the 4-connected region containing (x, y) with `index`.

    Out-of-range starts are a no-op. Returns the number of spans processed,
    which is also the number of change notifications raised.
    """
    return SpanFill(buffer, x, y, index).run(should_cancel)


__all__ = ["Span", "SpanFill", "flood_fill"]
