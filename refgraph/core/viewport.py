from __future__ import annotations

from .. import config


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


class Viewport:
    """Pan/zoom transform between screen pixels and world coordinates.

    screen = world * scale + offset, so world = (screen - offset) / scale.
    """

    def __init__(
        self,
        width: float = 0.0,
        height: float = 0.0,
        *,
        min_scale: float | None = None,
        max_scale: float | None = None,
        sensitivity: float | None = None,
    ) -> None:
        self.width = float(width or 0)
        self.height = float(height or 0)
        self.min_scale = config.VIEW_MIN_SCALE if min_scale is None else float(min_scale)
        self.max_scale = config.VIEW_MAX_SCALE if max_scale is None else float(max_scale)
        self.sensitivity = config.ZOOM_SENSITIVITY if sensitivity is None else float(sensitivity)
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.scale = clamp(1.0, self.min_scale, self.max_scale)
        self._pan_origin: tuple[float, float, float, float] | None = None

    def set_size(self, width: float, height: float) -> None:
        self.width = float(width or 0)
        self.height = float(height or 0)

    def contains(self, sx: float, sy: float) -> bool:
        return 0 <= sx <= self.width and 0 <= sy <= self.height

    def screen_to_world(self, sx: float, sy: float) -> tuple[float, float]:
        return (sx - self.offset_x) / self.scale, (sy - self.offset_y) / self.scale

    def world_to_screen(self, wx: float, wy: float) -> tuple[float, float]:
        return wx * self.scale + self.offset_x, wy * self.scale + self.offset_y

    @property
    def panning(self) -> bool:
        return self._pan_origin is not None

    def begin_pan(self, sx: float, sy: float) -> tuple[float, float]:
        self._pan_origin = (sx, sy, self.offset_x, self.offset_y)
        return self.offset_x, self.offset_y

    def pan_to(self, sx: float, sy: float) -> None:
        if self._pan_origin is None:
            return
        px, py, ox, oy = self._pan_origin
        self.offset_x = ox + (sx - px)
        self.offset_y = oy + (sy - py)

    def end_pan(self) -> None:
        self._pan_origin = None

    def zoom_at(self, sx: float, sy: float, delta: float) -> bool:
        """Zoom around the screen point (sx, sy).

        Returns False without touching the transform when the point lies
        outside the viewport, so the host can let the wheel event through.
        """
        if not self.contains(sx, sy):
            return False
        old = self.scale
        new = clamp(old - float(delta) * self.sensitivity, self.min_scale, self.max_scale)
        wx, wy = self.screen_to_world(sx, sy)
        self.offset_x -= wx * (new - old)
        self.offset_y -= wy * (new - old)
        self.scale = new
        return True

    def reset(self) -> None:
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.scale = clamp(1.0, self.min_scale, self.max_scale)
        self._pan_origin = None
