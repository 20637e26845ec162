from __future__ import annotations

from dataclasses import dataclass
from typing import List

from stacking.items import TowerSnapshot


@dataclass(frozen=True)
class CanvasSpec:
    width: int = 300
    height: int = 300
    margin_left: int = 40
    margin_right: int = 10
    margin_top: int = 10
    margin_bottom: int = 15
    wall: int = 2
    mark_w: int = 5
    mark_h: int = 2
    cup_wall: int = 2
    min_scale: int = 2

    @classmethod
    def from_cfg(cls, render_cfg: dict) -> "CanvasSpec":
        return cls(
            width=int(render_cfg.get("canvas_width", 300)),
            height=int(render_cfg.get("canvas_height", 300)),
        )

    @property
    def base_y(self) -> int:
        return self.height - self.margin_bottom


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    w: int
    h: int
    color: str = "black"
    kind: str = "structure"
    item_id: int = 0


def scale_factor(width: int, max_height: int, canvas: CanvasSpec) -> int:
    """Pixels per tower unit; never below ``canvas.min_scale``."""
    if width <= 0 or max_height <= 0:
        return canvas.min_scale
    avail_w = canvas.width - canvas.margin_left - canvas.margin_right
    avail_h = canvas.height - canvas.margin_top - canvas.margin_bottom
    return max(min(avail_w // width, avail_h // max_height), canvas.min_scale)


def fits_on_screen(width: int, max_height: int, canvas: CanvasSpec) -> bool:
    s = scale_factor(width, max_height, canvas)
    need_w = canvas.margin_left + width * s + canvas.margin_right
    need_h = canvas.margin_top + max_height * s + canvas.margin_bottom
    return need_w <= canvas.width and need_h <= canvas.height


def structure_rects(width: int, max_height: int, canvas: CanvasSpec) -> List[Rect]:
    s = scale_factor(width, max_height, canvas)
    tw, th = width * s, max_height * s
    x0, base_y, wall = canvas.margin_left, canvas.base_y, canvas.wall

    rects = [
        Rect(x0 - wall, base_y - th, wall, th),   # left wall
        Rect(x0 + tw, base_y - th, wall, th),     # right wall
        Rect(x0 - wall, base_y, tw + 2 * wall, wall),
    ]
    for cm in range(1, max_height + 1):
        rects.append(Rect(x0 - wall - canvas.mark_w, base_y - cm * s, canvas.mark_w, canvas.mark_h))
    return rects


def item_rects(snapshot: TowerSnapshot, canvas: CanvasSpec) -> List[Rect]:
    """Bounding box of every item, base first, centered between the walls."""
    s = scale_factor(snapshot.width, snapshot.max_height, canvas)
    tw = snapshot.width * s
    y = canvas.base_y

    rects: List[Rect] = []
    for it in snapshot.items:
        h = it.height * s
        w = it.size * s
        y -= h
        x = canvas.margin_left + (tw - w) // 2
        rects.append(Rect(x, y, w, h, color=it.color, kind=it.kind, item_id=it.id))
    return rects


def cup_outline(r: Rect, canvas: CanvasSpec) -> List[Rect]:
    """U-shape for a cup: left wall, right wall, bottom. Interior stays empty."""
    t = canvas.cup_wall
    return [
        Rect(r.x, r.y, t, r.h, r.color, r.kind, r.item_id),
        Rect(r.x + r.w - t, r.y, t, r.h, r.color, r.kind, r.item_id),
        Rect(r.x, r.y + r.h - t, r.w, t, r.color, r.kind, r.item_id),
    ]
