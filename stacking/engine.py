from __future__ import annotations

import operator
from dataclasses import dataclass
from typing import List, Optional, Tuple

from stacking.items import Cup, CoveredCup, Item, Lid, TowerSnapshot, palette_color, view_of
from stacking.layout import CanvasSpec, fits_on_screen
from stacking.ordering import reorder
from utils.logging import JsonlLogger


@dataclass(frozen=True)
class OpResult:
    ok: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.ok


def _as_id(value) -> Optional[int]:
    # numpy integers pass, floats and strings do not
    if isinstance(value, bool):
        return None
    try:
        return operator.index(value)
    except TypeError:
        return None


class TowerEngine:
    """Bounded tower of cups and lids.

    Every mutating operation returns an ``OpResult`` and also records its
    outcome in ``ok()``. Validation failures never raise and never mutate.
    """

    def __init__(
        self,
        width: int,
        max_height: int,
        *,
        canvas: Optional[CanvasSpec] = None,
        logger: Optional[JsonlLogger] = None,
        view=None,
        step_delay_ms: int = 0,
    ):
        if int(width) <= 0 or int(max_height) <= 0:
            raise ValueError(f"tower dimensions must be positive, got {width}x{max_height}")
        self._width = int(width)
        self._max_height = int(max_height)
        self._items: List[Item] = []
        self._height = 0
        self._last_ok = True

        self.canvas = canvas or CanvasSpec()
        self.logger = logger
        self.step_delay_ms = int(step_delay_ms)
        self._injected_view = view
        self._view = None
        self._visible = False

    @property
    def width(self) -> int:
        return self._width

    @property
    def max_height(self) -> int:
        return self._max_height

    @property
    def visible(self) -> bool:
        return self._visible

    # ---- pushes ----

    def push_cup(self, cup_id: int) -> OpResult:
        cup_id = _as_id(cup_id)
        if cup_id is None:
            return self._fail("push_cup", None, "cup id must be an integer")
        if cup_id <= 0:
            return self._fail("push_cup", cup_id, "cup id must be positive")
        if self._find("cup", cup_id) is not None:
            return self._fail("push_cup", cup_id, f"cup {cup_id} already exists")
        if cup_id > self._width:
            return self._fail("push_cup", cup_id, f"cup {cup_id} is wider than the tower")
        cup = Cup(cup_id, cup_id, palette_color(cup_id))
        if self._height + cup.height > self._max_height:
            return self._fail("push_cup", cup_id, f"cup {cup_id} does not fit in the tower height")

        self._items.append(cup)
        self._height += cup.height
        return self._succeed("push_cup", cup_id)

    def push_lid(self, lid_id: int) -> OpResult:
        lid_id = _as_id(lid_id)
        if lid_id is None:
            return self._fail("push_lid", None, "lid id must be an integer")
        if lid_id <= 0:
            return self._fail("push_lid", lid_id, "lid id must be positive")
        if self._find("lid", lid_id) is not None:
            return self._fail("push_lid", lid_id, f"lid {lid_id} already exists")

        cup = self._find("cup", lid_id)
        if cup is not None:
            size, color = cup.diameter, cup.color
        else:
            size, color = lid_id, palette_color(lid_id)

        if size > self._width:
            return self._fail("push_lid", lid_id, f"lid {lid_id} is wider than the tower")
        if self._height + 1 > self._max_height:
            return self._fail("push_lid", lid_id, f"lid {lid_id} does not fit in the tower height")

        lid = Lid(lid_id, size, color)
        self._items.append(lid)
        self._height += lid.height
        return self._succeed("push_lid", lid_id)

    # ---- removals ----

    def pop_cup(self) -> OpResult:
        return self._pop("cup")

    def pop_lid(self) -> OpResult:
        return self._pop("lid")

    def remove_cup(self, cup_id: int) -> OpResult:
        return self._remove("cup", cup_id)

    def remove_lid(self, lid_id: int) -> OpResult:
        return self._remove("lid", lid_id)

    def _pop(self, kind: str) -> OpResult:
        op = f"pop_{kind}"
        for idx in range(len(self._items) - 1, -1, -1):
            if self._items[idx].kind == kind:
                item = self._items.pop(idx)
                self._height -= item.height
                return self._succeed(op, None)
        return self._fail(op, None, f"no {kind}s in the tower")

    def _remove(self, kind: str, item_id: int) -> OpResult:
        op = f"remove_{kind}"
        item_id = _as_id(item_id)
        if item_id is None:
            return self._fail(op, None, f"{kind} id must be an integer")
        # base upward, unlike _pop
        for idx, item in enumerate(self._items):
            if item.kind == kind and item.id == item_id:
                del self._items[idx]
                self._height -= item.height
                return self._succeed(op, item_id)
        return self._fail(op, item_id, f"{kind} {item_id} not found")

    # ---- reordering ----

    def order_tower(self) -> OpResult:
        """Largest id at the base, each lid on its own cup, loose lids on top."""
        return self._reorder("order_tower", descending=True)

    def reverse_tower(self) -> OpResult:
        """Smallest id at the base; otherwise the same as ``order_tower``."""
        return self._reorder("reverse_tower", descending=False)

    def _reorder(self, op: str, descending: bool) -> OpResult:
        # items that no longer fit are dropped; the operation still succeeds
        self._items, self._height = reorder(self._items, self._max_height, descending)
        return self._succeed(op, None)

    # ---- queries ----

    def height(self) -> int:
        return self._height

    def ok(self) -> bool:
        return self._last_ok

    def lided_cups(self) -> List[int]:
        return sorted(c.id for c in self.covered_cups())

    def covered_cups(self) -> List[CoveredCup]:
        pairs = []
        for below, above in zip(self._items, self._items[1:]):
            if below.kind == "cup" and above.kind == "lid" and below.id == above.id:
                pairs.append(CoveredCup(below, above))
        return pairs

    def stacking_items(self) -> List[str]:
        out: List[str] = []
        for it in self._items:
            out.extend((it.kind, str(it.id)))
        return out

    def items(self) -> Tuple[Item, ...]:
        return tuple(self._items)

    def snapshot(self) -> TowerSnapshot:
        return TowerSnapshot(
            width=self._width,
            max_height=self._max_height,
            height=self._height,
            items=tuple(view_of(it) for it in self._items),
        )

    # ---- visibility ----

    def make_visible(self) -> OpResult:
        if not fits_on_screen(self._width, self._max_height, self.canvas):
            return self._fail("make_visible", None, "the tower does not fit on the screen")
        if self._view is None:
            self._view = self._injected_view if self._injected_view is not None else self._make_view()
        self._visible = True
        return self._succeed("make_visible", None)

    def make_invisible(self) -> OpResult:
        self._close_view()
        return self._succeed("make_invisible", None)

    def exit(self) -> OpResult:
        self._close_view()
        result = self._succeed("exit", None)
        if self.logger is not None:
            self.logger.flush()
        return result

    def _make_view(self):
        from stacking.renderer import TowerRenderer
        return TowerRenderer(self.canvas, step_delay_ms=self.step_delay_ms)

    def _close_view(self) -> None:
        if self._view is not None:
            self._view.close()
        self._view = None
        self._visible = False

    # ---- bookkeeping ----

    def _find(self, kind: str, item_id: int) -> Optional[Item]:
        for it in self._items:
            if it.kind == kind and it.id == item_id:
                return it
        return None

    def _succeed(self, op: str, arg: Optional[int]) -> OpResult:
        assert self._height == sum(it.height for it in self._items)
        assert self._height <= self._max_height
        return self._finish(op, arg, OpResult(True))

    def _fail(self, op: str, arg: Optional[int], reason: str) -> OpResult:
        return self._finish(op, arg, OpResult(False, reason))

    def _finish(self, op: str, arg: Optional[int], result: OpResult) -> OpResult:
        self._last_ok = result.ok
        if self.logger is not None:
            self.logger.log({
                "type": "op",
                "op": op,
                "arg": arg,
                "ok": result.ok,
                "reason": result.reason,
                "height": self._height,
            })
        if self._visible and self._view is not None:
            self._view.render(self.snapshot(), message=result.reason)
        return result
