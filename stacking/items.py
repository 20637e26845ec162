from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Tuple, Union


PALETTE: Tuple[str, ...] = ("red", "blue", "green", "yellow", "magenta", "black")


def palette_color(item_id: int) -> str:
    return PALETTE[(item_id - 1) % len(PALETTE)]


def _check_id(item_id) -> None:
    if not isinstance(item_id, int) or isinstance(item_id, bool) or item_id <= 0:
        raise ValueError(f"item id must be a positive integer, got {item_id!r}")


@dataclass(frozen=True)
class Cup:
    """A cup of height 2*id - 1. ``diameter`` is its lateral size in tower units."""

    kind: ClassVar[str] = "cup"

    id: int
    diameter: int
    color: str

    def __post_init__(self) -> None:
        _check_id(self.id)

    @property
    def height(self) -> int:
        return 2 * self.id - 1

    @property
    def size(self) -> int:
        return self.diameter


@dataclass(frozen=True)
class Lid:
    """A lid, always 1 tall. It covers a cup only when stacked directly on it."""

    kind: ClassVar[str] = "lid"

    id: int
    width: int
    color: str

    def __post_init__(self) -> None:
        _check_id(self.id)

    @property
    def height(self) -> int:
        return 1

    @property
    def size(self) -> int:
        return self.width


Item = Union[Cup, Lid]


@dataclass(frozen=True)
class CoveredCup:
    """A cup with its matching lid directly on top."""

    cup: Cup
    lid: Lid

    def __post_init__(self) -> None:
        if self.cup is None or self.lid is None:
            raise ValueError("a covered cup needs both a cup and a lid")
        if self.cup.id != self.lid.id:
            raise ValueError(f"lid {self.lid.id} does not match cup {self.cup.id}")

    @property
    def id(self) -> int:
        return self.cup.id

    @property
    def height(self) -> int:
        return self.cup.height + self.lid.height


@dataclass(frozen=True)
class ItemView:
    kind: str
    id: int
    height: int
    size: int
    color: str


@dataclass(frozen=True)
class TowerSnapshot:
    """Read-only projection of a tower handed to renderers."""

    width: int
    max_height: int
    height: int
    items: Tuple[ItemView, ...]


def view_of(item: Item) -> ItemView:
    return ItemView(kind=item.kind, id=item.id, height=item.height, size=item.size, color=item.color)
