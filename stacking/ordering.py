from __future__ import annotations

from typing import List, Sequence, Tuple

from stacking.items import Cup, Item, Lid


def split_items(items: Sequence[Item]) -> Tuple[List[Cup], List[Lid]]:
    cups = [it for it in items if isinstance(it, Cup)]
    lids = [it for it in items if isinstance(it, Lid)]
    return cups, lids


def sort_by_id(items: Sequence[Item], descending: bool) -> List[Item]:
    # ids are unique within a kind, so the order is total
    return sorted(items, key=lambda it: it.id, reverse=descending)


def rebuild(cups: Sequence[Cup], lids: Sequence[Lid], max_height: int) -> Tuple[List[Item], int]:
    """Greedy capacity-aware restack.

    Cups go in the given order, each followed directly by its matching lid.
    Lids left over are stacked after all cups. Anything that would push the
    height past ``max_height`` is skipped.
    """
    remaining = list(lids)
    ordered: List[Item] = []
    acc = 0

    for cup in cups:
        if acc + cup.height > max_height:
            continue
        ordered.append(cup)
        acc += cup.height

        match = next((lid for lid in remaining if lid.id == cup.id), None)
        if match is not None and acc + match.height <= max_height:
            ordered.append(match)
            acc += match.height
            remaining.remove(match)

    for lid in remaining:
        if acc + lid.height <= max_height:
            ordered.append(lid)
            acc += lid.height

    return ordered, acc


def reorder(items: Sequence[Item], max_height: int, descending: bool) -> Tuple[List[Item], int]:
    cups, lids = split_items(items)
    return rebuild(
        sort_by_id(cups, descending),
        sort_by_id(lids, descending),
        max_height,
    )
