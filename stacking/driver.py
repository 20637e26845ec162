"""Replays operations against a tower, either from a script or at random.

A script is a list of steps; each step is a bare operation name
(``"order_tower"``) or a one-key mapping (``{"push_cup": 3}``).
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from stacking.engine import TowerEngine


OPERATIONS: Dict[str, int] = {
    "push_cup": 1,
    "push_lid": 1,
    "pop_cup": 0,
    "pop_lid": 0,
    "remove_cup": 1,
    "remove_lid": 1,
    "order_tower": 0,
    "reverse_tower": 0,
}


def apply_op(engine: TowerEngine, name: str, arg: Optional[int] = None) -> Dict[str, Any]:
    if name not in OPERATIONS:
        raise ValueError(f"Unknown operation {name!r}")
    if OPERATIONS[name] == 1:
        if arg is None:
            raise ValueError(f"Operation {name!r} needs an id")
        result = getattr(engine, name)(int(arg))
    else:
        if arg is not None:
            raise ValueError(f"Operation {name!r} takes no argument, got {arg!r}")
        result = getattr(engine, name)()

    return {
        "op": name,
        "arg": arg,
        "ok": bool(result.ok),
        "reason": result.reason,
        "height": engine.height(),
        "items": engine.stacking_items(),
    }


def parse_step(step: Any) -> tuple:
    if isinstance(step, str):
        return step, None
    if isinstance(step, dict) and len(step) == 1:
        (name, arg), = step.items()
        return name, arg
    raise ValueError(f"Malformed script step {step!r}")


def run_script(engine: TowerEngine, ops: Iterable[Any]) -> List[Dict[str, Any]]:
    return [apply_op(engine, *parse_step(step)) for step in ops]


def random_ops(
    engine: TowerEngine,
    rng: np.random.Generator,
    steps: int,
    max_id: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Drive the tower with ``steps`` uniformly drawn operations.

    Ids are drawn from ``0..max_id`` so that invalid ids are exercised too.
    """
    names = list(OPERATIONS)
    hi = int(max_id if max_id is not None else engine.width + 1)
    records = []
    for _ in range(int(steps)):
        name = names[int(rng.integers(0, len(names)))]
        arg = int(rng.integers(0, hi + 1)) if OPERATIONS[name] == 1 else None
        records.append(apply_op(engine, name, arg))
    return records


def summarize(engine: TowerEngine, records: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "steps": len(records),
        "failures": sum(1 for r in records if not r["ok"]),
        "height": engine.height(),
        "max_height": engine.max_height,
        "lided_cups": engine.lided_cups(),
        "items": engine.stacking_items(),
    }
