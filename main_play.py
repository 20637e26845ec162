from __future__ import annotations

import argparse
from pathlib import Path

import yaml

from stacking.driver import random_ops, run_script, summarize
from stacking.engine import TowerEngine
from stacking.layout import CanvasSpec
from utils.logging import JsonlLogger, ensure_dir, flush, log_event
from utils.rng import make_rng


def load_yaml(path: str) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def deep_update(base: dict, patch: dict) -> dict:
    # Recursively merge dict patch into base (in-place).
    for k, v in (patch or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            deep_update(base[k], v)
        else:
            base[k] = v
    return base


def build_engine(cfg: dict, logger=None) -> TowerEngine:
    tower_cfg = cfg["tower"]
    render_cfg = cfg.get("render", {})
    return TowerEngine(
        int(tower_cfg["width"]),
        int(tower_cfg["max_height"]),
        canvas=CanvasSpec.from_cfg(render_cfg),
        logger=logger,
        step_delay_ms=int(render_cfg.get("step_delay_ms", 0)),
    )


def main() -> None:
    ap = argparse.ArgumentParser(description="Stack cups and lids on a bounded tower")
    ap.add_argument("--base", default="config.yaml", help="Base config")
    ap.add_argument("--exp", default="", help="Path to experiments/*.yaml (optional)")
    ap.add_argument("--out", default=None, help="Log output dir (overrides log.out)")
    ap.add_argument("--random", type=int, default=None, help="Run N random operations instead of a script")
    ap.add_argument("--render", action="store_true", help="Show the tower in a pygame window")
    args = ap.parse_args()

    cfg = load_yaml(args.base)
    exp = load_yaml(args.exp) if args.exp else {}
    cfg = deep_update(cfg, exp)

    name = exp.get("name", Path(args.exp).stem if args.exp else "play")
    out_dir = Path(args.out or cfg.get("log", {}).get("out", "logs")) / name
    ensure_dir(out_dir)

    driver_cfg = cfg.get("driver", {})
    rng = make_rng(int(driver_cfg.get("seed", 1)))

    logger = JsonlLogger(out_dir / "play.jsonl")
    engine = build_engine(cfg, logger=logger)
    log_event("start", {"name": name, "width": engine.width, "max_height": engine.max_height})

    if args.render or cfg.get("render", {}).get("enabled", False):
        if not engine.make_visible():
            print("[VIEW] tower does not fit on the canvas; running headless")

    n_random = args.random if args.random is not None else int(driver_cfg.get("random_steps", 0))
    if n_random > 0:
        records = random_ops(engine, rng, n_random, driver_cfg.get("max_id"))
    else:
        records = run_script(engine, cfg.get("ops", []))

    for r in records:
        status = "ok  " if r["ok"] else "FAIL"
        arg = "" if r["arg"] is None else f"({r['arg']})"
        reason = f"  # {r['reason']}" if r["reason"] else ""
        print(f"[{status}] {r['op']}{arg:<5} height={r['height']:<4}{reason}")

    summary = summarize(engine, records)
    engine.exit()
    log_event("summary", summary)
    print(summary)

    flush()
    print(f"[LOG] {logger.n_records} records -> {logger.path}")
    logger.close()


if __name__ == "__main__":
    main()
