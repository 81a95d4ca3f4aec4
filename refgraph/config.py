from __future__ import annotations

import json
import os
from typing import Any

PACKAGE_DIR = os.path.dirname(__file__)
DEFAULT_CONFIG_PATH = os.path.join(PACKAGE_DIR, "config.json")
CONFIG_PATH = os.environ.get("REFGRAPH_CONFIG", "") or DEFAULT_CONFIG_PATH
DEFAULT_CATALOG_PATH = os.path.join(PACKAGE_DIR, "references.json")

CFG: dict[str, Any] = {}
DEBUG = False
DEBUG_LEVEL = "debug"
DEBUG_LOG_FILE = ""
DEBUG_MODULE_LOGS: dict[str, bool] = {}
DEBUG_MODULE_LEVELS: dict[str, str] = {}

CATALOG_PATH = DEFAULT_CATALOG_PATH

LINK_DISTANCE = 120.0
CHARGE_STRENGTH = -200.0
CENTER_STRENGTH = 1.0
COLLIDE_RADIUS = 25.0
COLLIDE_STRENGTH = 0.7
VELOCITY_DECAY = 0.4
ALPHA_MIN = 0.001
ALPHA_DECAY = 1.0 - ALPHA_MIN ** (1.0 / 300.0)
WARMUP_STEPS = 50
DRAG_ALPHA_TARGET = 0.3
SELECT_ALPHA = 0.3

VIEW_MIN_SCALE = 0.5
VIEW_MAX_SCALE = 3.0
ZOOM_SENSITIVITY = 0.001

HIT_RADIUS = 15.0
HIT_RADIUS_SELECTED = 25.0
PRESS_RADIUS = 20.0
DRAG_THRESHOLD = 5.0

FRAME_INTERVAL_MS = 16
NODE_RADIUS_MIN = 8.0
NODE_RADIUS_MAX = 12.0
NODE_RADIUS_FOCUS = 15.0

_LEVELS = {"trace", "debug", "info", "warn", "error"}


def _load_config(path: str | None = None) -> dict[str, Any]:
    target = path or CONFIG_PATH
    if not os.path.exists(target):
        return {}
    with open(target, "r", encoding="utf-8-sig") as f:
        data = json.load(f)
    return data if isinstance(data, dict) else {}


def cfg_get(path: str, default: Any = None) -> Any:
    cur: Any = CFG
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def _cfg_set(cfg: dict[str, Any], path: str, value: Any) -> None:
    cur: dict[str, Any] = cfg
    parts = path.split(".")
    for part in parts[:-1]:
        nxt = cur.get(part)
        if not isinstance(nxt, dict):
            nxt = {}
            cur[part] = nxt
        cur = nxt
    cur[parts[-1]] = value


def _cfg_float(path: str, default: float) -> float:
    raw = cfg_get(path, default)
    try:
        return float(raw)
    except (TypeError, ValueError):
        return float(default)


def _cfg_int(path: str, default: int) -> int:
    raw = cfg_get(path, default)
    try:
        return int(raw)
    except (TypeError, ValueError):
        return int(default)


def reload_config(path: str | None = None) -> None:
    global CFG, CONFIG_PATH, DEBUG, DEBUG_LEVEL, DEBUG_LOG_FILE
    global DEBUG_MODULE_LOGS, DEBUG_MODULE_LEVELS, CATALOG_PATH
    global LINK_DISTANCE, CHARGE_STRENGTH, CENTER_STRENGTH
    global COLLIDE_RADIUS, COLLIDE_STRENGTH, VELOCITY_DECAY
    global ALPHA_MIN, ALPHA_DECAY, WARMUP_STEPS, DRAG_ALPHA_TARGET, SELECT_ALPHA
    global VIEW_MIN_SCALE, VIEW_MAX_SCALE, ZOOM_SENSITIVITY
    global HIT_RADIUS, HIT_RADIUS_SELECTED, PRESS_RADIUS, DRAG_THRESHOLD
    global FRAME_INTERVAL_MS, NODE_RADIUS_MIN, NODE_RADIUS_MAX, NODE_RADIUS_FOCUS

    if path:
        CONFIG_PATH = path
    CFG = _load_config()

    _dbg = CFG.get("debug", {})
    if isinstance(_dbg, dict):
        DEBUG = bool(_dbg.get("enabled", False))
        _lvl = str(_dbg.get("level", "debug")).strip().lower()
        DEBUG_LEVEL = _lvl if _lvl in _LEVELS else "debug"
        DEBUG_LOG_FILE = str(_dbg.get("log_file", "") or "").strip()
        _mlogs = _dbg.get("module_logs", {})
        if isinstance(_mlogs, dict):
            DEBUG_MODULE_LOGS = {str(k): bool(v) for k, v in _mlogs.items() if str(k).strip()}
        else:
            DEBUG_MODULE_LOGS = {}
        _mlevels = _dbg.get("module_levels", {})
        if isinstance(_mlevels, dict):
            out_levels: dict[str, str] = {}
            for k, v in _mlevels.items():
                key = str(k).strip()
                lvl = str(v).strip().lower()
                if key and lvl in _LEVELS:
                    out_levels[key] = lvl
            DEBUG_MODULE_LEVELS = out_levels
        else:
            DEBUG_MODULE_LEVELS = {}
    else:
        DEBUG = bool(_dbg)
        DEBUG_LEVEL = "debug"
        DEBUG_LOG_FILE = ""
        DEBUG_MODULE_LOGS = {}
        DEBUG_MODULE_LEVELS = {}

    CATALOG_PATH = str(cfg_get("catalog.path", "") or "").strip() or DEFAULT_CATALOG_PATH

    LINK_DISTANCE = _cfg_float("layout.link_distance", 120.0)
    CHARGE_STRENGTH = _cfg_float("layout.charge_strength", -200.0)
    CENTER_STRENGTH = _cfg_float("layout.center_strength", 1.0)
    COLLIDE_RADIUS = max(0.0, _cfg_float("layout.collide_radius", 25.0))
    # Collision must stay damped or overlapping nodes oscillate.
    COLLIDE_STRENGTH = min(0.99, max(0.0, _cfg_float("layout.collide_strength", 0.7)))
    VELOCITY_DECAY = min(1.0, max(0.0, _cfg_float("layout.velocity_decay", 0.4)))
    ALPHA_MIN = max(1e-6, _cfg_float("layout.alpha_min", 0.001))
    ALPHA_DECAY = _cfg_float("layout.alpha_decay", 1.0 - ALPHA_MIN ** (1.0 / 300.0))
    WARMUP_STEPS = max(0, _cfg_int("layout.warmup_steps", 50))
    DRAG_ALPHA_TARGET = _cfg_float("layout.drag_alpha_target", 0.3)
    SELECT_ALPHA = _cfg_float("layout.select_alpha", 0.3)

    VIEW_MIN_SCALE = _cfg_float("view.min_scale", 0.5)
    VIEW_MAX_SCALE = max(VIEW_MIN_SCALE, _cfg_float("view.max_scale", 3.0))
    ZOOM_SENSITIVITY = _cfg_float("view.zoom_sensitivity", 0.001)

    HIT_RADIUS = _cfg_float("interaction.hit_radius", 15.0)
    HIT_RADIUS_SELECTED = _cfg_float("interaction.hit_radius_selected", 25.0)
    PRESS_RADIUS = _cfg_float("interaction.press_radius", 20.0)
    DRAG_THRESHOLD = _cfg_float("interaction.drag_threshold", 5.0)

    FRAME_INTERVAL_MS = max(1, _cfg_int("render.frame_interval_ms", 16))
    NODE_RADIUS_MIN = _cfg_float("render.min_year_radius", 8.0)
    NODE_RADIUS_MAX = _cfg_float("render.max_year_radius", 12.0)
    NODE_RADIUS_FOCUS = _cfg_float("render.focus_radius", 15.0)


reload_config()
