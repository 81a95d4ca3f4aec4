from __future__ import annotations

import inspect
import os
import time
from typing import Any

from . import config

_PACKAGE = __name__.rpartition(".")[0] or "refgraph"
_FALLBACK_SOURCE = _PACKAGE

_LEVEL_SCORE = {
    "trace": 10,
    "debug": 20,
    "info": 30,
    "warn": 40,
    "warning": 40,
    "error": 50,
}


def source_tag(module_name: str) -> str:
    """Tag for a module: its path below the package, else its leaf name.

    ``refgraph.core.layout`` -> ``core.layout``,
    ``refgraph.modules._graph_canvas`` -> ``modules.graph_canvas``.
    """
    name = str(module_name or "").strip()
    if name.startswith(_PACKAGE + "."):
        parts = [p.strip("_") for p in name[len(_PACKAGE) + 1:].split(".")]
        return ".".join(p for p in parts if p)
    return name.split(".")[-1].strip("_")


def _source_keys(source: str) -> list[str]:
    # Most specific first: "core.layout", then "layout", then "core".
    parts = source.split(".")
    keys = [source]
    if len(parts) > 1:
        keys.extend([parts[-1], parts[0]])
    return keys


def _source_from_stack() -> str:
    try:
        frame = inspect.currentframe()
        if frame is None:
            return _FALLBACK_SOURCE
        cur = frame.f_back
        this_file = os.path.abspath(__file__)
        while cur is not None:
            fname = os.path.abspath(str(cur.f_code.co_filename or ""))
            if fname != this_file:
                tag = source_tag(str(cur.f_globals.get("__name__", "") or ""))
                if tag:
                    return tag
                base = os.path.splitext(os.path.basename(fname))[0].strip("_")
                if base:
                    return base
                break
            cur = cur.f_back
    except Exception:
        pass
    return _FALLBACK_SOURCE


def _normalize_level(level: str | None) -> str:
    v = str(level or "debug").strip().lower()
    if v == "warning":
        v = "warn"
    return v if v in {"trace", "debug", "info", "warn", "error"} else "debug"


def _score(level: str | None) -> int:
    return int(_LEVEL_SCORE.get(_normalize_level(level), 20))


def _lookup(table: dict[str, Any], source: str, default: Any) -> Any:
    for key in _source_keys(source):
        if key in table:
            return table[key]
    return default


def _should_log(source: str, level: str) -> bool:
    if not config.DEBUG:
        return False
    if not bool(_lookup(config.DEBUG_MODULE_LOGS, source, True)):
        return False
    global_level = _normalize_level(getattr(config, "DEBUG_LEVEL", "debug"))
    module_level = _normalize_level(_lookup(config.DEBUG_MODULE_LEVELS, source, global_level))
    threshold = max(_score(global_level), _score(module_level))
    return _score(level) >= threshold


def format_line(level: str, source: str, *a: Any) -> str:
    try:
        ts = time.strftime("%H:%M:%S")
    except Exception:
        ts = ""
    line = " ".join(str(x) for x in a)
    return f"[{source} {_normalize_level(level).upper()} {ts}] {line}"


def _emit(level: str, *a: Any, source: str | None = None) -> None:
    tag = str(source or _source_from_stack()).strip() or _FALLBACK_SOURCE
    lvl = _normalize_level(level)
    if not _should_log(tag, lvl):
        return
    msg = format_line(lvl, tag, *a)

    try:
        print(msg, flush=True)
    except Exception:
        pass

    path = config.DEBUG_LOG_FILE
    if not path:
        return
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(msg + "\n")
    except Exception:
        pass


def trace(*a: Any, source: str | None = None) -> None:
    _emit("trace", *a, source=source)


def debug(*a: Any, source: str | None = None) -> None:
    _emit("debug", *a, source=source)


def info(*a: Any, source: str | None = None) -> None:
    _emit("info", *a, source=source)


def warn(*a: Any, source: str | None = None) -> None:
    _emit("warn", *a, source=source)


def error(*a: Any, source: str | None = None) -> None:
    _emit("error", *a, source=source)


def dbg(*a: Any, source: str | None = None) -> None:
    debug(*a, source=source)
