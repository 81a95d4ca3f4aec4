from __future__ import annotations

import argparse
import sys

from . import config, logging
from .catalog import CatalogError, load_catalog
from .version import __version__


def _parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="refgraph", description="Interactive reference graph showcase")
    ap.add_argument("--catalog", default="", help="path to a references JSON file")
    ap.add_argument("--config", default="", help="path to a config JSON file")
    ap.add_argument("--debug", action="store_true", help="enable debug logging")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def main(argv: list[str] | None = None) -> int:
    ns = _parser().parse_args(sys.argv[1:] if argv is None else argv)

    if ns.config:
        config.reload_config(ns.config)
    if ns.debug:
        config.DEBUG = True

    try:
        records = load_catalog(ns.catalog or None)
    except CatalogError as exc:
        logging.error("catalog error", str(exc))
        print(f"refgraph: {exc}", file=sys.stderr)
        return 2

    from aqt.qt import QApplication

    from .ui.window import ShowcaseWindow

    app = QApplication.instance() or QApplication(sys.argv[:1])
    win = ShowcaseWindow(records)
    win.show()
    return int(app.exec())


if __name__ == "__main__":
    raise SystemExit(main())
