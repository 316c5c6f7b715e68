"""Command‑line interface: run a search for one digit string and report the results."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict, fields
from pathlib import Path
from typing import Any

from .constants import TRAVERSALS
from .controller import RunController
from .messages import Event, StepOutcome
from .operators import describe_symbols
from .report import render_report
from .settings import Options
from .verify import verify_formula

__all__ = ["main"]

# CLI destination -> option field, for flags given explicitly
_FLAG_OPTIONS = {
    "digits": "digit_string",
    "symbols": "symbols",
    "preserve_order": "preserve_order",
    "value_limit": "value_limit",
    "display_limit": "display_limit",
    "max_duration": "max_duration_seconds",
    "heartbeat": "heartbeat_seconds",
    "yield_seconds": "yield_seconds",
    "min_heartbeats": "min_heartbeats",
    "traversal": "traversal",
    "cache_limit": "cache_limit",
}


def _preview_image(path: str) -> None:
    """Display a PNG in a Matplotlib window (best‑effort)."""
    try:
        import numpy as np  # type: ignore
        from PIL import Image  # type: ignore
        import matplotlib.pyplot as plt  # imported lazily to avoid GUI deps
    except ImportError as exc:
        print(f"⚠️ Could not preview image; missing dependency: {exc}", file=sys.stderr)
        return

    try:
        img = Image.open(path).convert("RGBA")
        arr = np.array(img)
        fig, ax = plt.subplots()
        ax.imshow(arr)
        ax.axis("off")
        plt.show()
    except Exception as exc:
        print(f"⚠️ Could not preview image: {exc}", file=sys.stderr)


def _parse_cli(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Make every number you can from a string of digits")
    parser.add_argument("digits", nargs="?", help="Digits to use, e.g. 2024")
    parser.add_argument(
        "--symbols",
        nargs="+",
        metavar="SYMBOL",
        help="Operator symbols to allow (see --list-symbols); '()' enables brackets",
    )
    parser.add_argument(
        "--partial",
        action="store_true",
        help="Count formulas that use only some of the digits",
    )
    parser.add_argument(
        "--preserve-order",
        action="store_true",
        default=None,
        help="Keep the digits in the order given",
    )
    parser.add_argument("--value-limit", type=int, help="Largest magnitude kept during the search")
    parser.add_argument("--display-limit", type=int, help="Report every value from 0 up to this")
    parser.add_argument("--max-duration", type=float, help="Seconds of processing before pausing")
    parser.add_argument("--heartbeat", type=float, help="Seconds between progress snapshots")
    parser.add_argument("--yield", dest="yield_seconds", type=float, help="Seconds between yields")
    parser.add_argument("--min-heartbeats", type=int, help="Heartbeats before the time budget applies")
    parser.add_argument("--traversal", choices=TRAVERSALS, help="Order in which groups are expanded")
    parser.add_argument("--cache-limit", type=int, help="Seen groups kept before the cache resets")
    parser.add_argument("--config", help="JSON file of options (snake_case or camelCase keys)")
    parser.add_argument("--quiet", action="store_true", default=None, help="Suppress yield messages")
    parser.add_argument("--json", action="store_true", help="Print the results as JSON")
    parser.add_argument("--out", help="Write JSON results to file")
    parser.add_argument(
        "--extra-limit",
        type=int,
        default=100,
        help="How many solutions above the display limit to list",
    )
    parser.add_argument("--verify", action="store_true", help="Re-check every solution exactly")
    parser.add_argument("--plot", help="Write a coverage chart PNG to this path")
    parser.add_argument("--preview", action="store_true", help="Preview the coverage chart")
    parser.add_argument("--list-symbols", action="store_true", help="List operator symbols and exit")
    parser.add_argument(
        "--log-level",
        choices=["WARNING", "INFO", "DEBUG"],
        default="WARNING",
        help="Logging level for number_maker",
    )
    return parser.parse_args(argv)


def _configure_logging(level_name: str) -> None:
    logging.basicConfig(level=logging.WARNING)
    level = getattr(logging, level_name)
    pkg_logger = logging.getLogger("number_maker")
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(logging.BASIC_FORMAT))
    handler.setLevel(level)
    pkg_logger.addHandler(handler)
    pkg_logger.propagate = False
    pkg_logger.setLevel(level)


def _load_config(path: str) -> dict[str, Any]:
    try:
        data = json.loads(Path(path).read_text("utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        sys.exit(f"Error reading --config: {exc}")
    if not isinstance(data, dict):
        sys.exit("Error: --config must hold a JSON object.")
    return data


def build_options(ns: argparse.Namespace) -> Options:
    """Merge defaults, the config file and explicit flags, in that order."""
    values: dict[str, Any] = asdict(Options())
    if ns.config:
        values.update(asdict(Options.from_dict(_load_config(ns.config))))
    for dest, name in _FLAG_OPTIONS.items():
        given = getattr(ns, dest)
        if given is not None:
            values[name] = given
    if ns.partial:
        values["use_all_digits"] = False
    if ns.quiet:
        values["quiet"] = True
    known = {f.name for f in fields(Options)}
    return Options(**{k: v for k, v in values.items() if k in known})


def _list_symbols() -> None:
    for symbol, descriptions in describe_symbols():
        for description in descriptions:
            print(f"{symbol:>4}  {description}")


def main(argv: list[str] | None = None) -> None:
    ns = _parse_cli(argv)
    _configure_logging(ns.log_level)

    if ns.list_symbols:
        _list_symbols()
        return
    if ns.digits is None and not ns.config:
        sys.exit("Error: DIGITS is required unless given in --config.")

    options = build_options(ns)
    messages: list[str] = []

    def collect(event: Event) -> None:
        if event.clear_messages:
            messages.clear()
        if event.message is not None:
            messages.append(event.message)

    controller = RunController(collect)
    outcome = controller.run(options)
    if controller.state is None or controller.settings is None:
        sys.exit("Error: " + (messages[-1] if messages else "could not start"))

    snapshot = controller.snapshot(include_formulas=True)
    assert snapshot is not None
    if outcome is StepOutcome.PAUSED:
        logging.getLogger("number_maker").info(
            "[number-maker] paused after %.2f s with %d groups queued",
            snapshot.processing_time_ms / 1000,
            snapshot.queue_size,
        )

    failures: list[str] = []
    if ns.verify:
        failures = [f.text for f in controller.state.pool if not verify_formula(f)]

    plot_path = None
    if ns.plot or ns.preview:
        from .plot import render_coverage

        plot_path = render_coverage(
            snapshot.formula_map or {},
            controller.settings.display_limit,
            title=f"Numbers from {' '.join(controller.settings.digit_string)}",
            path=ns.plot,
        )
        if ns.plot:
            print(f"✔ Coverage chart written to {plot_path}", file=sys.stderr)
        if ns.preview:
            _preview_image(plot_path)

    result: dict[str, Any] = {
        "status": controller.status.value,
        "options": asdict(options),
        "messages": messages,
        "snapshot": snapshot.to_dict(),
    }
    if ns.verify:
        result["verifyFailures"] = failures
    json_out = json.dumps(result, ensure_ascii=False, separators=(",", ":"))
    if ns.out:
        Path(ns.out).write_text(json_out, "utf-8")
        print(f"✔ Results JSON written to {ns.out}", file=sys.stderr)

    if ns.json:
        print(json_out)
    else:
        print(render_report(options, snapshot, controller.status, extra_limit=ns.extra_limit))
        if ns.verify:
            print(f"Verified {len(controller.state.pool) - len(failures)} of {len(controller.state.pool)} formulas")

    if failures:
        sys.exit("Error: formulas failed verification: " + ", ".join(failures))


if __name__ == "__main__":  # pragma: no cover
    main()
