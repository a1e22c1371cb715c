from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from vectorchart import ConfigurationError, compute_nice_scale, load_chart_definition


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="vectorchart")
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a chart definition (TOML) to SVG.")
    render.add_argument("definition", type=Path)
    render.add_argument("--out", type=Path, default=None, help="Output path. Default: print the SVG to stdout.")
    render.add_argument("--html", action="store_true", help="Wrap the SVG in a minimal HTML page.")

    scale = sub.add_parser("scale", help="Print the nice scale for a data range.")
    scale.add_argument("min", type=float)
    scale.add_argument("max", type=float)
    scale.add_argument("--ticks", type=int, default=5)
    scale.add_argument("--no-zero", action="store_true", help="Do not extend the range to include zero.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "render":
            chart = load_chart_definition(args.definition)
            document = chart.to_html(title=args.definition.stem) if args.html else chart.render()
            if args.out is None:
                sys.stdout.write(document)
            else:
                args.out.write_text(document, encoding="utf-8")
                print(f"wrote {args.out}")
            return 0

        if args.command == "scale":
            result = compute_nice_scale(args.min, args.max, args.ticks, not args.no_zero)
            print(f"min={result.min:g} max={result.max:g} interval={result.tick_interval:g} ticks={result.tick_count}")
            return 0
    except ConfigurationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    parser.error(f"unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
