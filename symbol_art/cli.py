#!/usr/bin/env python3
# symbol_art/cli.py
"""
Entry point for Symbol Art.
Loads configuration, converts one image and prints or saves the result,
or launches the interactive viewer with --tui.
"""

import argparse
import os
import sys

from symbol_art.config import Config
from symbol_art.errors import SymbolArtError
from symbol_art.export import format_lines
from symbol_art.logging_conf import setup_logging
from symbol_art.pipeline import SymbolArtPipeline
from symbol_art.rendering.symbols import default_symbol_sets
from symbol_art.version import version_info


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="symbol-art",
        description="Turn an image into a grid of unicode symbols.",
    )
    p.add_argument("source", nargs="?", help="image path or URL (default: image.url from config)")
    p.add_argument("-t", "--threshold", type=int, help="gray <= threshold uses dark symbols (0-255)")
    p.add_argument("--turn", action="store_true", default=None, help="rotate the output by 90 degrees")
    p.add_argument("--light", help="symbols for light pixels")
    p.add_argument("--dark", help="symbols for dark pixels")
    p.add_argument("--preset", choices=sorted(default_symbol_sets()), help="named light/dark symbol pair")
    p.add_argument("--max-width", type=int, help="downscale images wider than this (0 keeps size)")
    p.add_argument("-f", "--format", choices=("text", "html"), help="output format")
    p.add_argument("-o", "--output", help="write to this file instead of stdout")
    p.add_argument("-c", "--config", help="config file path")
    p.add_argument("--tui", action="store_true", help="open the interactive viewer")
    p.add_argument("--version", action="version", version=version_info())
    return p


def _apply_args(cfg: Config, args: argparse.Namespace) -> None:
    partial = {"symbols": {}, "image": {}, "output": {}}
    if args.preset:
        light, dark = default_symbol_sets()[args.preset]
        partial["symbols"].update(light=light, dark=dark)
    if args.threshold is not None:
        partial["symbols"]["threshold"] = args.threshold
    if args.turn is not None:
        partial["symbols"]["turn"] = args.turn
    if args.light is not None:
        partial["symbols"]["light"] = args.light
    if args.dark is not None:
        partial["symbols"]["dark"] = args.dark
    if args.max_width is not None:
        partial["image"]["max_width"] = args.max_width
    if args.format:
        partial["output"]["format"] = args.format
    cfg.update(partial)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.threshold is not None and not 0 <= args.threshold <= 255:
        print(f"threshold {args.threshold} outside 0..255", file=sys.stderr)
        return 2

    cfg = Config.load(args.config, create_if_missing=args.config is None)
    _apply_args(cfg, args)
    setup_logging(cfg, quiet=args.tui)

    source = args.source or cfg["image"]["url"]
    pipeline = SymbolArtPipeline(cfg)

    if args.tui:
        if os.name == "nt" and not sys.stdout.isatty():
            print("No Windows console detected. Run from cmd, PowerShell, or Windows Terminal.")
            return 1
        from symbol_art.ui.app import SymbolArtApp
        try:
            pipeline.load(source)
        except SymbolArtError as e:
            pipeline.output_lines = [str(e)]
        SymbolArtApp(cfg, pipeline).run()
        return 0

    try:
        pipeline.load(source)
        pipeline.update_binary()
        lines = pipeline.compute().result()
    except SymbolArtError as e:
        print(str(e), file=sys.stderr)
        return 1
    finally:
        pipeline.close()

    out = cfg["output"]
    text = format_lines(lines, out["format"], out["font_size"], out["line_height"])
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text + "\n")
    else:
        print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
