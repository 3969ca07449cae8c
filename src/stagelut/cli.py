from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
import sys

from stagelut import __version__
from stagelut.config import AppConfig, load_config
from stagelut.utils.logging_utils import configure_logging


logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_NAME = "color_grading_lut.nutexb"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stagelut")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="Override the configured log level (DEBUG, INFO, WARNING, ...)")
    sub = parser.add_subparsers(dest="command", required=True)

    stamp = sub.add_parser("stamp", help="Darken a screenshot and stamp a neutral LUT strip into it")
    stamp.add_argument("input", help="Screenshot image path")
    stamp.add_argument("--out", default=None, help="Output path (default: <input>.lut.png)")
    stamp.add_argument("--config", default=None, help="Optional path to YAML config")

    build = sub.add_parser("build", help="Build the in-engine LUT from an edited screenshot strip")
    build.add_argument("input", help="Edited screenshot or LUT strip (.png, .cube, .nutexb)")
    build.add_argument("--stage", default=None, help="Stage LUT the screenshot was taken with")
    build.add_argument("--out", default=None, help=f"Output .nutexb, .png or .cube (default: {DEFAULT_OUTPUT_NAME})")
    build.add_argument("--raw", action="store_true", help="Copy the edited LUT without pipeline correction")
    build.add_argument("--template", default=None, help="Template .nutexb supplying the texture footer")
    build.add_argument("--workers", type=int, default=None, help="Worker threads for the correction")
    build.add_argument("--json", action="store_true", help="Emit machine-readable JSON report")
    build.add_argument("--config", default=None, help="Optional path to YAML config")

    decode = sub.add_parser("decode", help="Convert a .nutexb LUT to a strip PNG")
    decode.add_argument("input", help="Input .nutexb path")
    decode.add_argument("--out", default=None, help="Output path (default: <input>.png)")
    decode.add_argument("--config", default=None, help="Optional path to YAML config")

    return parser


def _load(args: argparse.Namespace) -> AppConfig:
    config = load_config(args.config) if args.config else AppConfig()
    configure_logging(getattr(args, "log_level", None) or config.log_level, config.log_file)
    return config


def _resolve(value: str | Path) -> Path:
    return Path(value).expanduser().resolve()


def _cmd_stamp(args: argparse.Namespace) -> int:
    from stagelut.write import stamp_screenshot

    config = _load(args)
    input_path = _resolve(args.input)
    out_path = _resolve(args.out) if args.out else input_path.with_suffix(".lut.png")

    stamp_screenshot(input_path, out_path, size=config.lut_size, darken=config.io.stamp_darken)
    print(str(out_path))
    return 0


def _cmd_build(args: argparse.Namespace) -> int:
    from stagelut.color import LutCorrector, build_pipeline
    from stagelut.decode import read_lut, read_nutexb
    from stagelut.write import write_lut

    config = _load(args)
    size = config.lut_size
    raw = bool(args.raw or config.correction.raw)

    edited_path = _resolve(args.input)
    stage_path = _resolve(args.stage) if args.stage else None
    if stage_path is None and not raw:
        raise ValueError("--stage is required unless --raw is given")

    lut_edit = read_lut(edited_path, size=size)

    footer: bytes | None = None
    lut_stage = None
    if stage_path is not None:
        if stage_path.suffix.lower() == ".nutexb":
            texture = read_nutexb(stage_path)
            lut_stage, footer = texture.lut, texture.footer
        else:
            lut_stage = read_lut(stage_path, size=size)

    template = _resolve(args.template) if args.template else config.io.nutexb_template
    if template is not None:
        footer = read_nutexb(template).footer

    corrector = LutCorrector(
        model=build_pipeline(config.pipeline),
        max_workers=args.workers or config.correction.max_workers,
        verify_tolerance=config.correction.verify_tolerance,
    )
    if raw or lut_stage is None:
        result = corrector.passthrough(lut_edit)
    else:
        result = corrector.correct(lut_edit, lut_stage)

    out_path = _resolve(args.out) if args.out else _resolve(DEFAULT_OUTPUT_NAME)
    write_lut(out_path, result.lut, footer=footer)
    logger.info("wrote %s LUT to %s", result.mode, out_path)

    payload = {
        "input": str(edited_path),
        "stage": str(stage_path) if stage_path else None,
        "output": str(out_path),
        "mode": result.mode,
        "pipeline": corrector.model.name,
        "lut_size": result.lut.size,
        "evaluated_points": result.evaluated_points,
        "excursions": {
            "stage_below_black": result.excursions.stage_below_black,
            "display_out_of_range": result.excursions.display_out_of_range,
            "linear_below_zero": result.excursions.linear_below_zero,
            "output_out_of_range": result.excursions.output_out_of_range,
        },
    }

    if args.json:
        print(json.dumps(payload, indent=2))
        return 0

    print(f"Output: {payload['output']}")
    print(f"Mode: {payload['mode']} (pipeline: {payload['pipeline']})")
    if result.mode == "corrected":
        print(f"Grid sites: {payload['evaluated_points']}")
        if result.excursions.total:
            print("Domain excursions:")
            for key, count in payload["excursions"].items():
                print(f"  {key:>22}: {count}")
    return 0


def _cmd_decode(args: argparse.Namespace) -> int:
    from stagelut.decode import read_nutexb
    from stagelut.write import write_strip_image

    _load(args)
    input_path = _resolve(args.input)
    out_path = _resolve(args.out) if args.out else input_path.with_suffix(".png")

    texture = read_nutexb(input_path)
    write_strip_image(out_path, texture.lut)
    print(str(out_path))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "stamp":
            return _cmd_stamp(args)
        if args.command == "build":
            return _cmd_build(args)
        if args.command == "decode":
            return _cmd_decode(args)

        parser.error(f"unknown command: {args.command}")
        return 2
    except Exception as exc:
        logger.exception("fatal error")
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
