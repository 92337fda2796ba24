"""
Headless entry point: list detected lines, apply edits, export.
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PyQt5.QtCore import QCoreApplication

from .config import EditorSettings
from .controllers import EditorController
from .core.errors import ExportError
from .core.session import SessionStatus

logger = logging.getLogger("inkpatch")


def _parse_numbers(value: str, count: int) -> List[float]:
    parts = value.split(",")
    if len(parts) != count:
        raise argparse.ArgumentTypeError(f"expected {count} comma-separated numbers, got {value!r}")
    try:
        return [float(p) for p in parts]
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number list: {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="inkpatch",
        description="Edit text on page 1 of a PDF and export the result.",
    )
    parser.add_argument("input", type=Path, help="source PDF")
    parser.add_argument("-o", "--output", type=Path, help="where to write the edited PDF")
    parser.add_argument("--list", action="store_true", help="print detected lines")
    parser.add_argument(
        "--replace", action="append", default=[], metavar="LINE_ID=TEXT",
        help="replace the text of a detected line (repeatable)",
    )
    parser.add_argument(
        "--rect", action="append", default=[], metavar="X,Y,W,H",
        type=lambda v: _parse_numbers(v, 4),
        help="add a rectangle in canvas pixels (repeatable)",
    )
    parser.add_argument("--host-width", type=float, help="host viewport width in pixels")
    parser.add_argument("--scale", type=float, help="render scale")
    parser.add_argument("--config", type=Path, help="settings JSON file")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    settings = EditorSettings.load(args.config)
    if args.scale:
        settings.render_scale = args.scale

    controller = EditorController(settings, host_width=args.host_width, run_synchronously=True)
    session = controller.load_document(args.input)
    if session.status != SessionStatus.READY:
        print(f"Error: {session.message}", file=sys.stderr)
        return 1
    if session.message:
        logger.warning(session.message)

    if args.list:
        for box in session.canvas.line_boxes:
            print(
                f"{box.id:<24} x={box.left:8.1f} y={box.top:8.1f} "
                f"w={box.width:7.1f} h={box.height:6.1f}  {box.text}"
            )

    for spec in args.replace:
        line_id, sep, text = spec.partition("=")
        if not sep:
            print(f"Error: --replace expects LINE_ID=TEXT, got {spec!r}", file=sys.stderr)
            return 2
        textbox = session.canvas.promote(line_id)
        if textbox is None:
            print(f"Error: no detected line {line_id!r}", file=sys.stderr)
            return 2
        session.canvas.commit_edit(textbox, text)

    for x, y, w, h in args.rect:
        rect = session.canvas.add_rectangle(x, y)
        rect.width, rect.height = w, h

    if args.output is None:
        return 0

    try:
        data = controller.export_now()
    except ExportError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    args.output.write_bytes(data)
    logger.info("Wrote %s (%d bytes)", args.output, len(data))
    return 0


if __name__ == "__main__":
    sys.exit(main())
