import argparse
import os
import sys
import time
from pathlib import Path

from imprev.config import RenderConfig
from imprev.converter import image_to_ansi
from imprev.errors import ImprevError
from imprev.lifecycle import LifecycleController
from imprev.logging_setup import configure_logging, get_logger
from imprev.render import write_output
from imprev.source import load_image
from imprev.terminal import ColourMode, TerminalGeometry

STDOUT_FILENO = 1

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130

WATCH_POLL_SECONDS = 0.1
WATCH_HINT = b"Press Ctrl-C to exit\n"

logger = get_logger()

COLOUR_MODES = {"auto": None} | {mode.value: mode for mode in ColourMode}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="imprev", description="Preview an image as coloured text in the terminal")
    parser.add_argument("image", help="Path to input image")
    parser.add_argument(
        "-c",
        "--colour-mode",
        default="auto",
        choices=list(COLOUR_MODES),
        help="Colour capability to render for (default: detect from COLORTERM/TERM)",
    )
    parser.add_argument(
        "-W", "--columns", type=int, default=None, help="Output width in columns (default: terminal width)"
    )
    parser.add_argument("-H", "--rows", type=int, default=None, help="Output height in rows (default: terminal height)")
    parser.add_argument(
        "-s", "--stretch", action="store_true", default=False, help="Fill the whole area instead of keeping aspect ratio"
    )
    parser.add_argument(
        "-u",
        "--upscale",
        default="nearest",
        choices=["nearest", "bilinear"],
        help="Filter used when enlarging small images (default: nearest)",
    )
    parser.add_argument(
        "-w", "--watch", action="store_true", default=False, help="Stay open and redraw when the terminal is resized"
    )
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="Log pipeline details to stderr")
    return parser


def _config_from_args(args: argparse.Namespace) -> RenderConfig:
    return RenderConfig(
        colour_mode=COLOUR_MODES[args.colour_mode],
        stretch=args.stretch,
        upscale=args.upscale,
        columns=args.columns,
        rows=args.rows,
        # Leave room for the hint line in watch mode
        reserve_rows=2 if args.watch else 1,
    )


def _watch(controller: LifecycleController, draw) -> None:
    write_output(WATCH_HINT, controller.fd)
    while controller.running:
        if controller.consume_resize():
            controller.clear_screen()
            draw()
            write_output(WATCH_HINT, controller.fd)
        time.sleep(WATCH_POLL_SECONDS)


def _render(args: argparse.Namespace, fd: int) -> None:
    config = _config_from_args(args)
    # Decode before touching the terminal so a bad file writes nothing to stdout
    image = load_image(args.image)

    def draw() -> None:
        write_output(image_to_ansi(image, TerminalGeometry.detect(), config), fd)

    with LifecycleController(fd, watch_resize=args.watch) as controller:
        if os.isatty(fd):
            controller.hide_cursor()
        draw()
        if args.watch:
            _watch(controller, draw)


def run(args: argparse.Namespace, fd: int = STDOUT_FILENO) -> int:
    image_path = Path(args.image)
    if not image_path.exists():
        print(f"File not found: {image_path}", file=sys.stderr)
        return EXIT_FAILURE

    try:
        _render(args, fd)
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    except ImprevError as e:
        logger.debug("render failed", exc_info=True)
        print(e, file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
