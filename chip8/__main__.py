"""Command line entry point: python -m chip8 ROM [--quirk-...]"""

import argparse
import logging
import sys

from .cpu import load
from .disassembler import format_listing
from .errors import LoadError
from .quirks import QuirkSet

log = logging.getLogger("chip8")


def build_parser():
    parser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 / S-CHIP interpreter")
    parser.add_argument("rom", help="path to a raw CHIP-8 program image")
    for name in QuirkSet.names():
        parser.add_argument(f"--{name}", action="append_const", const=name, dest="quirks", default=[])
    parser.add_argument("--ips", type=int, default=700, help="instructions per second (default: 700)")
    parser.add_argument("--scale", type=int, default=5, help="window pixels per high res pixel (default: 5)")
    parser.add_argument("--disassemble", action="store_true", help="print a listing of the program and exit")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with open(args.rom, "rb") as f:
        data = f.read()

    if args.disassemble:
        print(format_listing(data))
        return 0

    try:
        vm = load(data, args.quirks, strict=True)
    except LoadError as exc:
        log.error("%s", exc)
        return 1

    # pygame is only needed once there is something to show
    from .frontend import Frontend, FrontendConfig

    Frontend(vm, FrontendConfig(ips=args.ips, scale=args.scale)).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
