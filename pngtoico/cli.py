# pngtoico/cli.py
import argparse
import logging
from typing import List, Optional

from pngtoico import __version__
from pngtoico.config import ConfigManager, IconSettings
from pngtoico.errors import IconToolError
from pngtoico.ico import IconPacker, IconUnpacker
from pngtoico.utils.log import setup_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pngtoico",
        description="Convert a PNG image to a multi-resolution ICO file, "
                    "or unpack an ICO file into its PNG images.",
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "-i", "--input",
        metavar="PNG_FILE",
        help="PNG image to convert.",
    )
    mode.add_argument(
        "--unpack",
        metavar="ICO_FILE",
        help="ICO file to unpack into <name>_sizes/<name>_<w>x<h>.png files.",
    )
    parser.add_argument(
        "-o", "--output",
        metavar="OUTPUT_DIR",
        help="Output folder (default: ~/Pictures/PngToIcon).",
    )
    parser.add_argument(
        "--sizes",
        help="Comma separated icon sizes to pack, e.g. 16,32,256 "
             "(default: 16,32,48,64,128,256).",
    )
    parser.add_argument(
        "--config",
        metavar="YAML_FILE",
        help="Configuration file (default: config/pngtoico.yaml if present).",
    )
    parser.add_argument(
        "--permissive",
        action="store_true",
        help="Unpack containers that do not declare themselves as icons.",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run_pack(input_path: str, settings: IconSettings) -> int:
    packer = IconPacker(sizes=settings.sizes, resample=settings.resample)
    output_path = packer.pack_file(input_path, settings.output_dir)
    print(f"Successfully converted '{input_path}' to ICO file '{output_path}'.")
    return EXIT_OK


def run_unpack(ico_path: str, settings: IconSettings) -> int:
    unpacker = IconUnpacker(strict_image_type=settings.strict_image_type)
    report = unpacker.unpack_file(ico_path, settings.output_dir)
    for path in report.written:
        print(f"[INFO] Saved {path}")
    for failure in report.failures:
        label = failure.entry.label if failure.entry else "?"
        print(f"[ERROR] Entry {failure.index} ({label}): {failure.error}")
    print(f"Unpacked {len(report.written)} of {len(report.results)} images "
          f"from '{ico_path}' into '{report.output_dir}'.")
    return EXIT_OK if report.ok else EXIT_FAILURE


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {
        "output_dir": args.output,
        "sizes": args.sizes,
        "strict_image_type": False if args.permissive else None,
        "log_level": "DEBUG" if args.verbose else None,
    }
    try:
        settings = ConfigManager(args.config, overrides=overrides).settings
        setup_logging(settings.log_level, settings.log_file)
    except IconToolError as e:
        print(f"[ERROR] {e}")
        return EXIT_FAILURE

    try:
        if args.input:
            return run_pack(args.input, settings)
        return run_unpack(args.unpack, settings)
    except IconToolError as e:
        logger.debug("Operation failed", exc_info=True)
        print(f"[ERROR] {e}")
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
