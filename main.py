import argparse
import logging
import sys
from dataclasses import asdict

from bmp_errors import BitmapError
from bmp_parser import load_bitmap

DEFAULT_PATH = "/tmp/foo2.bmp"


def format_bitmap(bitmap):
    # Header and DIB fields, one per line
    text = ""
    for k, v in asdict(bitmap.header).items():
        text += f"{k}: {v}\n"
    for k, v in asdict(bitmap.dib).items():
        text += f"{k}: {v}\n"

    text += "palette:\n"
    for i, color in enumerate(bitmap.colors):
        text += f"  {i}: ({color.red}, {color.green}, {color.blue}, {color.reserved})\n"

    text += "pixels:\n"
    for r in range(bitmap.height):
        text += "  " + " ".join(f"{p:x}" for p in bitmap.row(r)) + "\n"
    return text


def main(argv=None):
    parser = argparse.ArgumentParser(description="Decode a 4 bpp BMP file and dump its contents")
    parser.add_argument("path", nargs="?", default=DEFAULT_PATH, help="BMP file to read")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every decode stage")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        bitmap = load_bitmap(args.path)
    except BitmapError as e:
        print(f"Error: {e}")
        return 1

    print(format_bitmap(bitmap), end="")
    return 0


if __name__ == "__main__":
    sys.exit(main())
