"""Decoder for uncompressed 4 bpp Windows bitmaps (BITMAPINFOHEADER).

A bitmap is read in one forward pass over a byte stream:

    file header (14 bytes) -> DIB header (40 bytes)
        -> color table (4 bytes per color) -> row-padded pixel array

Every stage either returns its part of the image or raises one of the errors
from ``bmp_errors``. Nothing is returned when any stage fails.
"""
import enum
import logging
from dataclasses import dataclass

from bmp_errors import BadMagicError, BitmapIoError, UnsupportedBppError, UnsupportedDibError
from utils import dword, read_section, row_stride, word

logger = logging.getLogger(__name__)

HEADER_SIZE = 14
DIB_SIZE = 40           # BITMAPINFOHEADER, the only DIB variant understood
COLOR_ENTRY_SIZE = 4
MAGIC = b'BM'


@dataclass(frozen=True)
class FileHeader:
    file_size: int
    reserved: int
    pixel_data_offset: int


@dataclass(frozen=True)
class InfoHeader:
    width: int
    height: int
    color_planes: int
    bits_per_pixel: int
    compression: int
    image_size: int
    x_ppm: int
    y_ppm: int
    palette_colors: int
    important_colors: int


@dataclass(frozen=True)
class Color:
    """One color table entry.

    The four components are the entry's bytes in the order they appear in the
    file, i.e. the little-endian dword ``n`` gives ``red = n & 0xff`` and
    ``reserved = n >> 24``.
    """
    red: int
    green: int
    blue: int
    reserved: int

    @classmethod
    def from_dword(cls, n):
        return cls(n & 0xFF, (n >> 8) & 0xFF, (n >> 16) & 0xFF, (n >> 24) & 0xFF)

    @classmethod
    def from_bytes(cls, entry):
        return cls.from_dword(dword(entry, 0))


class PixelFormat(enum.IntEnum):
    INDEXED_4 = 4

    @classmethod
    def from_bpp(cls, bpp):
        try:
            return cls(bpp)
        except ValueError:
            logger.debug("Unsupported bits per pixel: %d", bpp)
            raise UnsupportedBppError() from None


@dataclass(frozen=True)
class Bitmap:
    header: FileHeader
    dib: InfoHeader
    colors: tuple
    pixels: tuple

    @property
    def width(self):
        return self.dib.width

    @property
    def height(self):
        return self.dib.height

    def row(self, r):
        # Rows are kept in stored order, row 0 is the first row in the file
        if not 0 <= r < self.height:
            raise IndexError(f"row {r} out of range")
        start = r * self.width
        return self.pixels[start:start + self.width]

    def color_at(self, x, y):
        return self.colors[self.row(y)[x]]


def read_header(stream):
    buff = read_section(stream, HEADER_SIZE)

    # First two bytes must be 'BM'
    if buff[0:2] != MAGIC:
        logger.debug("Bad magic %r", buff[0:2])
        raise BadMagicError()

    header = FileHeader(
        file_size=dword(buff, 2),
        reserved=dword(buff, 6),
        pixel_data_offset=dword(buff, 10),
    )
    logger.debug("File header: %s", header)
    return header


def read_dib(stream):
    buff = read_section(stream, DIB_SIZE)

    # The declared DIB length must be 40
    size = dword(buff, 0)
    if size != DIB_SIZE:
        logger.debug("Unsupported DIB size %d", size)
        raise UnsupportedDibError()

    # Bit depth is checked later, by the pixel reader
    dib = InfoHeader(
        width=dword(buff, 4),
        height=dword(buff, 8),
        color_planes=word(buff, 12),
        bits_per_pixel=word(buff, 14),
        compression=dword(buff, 16),
        image_size=dword(buff, 20),
        x_ppm=dword(buff, 24),
        y_ppm=dword(buff, 28),
        palette_colors=dword(buff, 32),
        important_colors=dword(buff, 36),
    )
    logger.debug("DIB header: %s", dib)
    return dib


def read_color_table(stream, ncolors):
    buff = read_section(stream, COLOR_ENTRY_SIZE * ncolors)
    table = tuple(
        Color.from_bytes(buff[i:i + COLOR_ENTRY_SIZE])
        for i in range(0, len(buff), COLOR_ENTRY_SIZE)
    )
    logger.debug("Read %d palette colors", len(table))
    return table


def read_pixels(stream, cols, rows, bpp):
    pixel_format = PixelFormat.from_bpp(bpp)
    if pixel_format is PixelFormat.INDEXED_4:
        return _read_pixels_4bpp(stream, cols, rows)
    raise UnsupportedBppError()


def _read_pixels_4bpp(stream, cols, rows):
    if cols == 0 or rows == 0:
        return ()

    stride = row_stride(cols, 4)
    buff = read_section(stream, stride * rows)
    logger.debug("Pixel array: %d rows of %d bytes", rows, stride)

    pixels = []
    for r in range(rows):
        row_start = r * stride
        for c in range(cols):
            byte = buff[row_start + c // 2]
            # Two pixels per byte, the first one in the high nibble
            if c % 2 == 0:
                pixels.append(byte >> 4)
            else:
                pixels.append(byte & 0x0F)
    return tuple(pixels)


class BMPParser:
    def __init__(self, stream):
        self.stream = stream

    def parse(self):
        header = read_header(self.stream)
        dib = read_dib(self.stream)
        colors = read_color_table(self.stream, dib.palette_colors)
        pixels = read_pixels(self.stream, dib.width, dib.height, dib.bits_per_pixel)
        return Bitmap(header=header, dib=dib, colors=colors, pixels=pixels)


def read_bitmap(stream):
    # The stream is left positioned just past the pixel array
    return BMPParser(stream).parse()


def load_bitmap(filepath):
    try:
        f = open(filepath, "rb")
    except OSError as e:
        logger.debug("Could not open %s: %s", filepath, e)
        raise BitmapIoError(e) from e

    with f:
        bitmap = read_bitmap(f)
    logger.info("Loaded %dx%d bitmap from %s", bitmap.width, bitmap.height, filepath)
    return bitmap
