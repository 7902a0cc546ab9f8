import logging

from bmp_errors import BitmapIoError, UnexpectedEofError

logger = logging.getLogger(__name__)

# Upper bound for a single stream read, sizes come from untrusted headers
CHUNK_SIZE = 64 * 1024


def read_section(stream, nbytes):
    # Read exactly nbytes, retrying short reads until the stream runs dry
    if nbytes == 0:
        return b''

    buff = bytearray()
    while len(buff) < nbytes:
        try:
            chunk = stream.read(min(nbytes - len(buff), CHUNK_SIZE))
        except OSError as e:
            logger.debug("Stream read failed after %d of %d bytes: %s", len(buff), nbytes, e)
            raise BitmapIoError(e) from e
        # Empty read means the source is exhausted
        if not chunk:
            logger.debug("Expected %d bytes, stream ended after %d", nbytes, len(buff))
            raise UnexpectedEofError()
        buff.extend(chunk)
    return bytes(buff)


def word(buff, i):
    # Little-endian unsigned 16-bit value at offset i
    return int.from_bytes(buff[i:i+2], 'little')


def dword(buff, i):
    # Little-endian unsigned 32-bit value at offset i
    return int.from_bytes(buff[i:i+4], 'little')


def row_stride(width, bpp):
    # Each row is padded to a multiple of 4 bytes
    return ((bpp * width + 31) // 32) * 4
