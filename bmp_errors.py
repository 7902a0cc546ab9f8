class BitmapError(Exception):
    """Base class for every failure raised while decoding a bitmap."""

    kind = None
    message = "bitmap error"

    def __init__(self, message=None):
        super().__init__(message or self.message)


class BitmapIoError(BitmapError):
    # The stream itself failed, not its content
    kind = "Io"

    def __init__(self, cause):
        self.cause = cause
        super().__init__(f"unexpected IO error: {cause}")


class UnexpectedEofError(BitmapError, ValueError):
    kind = "UnexpectedEof"
    message = "unexpected end of file"


class BadMagicError(BitmapError, ValueError):
    kind = "BadMagic"
    message = "invalid magic number in BMP header"


class UnsupportedDibError(BitmapError, ValueError):
    kind = "UnsupportedDib"
    message = "unsupported DIB block (only BITMAPINFOHEADER is supported)"


class UnsupportedBppError(BitmapError, ValueError):
    kind = "UnsupportedBpp"
    message = "unsupported bits per pixel (only 4 bpp supported)"
