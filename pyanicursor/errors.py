__all__ = ('CursorError', 'FormatError', 'EncodeError', 'LayerError')


class CursorError(Exception):
    """base class of every error raised by this package"""


class FormatError(CursorError, ValueError):
    """input bytes could not be decoded (bad magic, truncated chunk, unreadable image)"""

    def __init__(self, message: str, file_name: str = None):
        super().__init__(message)
        self.message = message
        self.file_name = file_name

    def __str__(self):
        if self.file_name:
            return f'{self.file_name}: {self.message}'
        return self.message


class EncodeError(CursorError):
    """an export step produced no usable output"""


class LayerError(CursorError, LookupError):
    """a layer operation referenced a missing layer or broke a stack rule"""
