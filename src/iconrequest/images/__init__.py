"""Icon loading and encoding."""

from iconrequest.images.icons import FileIconSource, IconSource, encode_png, save_png

__all__ = ["FileIconSource", "IconSource", "encode_png", "save_png"]
