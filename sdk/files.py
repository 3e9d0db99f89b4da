"""Helpers for deciding what a media payload is and whether it may be sent.

A payload handed to a ``send_*`` method is one of:

* a :class:`pathlib.Path` or an open binary file, uploaded as a multipart
  file part;
* ``bytes``, uploaded under the method's default filename;
* a ``str``: a ``file_id`` or URL Telegram already knows, sent in a JSON
  body.
"""

import os
from typing import Any, Iterable, Optional

from sdk.exceptions import UnsupportedFileType

PHOTO_EXTENSIONS = ("jpg", "jpeg", "gif", "png", "tif", "bmp")
VIDEO_EXTENSIONS = ("mp4",)
AUDIO_EXTENSIONS = ("mp3",)
STICKER_EXTENSIONS = ("webp",)


def is_file(value: Any) -> bool:
    """Is *value* a local file (a path object or an open binary stream)?"""
    return isinstance(value, os.PathLike) or hasattr(value, "read")


def file_name(value: Any) -> Optional[str]:
    """Best-effort base name of a path or stream, ``None`` when unknown."""
    if isinstance(value, os.PathLike):
        return os.path.basename(os.fspath(value))
    name = getattr(value, "name", None)
    if isinstance(name, str):
        return os.path.basename(name)
    return None


def of_type(value: Any, valid_extensions: Iterable[str]) -> bool:
    """Does the extension of *value* match any of *valid_extensions*?"""
    name = file_name(value)
    if name is None:
        return False
    name = name.lower()
    return any(name.endswith(f".{ext.lower()}") for ext in valid_extensions)


def assert_file_type(value: Any, valid_extensions: Iterable[str]) -> None:
    """Raise :class:`UnsupportedFileType` if *value* is a file of the wrong type.

    Non-file payloads (``bytes``, file ids, URLs) and streams without a
    name pass through unchecked; they upload under the default filename.
    """
    valid_extensions = tuple(valid_extensions)
    if not is_file(value) or file_name(value) is None:
        return
    if not of_type(value, valid_extensions):
        raise UnsupportedFileType(file_name(value), valid_extensions)
