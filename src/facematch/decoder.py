"""Decode base64 image payloads into RGB rasters."""

from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Any

import cv2
import numpy as np
import numpy.typing as npt

from .errors import InvalidImageFormat

logger = logging.getLogger(__name__)


def strip_data_url(payload: str) -> str:
    """Remove a ``data:<mime>;base64,`` style prefix.

    Everything up to and including the first comma is discarded.

    Args:
        payload: Base64 text, optionally prefixed.

    Returns:
        The bare base64 text.
    """
    _, sep, rest = payload.partition(",")
    return (rest if sep else payload).strip()


def decode_image_bytes(data: bytes) -> npt.NDArray[Any]:
    """Decode an encoded image container (PNG, JPEG, BMP...) into a raster.

    Args:
        data: Raw container bytes.

    Returns:
        RGB image as uint8 array of shape (height, width, 3).

    Raises:
        InvalidImageFormat: If the bytes do not parse as a supported image.
    """
    if not data:
        msg = "Image payload is empty"
        raise InvalidImageFormat(msg)

    buf = np.frombuffer(data, dtype=np.uint8)
    try:
        bgr = cv2.imdecode(buf, cv2.IMREAD_COLOR)
    except cv2.error as e:
        msg = f"Unable to decode image: {e}"
        raise InvalidImageFormat(msg) from e

    if bgr is None:
        msg = "Byte stream is not a supported image format"
        raise InvalidImageFormat(msg)

    rgb: npt.NDArray[Any] = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
    rgb.flags.writeable = False
    return rgb


def decode_image(payload: str) -> npt.NDArray[Any]:
    """Decode a base64 (optionally data-URL prefixed) payload into a raster.

    Args:
        payload: Base64 image text as sent by clients.

    Returns:
        RGB image as uint8 array of shape (height, width, 3).

    Raises:
        InvalidImageFormat: If base64 decoding or image decoding fails.
    """
    text = strip_data_url(payload)
    try:
        data = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        msg = f"Payload is not valid base64: {e}"
        raise InvalidImageFormat(msg) from e

    raster = decode_image_bytes(data)
    logger.debug(f"Decoded image {raster.shape[1]}x{raster.shape[0]}")
    return raster


def load_image_file(path: Path) -> npt.NDArray[Any]:
    """Read an image file from disk into a raster.

    Args:
        path: Path to the image file.

    Returns:
        RGB image as uint8 array of shape (height, width, 3).

    Raises:
        FileNotFoundError: If the file does not exist.
        InvalidImageFormat: If the file is not a decodable image.
    """
    with Path(path).open("rb") as f:
        data = f.read()
    return decode_image_bytes(data)
