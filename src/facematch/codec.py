"""Serialization of feature sets into opaque, hashable encoding strings.

Layout::

    <hash>:HIST:<256 ints,>LBP:<256 floats,>EDGE:<8 floats,>TEXT:<16 floats,>

Every value is followed by a comma; floats use three decimals. The hash is
the first 16 characters of the base64 SHA-256 digest of everything after
the first colon.
"""

from __future__ import annotations

import base64
import hashlib

import numpy as np
import numpy.typing as npt

from .errors import EncodingParseError
from .features import EDGE_BINS, HISTOGRAM_BINS, LBP_BINS, TEXTURE_BLOCKS
from .models import FeatureSet

HIST_TAG = "HIST:"
LBP_TAG = "LBP:"
EDGE_TAG = "EDGE:"
TEXTURE_TAG = "TEXT:"

SECTION_TAGS = (HIST_TAG, LBP_TAG, EDGE_TAG, TEXTURE_TAG)
SECTION_SIZES = {
    HIST_TAG: HISTOGRAM_BINS,
    LBP_TAG: LBP_BINS,
    EDGE_TAG: EDGE_BINS,
    TEXTURE_TAG: TEXTURE_BLOCKS,
}

HASH_LENGTH = 16
_SEPARATOR = ":"


def _join_ints(values: npt.NDArray[np.int64]) -> str:
    return "".join(f"{int(v)}," for v in values)


def _join_floats(values: npt.NDArray[np.float64]) -> str:
    return "".join(f"{float(v):.3f}," for v in values)


def serialize_features(features: FeatureSet) -> str:
    """Serialize a feature set into the tagged, comma-separated payload.

    Args:
        features: Extracted feature set.

    Returns:
        Feature payload without the hash prefix.
    """
    return (
        HIST_TAG + _join_ints(features.histogram)
        + LBP_TAG + _join_floats(features.lbp)
        + EDGE_TAG + _join_floats(features.edge_orientation)
        + TEXTURE_TAG + _join_floats(features.texture)
    )


def content_hash(payload: str) -> str:
    """Hash a serialized feature payload.

    Args:
        payload: Output of serialize_features.

    Returns:
        First 16 characters of the base64-encoded SHA-256 digest.
    """
    digest = hashlib.sha256(payload.encode("utf-8")).digest()
    return base64.b64encode(digest).decode("ascii")[:HASH_LENGTH]


def encode_features(features: FeatureSet) -> str:
    """Build the full encoding string ``<hash>:<payload>``.

    Args:
        features: Extracted feature set.

    Returns:
        Opaque encoding to be stored verbatim.
    """
    payload = serialize_features(features)
    return f"{content_hash(payload)}{_SEPARATOR}{payload}"


def split_encoding(encoding: str) -> tuple[str, str]:
    """Split an encoding into its hash and feature payload.

    Only the first colon separates; the payload keeps the rest.

    Args:
        encoding: Stored encoding string.

    Returns:
        Tuple of (hash, payload).

    Raises:
        EncodingParseError: If the encoding contains no colon.
    """
    hash_part, sep, payload = encoding.partition(_SEPARATOR)
    if not sep:
        msg = "Invalid encoding format: no ':' separator found"
        raise EncodingParseError(msg)
    return hash_part, payload


def extract_section(payload: str, tag: str) -> list[str]:
    """Extract the raw comma-separated tokens of one tagged section.

    The section runs from the end of ``tag`` to the start of the next tag,
    or to the end of the payload.

    Args:
        payload: Feature payload (after the hash).
        tag: Section tag, e.g. ``"LBP:"``.

    Returns:
        Non-empty tokens of the section, in order.

    Raises:
        EncodingParseError: If the tag is not present.
    """
    start = payload.find(tag)
    if start == -1:
        msg = f"Section {tag!r} not found in encoding"
        raise EncodingParseError(msg)
    start += len(tag)

    # The next tag begins right after the last comma before its colon
    end = payload.find(_SEPARATOR, start)
    if end == -1:
        body = payload[start:]
    else:
        body = payload[start:payload.rfind(",", start, end) + 1]

    tokens = body.split(",")
    while tokens and tokens[-1] == "":
        tokens.pop()
    return tokens


def parse_section(payload: str, tag: str) -> npt.NDArray[np.float64]:
    """Extract and parse one section as floats.

    Args:
        payload: Feature payload (after the hash).
        tag: Section tag.

    Returns:
        Section values.

    Raises:
        EncodingParseError: If the tag is missing or a value is not numeric.
    """
    tokens = extract_section(payload, tag)
    try:
        return np.array([float(t) for t in tokens], dtype=np.float64)
    except ValueError as e:
        msg = f"Section {tag!r} contains a non-numeric value: {e}"
        raise EncodingParseError(msg) from e


def decode_features(encoding: str) -> FeatureSet:
    """Parse a full encoding back into a feature set.

    Args:
        encoding: Stored encoding string.

    Returns:
        Feature set with the precision stored in the encoding.

    Raises:
        EncodingParseError: On a missing separator, missing section,
            non-numeric value or wrong section length.
    """
    _, payload = split_encoding(encoding)

    sections = {}
    for tag in SECTION_TAGS:
        values = parse_section(payload, tag)
        if len(values) != SECTION_SIZES[tag]:
            msg = f"Section {tag!r} has {len(values)} values, expected {SECTION_SIZES[tag]}"
            raise EncodingParseError(msg)
        sections[tag] = values

    return FeatureSet(
        histogram=sections[HIST_TAG].astype(np.int64),
        lbp=sections[LBP_TAG],
        edge_orientation=sections[EDGE_TAG],
        texture=sections[TEXTURE_TAG],
    )
