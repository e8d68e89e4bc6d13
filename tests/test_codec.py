"""
Tests for encoding serialization and section parsing.
"""

import base64
import hashlib

import numpy as np
import pytest

from facematch import EncodingParseError, FeatureSet, decode_features, encode_features
from facematch.codec import (
    EDGE_TAG,
    HIST_TAG,
    LBP_TAG,
    TEXTURE_TAG,
    content_hash,
    extract_section,
    parse_section,
    serialize_features,
    split_encoding,
)


def create_feature_set() -> FeatureSet:
    """Create a feature set with recognizable values."""
    histogram = np.arange(256, dtype=np.int64)
    lbp = np.zeros(256)
    lbp[255] = 0.75
    lbp[0] = 0.25
    edge = np.full(8, 0.125)
    texture = np.linspace(0.0, 1.0, 16)
    return FeatureSet(histogram=histogram, lbp=lbp, edge_orientation=edge, texture=texture)


class TestSerialize:
    """Test the serialized payload layout."""

    def test_tag_order(self):
        """Test that sections appear as HIST, LBP, EDGE, TEXT."""
        payload = serialize_features(create_feature_set())

        positions = [payload.index(tag) for tag in (HIST_TAG, LBP_TAG, EDGE_TAG, TEXTURE_TAG)]

        assert payload.startswith("HIST:")
        assert positions == sorted(positions)

    def test_section_formats(self):
        """Test integer histogram and three-decimal float sections."""
        payload = serialize_features(create_feature_set())

        assert payload.startswith("HIST:0,1,2,3,")
        assert "LBP:0.250,0.000," in payload
        assert "EDGE:0.125,0.125,0.125,0.125,0.125,0.125,0.125,0.125,TEXT:" in payload
        assert payload.endswith("1.000,")

    def test_section_lengths(self):
        """Test the number of values per section."""
        payload = serialize_features(create_feature_set())

        assert len(extract_section(payload, HIST_TAG)) == 256
        assert len(extract_section(payload, LBP_TAG)) == 256
        assert len(extract_section(payload, EDGE_TAG)) == 8
        assert len(extract_section(payload, TEXTURE_TAG)) == 16


class TestEncode:
    """Test the hash-prefixed encoding."""

    def test_hash_prefix(self):
        """Test that the prefix is the truncated base64 SHA-256 of the payload."""
        features = create_feature_set()
        payload = serialize_features(features)
        expected = base64.b64encode(hashlib.sha256(payload.encode()).digest()).decode()[:16]

        encoding = encode_features(features)

        assert encoding == f"{expected}:{payload}"
        assert content_hash(payload) == expected
        assert len(expected) == 16

    def test_deterministic(self):
        """Test that equal features give byte-identical encodings."""
        assert encode_features(create_feature_set()) == encode_features(create_feature_set())

    def test_decode_features(self):
        """Test parsing an encoding back at stored precision."""
        features = create_feature_set()

        decoded = decode_features(encode_features(features))

        assert np.array_equal(decoded.histogram, features.histogram)
        assert np.allclose(decoded.lbp, features.lbp, atol=5e-4)
        assert np.allclose(decoded.edge_orientation, features.edge_orientation, atol=5e-4)
        assert np.allclose(decoded.texture, features.texture, atol=5e-4)


class TestParse:
    """Test splitting and section extraction."""

    def test_split_on_first_colon(self):
        """Test that only the first colon separates hash and payload."""
        hash_part, payload = split_encoding("abc:HIST:1,LBP:2,")

        assert hash_part == "abc"
        assert payload == "HIST:1,LBP:2,"

    def test_split_without_colon(self):
        """Test that an encoding without a colon raises."""
        with pytest.raises(EncodingParseError):
            split_encoding("no-separator-here")

    def test_missing_section(self):
        """Test that a missing tag raises."""
        with pytest.raises(EncodingParseError):
            extract_section("HIST:1,2,LBP:3,", EDGE_TAG)

    def test_section_stops_at_next_tag(self):
        """Test that a section ends where the next tag begins."""
        payload = "HIST:1,2,LBP:3,4,5,EDGE:6,"

        assert extract_section(payload, HIST_TAG) == ["1", "2"]
        assert extract_section(payload, LBP_TAG) == ["3", "4", "5"]
        assert extract_section(payload, EDGE_TAG) == ["6"]

    def test_empty_section(self):
        """Test that a tag followed directly by another tag is empty."""
        assert extract_section("HIST:LBP:1,", HIST_TAG) == []

    def test_non_numeric_value(self):
        """Test that a non-numeric token raises on parse."""
        with pytest.raises(EncodingParseError):
            parse_section("EDGE:0.1,abc,", EDGE_TAG)

    def test_decode_wrong_length(self):
        """Test that decode_features validates section lengths."""
        with pytest.raises(EncodingParseError):
            decode_features("hash:HIST:1,LBP:1,EDGE:1,TEXT:1,")
