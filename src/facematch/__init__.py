"""Face Matcher - Deterministic face image encodings and similarity matching."""

from .codec import decode_features, encode_features
from .config import Config, load_config
from .errors import (
    EncodingParseError,
    FaceImageError,
    ImageTooLarge,
    ImageTooSmall,
    InvalidImageFormat,
    LowContrast,
    PoorBrightness,
    TooBlurry,
)
from .features import FeatureExtractor
from .models import FeatureSet, MatchResult, QualityReport, SimilarityBreakdown
from .recognizer import FaceRecognizer
from .selector import select_best
from .similarity import (
    EDGE_WEIGHT,
    HISTOGRAM_WEIGHT,
    LBP_WEIGHT,
    TEXTURE_WEIGHT,
    compare_encodings,
)

__version__ = "0.1.0"

__all__ = [
    "EDGE_WEIGHT",
    "HISTOGRAM_WEIGHT",
    "LBP_WEIGHT",
    "TEXTURE_WEIGHT",
    "Config",
    "EncodingParseError",
    "FaceImageError",
    "FaceRecognizer",
    "FeatureExtractor",
    "FeatureSet",
    "ImageTooLarge",
    "ImageTooSmall",
    "InvalidImageFormat",
    "LowContrast",
    "MatchResult",
    "PoorBrightness",
    "QualityReport",
    "SimilarityBreakdown",
    "TooBlurry",
    "compare_encodings",
    "decode_features",
    "encode_features",
    "load_config",
    "select_best",
]
