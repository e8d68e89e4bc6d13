"""Exception types raised by the encoding pipeline."""


class FaceImageError(ValueError):
    """Base class for images that cannot be turned into an encoding."""


class InvalidImageFormat(FaceImageError):
    """Payload is not valid base64 or not a decodable image container."""


class ImageTooSmall(FaceImageError):
    """Width or height is below the minimum dimension."""


class ImageTooLarge(FaceImageError):
    """Width or height is above the maximum dimension."""


class LowContrast(FaceImageError):
    """Grayscale intensity range is too narrow."""


class PoorBrightness(FaceImageError):
    """Mean grayscale intensity is too dark or too bright."""


class TooBlurry(FaceImageError):
    """Average gradient magnitude is below the sharpness threshold."""


class EncodingParseError(ValueError):
    """Stored encoding string is malformed."""
