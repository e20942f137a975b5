"""
Error kinds raised by colorkmeans.

Every configuration and input problem is detected before clustering starts
and raised as one of these. Only the command line catches them.
"""


class KMeansColorError(Exception):
    """Base class for all colorkmeans errors."""


class InvalidOption(KMeansColorError, ValueError):
    """Malformed or out-of-range option value."""


class InvalidSeedColor(KMeansColorError, ValueError):
    """A seed color specification could not be parsed."""


class ColorspaceUnsupported(KMeansColorError, ValueError):
    """Unrecognized working colorspace name."""


class MissingInputFile(KMeansColorError):
    """No input path was supplied."""


class MissingOutputFile(KMeansColorError):
    """No output path was supplied."""


class UnreadableInput(KMeansColorError):
    """Input file is absent, unreadable or empty."""


class CodecFailure(KMeansColorError):
    """The image codec failed to decode or encode a file."""
