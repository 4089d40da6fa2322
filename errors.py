"""
Error taxonomy for the outcome predictor
"""


class PredictionError(Exception):
    """Base class for predictor errors"""


class InvalidInput(PredictionError, ValueError):
    """Raised when a case cannot be scored as given"""


class ResultFormatError(PredictionError, ValueError):
    """Raised when a transport record is not a valid prediction result"""
