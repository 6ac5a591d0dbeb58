"""Exception hierarchy for AmpleTime."""


class AmpleTimeError(Exception):
    """Base exception for AmpleTime errors."""
    pass


class ChartGenerationError(AmpleTimeError):
    """Chart image could not be produced by the charting service."""
    pass


class NoteNotFoundError(AmpleTimeError):
    """Requested note does not exist on the host."""
    pass


class InvalidInputError(AmpleTimeError):
    """Task input file is missing or malformed."""
    pass
