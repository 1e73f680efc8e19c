"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InsufficientDataError(DomainException):
    """Not enough data to build a model at all"""

    pass


class InvalidRecordError(DomainException):
    """Transaction or attendance record is malformed"""

    pass


class NarrativeProviderError(DomainException):
    """Generative-text collaborator failed, timed out, or returned garbage"""

    pass
