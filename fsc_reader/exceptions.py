"""
Custom exceptions for reading fastsimcoal2 output.
Kept minimal - only what's needed for clear error handling.
"""


class FscReadError(Exception):
    """Base exception for .arp reading errors."""
    pass


class LocusNotFoundError(FscReadError, LookupError):
    """Raised when a chromosome or marker selection matches no loci."""
    pass


class InconsistentInputError(FscReadError, ValueError):
    """Raised when the .arp file and the locus metadata don't agree."""
    pass


class UnsupportedRequestError(FscReadError, ValueError):
    """Raised when the requested output can't be produced for this data."""
    pass
