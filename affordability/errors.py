from __future__ import annotations


class FetchError(RuntimeError):
    """A remote series could not be retrieved or decoded."""


class AlignmentError(IndexError):
    """Positional alignment ran past the end of a series."""
