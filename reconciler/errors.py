"""Exception classes for the surfaces around the matching engine.

The engine itself degrades to "no match" instead of raising; these are
raised only while loading batch input.
"""

from __future__ import annotations


class ReconcilerError(Exception):
    """Base exception for reconciler errors."""

    pass


class InputFormatError(ReconcilerError):
    """Raised when a batch file cannot be turned into directory/identifier data."""

    pass
