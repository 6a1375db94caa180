"""
FEC exception hierarchy.

Every error here is a broken length invariant between the codec and the
interleaver, never channel noise. Channel noise only ever shows up as
residual bit errors.
"""


class FECError(Exception):
    """Base exception for codec / interleaver errors."""
    pass


class InterleaveLengthError(FECError, ValueError):
    """Raised when interleaved data and its recorded padding disagree."""
    pass


class NibbleCountError(FECError, ValueError):
    """Raised when codewords cannot be merged into whole bytes."""
    pass
