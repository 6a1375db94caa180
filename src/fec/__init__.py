"""
FEC package - Forward error correction.

Contains implementations for:
- Hamming(8,4) codec with single-error correction
- 8×8 bit block interleaver
"""

from .hamming import encode, decode, merge, encode_all, decode_all, DecodeResult
from .interleaver import interleave, deinterleave, InterleavedData, BLOCK_SIZE
from .errors import FECError, InterleaveLengthError, NibbleCountError

__all__ = [
    'encode',
    'decode',
    'merge',
    'encode_all',
    'decode_all',
    'DecodeResult',
    'interleave',
    'deinterleave',
    'InterleavedData',
    'BLOCK_SIZE',
    'FECError',
    'InterleaveLengthError',
    'NibbleCountError'
]
