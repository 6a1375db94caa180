"""
Hamming(8,4) Codec

Each nibble is carried in one 8-bit codeword. Bit indices are LSB-first:

    bit:   7   6   5   4   3   2   1   0
          d3  d2  d1  p4  d0  p2  p1   0

Parity bits sit at the power-of-two indices 1, 2 and 4, data bits at 3, 5,
6 and 7, and bit 0 is reserved (always 0). With this layout the XOR of the
indices of all set bits is zero for a valid codeword and equals the index
of the flipped bit after a single error.
"""

from typing import NamedTuple, Tuple

import numpy as np

from .errors import NibbleCountError

# Codeword bit index of nibble bit 0..3
DATA_POSITIONS = (3, 5, 6, 7)

# Parity bit index -> data bit indices it covers
PARITY_POSITIONS = {
    1: (3, 5, 7),
    2: (3, 6, 7),
    4: (5, 6, 7),
}

RESERVED_BIT = 0


class DecodeResult(NamedTuple):
    """Decoded bytes plus the number of codewords that needed a bit flip."""
    data: bytes
    corrected: int


def _bit(value: int, index: int) -> int:
    return (value >> index) & 1


def encode_nibble(nibble: int) -> int:
    """
    Encode a 4-bit nibble into a codeword.

    Args:
        nibble: Value in 0..15

    Returns:
        8-bit codeword
    """
    nibble &= 0x0F
    codeword = 0
    for nibble_bit, position in enumerate(DATA_POSITIONS):
        codeword |= _bit(nibble, nibble_bit) << position

    for parity, covered in PARITY_POSITIONS.items():
        bit = 0
        for position in covered:
            bit ^= _bit(codeword, position)
        codeword |= bit << parity

    return codeword


def encode(byte: int) -> Tuple[int, int]:
    """
    Encode one byte into two codewords, upper nibble first.

    Args:
        byte: Value in 0..255

    Returns:
        Tuple of (upper_codeword, lower_codeword)
    """
    return encode_nibble(byte >> 4), encode_nibble(byte & 0x0F)


def syndrome(codeword: int) -> int:
    """XOR of the indices of all set bits in the codeword."""
    result = 0
    for index in range(8):
        if _bit(codeword, index):
            result ^= index
    return result


def extract_nibble(codeword: int) -> int:
    """Read the data bits of a codeword without any correction."""
    nibble = 0
    for nibble_bit, position in enumerate(DATA_POSITIONS):
        nibble |= _bit(codeword, position) << nibble_bit
    return nibble


def decode(codeword: int) -> Tuple[int, bool]:
    """
    Decode a codeword, correcting at most one bit error.

    Two or more errors in the same codeword give a wrong syndrome and the
    wrong bit is flipped. That is the limit of the code, not an error.

    Args:
        codeword: 8-bit codeword as received

    Returns:
        Tuple of (nibble, corrected)
    """
    index = syndrome(codeword & 0xFF)
    if index == 0:
        return extract_nibble(codeword), False
    return extract_nibble(codeword ^ (1 << index)), True


def merge(upper: int, lower: int) -> int:
    """Reassemble a byte from its upper and lower nibble."""
    return ((upper & 0x0F) << 4) | (lower & 0x0F)


# Lookup tables for the bulk paths, built from the single-codeword functions
ENCODE_TABLE = np.array([encode_nibble(n) for n in range(16)], dtype=np.uint8)
DECODE_TABLE = np.array([decode(c)[0] for c in range(256)], dtype=np.uint8)
CORRECTED_TABLE = np.array([decode(c)[1] for c in range(256)], dtype=bool)


def encode_all(data: bytes) -> bytes:
    """
    Encode a byte sequence into codewords.

    Returns:
        Two codewords per input byte, upper nibble first
    """
    values = np.frombuffer(bytes(data), dtype=np.uint8)
    codewords = np.empty(len(values) * 2, dtype=np.uint8)
    codewords[0::2] = ENCODE_TABLE[values >> 4]
    codewords[1::2] = ENCODE_TABLE[values & 0x0F]
    return codewords.tobytes()


def decode_all(codewords: bytes) -> DecodeResult:
    """
    Decode a codeword sequence and merge nibble pairs back into bytes.

    Raises:
        NibbleCountError: If the number of codewords is odd
    """
    if len(codewords) % 2 != 0:
        raise NibbleCountError(
            f"Cannot merge {len(codewords)} codewords into whole bytes"
        )

    values = np.frombuffer(bytes(codewords), dtype=np.uint8)
    nibbles = DECODE_TABLE[values]
    merged = (nibbles[0::2] << 4) | nibbles[1::2]
    corrected = int(np.count_nonzero(CORRECTED_TABLE[values]))
    return DecodeResult(merged.astype(np.uint8).tobytes(), corrected)
