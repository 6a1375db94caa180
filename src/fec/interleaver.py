"""
Block Interleaver

Groups codewords into blocks of 8 and transposes the 8×8 bit matrix of each
block: transmitted byte p carries bit p of every codeword in the block, and
bit j of that byte is bit p of codeword j. A burst of up to 8 consecutive
transmitted bits therefore hits each codeword at most once.

The transpose is its own inverse, so interleave and deinterleave share it.
"""

from typing import NamedTuple

import numpy as np

from .errors import InterleaveLengthError

BLOCK_SIZE = 8
PAD_CODEWORD = 0x00


class InterleavedData(NamedTuple):
    """Interleaved bytes and the number of pad codewords appended."""
    data: bytes
    pad_length: int


def pad_length_for(count: int) -> int:
    """Number of pad codewords needed to fill the last block."""
    return (BLOCK_SIZE - count % BLOCK_SIZE) % BLOCK_SIZE


def transpose_blocks(data: bytes) -> bytes:
    """
    Transpose the bit matrix of every 8-byte block.

    Args:
        data: Byte sequence whose length is a multiple of 8

    Returns:
        Transposed byte sequence of the same length
    """
    values = np.frombuffer(bytes(data), dtype=np.uint8)
    blocks = values.reshape(-1, BLOCK_SIZE)
    # bits[block, j, p] = bit p of byte j
    bits = np.unpackbits(blocks[:, :, np.newaxis], axis=2, bitorder='little')
    transposed = bits.transpose(0, 2, 1)
    return np.packbits(transposed, axis=2, bitorder='little').tobytes()


def interleave(codewords: bytes) -> InterleavedData:
    """
    Pad the codeword sequence to whole blocks and interleave it.

    Args:
        codewords: Codeword sequence of any length

    Returns:
        InterleavedData with the transmitted bytes and the pad length
    """
    pad_length = pad_length_for(len(codewords))
    padded = bytes(codewords) + bytes([PAD_CODEWORD]) * pad_length
    return InterleavedData(transpose_blocks(padded), pad_length)


def deinterleave(data: bytes, pad_length: int) -> bytes:
    """
    Invert interleave() and strip the recorded padding.

    Args:
        data: Interleaved (possibly corrupted) bytes
        pad_length: Pad length recorded by interleave()

    Returns:
        The codeword sequence

    Raises:
        InterleaveLengthError: If the data is not made of whole blocks or
            the pad length does not fit it
    """
    if len(data) % BLOCK_SIZE != 0:
        raise InterleaveLengthError(
            f"Interleaved length {len(data)} is not a multiple of {BLOCK_SIZE}"
        )
    if not 0 <= pad_length < BLOCK_SIZE:
        raise InterleaveLengthError(f"Invalid pad length: {pad_length}")
    if pad_length > len(data):
        raise InterleaveLengthError(
            f"Pad length {pad_length} exceeds {len(data)} codewords"
        )

    codewords = transpose_blocks(data)
    return codewords[:len(codewords) - pad_length]
