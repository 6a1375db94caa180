"""
Data Source and Sink

Reads the original byte stream, writes the decoded result and generates
test data when no input file is given. This is the only place that
touches files; the codec and pipeline work on in-memory bytes.
"""

import os
import hashlib
from typing import Optional, Tuple

import numpy as np


def read_data_file(filepath: str) -> bytes:
    """
    Read a whole input file.

    Args:
        filepath: Path to the file

    Returns:
        File contents
    """
    if not os.path.exists(filepath):
        raise FileNotFoundError(f"File not found: {filepath}")

    with open(filepath, 'rb') as f:
        return f.read()


def write_data_file(filepath: str, data: bytes):
    """
    Write decoded data to a file.

    Args:
        filepath: Output file path
        data: Bytes to write
    """
    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(filepath, 'wb') as f:
        f.write(data)


class TestDataGenerator:
    """
    Generates test data for simulation.

    Used when no actual file is available.
    """

    __test__ = False

    @staticmethod
    def generate_test_data(size: int, pattern: str = "random", seed: Optional[int] = None) -> bytes:
        """
        Generate test data of specified size.

        Args:
            size: Size in bytes
            pattern: Pattern type ("random", "sequential", "zeros")
            seed: Seed for the "random" pattern

        Returns:
            Generated data
        """
        if pattern == "random":
            rng = np.random.default_rng(seed)
            return rng.integers(0, 256, size=size, dtype=np.uint8).tobytes()
        elif pattern == "sequential":
            return (np.arange(size) % 256).astype(np.uint8).tobytes()
        elif pattern == "zeros":
            return bytes(size)
        else:
            raise ValueError(f"Unknown pattern: {pattern}")


class DataVerifier:
    """
    Utility for verifying data integrity.
    """

    @staticmethod
    def calculate_checksum(data: bytes) -> str:
        """Calculate MD5 checksum of data."""
        return hashlib.md5(data).hexdigest()

    @staticmethod
    def verify_data(original: bytes, received: bytes) -> Tuple[bool, dict]:
        """
        Verify received data against original.

        Args:
            original: Original data
            received: Received data

        Returns:
            Tuple of (match, details)
        """
        size_match = len(original) == len(received)
        content_match = size_match and original == received

        # Find first mismatch if any
        first_mismatch = -1
        if not content_match:
            min_len = min(len(original), len(received))
            a = np.frombuffer(original[:min_len], dtype=np.uint8)
            b = np.frombuffer(received[:min_len], dtype=np.uint8)
            differing = np.flatnonzero(a != b)
            first_mismatch = int(differing[0]) if len(differing) else min_len

        details = {
            'size_match': size_match,
            'content_match': content_match,
            'original_size': len(original),
            'received_size': len(received),
            'original_checksum': DataVerifier.calculate_checksum(original),
            'received_checksum': DataVerifier.calculate_checksum(received),
            'first_mismatch_byte': first_mismatch
        }

        return content_match, details
