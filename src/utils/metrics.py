"""
Metrics Collection and Calculation

This module provides the per-run records of the simulation: how long a
run took, how many bytes crossed the channel, and how many bit errors
survived decoding.
"""

from dataclasses import dataclass, asdict
from typing import Dict

import numpy as np

from src.channel.base import Channel, ChannelInformation


class LengthMismatchError(ValueError):
    """Raised when the original and final byte streams differ in length."""
    pass


@dataclass(frozen=True)
class RunMetrics:
    """Timing and byte counts of one pipeline run."""
    elapsed: float              # seconds, end to end
    input_byte_count: int       # bytes entering the coder
    channel_byte_count: int     # bytes handed to the channel


@dataclass(frozen=True)
class AnalyticsRecord:
    """
    Result of one channel configuration.

    Combines the run metrics, the channel snapshot taken after the run
    and the residual bit errors left after decoding.
    """
    index: int
    coder: str
    run: RunMetrics
    channel: ChannelInformation
    residual_bit_errors: int
    corrected_codewords: int = 0

    @property
    def input_bits(self) -> int:
        return self.run.input_byte_count * 8

    @property
    def channel_bits(self) -> int:
        return self.run.channel_byte_count * 8

    @property
    def overhead_ratio(self) -> float:
        """Extra channel bits per input bit (1.0 = 100% overhead)."""
        if self.run.input_byte_count == 0:
            return 0.0
        return self.run.channel_byte_count / self.run.input_byte_count - 1.0

    @property
    def residual_error_ratio(self) -> float:
        """
        Share of channel bit errors left uncorrected.

        Returns:
            Ratio, or NaN when the channel flipped no bits
        """
        if self.channel.bit_errors == 0:
            return float('nan')
        return self.residual_bit_errors / self.channel.bit_errors

    def to_csv_row(self) -> Dict:
        """
        Get the record as a flat dictionary suitable for CSV export.

        Returns:
            Dictionary with flattened metrics
        """
        flat = {'index': self.index, 'coder': self.coder}
        flat.update(asdict(self.run))
        flat.update(asdict(self.channel))
        flat['channel_bit_errors'] = flat.pop('bit_errors')
        flat['residual_bit_errors'] = self.residual_bit_errors
        flat['corrected_codewords'] = self.corrected_codewords
        flat['overhead_ratio'] = self.overhead_ratio
        flat['residual_error_ratio'] = self.residual_error_ratio
        return flat


def count_residual_bit_errors(original: bytes, final: bytes) -> int:
    """
    Count the bit positions where two byte streams differ.

    Args:
        original: Data before encoding
        final: Data after decoding

    Returns:
        Number of differing bits

    Raises:
        LengthMismatchError: If the streams have different lengths
    """
    if len(original) != len(final):
        raise LengthMismatchError(
            f"Length mismatch: original={len(original)}, final={len(final)}"
        )

    a = np.frombuffer(bytes(original), dtype=np.uint8)
    b = np.frombuffer(bytes(final), dtype=np.uint8)
    return int(np.unpackbits(a ^ b).sum())


def analyze(
    channel: Channel,
    run_metrics: RunMetrics,
    original: bytes,
    final: bytes,
    coder: str = "hamming",
    index: int = 0,
    corrected_codewords: int = 0
) -> AnalyticsRecord:
    """
    Build the analytics record of a finished run.

    Args:
        channel: The channel used for the run
        run_metrics: Timing and byte counts of the run
        original: Input of the run
        final: Output of the run
        coder: Name of the coder used
        index: Configuration index
        corrected_codewords: Codewords the decoder flipped a bit in

    Returns:
        Immutable AnalyticsRecord
    """
    return AnalyticsRecord(
        index=index,
        coder=coder,
        run=run_metrics,
        channel=channel.channel_information(),
        residual_bit_errors=count_residual_bit_errors(original, final),
        corrected_codewords=corrected_codewords
    )
