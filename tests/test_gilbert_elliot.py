"""
Unit tests for the Gilbert-Elliot channel model.
"""

import pytest
import sys
import os

import numpy as np

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.channel import Channel, ChannelInformation
from src.channel.gilbert_elliot import (
    GilbertElliottChannel, ChannelState, apply_error_mask
)


def _flipped_bits(sent: bytes, received: bytes) -> int:
    a = np.frombuffer(sent, dtype=np.uint8)
    b = np.frombuffer(received, dtype=np.uint8)
    return int(np.unpackbits(a ^ b).sum())


class TestGilbertElliottChannel:
    """Tests for Gilbert-Elliot channel model."""

    def test_initialization(self):
        """Test channel initialization with default parameters."""
        channel = GilbertElliottChannel(seed=42)

        assert channel.pg == 0.0
        assert channel.pb == 0.5
        assert channel.p_gb == 0.0
        assert channel.p_bg == 1.0
        assert channel.state == ChannelState.GOOD

    def test_from_characteristics(self):
        """Transition probabilities follow from (h, tau)."""
        channel = GilbertElliottChannel.from_characteristics(h=0.01, tau=4.0, seed=42)

        assert channel.p_bg == pytest.approx(0.25)
        assert channel.p_gb == pytest.approx(0.25 * 0.02 / 0.98)
        assert channel.characteristics() == (0.01, 4.0)

    def test_steady_state_probabilities(self):
        """Test steady-state probability calculation."""
        channel = GilbertElliottChannel.from_characteristics(h=0.01, tau=4.0)

        pi_good, pi_bad = channel.get_steady_state_probabilities()

        # Should sum to 1
        assert abs(pi_good + pi_bad - 1.0) < 1e-10
        assert pi_bad == pytest.approx(0.02)

    def test_average_ber(self):
        """The long-run BER equals h."""
        channel = GilbertElliottChannel.from_characteristics(h=0.02, tau=8.0)
        assert channel.get_average_ber() == pytest.approx(0.02)

    @pytest.mark.parametrize("h, tau", [
        (0.01, 0.5),    # burst shorter than a bit
        (-0.01, 2.0),   # negative BER
        (0.5, 2.0),     # h must stay below the Bad state BER
        (0.49, 1.0),    # needs P(G->B) > 1
    ])
    def test_invalid_characteristics(self, h, tau):
        """Unrealisable (h, tau) pairs are rejected."""
        with pytest.raises(ValueError):
            GilbertElliottChannel.from_characteristics(h=h, tau=tau)

    def test_invalid_probability(self):
        """Transition probabilities outside [0, 1] are rejected."""
        with pytest.raises(ValueError):
            GilbertElliottChannel(p_gb=1.5)

    def test_noiseless_channel(self):
        """h = 0 never flips a bit."""
        channel = GilbertElliottChannel.from_characteristics(h=0.0, tau=1.0, seed=42)
        data = bytes(range(256)) * 16

        assert channel.transmit(data) == data
        assert channel.bit_errors() == 0

    def test_length_preserved(self):
        """transmit() returns as many bytes as it was given."""
        channel = GilbertElliottChannel.from_characteristics(h=0.02, tau=2.0, seed=1)

        for size in (0, 1, 7, 1000):
            assert len(channel.transmit(bytes(size))) == size

    def test_empty_transmission(self):
        """Empty input is returned unchanged."""
        channel = GilbertElliottChannel.from_characteristics(h=0.02, tau=2.0, seed=1)
        assert channel.transmit(b"") == b""
        assert channel.bit_errors() == 0

    def test_bit_errors_match_flips(self):
        """bit_errors() counts exactly the bits that were flipped."""
        channel = GilbertElliottChannel.from_characteristics(h=0.02, tau=4.0, seed=7)
        total = 0

        for _ in range(5):
            data = np.random.default_rng(3).integers(0, 256, 4096, dtype=np.uint8).tobytes()
            total += _flipped_bits(data, channel.transmit(data))

        assert total > 0
        assert channel.bit_errors() == total

    def test_observed_ber(self):
        """The observed BER is close to h over a long transmission."""
        channel = GilbertElliottChannel.from_characteristics(h=0.01, tau=4.0, seed=42)
        channel.transmit(bytes(256 * 1024))

        stats = channel.get_statistics()

        assert stats['total_bits'] == 256 * 1024 * 8
        assert 0.008 < stats['observed_ber'] < 0.012
        assert stats['fraction_in_good'] == pytest.approx(0.98, abs=0.005)

    def test_errors_are_bursty(self):
        """Errors cluster: neighbours of an error are errors far more often than h."""
        channel = GilbertElliottChannel.from_characteristics(h=0.01, tau=8.0, seed=5)
        mask = channel.error_mask(1_000_000)

        error_positions = np.flatnonzero(mask[:-1])
        neighbour_rate = mask[error_positions + 1].mean()

        assert neighbour_rate > 0.2

    def test_state_transitions(self):
        """Test that state transitions occur."""
        channel = GilbertElliottChannel.from_characteristics(h=0.01, tau=4.0, seed=42)
        channel.transmit(bytes(64 * 1024))

        stats = channel.get_statistics()

        assert stats['state_transitions'] > 0
        assert stats['time_in_good'] + stats['time_in_bad'] == 64 * 1024 * 8

    def test_channel_information(self):
        """The snapshot carries characteristics and error count."""
        channel = GilbertElliottChannel.from_characteristics(h=0.02, tau=2.0, seed=3)
        channel.transmit(bytes(4096))

        info = channel.channel_information()

        assert info == ChannelInformation(h=0.02, tau=2.0, bit_errors=channel.bit_errors())
        with pytest.raises(AttributeError):
            info.bit_errors = 0

    def test_satisfies_channel_protocol(self):
        """The model provides every method of the channel contract."""
        channel = GilbertElliottChannel.from_characteristics(h=0.01, tau=2.0)
        for name in ('transmit', 'bit_errors', 'characteristics', 'channel_information'):
            assert callable(getattr(channel, name))
            assert hasattr(Channel, name)

    def test_reset(self):
        """Test channel reset."""
        channel = GilbertElliottChannel.from_characteristics(h=0.01, tau=4.0, seed=42)
        channel.transmit(bytes(8192))

        # Reset
        channel.reset(seed=123)

        stats = channel.get_statistics()
        assert stats['total_bits'] == 0
        assert stats['bit_errors'] == 0
        assert channel.bit_errors() == 0

    def test_reproducibility(self):
        """Test that same seed produces same results."""
        channel1 = GilbertElliottChannel.from_characteristics(h=0.02, tau=4.0, seed=42)
        channel2 = GilbertElliottChannel.from_characteristics(h=0.02, tau=4.0, seed=42)

        data = bytes(range(256)) * 64

        assert channel1.transmit(data) == channel2.transmit(data)
        assert channel1.bit_errors() == channel2.bit_errors()


class TestErrorMask:
    """Tests for applying a per-bit error mask."""

    def test_msb_first(self):
        """Mask bit 0 flips the most significant bit of byte 0."""
        mask = np.zeros(16, dtype=bool)
        mask[0] = True
        mask[15] = True

        assert apply_error_mask(bytes(2), mask) == bytes([0x80, 0x01])

    def test_empty_mask(self):
        """An all-false mask leaves the data unchanged."""
        data = bytes([0xA4, 0x5A])
        assert apply_error_mask(data, np.zeros(16, dtype=bool)) == data


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
