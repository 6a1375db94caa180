"""
Gilbert-Elliott Burst Channel

A two-state Markov chain decides, bit by bit, whether the medium is Good
or Bad; each state flips bits independently with its own error rate.
Errors therefore arrive in bursts whose mean length is the mean Bad
sojourn. Bytes are serialized MSB-first, one chain step per bit.
"""

from enum import Enum
from typing import Optional, Tuple

import numpy as np

from config import GOOD_STATE_BER, BAD_STATE_BER
from src.channel.base import ChannelInformation


class ChannelState(Enum):
    GOOD = 0
    BAD = 1


def apply_error_mask(data: bytes, mask: np.ndarray) -> bytes:
    """
    Flip the bits of data selected by a per-bit mask.

    Args:
        data: Byte sequence
        mask: Boolean array of len(data) * 8 entries, MSB-first per byte

    Returns:
        Byte sequence with the selected bits flipped
    """
    bits = np.unpackbits(np.frombuffer(bytes(data), dtype=np.uint8))
    bits ^= np.asarray(mask, dtype=np.uint8)
    return np.packbits(bits).tobytes()


class GilbertElliottChannel:
    """
    Burst error channel driven by a Good/Bad Markov chain.

    Attributes:
        pg, pb: Bit error rate while Good / Bad
        p_gb: P(Good -> Bad) per bit
        p_bg: P(Bad -> Good) per bit
        h: Long-run bit error rate
        tau: Mean Bad sojourn, in bits
        state: State the next bit is sent in
    """

    def __init__(
        self,
        pg: float = GOOD_STATE_BER,
        pb: float = BAD_STATE_BER,
        p_gb: float = 0.0,
        p_bg: float = 1.0,
        seed: Optional[int] = None
    ):
        """
        Args:
            pg: Bit error rate in the Good state
            pb: Bit error rate in the Bad state
            p_gb: Per-bit probability of leaving Good
            p_bg: Per-bit probability of leaving Bad
            seed: Seed of the channel's random generator

        Raises:
            ValueError: If any argument is not a probability
        """
        for name, value in (('pg', pg), ('pb', pb), ('p_gb', p_gb), ('p_bg', p_bg)):
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be a probability, got {value}")

        self.pg = pg
        self.pb = pb
        self.p_gb = p_gb
        self.p_bg = p_bg
        self.h = self.get_average_ber()
        self.tau = 1.0 / p_bg if p_bg > 0 else float('inf')

        self.rng = np.random.default_rng(seed)
        self.state = self._draw_initial_state()
        self.reset_statistics()

    @classmethod
    def from_characteristics(
        cls,
        h: float,
        tau: float,
        pb: float = BAD_STATE_BER,
        pg: float = GOOD_STATE_BER,
        seed: Optional[int] = None
    ) -> 'GilbertElliottChannel':
        """
        Build a channel from its long-run BER and mean burst length.

        P(B→G) = 1 / tau, and P(G→B) is chosen so that the steady-state
        share of Bad bits gives an average BER of h.

        Args:
            h: Long-run bit error rate, pg <= h < pb
            tau: Mean burst length in bits, tau >= 1
            pb: Bit error rate in Bad state
            pg: Bit error rate in Good state
            seed: Seed of the channel's random generator

        Raises:
            ValueError: If (h, tau) cannot be realised by the chain
        """
        if tau < 1.0:
            raise ValueError(f"tau must be at least 1 bit, got {tau}")
        if not pg <= h < pb:
            raise ValueError(f"h must lie in [{pg}, {pb}), got {h}")

        pi_bad = (h - pg) / (pb - pg)
        p_bg = 1.0 / tau
        p_gb = p_bg * pi_bad / (1.0 - pi_bad)
        if p_gb > 1.0:
            raise ValueError(
                f"Channel h={h}, tau={tau} needs P(G->B)={p_gb:.3f} > 1"
            )

        channel = cls(pg=pg, pb=pb, p_gb=p_gb, p_bg=p_bg, seed=seed)
        channel.h = h
        channel.tau = tau
        return channel

    def _draw_initial_state(self) -> ChannelState:
        """First state, drawn from the stationary distribution."""
        pi_good, _ = self.get_steady_state_probabilities()
        return ChannelState.GOOD if self.rng.random() < pi_good else ChannelState.BAD

    def get_steady_state_probabilities(self) -> Tuple[float, float]:
        """
        Stationary distribution of the chain.

        Returns:
            Tuple of (π_Good, π_Bad); an absorbing chain counts as all Good
        """
        leave_rate = self.p_gb + self.p_bg
        if leave_rate == 0:
            return 1.0, 0.0
        return self.p_bg / leave_rate, self.p_gb / leave_rate

    def get_average_ber(self) -> float:
        """Long-run BER implied by pg, pb and the stationary distribution."""
        pi_good, pi_bad = self.get_steady_state_probabilities()
        return pi_good * self.pg + pi_bad * self.pb

    def _state_sequence(self, num_bits: int) -> np.ndarray:
        """
        Walk the chain for num_bits bits.

        Sojourn lengths are geometric, so the chain is advanced one state
        visit at a time instead of one bit at a time.

        Returns:
            Boolean array, True where the bit is sent in the Bad state
        """
        in_bad = np.zeros(num_bits, dtype=bool)
        pos = 0

        while pos < num_bits:
            bad = self.state == ChannelState.BAD
            p_leave = self.p_bg if bad else self.p_gb
            left = num_bits - pos

            sojourn = int(self.rng.geometric(p_leave)) if p_leave > 0 else left + 1
            span = min(sojourn, left)

            in_bad[pos:pos + span] = bad
            if bad:
                self.time_in_bad += span
            else:
                self.time_in_good += span
            pos += span

            # A sojourn that ends inside this call switches state
            if sojourn <= left:
                self.state = ChannelState.GOOD if bad else ChannelState.BAD
                self.state_transitions += 1

        return in_bad

    def error_mask(self, num_bits: int) -> np.ndarray:
        """
        Draw the error pattern for the next num_bits bits.

        Returns:
            Boolean array, True where the bit is flipped
        """
        in_bad = self._state_sequence(num_bits)
        flips = self.rng.random(num_bits) < np.where(in_bad, self.pb, self.pg)

        self.total_bits_transmitted += num_bits
        self.total_bit_errors += int(np.count_nonzero(flips))
        return flips

    def transmit(self, data: bytes) -> bytes:
        """
        Send a byte sequence through the channel.

        Returns:
            Received bytes, same length as data
        """
        if not data:
            return b''
        return apply_error_mask(data, self.error_mask(len(data) * 8))

    def bit_errors(self) -> int:
        """Bits flipped since creation (or the last reset)."""
        return self.total_bit_errors

    def characteristics(self) -> Tuple[float, float]:
        return self.h, self.tau

    def channel_information(self) -> ChannelInformation:
        """Read-only snapshot of characteristics and error count."""
        return ChannelInformation(h=self.h, tau=self.tau, bit_errors=self.total_bit_errors)

    def get_statistics(self) -> dict:
        """Counters of everything sent since creation or the last reset."""
        sent = self.total_bits_transmitted
        walked = self.time_in_good + self.time_in_bad
        return {
            'total_bits': sent,
            'bit_errors': self.total_bit_errors,
            'observed_ber': self.total_bit_errors / sent if sent else 0.0,
            'state_transitions': self.state_transitions,
            'time_in_good': self.time_in_good,
            'time_in_bad': self.time_in_bad,
            'fraction_in_good': self.time_in_good / walked if walked else 0.0,
            'expected_ber': self.h,
        }

    def reset_statistics(self):
        self.total_bits_transmitted = 0
        self.total_bit_errors = 0
        self.state_transitions = 0
        self.time_in_good = 0
        self.time_in_bad = 0

    def reset(self, seed: Optional[int] = None):
        """
        Clear the counters and redraw the state.

        Args:
            seed: Reseed the generator first (optional)
        """
        if seed is not None:
            self.rng = np.random.default_rng(seed)
        self.state = self._draw_initial_state()
        self.reset_statistics()
