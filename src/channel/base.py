"""
Channel contract shared by every channel model.
"""

from dataclasses import dataclass
from typing import Protocol, Tuple


@dataclass(frozen=True)
class ChannelInformation:
    """Snapshot of a channel's characteristics and error counter."""
    h: float
    tau: float
    bit_errors: int


class Channel(Protocol):
    """
    A noisy medium carrying a byte sequence.

    transmit() must return a sequence of the same length as its input.
    """

    def transmit(self, data: bytes) -> bytes:
        ...

    def bit_errors(self) -> int:
        """Bits flipped by this channel since creation."""
        ...

    def characteristics(self) -> Tuple[float, float]:
        """The (h, tau) pair describing the channel."""
        ...

    def channel_information(self) -> ChannelInformation:
        ...
