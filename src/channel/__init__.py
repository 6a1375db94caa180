"""
Channel package - Physical channel models.

Contains implementations for:
- Channel contract and information snapshot
- Gilbert-Elliot burst error channel model
"""

from .base import Channel, ChannelInformation
from .gilbert_elliot import GilbertElliottChannel, ChannelState, apply_error_mask

__all__ = [
    'Channel',
    'ChannelInformation',
    'GilbertElliottChannel',
    'ChannelState',
    'apply_error_mask'
]
