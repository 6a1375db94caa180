"""
Visualization package - Plotting and visualization tools.

Contains:
- Residual error heatmap over (h, tau)
"""

from .heatmap import ResidualErrorHeatmap

__all__ = [
    'ResidualErrorHeatmap'
]
