"""
Residual Error Heatmap Visualization

This module generates 2D heatmaps showing the residual error ratio
as a function of the channel characteristics (h, tau).
"""

import os
import sys
from typing import Dict, List, Optional, Sequence, Tuple
import csv

# Add parent to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns

from config import PLOTS_DIR
from src.utils.metrics import AnalyticsRecord


class ResidualErrorHeatmap:
    """
    Generates 2D heatmaps of residual error ratio (h, tau).

    Cells without a result (or without channel errors) are left blank.
    """

    def __init__(
        self,
        results: Optional[Sequence] = None,
        csv_file: Optional[str] = None
    ):
        """
        Initialize heatmap generator.

        Args:
            results: AnalyticsRecords or result dictionaries
            csv_file: Path to CSV file with results
        """
        if results:
            self.results = [
                r.to_csv_row() if isinstance(r, AnalyticsRecord) else r
                for r in results
            ]
        elif csv_file:
            self.results = self._load_csv(csv_file)
        else:
            self.results = []

        self.h_values = sorted(set(float(r['h']) for r in self.results))
        self.tau_values = sorted(set(float(r['tau']) for r in self.results))

    def _load_csv(self, filepath: str) -> List[Dict]:
        """Load results from CSV file."""
        results = []
        with open(filepath, 'r') as f:
            reader = csv.DictReader(f)
            for row in reader:
                # Convert numeric fields
                for key in row:
                    try:
                        if '.' in str(row[key]) or str(row[key]) == 'nan':
                            row[key] = float(row[key])
                        else:
                            row[key] = int(row[key])
                    except (ValueError, TypeError):
                        pass
                results.append(row)
        return results

    def _create_ratio_matrix(self) -> np.ndarray:
        """
        Create matrix of residual error ratios.

        Returns:
            Matrix indexed [h, tau], NaN where no ratio is available
        """
        matrix = np.full((len(self.h_values), len(self.tau_values)), np.nan)

        for r in self.results:
            i = self.h_values.index(float(r['h']))
            j = self.tau_values.index(float(r['tau']))
            matrix[i, j] = float(r['residual_error_ratio'])

        return matrix

    def plot(
        self,
        output_file: Optional[str] = None,
        title: str = "Residual Error Ratio vs Channel Characteristics",
        figsize: Tuple[int, int] = (10, 7),
        cmap: str = "viridis",
        show_values: bool = True
    ) -> str:
        """
        Generate and save heatmap.

        Args:
            output_file: Output file path (auto-generated if None)
            title: Plot title
            figsize: Figure size (width, height)
            cmap: Colormap name
            show_values: Show values in cells

        Returns:
            Path to saved figure
        """
        if not self.results:
            raise ValueError("No results to plot")

        # Percent, larger h at top
        matrix_display = np.flipud(self._create_ratio_matrix() * 100)
        h_values_display = list(reversed(self.h_values))

        fig, ax = plt.subplots(figsize=figsize)

        # NaN cells are masked and left blank
        finite = matrix_display[np.isfinite(matrix_display)]
        limits = {} if finite.size else {'vmin': 0.0, 'vmax': 1.0}

        sns.heatmap(
            matrix_display,
            annot=show_values,
            fmt='.2f',
            cmap=cmap,
            xticklabels=[f"{t:g}" for t in self.tau_values],
            yticklabels=[f"{h:g}" for h in h_values_display],
            ax=ax,
            cbar_kws={'label': "Residual Error Ratio (%)"},
            **limits
        )

        # Labels
        ax.set_xlabel('Mean Burst Length tau (bits)', fontsize=12)
        ax.set_ylabel('Channel BER h', fontsize=12)
        ax.set_title(title, fontsize=14, fontweight='bold')

        plt.tight_layout()

        # Save figure
        if output_file is None:
            os.makedirs(PLOTS_DIR, exist_ok=True)
            output_file = os.path.join(PLOTS_DIR, 'residual_error_heatmap.png')

        plt.savefig(output_file, dpi=150, bbox_inches='tight')
        plt.close(fig)

        return output_file
