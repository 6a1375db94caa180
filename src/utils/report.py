"""
Report Rendering

Renders the analytics records of a sweep as a text table and CSV.
One row per channel configuration, in the order the records are given.
"""

import csv
import math
import os
from typing import List, Sequence

from src.utils.metrics import AnalyticsRecord

HEADERS = [
    "E2E Time",
    "Input Bits",
    "Channel Bits",
    "Overhead Ratio",
    "Channel",
    "Channel Errors",
    "Residual Errors",
    "Residual Error Ratio",
]


def format_row(record: AnalyticsRecord) -> List[str]:
    """Format the cells of one record."""
    ratio = record.residual_error_ratio
    return [
        f"{record.run.elapsed * 1000:.3f} ms",
        f"{record.input_bits:,} bit",
        f"{record.channel_bits:,} bit",
        f"{record.overhead_ratio * 100:.1f}%",
        f"h: {record.channel.h:.2f}, tau: {record.channel.tau:.2f}",
        f"{record.channel.bit_errors:,}",
        f"{record.residual_bit_errors:,}",
        "n/a" if math.isnan(ratio) else f"{ratio * 100:.3f}%",
    ]


def format_report(records: Sequence[AnalyticsRecord]) -> str:
    """
    Render records as a right-aligned table.

    Args:
        records: Analytics records in configuration order

    Returns:
        The table as a string
    """
    rows = [HEADERS] + [format_row(r) for r in records]
    widths = [max(len(row[i]) for row in rows) for i in range(len(HEADERS))]

    rule = "+" + "+".join("-" * (w + 2) for w in widths) + "+"
    lines = [rule]
    for n, row in enumerate(rows):
        cells = " | ".join(cell.rjust(w) for cell, w in zip(row, widths))
        lines.append(f"| {cells} |")
        if n == 0:
            lines.append(rule)
    lines.append(rule)
    return "\n".join(lines)


def print_report(records: Sequence[AnalyticsRecord]):
    """Print the report table to stdout."""
    print(format_report(records))


def write_csv(records: Sequence[AnalyticsRecord], filepath: str) -> str:
    """
    Save records to a CSV file.

    Args:
        records: Analytics records
        filepath: Output file path

    Returns:
        The path written
    """
    if not records:
        raise ValueError("No results to save")

    directory = os.path.dirname(filepath)
    if directory:
        os.makedirs(directory, exist_ok=True)

    rows = [r.to_csv_row() for r in records]
    with open(filepath, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        writer.writerows(rows)

    return filepath
