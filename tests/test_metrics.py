"""
Unit tests for analytics records, the report and the heatmap.
"""

import csv
import math
import pytest
import sys
import os

import matplotlib
matplotlib.use("Agg")

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.channel.base import ChannelInformation
from src.utils.metrics import (
    AnalyticsRecord, RunMetrics, LengthMismatchError,
    count_residual_bit_errors
)
from src.utils.report import HEADERS, format_row, format_report, write_csv
from visualization.heatmap import ResidualErrorHeatmap


def make_record(h=0.01, tau=4.0, channel_errors=200, residual=10,
                input_bytes=1000, channel_bytes=2000, index=0):
    return AnalyticsRecord(
        index=index,
        coder="hamming",
        run=RunMetrics(elapsed=0.0125, input_byte_count=input_bytes,
                       channel_byte_count=channel_bytes),
        channel=ChannelInformation(h=h, tau=tau, bit_errors=channel_errors),
        residual_bit_errors=residual,
        corrected_codewords=150
    )


class TestResidualErrors:
    """Tests for the residual bit error count."""

    def test_single_bit(self):
        """[0x00, 0xFF] vs [0x01, 0xFF] differ in one bit."""
        assert count_residual_bit_errors(bytes([0x00, 0xFF]), bytes([0x01, 0xFF])) == 1

    def test_identical(self):
        """Identical streams have no residual errors."""
        assert count_residual_bit_errors(b"abc", b"abc") == 0
        assert count_residual_bit_errors(b"", b"") == 0

    def test_all_bits(self):
        """Complemented bytes differ in every bit."""
        assert count_residual_bit_errors(bytes([0x00, 0x0F]), bytes([0xFF, 0xF0])) == 16

    def test_length_mismatch(self):
        """Streams of different length cannot be compared."""
        with pytest.raises(LengthMismatchError):
            count_residual_bit_errors(b"ab", b"a")
        with pytest.raises(ValueError):
            count_residual_bit_errors(b"ab", b"a")


class TestAnalyticsRecord:
    """Tests for derived record values."""

    def test_bit_counts(self):
        record = make_record()
        assert record.input_bits == 8000
        assert record.channel_bits == 16000

    def test_overhead_ratio(self):
        """Hamming(8,4) doubles the data."""
        assert make_record().overhead_ratio == pytest.approx(1.0)
        assert make_record(input_bytes=0, channel_bytes=0).overhead_ratio == 0.0

    def test_residual_error_ratio(self):
        assert make_record(channel_errors=200, residual=10).residual_error_ratio == 0.05

    def test_ratio_without_channel_errors(self):
        """No channel errors leaves the ratio undefined."""
        assert math.isnan(make_record(channel_errors=0, residual=0).residual_error_ratio)

    def test_record_is_frozen(self):
        record = make_record()
        with pytest.raises(AttributeError):
            record.residual_bit_errors = 0

    def test_csv_row(self):
        """The CSV row is flat."""
        row = make_record().to_csv_row()

        assert row['h'] == 0.01
        assert row['tau'] == 4.0
        assert row['channel_bit_errors'] == 200
        assert row['residual_bit_errors'] == 10
        assert row['input_byte_count'] == 1000
        assert 'bit_errors' not in row


class TestReport:
    """Tests for the text report."""

    def test_row_format(self):
        row = format_row(make_record())

        assert row == [
            "12.500 ms",
            "8,000 bit",
            "16,000 bit",
            "100.0%",
            "h: 0.01, tau: 4.00",
            "200",
            "10",
            "5.000%",
        ]

    def test_ratio_not_available(self):
        """No channel errors renders as n/a."""
        row = format_row(make_record(channel_errors=0, residual=0))
        assert row[-1] == "n/a"

    def test_table(self):
        """One header and one line per record, all the same width."""
        records = [make_record(index=i, tau=t) for i, t in enumerate((1.0, 2.0, 8.0))]
        lines = format_report(records).splitlines()

        assert len(lines) == 3 + 1 + len(records)
        assert all(h in lines[1] for h in HEADERS)
        assert len({len(line) for line in lines}) == 1
        assert "tau: 8.00" in lines[-2]

    def test_empty_table(self):
        """An empty sweep still renders the header."""
        assert "Residual Error Ratio" in format_report([])


class TestCsv:
    """Tests for the CSV export."""

    def test_write(self, tmp_path):
        path = write_csv([make_record(), make_record(index=1, h=0.02)],
                         str(tmp_path / "out" / "results.csv"))

        with open(path, newline='') as f:
            rows = list(csv.DictReader(f))

        assert len(rows) == 2
        assert rows[1]['h'] == '0.02'
        assert rows[0]['residual_error_ratio'] == '0.05'

    def test_no_records(self, tmp_path):
        with pytest.raises(ValueError):
            write_csv([], str(tmp_path / "results.csv"))


class TestHeatmap:
    """Tests for the residual error heatmap."""

    def records(self):
        return [
            make_record(index=0, h=0.01, tau=1.0, residual=0),
            make_record(index=1, h=0.01, tau=8.0, residual=40),
            make_record(index=2, h=0.02, tau=1.0, residual=5),
            make_record(index=3, h=0.02, tau=8.0, channel_errors=0, residual=0),
        ]

    def test_axes(self):
        heatmap = ResidualErrorHeatmap(results=self.records())

        assert heatmap.h_values == [0.01, 0.02]
        assert heatmap.tau_values == [1.0, 8.0]

    def test_matrix(self):
        """Cells hold ratios, NaN where the channel made no errors."""
        matrix = ResidualErrorHeatmap(results=self.records())._create_ratio_matrix()

        assert matrix[0, 1] == pytest.approx(0.2)
        assert matrix[1, 0] == pytest.approx(0.025)
        assert math.isnan(matrix[1, 1])

    def test_plot(self, tmp_path):
        output = ResidualErrorHeatmap(results=self.records()).plot(
            output_file=str(tmp_path / "heatmap.png")
        )
        assert os.path.getsize(output) > 0

    def test_from_csv(self, tmp_path):
        """Results can be loaded back from a CSV file."""
        path = write_csv(self.records(), str(tmp_path / "results.csv"))
        heatmap = ResidualErrorHeatmap(csv_file=path)

        assert len(heatmap.results) == 4
        assert math.isnan(heatmap._create_ratio_matrix()[1, 1])

    def test_no_results(self):
        with pytest.raises(ValueError):
            ResidualErrorHeatmap().plot()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
