"""
Batch Runner for Channel Sweep Simulations

This module runs the pipeline once per (h, tau) channel configuration,
each with its own freshly seeded channel, and collects one analytics
record per configuration in configuration order.
"""

import os
import time
from typing import Optional, Callable, List, Dict, Sequence, Tuple
from dataclasses import dataclass
from concurrent.futures import ProcessPoolExecutor, as_completed
import multiprocessing
import sys

# Add parent to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tqdm import tqdm

from config import (
    CHANNEL_CONFIGURATIONS, DATA_SIZE, DATA_PATTERN, DEFAULT_CODER,
    RNG_SEED_BASE, RESULTS_CSV, channel_seed
)
from simulation.pipeline import Pipeline, PipelineConfig
from src.channel.gilbert_elliot import GilbertElliottChannel
from src.utils.data_io import TestDataGenerator
from src.utils.logger import SimulationLogger, LogLevel, get_logger
from src.utils.metrics import AnalyticsRecord, analyze
from src.utils.report import write_csv


@dataclass
class RunConfig:
    """Configuration for a single channel run."""
    index: int
    h: float
    tau: float
    seed: int
    coder: str
    interleave: bool


@dataclass
class RunFailure:
    """A configuration whose run raised instead of producing a record."""
    index: int
    h: float
    tau: float
    error: str


def run_single_configuration(run_config: RunConfig, data: bytes) -> AnalyticsRecord:
    """
    Run the pipeline for one channel configuration.

    This function is designed to be called in a separate process.

    Args:
        run_config: Configuration for this run
        data: Input bytes

    Returns:
        AnalyticsRecord for the run
    """
    channel = GilbertElliottChannel.from_characteristics(
        h=run_config.h,
        tau=run_config.tau,
        seed=run_config.seed
    )
    config = PipelineConfig(
        coder=run_config.coder,
        interleave=run_config.interleave,
        log_level=LogLevel.ERROR  # Minimal logging for batch runs
    )

    result = Pipeline(config).run(data, channel)

    return analyze(
        channel,
        result.metrics,
        data,
        result.output,
        coder=config.name,
        index=run_config.index,
        corrected_codewords=result.corrected_codewords
    )


class BatchRunner:
    """
    Batch Runner for channel sweep simulations.

    Executes the pipeline once per (h, tau) configuration.

    Attributes:
        configurations: (h, tau) pairs, in report order
        data: Input bytes shared by every run
        coder: Coder name
        interleave: Whether the interleaver is used
        failures: Runs that raised, in configuration order
    """

    def __init__(
        self,
        configurations: Optional[Sequence[Tuple[float, float]]] = None,
        data: Optional[bytes] = None,
        data_size: int = DATA_SIZE,
        pattern: str = DATA_PATTERN,
        coder: str = DEFAULT_CODER,
        interleave: bool = True,
        seed_base: int = RNG_SEED_BASE,
        logger: Optional[SimulationLogger] = None,
        show_progress: bool = True,
        on_progress: Optional[Callable[[int, int, Optional[AnalyticsRecord]], None]] = None
    ):
        """
        Initialize batch runner.

        Args:
            configurations: (h, tau) pairs (default from config)
            data: Input bytes (generated when None)
            data_size: Size of generated data
            pattern: Pattern of generated data
            coder: Coder name ("hamming" or "identity")
            interleave: Use the interleaver with the hamming coder
            seed_base: Seed base for data and channels
            logger: Logger (a new one when None)
            show_progress: Show a progress bar
            on_progress: Callback for progress updates
        """
        self.configurations = list(CHANNEL_CONFIGURATIONS if configurations is None else configurations)
        self.seed_base = seed_base
        self.data = data if data is not None else TestDataGenerator.generate_test_data(
            data_size, pattern, seed=seed_base
        )
        self.coder = coder
        self.interleave = interleave
        self.logger = logger or get_logger()
        self.show_progress = show_progress
        self.on_progress = on_progress

        # Validate the coder once, before any run
        PipelineConfig(coder=coder, interleave=interleave)

        self.failures: List[RunFailure] = []

        # Progress tracking
        self.total_runs = len(self.configurations)
        self.completed_runs = 0
        self.start_time = 0.0

    def _generate_run_configs(self) -> List[RunConfig]:
        """Generate all run configurations."""
        return [
            RunConfig(
                index=index,
                h=h,
                tau=tau,
                seed=channel_seed(index, self.seed_base),
                coder=self.coder,
                interleave=self.interleave
            )
            for index, (h, tau) in enumerate(self.configurations)
        ]

    def _record_failure(self, config: RunConfig, error: Exception):
        """Log a failed run and keep it for the caller."""
        self.logger.run_failed(config.index, error)
        self.failures.append(RunFailure(config.index, config.h, config.tau, str(error)))

    def _finish(self, config: RunConfig, record: Optional[AnalyticsRecord]):
        """Bookkeeping after a run ended, successfully or not."""
        self.completed_runs += 1
        if record is not None:
            self.logger.run_end(
                config.index, record.channel.bit_errors, record.residual_bit_errors
            )
        self.logger.progress(self.completed_runs, self.total_runs)
        if self.on_progress:
            self.on_progress(self.completed_runs, self.total_runs, record)

    def _reset(self):
        self.failures = []
        self.completed_runs = 0
        self.start_time = time.time()

    def run_sequential(self, results: Optional[List[AnalyticsRecord]] = None) -> List[AnalyticsRecord]:
        """
        Run all configurations one after another.

        Args:
            results: Caller-owned list the records are appended to

        Returns:
            The results list
        """
        results = [] if results is None else results
        configs = self._generate_run_configs()
        self._reset()

        self.logger.info(f"Running {self.total_runs} channel configurations sequentially", "SWEEP")

        for config in tqdm(configs, desc="Channels", disable=not self.show_progress):
            self.logger.run_start(config.index, config.h, config.tau)
            record = None
            try:
                record = run_single_configuration(config, self.data)
            except Exception as e:
                self._record_failure(config, e)
            else:
                results.append(record)
            self._finish(config, record)

        total_time = time.time() - self.start_time
        self.logger.info(f"Completed {self.total_runs} runs in {total_time:.1f}s", "SWEEP")

        return results

    def run_parallel(
        self,
        results: Optional[List[AnalyticsRecord]] = None,
        max_workers: Optional[int] = None
    ) -> List[AnalyticsRecord]:
        """
        Run configurations in parallel using multiprocessing.

        Records are appended in configuration order once every run ended.

        Args:
            results: Caller-owned list the records are appended to
            max_workers: Number of parallel workers (default: CPU count)

        Returns:
            The results list
        """
        results = [] if results is None else results
        if max_workers is None:
            max_workers = multiprocessing.cpu_count()

        configs = self._generate_run_configs()
        self._reset()
        finished: Dict[int, AnalyticsRecord] = {}
        failed: Dict[int, Exception] = {}

        self.logger.info(
            f"Running {self.total_runs} channel configurations with {max_workers} workers",
            "SWEEP"
        )

        with ProcessPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(run_single_configuration, config, self.data): config
                for config in configs
            }

            for future in tqdm(as_completed(futures), total=len(futures),
                               desc="Channels", disable=not self.show_progress):
                config = futures[future]
                record = None
                try:
                    record = future.result()
                except Exception as e:
                    failed[config.index] = e
                else:
                    finished[config.index] = record
                self._finish(config, record)

        for config in configs:
            if config.index in finished:
                results.append(finished[config.index])
            else:
                self._record_failure(config, failed[config.index])

        total_time = time.time() - self.start_time
        self.logger.info(f"Completed {self.total_runs} runs in {total_time:.1f}s", "SWEEP")

        return results

    def save_results(self, records: Sequence[AnalyticsRecord], filepath: Optional[str] = None) -> str:
        """
        Save records to CSV file.

        Args:
            records: Analytics records
            filepath: Output file path (default: RESULTS_CSV)

        Returns:
            Path written
        """
        filepath = write_csv(records, filepath or RESULTS_CSV)
        self.logger.info(f"Results saved to: {filepath}", "SWEEP")
        return filepath


def summarize(records: Sequence[AnalyticsRecord]) -> Dict:
    """
    Aggregate a sweep into totals.

    Returns:
        Dictionary with total channel / residual errors and the
        configuration with the most residual errors
    """
    if not records:
        return {'runs': 0, 'channel_bit_errors': 0, 'residual_bit_errors': 0}

    channel_errors = sum(r.channel.bit_errors for r in records)
    residual_errors = sum(r.residual_bit_errors for r in records)
    worst = max(records, key=lambda r: r.residual_bit_errors)

    return {
        'runs': len(records),
        'channel_bit_errors': channel_errors,
        'residual_bit_errors': residual_errors,
        'corrected_ratio': (1 - residual_errors / channel_errors
                            if channel_errors > 0 else 1.0),
        'worst_h': worst.channel.h,
        'worst_tau': worst.channel.tau,
        'worst_residual_bit_errors': worst.residual_bit_errors
    }
