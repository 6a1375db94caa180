#!/usr/bin/env python3
"""
Hamming FEC Simulator - Main Entry Point

This is the main CLI interface for the FEC simulator.
It provides options for:
- Single channel runs
- Channel sweep over (h, tau) configurations
- Visualization generation

Usage:
    python main.py --single --h 0.01 --tau 4
    python main.py --sweep
    python main.py --visualize --csv results.csv
"""

import argparse
import itertools
import os
import sys

# Ensure project root is in path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import (
    CHANNEL_CONFIGURATIONS, CODERS, DATA_PATTERN, DATA_SIZE, DEFAULT_CODER,
    DEFAULT_H, DEFAULT_TAU, PLOTS_DIR, RESULT_FILE, RESULTS_CSV, RNG_SEED_BASE
)


def load_input(args) -> bytes:
    """Read the input file, or generate test data when none is given."""
    from src.utils.data_io import TestDataGenerator, read_data_file

    if args.input:
        return read_data_file(args.input)
    return TestDataGenerator.generate_test_data(args.data_size, args.pattern, seed=args.seed)


def make_logger(args):
    from src.utils.logger import SimulationLogger, LogLevel, set_logger

    logger = SimulationLogger(
        name="FEC",
        level=LogLevel.DEBUG if args.verbose else LogLevel.INFO
    )
    set_logger(logger)
    return logger


def run_single(args):
    """Run one channel configuration."""
    from simulation.pipeline import Pipeline, PipelineConfig
    from src.channel.gilbert_elliot import GilbertElliottChannel
    from src.utils.data_io import DataVerifier, write_data_file
    from src.utils.metrics import analyze
    from src.utils.report import print_report

    logger = make_logger(args)
    data = load_input(args)

    config = PipelineConfig(coder=args.coder, interleave=not args.no_interleave)
    channel = GilbertElliottChannel.from_characteristics(h=args.h, tau=args.tau, seed=args.seed)

    print("=" * 60)
    print("HAMMING FEC SIMULATOR")
    print("=" * 60)
    print(f"\nConfiguration:")
    print(f"  Coder: {config.name}")
    print(f"  Channel: h={args.h}, tau={args.tau}")
    print(f"  P(G->B): {channel.p_gb:.5f}, P(B->G): {channel.p_bg:.5f}")
    print(f"  Data size: {len(data) / 1024:.1f} KB")
    print(f"  Seed: {args.seed}")

    logger.run_start(0, args.h, args.tau)
    result = Pipeline(config, logger=logger).run(data, channel)
    record = analyze(
        channel, result.metrics, data, result.output,
        coder=config.name, corrected_codewords=result.corrected_codewords
    )
    logger.run_end(0, record.channel.bit_errors, record.residual_bit_errors)

    output = args.output or RESULT_FILE
    write_data_file(output, result.output)

    valid, _ = DataVerifier.verify_data(data, result.output)

    print("\n" + "=" * 60)
    print("RESULTS")
    print("=" * 60)
    print_report([record])
    print(f"\n  Corrected codewords: {record.corrected_codewords:,}")
    print(f"  Data valid: {valid}")
    print(f"  Output: {output}")

    return record


def channel_configurations(args):
    """(h, tau) pairs from the command line, or the configured sweep."""
    if args.h_values or args.tau_values:
        h_values = args.h_values or [DEFAULT_H]
        tau_values = args.tau_values or [DEFAULT_TAU]
        return list(itertools.product(h_values, tau_values))
    return CHANNEL_CONFIGURATIONS


def run_sweep(args):
    """Run every channel configuration and report."""
    from simulation.runner import BatchRunner, summarize
    from src.utils.report import print_report

    logger = make_logger(args)
    data = load_input(args)
    configurations = channel_configurations(args)

    runner = BatchRunner(
        configurations=configurations,
        data=data,
        coder=args.coder,
        interleave=not args.no_interleave,
        seed_base=args.seed,
        logger=logger
    )

    print("=" * 60)
    print("CHANNEL SWEEP")
    print("=" * 60)
    print(f"\nConfiguration:")
    print(f"  Coder: {args.coder}{' (no interleaver)' if args.no_interleave else ''}")
    print(f"  Channels: {len(configurations)}")
    print(f"  Data size: {len(data) / 1024:.1f} KB")
    print(f"  Output: {args.csv or RESULTS_CSV}")
    print()

    results = []
    if args.parallel:
        runner.run_parallel(results, max_workers=args.workers)
    else:
        runner.run_sequential(results)

    print()
    print_report(results)

    if runner.failures:
        print(f"\n{len(runner.failures)} configuration(s) failed:")
        for failure in runner.failures:
            print(f"  h={failure.h}, tau={failure.tau}: {failure.error}")

    if results:
        runner.save_results(results, args.csv or RESULTS_CSV)

        summary = summarize(results)
        print(f"\nSummary:")
        print(f"  Channel bit errors: {summary['channel_bit_errors']:,}")
        print(f"  Residual bit errors: {summary['residual_bit_errors']:,}")
        print(f"  Corrected: {summary['corrected_ratio'] * 100:.2f}%")
        print(f"  Worst channel: h={summary['worst_h']}, tau={summary['worst_tau']}")

    return results


def generate_visualizations(args):
    """Generate the residual error heatmap."""
    print("=" * 60)
    print("GENERATING VISUALIZATIONS")
    print("=" * 60)

    csv_file = args.csv or RESULTS_CSV

    if not os.path.exists(csv_file):
        print(f"Error: Results file not found: {csv_file}")
        print("Run a channel sweep first: python main.py --sweep")
        return None

    from visualization.heatmap import ResidualErrorHeatmap

    heatmap = ResidualErrorHeatmap(csv_file=csv_file)
    print(f"Loaded {len(heatmap.results)} results from {csv_file}")

    os.makedirs(PLOTS_DIR, exist_ok=True)
    heatmap_file = heatmap.plot(
        output_file=args.output or os.path.join(PLOTS_DIR, 'residual_error_heatmap.png')
    )
    print(f"  Heatmap: {heatmap_file}")
    return heatmap_file


def show_config(args):
    """Display current configuration."""
    import config as cfg

    print("=" * 60)
    print("SIMULATOR CONFIGURATION")
    print("=" * 60)

    print(f"\nGilbert-Elliot Channel:")
    print(f"  Good State BER: {cfg.GOOD_STATE_BER:.2e}")
    print(f"  Bad State BER: {cfg.BAD_STATE_BER:.2e}")

    print(f"\nCoder:")
    print(f"  Default coder: {cfg.DEFAULT_CODER}")
    print(f"  Code rate: {cfg.calculate_code_rate():.2f}")

    print(f"\nChannel Sweep:")
    print(f"  h values: {cfg.H_VALUES}")
    print(f"  tau values: {cfg.TAU_VALUES}")
    print(f"  Total runs: {len(cfg.CHANNEL_CONFIGURATIONS)}")

    print(f"\nTransition probabilities:")
    for h, tau in cfg.CHANNEL_CONFIGURATIONS:
        p_gb, p_bg = cfg.calculate_transition_probabilities(h, tau)
        print(f"  h={h:<6} tau={tau:<4}: P(G->B)={p_gb:.5f}, P(B->G)={p_bg:.3f}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Hamming(8,4) FEC Simulator with Block Interleaving",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Single channel:
    python main.py --single --h 0.01 --tau 4

  Channel sweep (configured grid):
    python main.py --sweep

  Custom grid, uncoded baseline:
    python main.py --sweep --h-values 0.01 0.02 --tau-values 1 8 --coder identity

  Parallel sweep:
    python main.py --sweep --parallel --workers 4

  Generate visualizations:
    python main.py --visualize

  Show configuration:
    python main.py --config
        """
    )

    # Mode selection
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument('--single', action='store_true',
                     help='Run a single channel configuration')
    mode.add_argument('--sweep', action='store_true',
                     help='Run all channel configurations')
    mode.add_argument('--visualize', action='store_true',
                     help='Generate visualizations')
    mode.add_argument('--config', action='store_true',
                     help='Show configuration')

    # Channel options
    parser.add_argument('--h', type=float, default=DEFAULT_H,
                       help=f'Channel BER h for --single (default: {DEFAULT_H})')
    parser.add_argument('--tau', type=float, default=DEFAULT_TAU,
                       help=f'Mean burst length tau for --single (default: {DEFAULT_TAU})')
    parser.add_argument('--h-values', type=float, nargs='+',
                       help='h values for --sweep')
    parser.add_argument('--tau-values', type=float, nargs='+',
                       help='tau values for --sweep')
    parser.add_argument('--seed', '-s', type=int, default=RNG_SEED_BASE,
                       help=f'Random seed (default: {RNG_SEED_BASE})')

    # Coder options
    parser.add_argument('--coder', choices=CODERS, default=DEFAULT_CODER,
                       help=f'Coder (default: {DEFAULT_CODER})')
    parser.add_argument('--no-interleave', action='store_true',
                       help='Disable the block interleaver')

    # Sweep options
    parser.add_argument('--parallel', action='store_true',
                       help='Run configurations in parallel')
    parser.add_argument('--workers', type=int, default=None,
                       help='Number of parallel workers')

    # Data options
    parser.add_argument('--input', '-i', type=str,
                       help='Input file (generated data when omitted)')
    parser.add_argument('--data-size', type=int, default=DATA_SIZE,
                       help=f'Generated data size in bytes (default: {DATA_SIZE})')
    parser.add_argument('--pattern', choices=['random', 'sequential', 'zeros'],
                       default=DATA_PATTERN, help='Generated data pattern')

    # Output options
    parser.add_argument('--output', '-o', type=str,
                       help='Output file path')
    parser.add_argument('--csv', type=str,
                       help='Results CSV file')
    parser.add_argument('--verbose', '-v', action='store_true',
                       help='Verbose output')

    args = parser.parse_args(argv)

    # Execute selected mode
    if args.single:
        return run_single(args)
    elif args.sweep:
        return run_sweep(args)
    elif args.visualize:
        return generate_visualizations(args)
    elif args.config:
        return show_config(args)


if __name__ == "__main__":
    main()
