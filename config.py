"""
Configuration file for the Hamming FEC / interleaving simulator.
Contains the fixed baseline parameters for the channel sweep.
"""

import itertools

# =============================================================================
# GILBERT-ELLIOT BURST ERROR MODEL PARAMETERS
# =============================================================================

# Bit Error Rates
GOOD_STATE_BER = 0.0    # pg - the good state is error free
BAD_STATE_BER = 0.5     # pb - every bit in a burst is a coin flip

# Default channel characteristics for a single run
DEFAULT_H = 0.01        # long-run bit error rate
DEFAULT_TAU = 4.0       # mean burst length (bits)

# =============================================================================
# PARAMETER SWEEP CONFIGURATION
# =============================================================================

# Long-run bit error rates to evaluate
H_VALUES = [0.001, 0.005, 0.01, 0.02]

# Mean burst lengths (bits) to evaluate
TAU_VALUES = [1.0, 2.0, 4.0, 8.0]

# Every (h, tau) pair, in report order
CHANNEL_CONFIGURATIONS = list(itertools.product(H_VALUES, TAU_VALUES))

# Total runs = 4 × 4 = 16

# =============================================================================
# CODER SETTINGS
# =============================================================================

# Payload bits per codeword and codeword size (bits)
DATA_BITS = 4
CODEWORD_BITS = 8

# "hamming" (Hamming(8,4) + interleaver) or "identity" (uncoded baseline)
DEFAULT_CODER = "hamming"
CODERS = ["hamming", "identity"]

# =============================================================================
# RUN SETTINGS
# =============================================================================

# Size of the generated input when no file is given
DATA_SIZE = 256 * 1024  # 256 KB
DATA_PATTERN = "random"

# Default RNG seed base (actual seed = base + configuration index)
RNG_SEED_BASE = 42

# Logging verbosity levels
LOG_LEVEL_DEBUG = 0
LOG_LEVEL_INFO = 1
LOG_LEVEL_WARNING = 2
LOG_LEVEL_ERROR = 3

DEFAULT_LOG_LEVEL = LOG_LEVEL_INFO

# =============================================================================
# OUTPUT PATHS
# =============================================================================

import os

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.path.join(BASE_DIR, "data")
OUTPUT_DIR = os.path.join(DATA_DIR, "output")
PLOTS_DIR = os.path.join(OUTPUT_DIR, "plots")

# Results CSV filename
RESULTS_CSV = os.path.join(OUTPUT_DIR, "results.csv")

# Decoded output of the last run
RESULT_FILE = os.path.join(OUTPUT_DIR, "result.bin")

# =============================================================================
# DERIVED PARAMETERS (calculated from fixed parameters)
# =============================================================================

def channel_seed(index, seed_base=RNG_SEED_BASE):
    """Seed for the channel of the configuration at the given index."""
    return seed_base + index


def calculate_code_rate():
    """Code rate k/n of the Hamming(8,4) codeword."""
    return DATA_BITS / CODEWORD_BITS


def calculate_steady_state_probabilities(h, tau, pg=GOOD_STATE_BER, pb=BAD_STATE_BER):
    """
    Calculate steady-state probabilities for Good and Bad states
    for a channel described by (h, tau).
    π_B = (h - pg) / (pb - pg)
    π_G = 1 - π_B
    """
    pi_bad = (h - pg) / (pb - pg)
    return 1.0 - pi_bad, pi_bad


def calculate_transition_probabilities(h, tau, pg=GOOD_STATE_BER, pb=BAD_STATE_BER):
    """
    Calculate (P(G→B), P(B→G)) for a channel described by (h, tau).
    P(B→G) = 1 / tau
    P(G→B) = P(B→G) * π_B / π_G
    """
    pi_good, pi_bad = calculate_steady_state_probabilities(h, tau, pg, pb)
    p_bg = 1.0 / tau
    p_gb = p_bg * pi_bad / pi_good
    return p_gb, p_bg


# Print configuration summary
if __name__ == "__main__":
    print("=" * 60)
    print("HAMMING FEC SIMULATOR - CONFIGURATION")
    print("=" * 60)

    print(f"\nGilbert-Elliot Model:")
    print(f"  Good State BER: {GOOD_STATE_BER:.2e}")
    print(f"  Bad State BER: {BAD_STATE_BER:.2e}")

    print(f"\nCoder:")
    print(f"  Default coder: {DEFAULT_CODER}")
    print(f"  Code rate: {calculate_code_rate():.2f}")

    print(f"\nParameter Sweep:")
    print(f"  h values: {H_VALUES}")
    print(f"  tau values: {TAU_VALUES}")
    print(f"  Total runs: {len(CHANNEL_CONFIGURATIONS)}")

    print(f"\nTransition probabilities:")
    for h, tau in CHANNEL_CONFIGURATIONS:
        p_gb, p_bg = calculate_transition_probabilities(h, tau)
        print(f"  h={h:<6} tau={tau:<4}: P(G->B)={p_gb:.5f}, P(B->G)={p_bg:.3f}")
