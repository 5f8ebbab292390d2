"""
Numerical constants for the fixed-point pricing engine.

This module defines the scale factors, precision bounds and solver
defaults shared by every component. All values are integers: nothing on
a pricing or solving path touches floating point.
"""

# Fixed-point scale
DECIMALS = 18  # Inputs and outputs are raw / 10**18
SCALE = 10**DECIMALS
PRECISION_DECIMALS = 24  # Working precision inside the pricing formula
PRECISION = 10**PRECISION_DECIMALS

# Representable range (signed 256-bit)
MAX_INT256 = 2**255 - 1
MIN_INT256 = -(2**255)

# Normal distribution
MIN_PROBABILITY_DECIMALS = 4
MAX_PROBABILITY_DECIMALS = 76
PROBABILITY_DECIMALS = 5  # Precision of stored table probabilities
PROBABILITY_ONE = 10**PROBABILITY_DECIMALS
BUCKET_DECIMALS = 2  # Table buckets are hundredths of |z|
DEFAULT_TABLE_MAX_BUCKET = 500  # z = 5.00, beyond which the CDF rounds to 1

# Volatility solver
BASIS_POINTS = 10_000
DEFAULT_ACCEPTABLE_RANGE_BPS = 10
MIN_ACCEPTABLE_RANGE_BPS = 10
MAX_ACCEPTABLE_RANGE_BPS = BASIS_POINTS
DEFAULT_MAX_ITERATIONS = 50
MAX_VOLATILITY_GUESS = 10_000 * SCALE  # Bracket search gives up doubling past this

# Arbitrage diagnostics tolerances (raw, 18 decimals)
ARBITRAGE_TOLERANCE = 10**14  # 0.0001 price units
PARITY_TOLERANCE = 10**12  # 0.000001 price units

# Parameter names read from the configuration source
ACCEPTABLE_RANGE_PARAMETER = "GUESSER_ACCEPTABLE_RANGE"
MAX_ITERATIONS_PARAMETER = "GUESSER_MAX_ITERATIONS"
ENV_PREFIX = "FIXED_OPTIONS_"

# Calendar
DAYS_PER_YEAR = 365
