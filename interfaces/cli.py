"""
Command-line interface for the fixed-point options engine.

This CLI provides access to:
- Option pricing (Black-Scholes)
- Implied volatility solving
- Normal distribution lookups and the probability table

Numbers are typed as decimals (``--spot 10500 --vol 1.2``) and converted
exactly to 18-decimal fixed point; ``--raw`` prints raw integers.
"""

import click

from fixed_options.core.black_scholes import BlackScholes
from fixed_options.core.distributions import NormalDistribution
from fixed_options.core.fixed_point import from_fixed, to_fixed
from fixed_options.diagnostics.arbitrage import check_target_price
from fixed_options.solvers.implied_vol import VolatilitySolver
from fixed_options.utils.config import ParameterStore
from fixed_options.utils.constants import (
    ACCEPTABLE_RANGE_PARAMETER,
    DAYS_PER_YEAR,
    MAX_ITERATIONS_PARAMETER,
    PRECISION_DECIMALS,
)
from fixed_options.utils.exceptions import EngineError, NonConvergence
from fixed_options.utils.logging_config import configure_logging
from fixed_options.utils.types import ConvergenceConfig


class FixedPointType(click.ParamType):
    """Decimal text converted exactly to a raw fixed-point integer."""

    name = "decimal"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            return to_fixed(value)
        except (ValueError, ZeroDivisionError):
            self.fail(f"{value!r} is not a decimal number", param, ctx)


FIXED = FixedPointType()


def _format(raw: int, as_raw: bool) -> str:
    return str(raw) if as_raw else f"{from_fixed(raw):.6f}"


def _time_to_maturity(time, days):
    if (time is None) == (days is None):
        raise click.UsageError("Give exactly one of --time (years) or --days")
    if days is not None:
        return days // DAYS_PER_YEAR
    return time


@click.group()
@click.version_option(version="1.0.0")
@click.option("--verbose", is_flag=True, help="Log solver iterations")
@click.option("--quiet", is_flag=True, help="Only log errors")
def cli(verbose, quiet):
    """Fixed-point Black-Scholes pricing and implied volatility."""
    configure_logging(verbose=verbose, quiet=quiet)


@cli.command()
@click.option("--spot", "-S", type=FIXED, required=True, help="Spot price")
@click.option("--strike", "-K", type=FIXED, required=True, help="Strike price")
@click.option("--vol", "-v", type=FIXED, required=True, help="Volatility (annualized)")
@click.option("--rate", "-r", type=FIXED, default="0", help="Risk-free rate")
@click.option("--time", "-T", type=FIXED, default=None, help="Time to expiry (years)")
@click.option("--days", type=FIXED, default=None, help="Time to expiry (days), instead of --time")
@click.option("--type", "-t", type=click.Choice(["call", "put"]), default="call")
@click.option("--raw", is_flag=True, help="Print raw 18-decimal integers")
def price(spot, strike, vol, rate, time, days, type, raw):
    """Calculate option price using Black-Scholes."""
    time_to_maturity = _time_to_maturity(time, days)
    try:
        price_value = BlackScholes().get_price(type, spot, strike, vol, rate, time_to_maturity)
    except EngineError as e:
        raise click.ClickException(str(e))
    click.echo(f"\n{type.capitalize()} Option Price: {_format(price_value, raw)}")


@cli.command()
@click.option("--market-price", "-p", type=FIXED, required=True, help="Market price")
@click.option("--guess", "-g", type=FIXED, default="1", help="Initial volatility guess")
@click.option("--spot", "-S", type=FIXED, required=True, help="Spot price")
@click.option("--strike", "-K", type=FIXED, required=True, help="Strike price")
@click.option("--rate", "-r", type=FIXED, default="0", help="Risk-free rate")
@click.option("--time", "-T", type=FIXED, default=None, help="Time to expiry (years)")
@click.option("--days", type=FIXED, default=None, help="Time to expiry (days), instead of --time")
@click.option("--type", "-t", type=click.Choice(["call", "put"]), default="call")
@click.option("--range-bps", type=int, default=None, help="Acceptable price error (bps)")
@click.option("--max-iterations", type=int, default=None, help="Iteration budget")
@click.option("--raw", is_flag=True, help="Print raw 18-decimal integers")
def iv(market_price, guess, spot, strike, rate, time, days, type, range_bps, max_iterations, raw):
    """
    Solve for implied volatility.

    Tolerance and budget default to FIXED_OPTIONS_GUESSER_ACCEPTABLE_RANGE
    and FIXED_OPTIONS_GUESSER_MAX_ITERATIONS when those are set.
    """
    time_to_maturity = _time_to_maturity(time, days)

    try:
        parameters = ParameterStore.from_env()
        if range_bps is not None:
            parameters.set_parameter(ACCEPTABLE_RANGE_PARAMETER, range_bps)
        if max_iterations is not None:
            parameters.set_parameter(MAX_ITERATIONS_PARAMETER, max_iterations)

        check = check_target_price(market_price, type, spot, strike, time_to_maturity, rate)
        for violation in check.violations:
            click.echo(f"Warning: {violation}", err=True)

        solver = VolatilitySolver(config=ConvergenceConfig(), parameters=parameters)
        if ACCEPTABLE_RANGE_PARAMETER in parameters:
            solver.update_acceptable_range()
        if MAX_ITERATIONS_PARAMETER in parameters:
            solver.update_max_iterations()
        result = solver.get_iv(type, market_price, guess, spot, strike, time_to_maturity, rate)
    except NonConvergence as e:
        raise click.ClickException(f"Solver failed after {e.iterations} iterations: {e}")
    except EngineError as e:
        raise click.ClickException(str(e))

    click.echo(f"\nImplied Volatility: {_format(result.volatility, raw)}")
    click.echo(f"Price at IV: {_format(result.price, raw)}")
    click.echo(f"Iterations: {result.iterations}")


@cli.command()
@click.argument("z", type=str)
@click.option("--decimals", "-d", type=int, default=PRECISION_DECIMALS, help="Result precision")
@click.option("--raw", is_flag=True, help="Treat Z as a raw integer already scaled by 10**decimals")
def probability(z, decimals, raw):
    """Standard normal CDF at Z."""
    try:
        z_value = int(z) if raw else to_fixed(z, decimals)
    except ValueError:
        raise click.BadParameter(f"{z!r} is not a number", param_hint="Z")
    try:
        result = NormalDistribution().get_probability(z_value, decimals)
    except EngineError as e:
        raise click.ClickException(str(e))
    click.echo(str(result) if raw else str(from_fixed(result, decimals)))


@cli.command()
@click.option("--start", type=int, default=0, help="First bucket (hundredths of z)")
@click.option("--stop", type=int, default=400, help="Last bucket (inclusive)")
@click.option("--step", type=int, default=50, help="Bucket stride")
def table(start, stop, step):
    """Print entries of the default probability table."""
    nd = NormalDistribution()
    wanted = set(range(start, stop + 1, step))
    click.echo(f"{'z':>6}  {'P(Z <= z)':>10}")
    for bucket, value in nd.table:
        if bucket in wanted:
            click.echo(f"{bucket / 100:>6.2f}  {from_fixed(value, nd.table.decimals):>10}")


if __name__ == "__main__":
    cli()
