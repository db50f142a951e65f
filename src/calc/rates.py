"""Rate conversions used by the projection engine."""

import math


def gross_up(post_tax: float, taxable_portion: float, tax_rate: float) -> float:
    """Convert a post-tax spending amount into the pre-tax withdrawal needed.

    Only ``taxable_portion`` of each withdrawn dollar is taxed, at the flat
    ``tax_rate``, so the gross amount is::

        post_tax / (1 - taxable_portion * tax_rate)

    No clamping is done. Callers must keep ``taxable_portion * tax_rate``
    strictly below 1: at exactly 1 the result is infinite, above 1 it turns
    negative.

    Args:
        post_tax: Amount the household wants to spend after tax
        taxable_portion: Fraction of a withdrawal that is taxable (0-1)
        tax_rate: Effective tax rate on the taxable portion

    Returns:
        The pre-tax amount to withdraw
    """
    denominator = 1 - taxable_portion * tax_rate
    if denominator == 0:
        return math.copysign(math.inf, post_tax) if post_tax else math.nan
    return post_tax / denominator


def real_return(nominal: float, inflation: float) -> float:
    """Inflation-adjusted growth rate. May be negative."""
    return nominal - inflation
