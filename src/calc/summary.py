"""Headline figures derived from a projection result."""

from dataclasses import dataclass
from typing import Optional

from calc.rates import real_return
from model.ProjectionData import Inputs, ProjectionResult


@dataclass
class ProjectionSummary:
    """Key results of a projection run."""
    both_retired_year: int
    retirement_nest_egg: float  # Total portfolio in the year both persons are retired
    peak_portfolio: float
    peak_year: Optional[int]
    depletion_year: Optional[int]
    depletion_age: Optional[int]  # Age of the reference person when money runs out
    final_balance: float
    real_pre_ret_growth: float
    real_post_ret_growth: float
    years_simulated: int

    @property
    def is_depleted(self) -> bool:
        return self.depletion_year is not None


def summarize(result: ProjectionResult, inputs: Inputs) -> ProjectionSummary:
    """Summarize a projection result.

    The reference person for the depletion age is person 1 for single
    filers, otherwise the older of the two.

    Args:
        result: Output of run_projection
        inputs: The assumptions the result was produced from

    Returns:
        ProjectionSummary with the headline figures
    """
    persons = inputs.applicable_persons()
    both_retired_year = max(p.retirement_year for p in persons)

    retirement_row = result.get_year(both_retired_year)
    retirement_nest_egg = retirement_row.total_portfolio if retirement_row else 0.0

    peak_portfolio = 0.0
    peak_year = None
    for row in result.rows:
        if peak_year is None or row.total_portfolio > peak_portfolio:
            peak_portfolio = row.total_portfolio
            peak_year = row.year

    depletion_age = None
    if result.depletion_year is not None:
        oldest_age = max(p.current_age for p in persons)
        depletion_age = result.depletion_year - (result.start_year - oldest_age)

    return ProjectionSummary(
        both_retired_year=both_retired_year,
        retirement_nest_egg=retirement_nest_egg,
        peak_portfolio=peak_portfolio,
        peak_year=peak_year,
        depletion_year=result.depletion_year,
        depletion_age=depletion_age,
        final_balance=result.final_balance,
        real_pre_ret_growth=real_return(inputs.pre_ret_nominal_growth, inputs.inflation_rate),
        real_post_ret_growth=real_return(inputs.post_ret_nominal_growth, inputs.inflation_rate),
        years_simulated=len(result.rows),
    )
