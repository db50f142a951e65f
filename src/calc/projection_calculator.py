"""Year-by-year retirement projection.

Projects the household's tax-deferred and taxable balances forward one
calendar year at a time:

1. Apply growth (pre-retirement rate until both persons have retired)
2. Add contributions for persons still working
3. Add pension and Social Security income
4. Gross up the active expense phase and withdraw the shortfall,
   taxable account first, then tax-deferred
5. Stop after the first year savings cannot cover the shortfall

Amounts are either in today's dollars (``'real'`` mode, growth reduced by
inflation) or in future dollars (``'nominal'`` mode, every dollar input
inflated forward from the first year).
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Optional, Tuple

from loguru import logger

from calc.expense_phases import get_active_phase
from calc.rates import gross_up, real_return
from model.ProjectionData import ACCUMULATION_LABEL, Inputs, ProjectionResult, ProjectionRow


REAL = 'real'
NOMINAL = 'nominal'
MODES = (REAL, NOMINAL)

# Last calendar year simulated unless the caller supplies a tighter bound
MAX_PROJECTION_YEAR = 2100


@dataclass(frozen=True)
class YearState:
    """Running values carried from one simulated year to the next."""
    tax_deferred: float
    taxable: float
    inflation_factor: float = 1.0
    depletion_year: Optional[int] = None

    @property
    def total(self) -> float:
        return self.tax_deferred + self.taxable


def resolve_mode(mode: Optional[str]) -> str:
    """Validate a dollar mode, defaulting to real when none is given."""
    if mode is None:
        return REAL
    if mode not in MODES:
        raise ValueError(f"Unknown projection mode '{mode}'. Expected one of: {', '.join(MODES)}")
    return mode


def resolve_last_year(inputs: Inputs, start_year: int,
                      last_year: Optional[int] = None,
                      end_age: Optional[int] = None) -> int:
    """Determine the last calendar year to simulate.

    Args:
        inputs: Household assumptions
        start_year: First simulated year
        last_year: Fixed ceiling; defaults to MAX_PROJECTION_YEAR
        end_age: If given, stop once every applicable person has reached this age

    Returns:
        The smallest of the requested bounds
    """
    bound = last_year if last_year is not None else MAX_PROJECTION_YEAR
    if end_age is not None:
        end_age_year = max(p.birth_year(start_year) + end_age for p in inputs.applicable_persons())
        bound = min(bound, end_age_year)
    return bound


class ProjectionCalculator:
    """Runs the per-year projection for one set of assumptions.

    Everything derived once per run (birth years, growth rates, retirement
    pivots) is computed in the constructor. ``advance_year`` is a pure
    function of the state passed in, so single years can be examined in
    isolation from the full loop.
    """

    def __init__(self, inputs: Inputs, mode: str = REAL, start_year: Optional[int] = None):
        """Initialize the calculator.

        Args:
            inputs: Household assumptions, treated as read-only
            mode: 'real' or 'nominal'
            start_year: First simulated calendar year (defaults to the current year)
        """
        self.inputs = inputs
        self.mode = resolve_mode(mode)
        self.is_nominal = self.mode == NOMINAL
        self.is_single = inputs.is_single
        self.start_year = start_year if start_year is not None else datetime.now().year

        self.person1 = inputs.person1
        self.person2 = inputs.person2
        self.person1_birth_year = self.person1.birth_year(self.start_year)
        self.person2_birth_year = self.person2.birth_year(self.start_year)

        if self.is_nominal:
            self.pre_ret_growth = inputs.pre_ret_nominal_growth
            self.post_ret_growth = inputs.post_ret_nominal_growth
        else:
            self.pre_ret_growth = real_return(inputs.pre_ret_nominal_growth, inputs.inflation_rate)
            self.post_ret_growth = real_return(inputs.post_ret_nominal_growth, inputs.inflation_rate)

        retirement_years = [p.retirement_year for p in inputs.applicable_persons()]
        self.both_retired_year = max(retirement_years)
        self.first_retired_year = min(retirement_years)

    def initial_state(self) -> YearState:
        return YearState(
            tax_deferred=self.inputs.tax_deferred_balance,
            taxable=self.inputs.taxable_balance,
        )

    def inflate(self, amount: float, inflation_factor: float) -> float:
        """Express a today's-dollars amount in the dollars of the current year."""
        if self.is_nominal:
            return amount * inflation_factor
        return float(amount)

    def growth_rate(self, year: int) -> float:
        if year < self.both_retired_year:
            return self.pre_ret_growth
        return self.post_ret_growth

    def _next_inflation_factor(self, state: YearState, year: int) -> float:
        if self.is_nominal and year > self.start_year:
            return state.inflation_factor * (1 + self.inputs.inflation_rate)
        return state.inflation_factor

    def advance_year(self, state: YearState, year: int) -> Tuple[YearState, ProjectionRow]:
        """Simulate one calendar year.

        Args:
            state: Balances and inflation factor at the end of the prior year
            year: The calendar year to simulate

        Returns:
            Tuple of (state at the end of this year, row describing this year)
        """
        inputs = self.inputs
        person1_age = year - self.person1_birth_year
        person2_age = 0 if self.is_single else year - self.person2_birth_year

        inflation_factor = self._next_inflation_factor(state, year)

        def inflate(amount: float) -> float:
            return self.inflate(amount, inflation_factor)

        # Growth is applied before contributions and withdrawals
        growth = 1 + self.growth_rate(year)
        tax_deferred = state.tax_deferred * growth
        taxable = state.taxable * growth

        # Contributions while working
        for person in inputs.applicable_persons():
            if year < person.retirement_year:
                tax_deferred += inflate(person.annual_401k)
                taxable += inflate(person.annual_taxable_savings)

        # Guaranteed income
        person1_pension = inflate(self.person1.pension_amount) if year >= self.person1.pension_start_year else 0.0
        person1_ss = inflate(self.person1.ss_amount) if person1_age >= self.person1.ss_start_age else 0.0
        person2_pension = 0.0
        person2_ss = 0.0
        if not self.is_single:
            if year >= self.person2.pension_start_year:
                person2_pension = inflate(self.person2.pension_amount)
            if person2_age >= self.person2.ss_start_age:
                person2_ss = inflate(self.person2.ss_amount)
        total_income = person1_pension + person2_pension + person1_ss + person2_ss

        # Expenses only start once someone has retired
        phase = None
        if year >= self.first_retired_year:
            phase = get_active_phase(inputs.expense_phases, year)
        gross_expense = 0.0
        if phase is not None and phase.annual_post_tax > 0:
            gross_expense = gross_up(inflate(phase.annual_post_tax),
                                     inputs.taxable_portion_of_withdrawals,
                                     inputs.effective_tax_rate)

        if phase is not None:
            phase_label = phase.label
        elif year < self.both_retired_year:
            phase_label = ACCUMULATION_LABEL
        else:
            phase_label = ''

        # Withdraw from taxable first, then tax-deferred
        withdrawal_needed = max(0.0, gross_expense - total_income)
        withdrawal = 0.0
        if withdrawal_needed > 0 and (tax_deferred > 0 or taxable > 0):
            from_taxable = min(taxable, withdrawal_needed)
            taxable -= from_taxable
            from_tax_deferred = min(tax_deferred, withdrawal_needed - from_taxable)
            tax_deferred -= from_tax_deferred
            withdrawal = from_taxable + from_tax_deferred

        depleted = tax_deferred <= 0 and taxable <= 0 and withdrawal_needed > 0
        depletion_year = state.depletion_year
        if depleted and depletion_year is None:
            depletion_year = year

        # Guard against floating point drift below zero
        tax_deferred = max(tax_deferred, 0.0)
        taxable = max(taxable, 0.0)

        row = ProjectionRow(
            year=year,
            person1_age=person1_age,
            person2_age=person2_age,
            phase=phase_label,
            gross_expense=gross_expense,
            person1_pension=person1_pension,
            person2_pension=person2_pension,
            person1_ss=person1_ss,
            person2_ss=person2_ss,
            total_income=total_income,
            withdrawal=withdrawal,
            tax_deferred=tax_deferred,
            taxable=taxable,
            total_portfolio=tax_deferred + taxable,
            depleted=depleted,
        )
        new_state = replace(
            state,
            tax_deferred=tax_deferred,
            taxable=taxable,
            inflation_factor=inflation_factor,
            depletion_year=depletion_year,
        )
        return new_state, row

    def calculate(self, last_year: Optional[int] = None) -> ProjectionResult:
        """Run the projection from the start year through ``last_year``.

        The loop ends early after the first depleted year.

        Args:
            last_year: Last calendar year to simulate (defaults to MAX_PROJECTION_YEAR)

        Returns:
            ProjectionResult with one row per simulated year
        """
        last_year = last_year if last_year is not None else MAX_PROJECTION_YEAR
        logger.debug(
            f"Running {self.mode} projection {self.start_year}-{last_year} "
            f"({'single' if self.is_single else 'married'}, both retired {self.both_retired_year})"
        )

        state = self.initial_state()
        rows: List[ProjectionRow] = []
        for year in range(self.start_year, last_year + 1):
            state, row = self.advance_year(state, year)
            rows.append(row)
            if row.depleted:
                logger.info(f"Savings depleted in {year}")
                break

        return ProjectionResult(
            rows=rows,
            depletion_year=state.depletion_year,
            final_balance=max(state.total, 0.0),
            mode=self.mode,
            start_year=self.start_year,
            last_year=last_year,
        )


def run_projection(inputs: Inputs, mode: str = REAL, start_year: Optional[int] = None,
                   last_year: Optional[int] = None, end_age: Optional[int] = None) -> ProjectionResult:
    """Project balances for a set of assumptions.

    Args:
        inputs: Household assumptions
        mode: 'real' (today's dollars, default) or 'nominal' (future dollars)
        start_year: First simulated year (defaults to the current calendar year)
        last_year: Fixed last year to simulate (defaults to MAX_PROJECTION_YEAR)
        end_age: Optionally stop once every applicable person reaches this age

    Returns:
        ProjectionResult for the run

    Raises:
        ValueError: If mode is not 'real' or 'nominal'
    """
    calculator = ProjectionCalculator(inputs, mode, start_year)
    bound = resolve_last_year(inputs, calculator.start_year, last_year, end_age)
    return calculator.calculate(bound)
