"""Default household assumptions.

Dates are expressed relative to the current calendar year so the defaults
stay meaningful whenever they are loaded.
"""

from datetime import datetime
from typing import Optional

from model.ProjectionData import ExpensePhase, Inputs, PersonInputs, MARRIED


def default_inputs(current_year: Optional[int] = None) -> Inputs:
    """Build a fresh default assumption set.

    Args:
        current_year: Year the relative dates are based on (defaults to this year)

    Returns:
        A new Inputs instance for a married household
    """
    year = current_year if current_year is not None else datetime.now().year
    return Inputs(
        filing_status=MARRIED,
        person1=PersonInputs(
            name='Person 1',
            current_age=50,
            retirement_year=year + 10,
            annual_401k=23000,
            annual_taxable_savings=10000,
            pension_amount=0,
            pension_start_year=year + 10,
            ss_amount=30000,
            ss_start_age=67,
        ),
        person2=PersonInputs(
            name='Person 2',
            current_age=48,
            retirement_year=year + 12,
            annual_401k=23000,
            annual_taxable_savings=5000,
            pension_amount=0,
            pension_start_year=year + 12,
            ss_amount=24000,
            ss_start_age=67,
        ),
        tax_deferred_balance=800000,
        taxable_balance=200000,
        pre_ret_nominal_growth=0.06,
        post_ret_nominal_growth=0.0525,
        inflation_rate=0.025,
        effective_tax_rate=0.25,
        taxable_portion_of_withdrawals=0.75,
        projection_end_age=95,
        expense_phases=[
            ExpensePhase(id='1', label='Early retirement', annual_post_tax=90000, start_year=year + 10),
            ExpensePhase(id='2', label='Both retired, no mortgage', annual_post_tax=75000, start_year=year + 15),
            ExpensePhase(id='3', label='Later years', annual_post_tax=60000, start_year=year + 25),
        ],
    )
