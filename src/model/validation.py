"""Plausibility checks for household assumptions.

The projection engine accepts any numbers it is given. These checks run at
the boundary (CLI, MCP tools) before a projection is started, so a spec.json
with a mistyped or out-of-range value is reported as a ValueError instead of
failing somewhere inside the engine.
"""

import math
from numbers import Real

from model.ProjectionData import FILING_STATUSES, ExpensePhase, Inputs, PersonInputs


_PERSON_YEARS = ('current_age', 'retirement_year', 'pension_start_year', 'ss_start_age')

_PERSON_AMOUNTS = ('annual_401k', 'annual_taxable_savings', 'pension_amount', 'ss_amount')

_RATES = ('pre_ret_nominal_growth', 'post_ret_nominal_growth', 'inflation_rate', 'effective_tax_rate')


def _check_number(value, name: str) -> None:
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
        raise ValueError(f"{name} must be a number (got {value!r})")


def _check_integer(value, name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be a whole number (got {value!r})")


def _check_text(value, name: str) -> None:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be text (got {value!r})")


def _check_person_types(person, prefix: str) -> None:
    if not isinstance(person, PersonInputs):
        raise ValueError(f"{prefix} must be an object (got {person!r})")
    _check_text(person.name, f"{prefix}.name")
    for attr in _PERSON_YEARS:
        _check_integer(getattr(person, attr), f"{prefix}.{attr}")
    for attr in _PERSON_AMOUNTS:
        _check_number(getattr(person, attr), f"{prefix}.{attr}")


def _check_person(person: PersonInputs, prefix: str) -> None:
    if person.current_age < 0:
        raise ValueError(f"{prefix}.current_age must not be negative (got {person.current_age})")
    for attr in _PERSON_AMOUNTS:
        value = getattr(person, attr)
        if value < 0:
            raise ValueError(f"{prefix}.{attr} must not be negative (got {value})")


def validate_inputs(inputs: Inputs) -> None:
    """Reject assumptions the projection cannot sensibly handle.

    Args:
        inputs: Household assumptions to check

    Raises:
        ValueError: Naming the first field that fails a check
    """
    if not isinstance(inputs.filing_status, str) or inputs.filing_status not in FILING_STATUSES:
        raise ValueError(
            f"filing_status must be one of {', '.join(FILING_STATUSES)} (got {inputs.filing_status!r})"
        )

    # The engine reads person 2's dates even for single filers
    _check_person_types(inputs.person1, 'person1')
    _check_person_types(inputs.person2, 'person2')
    _check_person(inputs.person1, 'person1')
    if not inputs.is_single:
        _check_person(inputs.person2, 'person2')

    for attr in ('tax_deferred_balance', 'taxable_balance'):
        value = getattr(inputs, attr)
        _check_number(value, attr)
        if value < 0:
            raise ValueError(f"{attr} must not be negative (got {value})")

    for attr in _RATES:
        value = getattr(inputs, attr)
        _check_number(value, attr)
        if not 0 <= value < 1:
            raise ValueError(f"{attr} must be a decimal in [0, 1) (got {value})")

    portion = inputs.taxable_portion_of_withdrawals
    _check_number(portion, 'taxable_portion_of_withdrawals')
    if not 0 <= portion <= 1:
        raise ValueError(f"taxable_portion_of_withdrawals must be in [0, 1] (got {portion})")

    _check_integer(inputs.projection_end_age, 'projection_end_age')

    if not isinstance(inputs.expense_phases, list):
        raise ValueError(f"expense_phases must be a list (got {inputs.expense_phases!r})")
    for index, phase in enumerate(inputs.expense_phases):
        if not isinstance(phase, ExpensePhase):
            raise ValueError(f"expense_phases[{index}] must be an object (got {phase!r})")
        _check_text(phase.label, f"expense_phases[{index}].label")
        _check_integer(phase.start_year, f"expense_phases[{index}].start_year")
        _check_number(phase.annual_post_tax, f"expense_phases[{index}].annual_post_tax")
        if phase.annual_post_tax < 0:
            raise ValueError(f"Expense phase '{phase.label}' has a negative annual amount")
