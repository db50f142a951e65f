"""Data model for retirement projections.

This module contains the assumption classes a projection is run from
(``PersonInputs``, ``ExpensePhase``, ``Inputs``) and the result classes
it produces (``ProjectionRow``, ``ProjectionResult``). Assumptions are
persisted as JSON using the camelCase keys listed in each class's
``_JSON_KEYS`` mapping, so ``from_dict(to_dict(x)) == x``.
"""

import uuid
from dataclasses import dataclass, field, fields
from typing import Dict, List, Optional


SINGLE = 'single'
MARRIED = 'married'
FILING_STATUSES = (SINGLE, MARRIED)

ACCUMULATION_LABEL = 'Accumulation'


def new_phase_id() -> str:
    """Generate an opaque identifier for a new expense phase."""
    return uuid.uuid4().hex


def _to_json(obj, keys: Dict[str, str]) -> dict:
    return {json_key: getattr(obj, attr) for attr, json_key in keys.items()}


def _from_json(data: dict, keys: Dict[str, str]) -> dict:
    """Build constructor kwargs from a JSON dict, skipping absent keys."""
    kwargs = {}
    for attr, json_key in keys.items():
        if json_key in data:
            kwargs[attr] = data[json_key]
    return kwargs


@dataclass
class PersonInputs:
    """Assumptions for one household member."""
    name: str = 'Person'
    current_age: int = 0
    retirement_year: int = 0
    annual_401k: float = 0.0  # Tax-deferred contribution while working
    annual_taxable_savings: float = 0.0  # Taxable contribution while working
    pension_amount: float = 0.0
    pension_start_year: int = 0
    ss_amount: float = 0.0
    ss_start_age: int = 67

    _JSON_KEYS = {
        'name': 'name',
        'current_age': 'currentAge',
        'retirement_year': 'retirementYear',
        'annual_401k': 'annual401k',
        'annual_taxable_savings': 'annualTaxableSavings',
        'pension_amount': 'pensionAmount',
        'pension_start_year': 'pensionStartYear',
        'ss_amount': 'ssAmount',
        'ss_start_age': 'ssStartAge',
    }

    def birth_year(self, current_year: int) -> int:
        return current_year - self.current_age

    def to_dict(self) -> dict:
        return _to_json(self, self._JSON_KEYS)

    @classmethod
    def from_dict(cls, data: dict) -> 'PersonInputs':
        return cls(**_from_json(data or {}, cls._JSON_KEYS))


@dataclass
class ExpensePhase:
    """A named annual post-tax spending level starting in a given year.

    The phase stays in effect until a phase with a later start year begins.
    ``id`` is an opaque key for list editing and has no effect on projections.
    """
    label: str = 'New phase'
    annual_post_tax: float = 0.0
    start_year: int = 0
    id: str = field(default_factory=new_phase_id)

    _JSON_KEYS = {
        'id': 'id',
        'label': 'label',
        'annual_post_tax': 'annualPostTax',
        'start_year': 'startYear',
    }

    def to_dict(self) -> dict:
        return _to_json(self, self._JSON_KEYS)

    @classmethod
    def from_dict(cls, data: dict) -> 'ExpensePhase':
        kwargs = _from_json(data or {}, cls._JSON_KEYS)
        if 'id' in kwargs:
            kwargs['id'] = str(kwargs['id'])
        return cls(**kwargs)


@dataclass
class Inputs:
    """The complete set of household assumptions for one projection run.

    Rates are stored as decimals (0.06 means 6%). When ``filing_status`` is
    ``'single'`` the ``person2`` assumptions are kept but ignored.
    """
    filing_status: str = MARRIED
    person1: PersonInputs = field(default_factory=lambda: PersonInputs(name='Person 1'))
    person2: PersonInputs = field(default_factory=lambda: PersonInputs(name='Person 2'))

    # Starting balances
    tax_deferred_balance: float = 0.0
    taxable_balance: float = 0.0

    # Rates
    pre_ret_nominal_growth: float = 0.0
    post_ret_nominal_growth: float = 0.0
    inflation_rate: float = 0.0
    effective_tax_rate: float = 0.0
    taxable_portion_of_withdrawals: float = 0.0

    # Only used when a caller asks for an end-age bounded horizon
    projection_end_age: int = 95

    expense_phases: List[ExpensePhase] = field(default_factory=list)

    _JSON_KEYS = {
        'filing_status': 'filingStatus',
        'tax_deferred_balance': 'taxDeferredBalance',
        'taxable_balance': 'taxableBalance',
        'pre_ret_nominal_growth': 'preRetNominalGrowth',
        'post_ret_nominal_growth': 'postRetNominalGrowth',
        'inflation_rate': 'inflationRate',
        'effective_tax_rate': 'effectiveTaxRate',
        'taxable_portion_of_withdrawals': 'taxablePortionOfWithdrawals',
        'projection_end_age': 'projectionEndAge',
    }

    @property
    def is_single(self) -> bool:
        return self.filing_status == SINGLE

    def applicable_persons(self) -> List[PersonInputs]:
        """Persons who take part in the projection under the filing status."""
        if self.is_single:
            return [self.person1]
        return [self.person1, self.person2]

    def to_dict(self) -> dict:
        data = _to_json(self, self._JSON_KEYS)
        data['person1'] = self.person1.to_dict()
        data['person2'] = self.person2.to_dict()
        data['expensePhases'] = [p.to_dict() for p in self.expense_phases]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Inputs':
        data = data or {}
        kwargs = _from_json(data, cls._JSON_KEYS)
        # Values of the wrong shape are kept as-is for validate_inputs to reject
        for attr in ('person1', 'person2'):
            person = data.get(attr)
            if isinstance(person, dict):
                kwargs[attr] = PersonInputs.from_dict(person)
            elif person is not None:
                kwargs[attr] = person
        phases = data.get('expensePhases') or []
        if isinstance(phases, list):
            phases = [ExpensePhase.from_dict(p) if isinstance(p, dict) else p for p in phases]
        kwargs['expense_phases'] = phases
        return cls(**kwargs)


@dataclass
class ProjectionRow:
    """Snapshot of a single simulated calendar year."""
    year: int
    person1_age: int = 0
    person2_age: int = 0  # Always 0 for single filers
    phase: str = ''

    # Spending
    gross_expense: float = 0.0

    # Income
    person1_pension: float = 0.0
    person2_pension: float = 0.0
    person1_ss: float = 0.0
    person2_ss: float = 0.0
    total_income: float = 0.0

    # Money movement and end-of-year balances
    withdrawal: float = 0.0
    tax_deferred: float = 0.0
    taxable: float = 0.0
    total_portfolio: float = 0.0
    depleted: bool = False

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class ProjectionResult:
    """Complete output of one projection run.

    Rows are ordered by year, earliest first. ``depletion_year`` is the first
    year savings could not cover the need, or None if money never ran out.
    """
    rows: List[ProjectionRow] = field(default_factory=list)
    depletion_year: Optional[int] = None
    final_balance: float = 0.0

    # How the run was produced
    mode: str = 'real'
    start_year: int = 0
    last_year: int = 0

    def get_year(self, year: int) -> Optional[ProjectionRow]:
        """Get the row for a specific year."""
        for row in self.rows:
            if row.year == year:
                return row
        return None

    def years(self) -> List[int]:
        return [row.year for row in self.rows]
