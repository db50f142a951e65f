"""Tests for projection summaries."""

import os
import sys
from dataclasses import replace

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.projection_calculator import run_projection
from calc.summary import summarize
from model.ProjectionData import SINGLE, ExpensePhase, ProjectionResult, ProjectionRow
from model.defaults import default_inputs


START = 2025


@pytest.fixture
def defaults():
    return default_inputs(START)


def test_summary_of_defaults(defaults):
    result = run_projection(defaults, start_year=START)
    summary = summarize(result, defaults)

    assert summary.both_retired_year == START + 12
    assert summary.retirement_nest_egg == result.get_year(START + 12).total_portfolio
    assert summary.peak_portfolio == max(row.total_portfolio for row in result.rows)
    assert result.get_year(summary.peak_year).total_portfolio == summary.peak_portfolio
    assert summary.depletion_year is None
    assert summary.depletion_age is None
    assert not summary.is_depleted
    assert summary.final_balance == result.final_balance
    assert summary.years_simulated == len(result.rows)
    assert summary.real_pre_ret_growth == pytest.approx(0.035)
    assert summary.real_post_ret_growth == pytest.approx(0.0275)


def test_depletion_age_uses_older_person(defaults):
    inputs = replace(
        defaults,
        tax_deferred_balance=10000,
        taxable_balance=0,
        expense_phases=[ExpensePhase(id='1', label='Lavish', annual_post_tax=400000, start_year=START + 10)],
    )
    result = run_projection(inputs, start_year=START)
    summary = summarize(result, inputs)
    assert summary.is_depleted
    assert summary.depletion_year == result.depletion_year
    # Person 1 is 50 in the first year
    assert summary.depletion_age == 50 + (summary.depletion_year - START)


def test_depletion_age_single_uses_person1(defaults):
    person1 = replace(defaults.person1, current_age=40, retirement_year=START,
                      annual_401k=0, annual_taxable_savings=0, ss_amount=0)
    person2 = replace(defaults.person2, current_age=70)
    inputs = replace(
        defaults,
        filing_status=SINGLE,
        person1=person1,
        person2=person2,
        tax_deferred_balance=0,
        taxable_balance=0,
        expense_phases=[ExpensePhase(id='1', label='Retired', annual_post_tax=50000, start_year=START)],
    )
    result = run_projection(inputs, start_year=START)
    summary = summarize(result, inputs)
    assert summary.depletion_year == START
    assert summary.depletion_age == 40


def test_nest_egg_zero_when_retirement_year_not_simulated(defaults):
    result = run_projection(defaults, start_year=START, last_year=START + 2)
    assert summarize(result, defaults).retirement_nest_egg == 0.0


def test_peak_takes_first_of_equal_values(defaults):
    rows = [
        ProjectionRow(year=2030, total_portfolio=10.0),
        ProjectionRow(year=2031, total_portfolio=20.0),
        ProjectionRow(year=2032, total_portfolio=20.0),
    ]
    result = ProjectionResult(rows=rows, final_balance=20.0, start_year=2030, last_year=2032)
    summary = summarize(result, defaults)
    assert summary.peak_year == 2031
    assert summary.peak_portfolio == 20.0


def test_empty_result(defaults):
    result = ProjectionResult(rows=[], final_balance=5.0, start_year=START, last_year=START - 1)
    summary = summarize(result, defaults)
    assert summary.peak_year is None
    assert summary.peak_portfolio == 0.0
    assert summary.years_simulated == 0
