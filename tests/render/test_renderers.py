"""Tests for projection renderers."""

import pytest
import sys
import os
from dataclasses import replace

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from calc.projection_calculator import NOMINAL, run_projection
from model.ProjectionData import SINGLE, ExpensePhase, ProjectionResult
from model.defaults import default_inputs
from render.renderers import (
    CUSTOM_CONFIGS,
    RENDERER_REGISTRY,
    CustomRenderer,
    ProjectionRenderer,
    SummaryRenderer,
    create_custom_renderer,
    format_multiline_headers,
    get_custom_renderer_factory,
    parse_year_range,
)


START = 2025


@pytest.fixture
def inputs():
    return default_inputs(START)


@pytest.fixture
def result(inputs):
    return run_projection(inputs, start_year=START, last_year=START + 20)


@pytest.fixture
def depleted_inputs(inputs):
    return replace(
        inputs,
        tax_deferred_balance=10000,
        taxable_balance=0,
        expense_phases=[ExpensePhase(id='1', label='Lavish', annual_post_tax=400000, start_year=START + 10)],
    )


def data_years(output: str) -> list:
    """Years of the table rows in rendered output."""
    years = []
    for line in output.splitlines():
        token = line.split()[0] if line.split() else ''
        if len(token) == 4 and token.isdigit():
            years.append(int(token))
    return years


class TestParseYearRange:
    """Tests for parse_year_range."""

    def test_full_range(self, result):
        assert parse_year_range('2030-2035', result) == (2030, 2035)

    def test_open_end(self, result):
        assert parse_year_range('2030-', result) == (2030, START + 20)

    def test_open_start(self, result):
        assert parse_year_range('-2035', result) == (START, 2035)

    def test_single_year(self, result):
        assert parse_year_range('2031', result) == (2031, 2031)

    def test_invalid(self, result):
        with pytest.raises(ValueError):
            parse_year_range('soon', result)


class TestProjectionRenderer:
    """Tests for the year-by-year table."""

    def test_renders_all_years(self, inputs, result, capsys):
        ProjectionRenderer(inputs).render(result)
        out = capsys.readouterr().out
        assert "YEAR-BY-YEAR PROJECTION (TODAY'S DOLLARS)" in out
        assert data_years(out) == result.years()
        assert 'Person 1' in out
        assert 'Person 2' in out
        assert 'Accumulation' in out
        assert 'Final Balance:' in out

    def test_nominal_title(self, inputs, capsys):
        nominal = run_projection(inputs, mode=NOMINAL, start_year=START, last_year=START + 1)
        ProjectionRenderer(inputs).render(nominal)
        assert 'NOMINAL DOLLARS' in capsys.readouterr().out

    def test_year_range(self, inputs, result, capsys):
        ProjectionRenderer(inputs, 2030, 2032).render(result)
        assert data_years(capsys.readouterr().out) == [2030, 2031, 2032]

    def test_single_hides_person2(self, inputs, capsys):
        single = replace(inputs, filing_status=SINGLE)
        ProjectionRenderer(single).render(run_projection(single, start_year=START, last_year=START))
        out = capsys.readouterr().out
        assert 'Person 1' in out
        assert 'Person 2' not in out

    def test_without_inputs(self, result, capsys):
        ProjectionRenderer().render(result)
        out = capsys.readouterr().out
        assert 'P1' in out
        assert 'P2' in out

    def test_depletion_marked(self, depleted_inputs, capsys):
        depleted = run_projection(depleted_inputs, start_year=START)
        ProjectionRenderer(depleted_inputs).render(depleted)
        out = capsys.readouterr().out
        depleted_lines = [line for line in out.splitlines() if line.endswith(' *')]
        assert len(depleted_lines) == 1
        assert depleted_lines[0].split()[0] == str(depleted.depletion_year)
        assert f'Savings run out in {depleted.depletion_year}' in out
        assert 'Final Balance:' not in out


class TestSummaryRenderer:
    """Tests for the headline summary."""

    def test_not_depleted(self, inputs, result, capsys):
        SummaryRenderer(inputs).render(result)
        out = capsys.readouterr().out
        assert 'PROJECTION SUMMARY' in out
        assert f'both-retired year {START + 12}' in out
        assert 'Peak Portfolio' in out
        assert '3.50% / 2.75%' in out
        assert 'Final Balance:' in out
        assert 'Money Runs Out' not in out

    def test_depleted(self, depleted_inputs, capsys):
        depleted = run_projection(depleted_inputs, start_year=START)
        SummaryRenderer(depleted_inputs).render(depleted)
        out = capsys.readouterr().out
        assert 'Money Runs Out:' in out
        assert str(depleted.depletion_year) in out
        assert 'Portfolio depleted at age:' in out
        assert 'Final Balance:' not in out

    def test_single_label(self, inputs, capsys):
        single = replace(inputs, filing_status=SINGLE)
        SummaryRenderer(single).render(run_projection(single, start_year=START, last_year=START + 12))
        assert 'retirement year' in capsys.readouterr().out


class TestCustomRenderer:
    """Tests for field-driven tables."""

    def test_renders_requested_fields(self, result, capsys):
        renderer = create_custom_renderer('My View', ['withdrawal', 'total_portfolio'])
        renderer.render(result)
        out = capsys.readouterr().out
        assert 'MY VIEW' in out
        assert 'Withdrawal' in out
        assert 'Total Portfolio' in out
        assert 'TOTAL' in out.split()

    def test_totals_sum_flows_only(self, result, capsys):
        CustomRenderer('Flows', ['withdrawal', 'total_portfolio'], 2035, 2040).render(result)
        lines = capsys.readouterr().out.splitlines()
        total_line = next(line for line in lines if line.strip().startswith('TOTAL'))
        expected = sum(r.withdrawal for r in result.rows if 2035 <= r.year <= 2040)
        assert f"${expected:,.0f}" in total_line.replace(' ', '')
        # Balances are not summed
        assert total_line.count('$') == 1

    def test_totals_can_be_hidden(self, result, capsys):
        CustomRenderer('No Totals', ['tax_deferred'], show_totals=False).render(result)
        assert 'TOTAL' not in capsys.readouterr().out.split()

    def test_is_summable(self):
        assert CustomRenderer._is_summable('withdrawal', 1.0)
        assert not CustomRenderer._is_summable('year', 2030)
        assert not CustomRenderer._is_summable('taxable', 1.0)
        assert not CustomRenderer._is_summable('depleted', True)
        assert not CustomRenderer._is_summable('phase', 'Accumulation')

    def test_factory_ignores_inputs(self, inputs, result, capsys):
        factory = get_custom_renderer_factory('Test', {'fields': ['withdrawal']})
        renderer = factory(inputs, 2030, 2031)
        assert renderer.title == 'Test'
        assert renderer.start_year == 2030
        renderer.render(result)
        assert data_years(capsys.readouterr().out) == [2030, 2031]


def test_multiline_headers_pad_at_top():
    header_lines, sep = format_multiline_headers([('Short', 8), ('Much Longer', 10)])
    assert len(header_lines) == 2
    assert 'Year' in header_lines[-1]
    assert 'Year' not in header_lines[0]
    assert sep.count('-') == 6 + 8 + 10


def test_registry_contains_all_modes():
    assert set(RENDERER_REGISTRY) == {'Projection', 'Summary'} | set(CUSTOM_CONFIGS)
    assert set(CUSTOM_CONFIGS) == {'Income', 'Balances'}


@pytest.mark.parametrize("mode", ['Projection', 'Summary', 'Income', 'Balances'])
def test_every_registered_renderer_renders(mode, inputs, result, capsys):
    RENDERER_REGISTRY[mode](inputs, None, None).render(result)
    assert capsys.readouterr().out.strip()
