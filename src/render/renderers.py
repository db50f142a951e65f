"""Renderer classes for displaying projection results.

This module contains renderer classes that handle the presentation logic
for projection output. Each renderer takes a ProjectionResult and extracts
the fields it needs.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from calc.projection_calculator import REAL
from calc.summary import summarize
from model.ProjectionData import Inputs, ProjectionResult
from model.field_metadata import get_short_name, wrap_header


def format_multiline_headers(columns: List[tuple], year_width: int = 6) -> tuple[List[str], str]:
    """Format column headers with multi-line wrapping support.

    Args:
        columns: List of (header_text, width) tuples for each column
        year_width: Width of the Year column (default 6)

    Returns:
        Tuple of (list of header lines, separator line)
    """
    wrapped_headers = []
    for header, width in columns:
        lines = wrap_header(header, width)
        wrapped_headers.append((lines, width))

    max_lines = max(len(lines) for lines, _ in wrapped_headers) if wrapped_headers else 1

    # Pad all headers to have the same number of lines (pad at top)
    for lines, _ in wrapped_headers:
        while len(lines) < max_lines:
            lines.insert(0, "")

    header_lines = []
    for line_idx in range(max_lines):
        if line_idx == max_lines - 1:
            header_line = f"  {'Year':<{year_width}}"
        else:
            header_line = f"  {'':<{year_width}}"

        for lines, width in wrapped_headers:
            header_line += f" {lines[line_idx]:>{width}}"
        header_lines.append(header_line)

    sep_line = f"  {'-' * year_width}"
    for _, width in wrapped_headers:
        sep_line += f" {'-' * width}"

    return header_lines, sep_line


def parse_year_range(year_range: str, result: ProjectionResult) -> tuple:
    """Parse a year range string into start and end years.

    Args:
        year_range: String in format 'startYear-endYear', 'startYear-', '-endYear' or 'year'
        result: ProjectionResult to get default years from

    Returns:
        Tuple of (start_year, end_year)
    """
    if '-' not in year_range:
        year = int(year_range)
        return (year, year)

    parts = year_range.split('-')
    start_year = int(parts[0]) if parts[0] else result.start_year
    end_year = int(parts[1]) if parts[1] else result.last_year
    return (start_year, end_year)


def _in_range(year: int, start_year: Optional[int], end_year: Optional[int]) -> bool:
    if start_year is not None and year < start_year:
        return False
    if end_year is not None and year > end_year:
        return False
    return True


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    @abstractmethod
    def render(self, result: ProjectionResult) -> None:
        """Render the data to output.

        Args:
            result: The ProjectionResult containing all yearly rows
        """
        pass


class ProjectionRenderer(BaseRenderer):
    """Renderer for the year-by-year projection table."""

    PHASE_WIDTH = 26
    MONEY_WIDTH = 15

    def __init__(self, inputs: Optional[Inputs] = None, start_year: int = None, end_year: int = None):
        """Initialize with the assumptions and an optional year range.

        Args:
            inputs: Assumptions the result came from (used for names and filing status)
            start_year: First year to display (defaults to the first simulated year)
            end_year: Last year to display (defaults to the last simulated year)
        """
        self.inputs = inputs
        self.start_year = start_year
        self.end_year = end_year

    def render(self, result: ProjectionResult) -> None:
        """Render the projection table.

        Args:
            result: ProjectionResult from run_projection
        """
        show_person2 = self.inputs is None or not self.inputs.is_single
        person1_name = self.inputs.person1.name if self.inputs else 'P1'
        person2_name = self.inputs.person2.name if self.inputs else 'P2'

        money_fields = ['gross_expense', 'total_income', 'withdrawal',
                        'tax_deferred', 'taxable', 'total_portfolio']
        w = self.MONEY_WIDTH

        header = f"  {'Year':<6} {person1_name[:10]:>10}"
        if show_person2:
            header += f" {person2_name[:10]:>10}"
        header += f" {'Phase':<{self.PHASE_WIDTH}}"
        for field in money_fields:
            header += f" {get_short_name(field):>{w}}"
        total_width = len(header) + 2

        dollars = "TODAY'S DOLLARS" if result.mode == REAL else 'NOMINAL DOLLARS'
        print()
        print("=" * total_width)
        print(f"{'YEAR-BY-YEAR PROJECTION (' + dollars + ')':^{total_width}}")
        print("=" * total_width)
        print()
        print(header)

        sep = f"  {'-' * 6} {'-' * 10}"
        if show_person2:
            sep += f" {'-' * 10}"
        sep += f" {'-' * self.PHASE_WIDTH}"
        for _ in money_fields:
            sep += f" {'-' * w}"
        print(sep)

        for row in result.rows:
            if not _in_range(row.year, self.start_year, self.end_year):
                continue
            line = f"  {row.year:<6} {row.person1_age:>10}"
            if show_person2:
                line += f" {row.person2_age:>10}"
            line += f" {row.phase[:self.PHASE_WIDTH]:<{self.PHASE_WIDTH}}"
            for field in money_fields:
                line += f" ${getattr(row, field):>{w - 1},.0f}"
            if row.depleted:
                line += " *"
            print(line)

        print()
        if result.depletion_year is not None:
            print(f"  * Savings run out in {result.depletion_year}")
        else:
            print(f"  {'Final Balance:':<40} ${result.final_balance:>18,.2f}")
        print("=" * total_width)
        print()


class SummaryRenderer(BaseRenderer):
    """Renderer for the headline projection figures."""

    def __init__(self, inputs: Inputs, start_year: int = None, end_year: int = None):
        """Initialize with the assumptions the result was produced from.

        The year range is accepted for a uniform registry signature and ignored.
        """
        self.inputs = inputs

    def render(self, result: ProjectionResult) -> None:
        summary = summarize(result, self.inputs)
        retired_label = 'retirement year' if self.inputs.is_single else 'both-retired year'

        print()
        print("=" * 60)
        print(f"{'PROJECTION SUMMARY':^60}")
        print("=" * 60)
        print(f"  {'Dollars:':<40} {result.mode:>18}")
        print(f"  {'Years Simulated:':<40} {summary.years_simulated:>18}")
        print()
        print(f"  {'Retirement Nest Egg (' + retired_label + ' ' + str(summary.both_retired_year) + '):':<40}"
              f" ${summary.retirement_nest_egg:>17,.2f}")
        if summary.peak_year is not None:
            print(f"  {'Peak Portfolio (' + str(summary.peak_year) + '):':<40} ${summary.peak_portfolio:>17,.2f}")
        print(f"  {'Real Return (pre / post retirement):':<40}"
              f" {summary.real_pre_ret_growth:>8.2%} / {summary.real_post_ret_growth:.2%}")
        print("-" * 60)
        if summary.is_depleted:
            print(f"  {'Money Runs Out:':<40} {summary.depletion_year:>18}")
            print(f"  {'Portfolio depleted at age:':<40} {summary.depletion_age:>18}")
        else:
            print(f"  {'Final Balance:':<40} ${summary.final_balance:>17,.2f}")
        print("=" * 60)
        print()


class CustomRenderer(BaseRenderer):
    """A generalized renderer that displays a table of specified fields.

    This renderer can be dynamically configured with a title and list of
    ProjectionRow fields, making it easy to create custom views of a projection.
    """

    # Maximum width for a column header before wrapping
    MAX_HEADER_WIDTH = 14

    def __init__(self, title: str, fields: List[str], start_year: int = None, end_year: int = None, show_totals: bool = True):
        """Initialize with a title and list of fields to display.

        Args:
            title: The title to display at the top of the table
            fields: List of field names from ProjectionRow to display as columns
            start_year: First year to display (defaults to the first simulated year)
            end_year: Last year to display (defaults to the last simulated year)
            show_totals: Whether to show a totals row at the bottom (default True)
        """
        self.title = title
        self.fields = fields
        self.start_year = start_year
        self.end_year = end_year
        self.show_totals = show_totals

    def _get_column_width(self, field: str) -> int:
        short_name = get_short_name(field)
        if len(short_name) > self.MAX_HEADER_WIDTH:
            wrapped = wrap_header(short_name, self.MAX_HEADER_WIDTH)
            return max(max(len(line) for line in wrapped), 12)
        return max(len(short_name) + 2, 12)

    @staticmethod
    def _is_summable(field: str, value: Any) -> bool:
        # Ages and balances are point-in-time values, not flows
        if field in ('year', 'person1_age', 'person2_age', 'tax_deferred', 'taxable', 'total_portfolio'):
            return False
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    def _format_value(self, value: Any, field: str, width: int) -> str:
        """Format a value for display based on its type."""
        if value is None:
            return f"{'N/A':>{width}}"
        elif isinstance(value, bool):
            return f"{'Yes' if value else 'No':>{width}}"
        elif isinstance(value, float):
            return f"${value:>{width-2},.0f}"
        elif isinstance(value, int):
            return f"{value:>{width}}"
        else:
            return f"{str(value)[:width]:>{width}}"

    def render(self, result: ProjectionResult) -> None:
        """Render a table with the specified fields.

        Args:
            result: ProjectionResult containing all yearly rows
        """
        col_widths = {field: self._get_column_width(field) for field in self.fields}

        year_width = 6
        total_width = year_width + 2 + sum(col_widths.values()) + len(self.fields) * 2
        total_width = max(total_width, len(self.title) + 10)

        print()
        print("=" * total_width)
        print(f"{self.title.upper():^{total_width}}")
        print("=" * total_width)
        print()

        header_lines, sep = format_multiline_headers(
            [(get_short_name(field), col_widths[field]) for field in self.fields],
            year_width=year_width,
        )
        for line in header_lines:
            print(line)
        print(sep)

        totals = {field: 0.0 for field in self.fields}
        row_count = 0

        for row in result.rows:
            if not _in_range(row.year, self.start_year, self.end_year):
                continue
            line = f"  {row.year:<{year_width}}"
            for field in self.fields:
                value = getattr(row, field, None)
                line += f" {self._format_value(value, field, col_widths[field])}"
                if self._is_summable(field, value):
                    totals[field] += value
            print(line)
            row_count += 1

        if self.show_totals and row_count > 0:
            print(sep)
            total_row = f"  {'TOTAL':<{year_width}}"
            for field in self.fields:
                width = col_widths[field]
                sample = getattr(result.rows[0], field, None)
                if self._is_summable(field, sample):
                    total_row += f" ${totals[field]:>{width-2},.0f}"
                else:
                    total_row += f" {'':>{width}}"
            print(total_row)

        print()
        print("=" * total_width)
        print()


def create_custom_renderer(title: str, fields: List[str], start_year: int = None, end_year: int = None, show_totals: bool = True) -> CustomRenderer:
    """Factory function to create a CustomRenderer."""
    return CustomRenderer(title, fields, start_year, end_year, show_totals)


def create_custom_renderer_from_config(name: str, config: dict, start_year: int = None, end_year: int = None) -> CustomRenderer:
    """Create a CustomRenderer from a configuration dictionary.

    Args:
        name: The name of the renderer (used as fallback title)
        config: Configuration dict with 'title', 'fields', and optionally 'show_totals'
        start_year: First year to display
        end_year: Last year to display

    Returns:
        A configured CustomRenderer instance
    """
    title = config.get('title', name)
    fields = config.get('fields', [])
    show_totals = config.get('show_totals', True)

    return CustomRenderer(title, fields, start_year, end_year, show_totals)


def get_custom_renderer_factory(name: str, config: dict):
    """Create a factory function for a custom renderer configuration.

    Factories share the registry signature ``(inputs, start_year, end_year)``;
    custom tables do not need the assumptions.
    """
    def factory(inputs: Optional[Inputs] = None, start_year: int = None, end_year: int = None) -> CustomRenderer:
        return create_custom_renderer_from_config(name, config, start_year, end_year)
    return factory


# Built-in table views over ProjectionRow fields
CUSTOM_CONFIGS: Dict[str, dict] = {
    'Income': {
        'title': 'Retirement Income',
        'fields': ['person1_pension', 'person2_pension', 'person1_ss', 'person2_ss',
                   'total_income', 'gross_expense', 'withdrawal'],
    },
    'Balances': {
        'title': 'Account Balances',
        'fields': ['withdrawal', 'tax_deferred', 'taxable', 'total_portfolio'],
        'show_totals': False,
    },
}


# Registry mapping mode names to renderer factories taking (inputs, start_year, end_year)
RENDERER_REGISTRY = {
    'Projection': ProjectionRenderer,
    'Summary': SummaryRenderer,
}

for _name, _config in CUSTOM_CONFIGS.items():
    RENDERER_REGISTRY[_name] = get_custom_renderer_factory(_name, _config)
