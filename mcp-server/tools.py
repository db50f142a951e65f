"""Retirement Projector Tools for MCP Server.

This module provides the tool implementations that wrap the projection
engine and expose its results through MCP.
"""

import os
import sys
from typing import Dict, Optional

from loguru import logger

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from calc.expense_phases import sorted_phases
from calc.projection_calculator import MODES, NOMINAL, REAL, resolve_mode, run_projection
from calc.summary import summarize
from model.ProjectionData import ProjectionResult, ProjectionRow
from model.validation import validate_inputs
from spec_store import list_existing_programs, load_inputs


def _round_row(row: ProjectionRow) -> dict:
    """Row as a dict with money rounded to cents."""
    return {
        key: round(value, 2) if isinstance(value, float) else value
        for key, value in row.to_dict().items()
    }


class ProjectorTools:
    """Tools that wrap the projection engine for one program."""

    def __init__(self, base_path: str, program_name: str, start_year: Optional[int] = None):
        """Initialize with paths and run the projections.

        Args:
            base_path: Path to the directory containing input-parameters
            program_name: Name of the program folder in input-parameters
            start_year: First simulated year (defaults to the current year)
        """
        self.base_path = base_path
        self.program_name = program_name
        self.inputs = load_inputs(program_name, base_path)
        validate_inputs(self.inputs)
        self._calculate(start_year)

    def _calculate(self, start_year: Optional[int]):
        """Run the projection once per dollar mode."""
        self.results: Dict[str, ProjectionResult] = {}
        for mode in MODES:
            self.results[mode] = run_projection(self.inputs, mode=mode, start_year=start_year)
        self.start_year = self.results[REAL].start_year

    def _result(self, mode: Optional[str]) -> ProjectionResult:
        return self.results[resolve_mode(mode)]

    def get_assumptions(self) -> dict:
        """Get the program's assumptions and derived retirement dates."""
        persons = self.inputs.applicable_persons()
        return {
            "program_name": self.program_name,
            "first_year": self.start_year,
            "both_retired_year": max(p.retirement_year for p in persons),
            "first_retirement_year": min(p.retirement_year for p in persons),
            "expense_schedule": [
                {"label": p.label, "start_year": p.start_year, "annual_post_tax": p.annual_post_tax}
                for p in sorted_phases(self.inputs.expense_phases)
            ],
            "assumptions": self.inputs.to_dict()
        }

    def get_projection_summary(self, mode: Optional[str] = None) -> dict:
        """Get the headline projection figures."""
        result = self._result(mode)
        summary = summarize(result, self.inputs)
        return {
            "mode": result.mode,
            "years": {
                "first": result.rows[0].year if result.rows else None,
                "last": result.rows[-1].year if result.rows else None,
                "simulated": summary.years_simulated
            },
            "both_retired_year": summary.both_retired_year,
            "retirement_nest_egg": round(summary.retirement_nest_egg, 2),
            "peak_portfolio": {
                "year": summary.peak_year,
                "balance": round(summary.peak_portfolio, 2)
            },
            "depletion": {
                "depleted": summary.is_depleted,
                "year": summary.depletion_year,
                "age": summary.depletion_age
            },
            "final_balance": round(summary.final_balance, 2),
            "real_returns": {
                "pre_retirement": round(summary.real_pre_ret_growth, 6),
                "post_retirement": round(summary.real_post_ret_growth, 6)
            }
        }

    def get_projection_year(self, year: int, mode: Optional[str] = None) -> dict:
        """Get the full projection row for a specific year."""
        result = self._result(mode)
        row = result.get_year(year)
        if row is None:
            return {"error": f"Year {year} is not in the projection ({self._range_text(result)})"}
        data = _round_row(row)
        data["mode"] = result.mode
        return data

    def get_balances(self, year: Optional[int] = None, mode: Optional[str] = None) -> dict:
        """Get account balances for one year or every simulated year."""
        result = self._result(mode)
        if year is not None:
            row = result.get_year(year)
            if row is None:
                return {"error": f"Year {year} is not in the projection ({self._range_text(result)})"}
            return {
                "year": year,
                "mode": result.mode,
                "balances": {
                    "tax_deferred": round(row.tax_deferred, 2),
                    "taxable": round(row.taxable, 2),
                    "total_portfolio": round(row.total_portfolio, 2)
                },
                "withdrawal": round(row.withdrawal, 2)
            }

        return {
            "mode": result.mode,
            "final_balance": round(result.final_balance, 2),
            "depletion_year": result.depletion_year,
            "yearly_balances": [
                {
                    "year": row.year,
                    "tax_deferred": round(row.tax_deferred, 2),
                    "taxable": round(row.taxable, 2),
                    "total": round(row.total_portfolio, 2)
                }
                for row in result.rows
            ]
        }

    def compare_modes(self, year: Optional[int] = None) -> dict:
        """Compare today's-dollar and future-dollar figures.

        Args:
            year: Year to compare; defaults to the last year both runs simulated
        """
        real = self.results[REAL]
        nominal = self.results[NOMINAL]
        if year is None:
            common = set(real.years()) & set(nominal.years())
            if not common:
                return {"error": "No simulated years to compare"}
            year = max(common)

        real_row = real.get_year(year)
        nominal_row = nominal.get_year(year)
        if real_row is None or nominal_row is None:
            return {"error": f"Year {year} was not simulated in both modes"}

        def compare_metric(field: str) -> dict:
            real_value = getattr(real_row, field)
            nominal_value = getattr(nominal_row, field)
            return {
                "real": round(real_value, 2),
                "nominal": round(nominal_value, 2),
                "difference": round(nominal_value - real_value, 2)
            }

        return {
            "year": year,
            "gross_expense": compare_metric("gross_expense"),
            "total_income": compare_metric("total_income"),
            "withdrawal": compare_metric("withdrawal"),
            "total_portfolio": compare_metric("total_portfolio"),
            "depletion_year": {
                "real": real.depletion_year,
                "nominal": nominal.depletion_year
            }
        }

    @staticmethod
    def _range_text(result: ProjectionResult) -> str:
        if not result.rows:
            return "no years simulated"
        return f"{result.rows[0].year}-{result.rows[-1].year}"


class MultiProgramTools:
    """Manager for multiple projection programs.

    Discovers all available programs and caches their projections,
    allowing queries to specify which program to use.
    """

    def __init__(self, base_path: str, default_program: Optional[str] = None, start_year: Optional[int] = None):
        """Initialize and discover all available programs.

        Args:
            base_path: Path to the directory containing input-parameters
            default_program: Default program to use when none specified
            start_year: First simulated year for every program
        """
        self.base_path = base_path
        self.start_year = start_year
        self.programs: Dict[str, ProjectorTools] = {}
        self.default_program = default_program
        self._discover_programs()

    def _discover_programs(self):
        """Discover and load all available programs."""
        for name in list_existing_programs(self.base_path):
            try:
                self.programs[name] = ProjectorTools(self.base_path, name, self.start_year)
            except Exception as e:
                # Skip programs that fail to load or validate
                logger.warning(f"Failed to load program '{name}': {e}")

        if self.default_program is None and self.programs:
            self.default_program = list(self.programs.keys())[0]

    def _get_program(self, program: Optional[str] = None, require_explicit: bool = False) -> ProjectorTools:
        """Get the specified program or default.

        Args:
            program: Program name to use, or None for default
            require_explicit: If True, raise error when program not specified and multiple exist
        """
        if program is None and len(self.programs) > 1 and require_explicit:
            available = list(self.programs.keys())
            raise ValueError(
                f"Multiple programs available: {available}. Please specify which program to query."
            )

        program_name = program or self.default_program

        if program_name not in self.programs:
            available = list(self.programs.keys())
            raise ValueError(
                f"Program '{program_name}' not found. Available programs: {available}"
            )

        return self.programs[program_name]

    def list_programs(self) -> dict:
        """List all available programs."""
        programs_info = {}
        for name, tools in self.programs.items():
            inputs = tools.inputs
            programs_info[name] = {
                "filing_status": inputs.filing_status,
                "first_year": tools.start_year,
                "starting_balance": round(inputs.tax_deferred_balance + inputs.taxable_balance, 2),
                "expense_phases": len(inputs.expense_phases)
            }

        return {
            "available_programs": list(self.programs.keys()),
            "default_program": self.default_program,
            "programs_info": programs_info
        }

    def reload_programs(self) -> dict:
        """Reload all programs from disk, refreshing the cache."""
        old_programs = set(self.programs.keys())

        self.programs.clear()
        self.default_program = None
        self._discover_programs()

        new_programs = set(self.programs.keys())

        return {
            "status": "success",
            "message": f"Reloaded {len(self.programs)} programs",
            "programs_loaded": list(self.programs.keys()),
            "default_program": self.default_program,
            "changes": {
                "added": sorted(new_programs - old_programs),
                "removed": sorted(old_programs - new_programs),
                "reloaded": sorted(old_programs & new_programs)
            }
        }

    def get_assumptions(self, program: Optional[str] = None) -> dict:
        result = self._get_program(program, require_explicit=True).get_assumptions()
        result["program"] = program or self.default_program
        return result

    def get_projection_summary(self, program: Optional[str] = None, mode: Optional[str] = None) -> dict:
        result = self._get_program(program, require_explicit=True).get_projection_summary(mode)
        result["program"] = program or self.default_program
        return result

    def get_projection_year(self, year: int, program: Optional[str] = None, mode: Optional[str] = None) -> dict:
        result = self._get_program(program, require_explicit=True).get_projection_year(year, mode)
        result["program"] = program or self.default_program
        return result

    def get_balances(self, year: Optional[int] = None, program: Optional[str] = None, mode: Optional[str] = None) -> dict:
        result = self._get_program(program, require_explicit=True).get_balances(year, mode)
        result["program"] = program or self.default_program
        return result

    def compare_modes(self, year: Optional[int] = None, program: Optional[str] = None) -> dict:
        result = self._get_program(program, require_explicit=True).compare_modes(year)
        result["program"] = program or self.default_program
        return result

    def compare_programs(self, program1: str, program2: str, mode: Optional[str] = None) -> dict:
        """Compare two programs and report which one lasts longer and ends richer.

        A program that never runs out of money beats one that does; between two
        depleting programs the later depletion wins; otherwise the larger final
        balance wins.
        """
        if program1 not in self.programs:
            return {"error": f"Program '{program1}' not found. Available: {list(self.programs.keys())}"}
        if program2 not in self.programs:
            return {"error": f"Program '{program2}' not found. Available: {list(self.programs.keys())}"}

        summary1 = self.programs[program1].get_projection_summary(mode)
        summary2 = self.programs[program2].get_projection_summary(mode)

        def compare_metric(val1: float, val2: float) -> dict:
            diff = val2 - val1
            higher = program1 if val1 > val2 else (program2 if val2 > val1 else "tie")
            return {
                program1: val1,
                program2: val2,
                "difference": round(diff, 2),
                "higher": higher
            }

        depletion1 = summary1["depletion"]["year"]
        depletion2 = summary2["depletion"]["year"]
        if depletion1 is None and depletion2 is None:
            better = compare_metric(summary1["final_balance"], summary2["final_balance"])["higher"]
            reason = "Neither program runs out of money; compared final balances"
        elif depletion1 is None:
            better, reason = program1, f"{program2} runs out of money in {depletion2}"
        elif depletion2 is None:
            better, reason = program2, f"{program1} runs out of money in {depletion1}"
        else:
            better = program1 if depletion1 > depletion2 else (program2 if depletion2 > depletion1 else "tie")
            reason = f"Both programs run out of money ({program1}: {depletion1}, {program2}: {depletion2})"

        return {
            "programs": [program1, program2],
            "mode": summary1["mode"],
            "retirement_nest_egg": compare_metric(summary1["retirement_nest_egg"], summary2["retirement_nest_egg"]),
            "peak_portfolio": compare_metric(summary1["peak_portfolio"]["balance"], summary2["peak_portfolio"]["balance"]),
            "final_balance": compare_metric(summary1["final_balance"], summary2["final_balance"]),
            "depletion_year": {program1: depletion1, program2: depletion2},
            "better_program": better,
            "reason": reason
        }
