"""Expense phase selection.

An expense phase applies from its start year until a phase with a later
start year takes over. Phase lists are not assumed to be sorted.
"""

from typing import Iterable, List, Optional

from model.ProjectionData import ExpensePhase


def get_active_phase(phases: Iterable[ExpensePhase], year: int) -> Optional[ExpensePhase]:
    """Find the phase in effect for a year.

    Scans every phase and keeps the one with the greatest start year that is
    not after ``year``. When two phases share that start year the later one
    in iteration order wins.

    Args:
        phases: Expense phases in any order
        year: Calendar year to look up

    Returns:
        The active ExpensePhase, or None if no phase has started yet
    """
    active = None
    for phase in phases:
        if phase.start_year > year:
            continue
        if active is None or phase.start_year >= active.start_year:
            active = phase
    return active


def sorted_phases(phases: Iterable[ExpensePhase]) -> List[ExpensePhase]:
    """Return phases ordered by start year (stable for equal years)."""
    return sorted(phases, key=lambda p: p.start_year)
