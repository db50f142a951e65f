"""Field metadata for ProjectionRow fields.

This module provides descriptions and short names for all ProjectionRow fields.
Short names are used as column headers in tables and in MCP tool output.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class FieldInfo:
    """Metadata for a single field."""
    short_name: str  # Column header (unique, concise)
    description: str  # Full description of the field


# Field metadata dictionary mapping field names to their info
FIELD_METADATA: Dict[str, FieldInfo] = {
    # Year Info
    "year": FieldInfo("Year", "Calendar year"),
    "person1_age": FieldInfo("P1 Age", "Age of person 1 during the year"),
    "person2_age": FieldInfo("P2 Age", "Age of person 2 during the year (0 for single filers)"),
    "phase": FieldInfo("Phase", "Active expense phase, or Accumulation before retirement"),

    # Spending
    "gross_expense": FieldInfo("Gross Expense", "Pre-tax amount needed to fund the phase's post-tax spending"),

    # Income
    "person1_pension": FieldInfo("P1 Pension", "Pension income of person 1"),
    "person2_pension": FieldInfo("P2 Pension", "Pension income of person 2"),
    "person1_ss": FieldInfo("P1 Social Security", "Social Security income of person 1"),
    "person2_ss": FieldInfo("P2 Social Security", "Social Security income of person 2"),
    "total_income": FieldInfo("Total Income", "Pensions plus Social Security for the household"),

    # Money movement
    "withdrawal": FieldInfo("Withdrawal", "Amount actually withdrawn from savings"),

    # Balances (end of year)
    "tax_deferred": FieldInfo("Tax-Deferred", "Tax-deferred (401k/IRA) balance at year end"),
    "taxable": FieldInfo("Taxable", "Taxable account balance at year end"),
    "total_portfolio": FieldInfo("Total Portfolio", "Combined balance at year end"),
    "depleted": FieldInfo("Depleted", "True in the year savings could not cover the need"),
}


def get_short_name(field_name: str) -> str:
    """Get the short name for a field, or the field name if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.short_name if info else field_name


def get_description(field_name: str) -> str:
    """Get the description for a field, or empty string if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.description if info else ""


def wrap_header(text: str, max_width: int) -> list[str]:
    """Wrap a header text into multiple lines to fit within max_width.
    
    Words are split on spaces and distributed across lines to minimize
    the total number of lines while staying within max_width.
    
    Args:
        text: The header text to wrap
        max_width: Maximum width per line
        
    Returns:
        List of strings, each representing a line
    """
    if len(text) <= max_width:
        return [text]
    
    words = text.split()
    lines = []
    current_line = ""
    
    for word in words:
        if not current_line:
            current_line = word
        elif len(current_line) + 1 + len(word) <= max_width:
            current_line += " " + word
        else:
            lines.append(current_line)
            current_line = word
    
    if current_line:
        lines.append(current_line)
    
    return lines
