#!/usr/bin/env python3
"""MCP Server for the Retirement Projector.

This server exposes retirement projections as MCP tools,
allowing AI assistants to answer questions about a household's savings outlook.
"""

import os
import sys
import json
import asyncio
from typing import Any

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import MultiProgramTools


# Create the MCP server
server = Server("retirement-projector")

# Global tools instance (initialized on startup)
tools: MultiProgramTools | None = None


def get_tools() -> MultiProgramTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Default program can be set via RETIREMENT_PROJECTOR_PROGRAM env var
        default_program = os.environ.get('RETIREMENT_PROJECTOR_PROGRAM')
        base_path = os.path.join(os.path.dirname(__file__), '..')
        tools = MultiProgramTools(base_path, default_program)
    return tools


# Common program parameter schema
PROGRAM_PARAM = {
    "type": "string",
    "description": "The program name (folder in input-parameters). If not specified, uses the default program. Use list_programs to see available programs."
}

# Common dollar mode parameter schema
MODE_PARAM = {
    "type": "string",
    "enum": ["real", "nominal"],
    "description": "Dollar basis: 'real' (today's dollars, default) or 'nominal' (future dollars)."
}

YEAR_PARAM = {
    "type": "integer",
    "description": "Calendar year"
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available projection tools."""
    return [
        Tool(
            name="list_programs",
            description="List all available retirement projection programs with filing status and starting balance.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="reload_programs",
            description="Reload all programs from disk. Use this after adding, modifying, or removing program spec.json files to refresh the cache without restarting the server.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="get_assumptions",
            description="Get the household assumptions of a program: people, retirement years, contributions, pensions, Social Security, rates, and expense phases.",
            inputSchema={
                "type": "object",
                "properties": {
                    "program": PROGRAM_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_projection_summary",
            description="Get the headline projection results: nest egg at retirement, peak portfolio, whether and when savings run out, and final balance. Use this first to answer 'will our money last?'.",
            inputSchema={
                "type": "object",
                "properties": {
                    "program": PROGRAM_PARAM,
                    "mode": MODE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_projection_year",
            description="Get the full projection for one year: ages, expense phase, gross expense, pension and Social Security income, withdrawal, and balances.",
            inputSchema={
                "type": "object",
                "properties": {
                    "year": YEAR_PARAM,
                    "program": PROGRAM_PARAM,
                    "mode": MODE_PARAM
                },
                "required": ["year"]
            }
        ),
        Tool(
            name="get_balances",
            description="Get tax-deferred and taxable account balances for a specific year, or for every simulated year if no year is given.",
            inputSchema={
                "type": "object",
                "properties": {
                    "year": {
                        "type": "integer",
                        "description": "Optional: specific year to get balances for. If omitted, returns all years."
                    },
                    "program": PROGRAM_PARAM,
                    "mode": MODE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="compare_modes",
            description="Compare today's-dollar (real) and future-dollar (nominal) figures for a year, defaulting to the last simulated year.",
            inputSchema={
                "type": "object",
                "properties": {
                    "year": {
                        "type": "integer",
                        "description": "Optional: year to compare"
                    },
                    "program": PROGRAM_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="compare_programs",
            description="Compare two programs and report which one keeps money longer and ends with more. Compares nest egg at retirement, peak portfolio, final balance, and depletion year.",
            inputSchema={
                "type": "object",
                "properties": {
                    "program1": {
                        "type": "string",
                        "description": "First program name to compare"
                    },
                    "program2": {
                        "type": "string",
                        "description": "Second program name to compare"
                    },
                    "mode": MODE_PARAM
                },
                "required": ["program1", "program2"]
            }
        )
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        rp_tools = get_tools()
        program = arguments.get("program")
        mode = arguments.get("mode")

        if name == "list_programs":
            result = rp_tools.list_programs()
        elif name == "reload_programs":
            result = rp_tools.reload_programs()
        elif name == "get_assumptions":
            result = rp_tools.get_assumptions(program)
        elif name == "get_projection_summary":
            result = rp_tools.get_projection_summary(program, mode)
        elif name == "get_projection_year":
            result = rp_tools.get_projection_year(arguments["year"], program, mode)
        elif name == "get_balances":
            result = rp_tools.get_balances(arguments.get("year"), program, mode)
        elif name == "compare_modes":
            result = rp_tools.compare_modes(arguments.get("year"), program)
        elif name == "compare_programs":
            result = rp_tools.compare_programs(
                arguments["program1"],
                arguments["program2"],
                mode
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]
    except Exception as e:
        return [TextContent(
            type="text",
            text=json.dumps({"error": str(e)}, indent=2)
        )]


async def main():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
