"""
CLI formatting functions.

JSON and YAML render the command result as is. Tables are rendered with Rich
for the two result shapes the CLI produces: a CloudFormation template and an
image descriptor.
"""
import json
from typing import Any, Dict

import yaml
from rich.console import Console
from rich.table import Table

FORMATS = ("json", "yaml", "table")


def format_output(data: Any, format_type: str) -> str:
    """Format data according to the specified format type."""
    if format_type == "yaml":
        return yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
    if format_type == "table":
        return format_table_output(data)
    return json.dumps(data, indent=2, default=str)


def format_table_output(data: Any) -> str:
    """Format data as a table."""
    if isinstance(data, dict) and "Resources" in data:
        return format_resources_table(data["Resources"])
    if isinstance(data, dict):
        return format_mapping_table(data)
    # Fallback to JSON for unknown data structures
    return json.dumps(data, indent=2, default=str)


def format_resources_table(resources: Dict[str, Dict[str, Any]]) -> str:
    """One row per logical resource with its type and explicit dependencies."""
    if not resources:
        return "No resources found."

    table = Table(show_header=True, header_style="bold magenta", show_lines=True)
    table.add_column("Logical Name", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Depends On", style="yellow")

    for name, resource in resources.items():
        depends_on = resource.get("DependsOn", [])
        if isinstance(depends_on, str):
            depends_on = [depends_on]
        table.add_row(name, resource.get("Type", "N/A"), "\n".join(depends_on))

    return _render(table)


def format_mapping_table(data: Dict[str, Any]) -> str:
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    for key, value in data.items():
        table.add_row(str(key), "N/A" if value is None else str(value))
    return _render(table)


def _render(table: Table) -> str:
    # Capture Rich output as string
    console = Console(width=240, legacy_windows=False, force_terminal=False)
    with console.capture() as capture:
        console.print(table)
    return capture.get()
