"""
Handles the 'drivers' command for listing the driver registry.
"""

import sys
import click

from ..config import load_config
from ..render import render_table
from ..services import DriverSelector
from ..cli_utils import standard_command, add_common_options


@click.command(name='drivers')
@click.option('--table/--no-table', default=None, help='Display as formatted table (auto-detected by default)')
@add_common_options('verbose', 'quiet', 'format')
@standard_command
def drivers_handler(table, progress, **kwargs):
    """List available drivers in the order they are tried.

    \b
    The order comes from the drivers.order configuration setting.
    A scan picks the first driver whose name matches --type, then the
    first whose URL check accepts the location.
    """
    if table is None:
        table = sys.stdout.isatty()

    selector = DriverSelector(config=load_config())
    entries = [
        dict(entry.to_dict(), priority=priority)
        for priority, entry in enumerate(selector.registry, 1)
    ]

    if table:
        render_table(
            ["Priority", "Name", "Driver"],
            [[e['priority'], e['name'], e['driver']] for e in entries],
            title="Drivers"
        )
        return None

    return entries
