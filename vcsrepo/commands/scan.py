"""
Handles the 'scan' command for listing the package versions of a repository.

This command follows our design principles:
- Default output is JSONL (one package record per line)
- --verbose/-v for progress output
- --quiet/-q to suppress JSON output
- Thin CLI layer that connects the scan service to output
"""

import sys
import click

from ..config import load_config
from ..domain import RepositoryLocation
from ..domain.location import AUTO_TYPE
from ..render import render_packages_table, render_skipped_table, print_scan_summary
from ..services import ProgressObserver, ScanService
from ..cli_utils import standard_command, add_common_options


@click.command(name='scan')
@click.argument('url')
@click.option('--type', 'repo_type', default=AUTO_TYPE, show_default=True,
              help='Driver to use (github, git, hg, svn); "vcs" detects it from the URL')
@click.option('--debug', is_flag=True, help='Report every tag and branch as it is processed')
@click.option('--skipped', is_flag=True, help='Also output the tags and branches that were skipped')
@click.option('--table/--no-table', default=None, help='Display as formatted table (auto-detected by default)')
@add_common_options('verbose', 'quiet', 'format')
@standard_command
def scan_handler(url, repo_type, debug, skipped, table, progress, quiet, **kwargs):
    """Scan a repository's tags and branches for package versions.

    URL: Repository URL or local path

    \b
    Every tag and branch with a valid name and a composer.json becomes a
    package record. The rest are skipped; use --skipped to list them.

    Examples:

    \b
        vcsrepo scan https://github.com/acme/pkg
        vcsrepo scan ~/src/pkg --type git --debug
        vcsrepo scan svn://svn.example.org/pkg --skipped
        vcsrepo scan https://github.com/acme/pkg --table
    """
    if table is None:
        table = sys.stdout.isatty()

    config = load_config()
    debug = debug or bool(config.get('general', {}).get('debug'))

    location = RepositoryLocation(url, repo_type or AUTO_TYPE)
    service = ScanService(config=config)
    observer = ProgressObserver(progress, debug=debug)

    progress(f"Scanning {location.url}...")
    result = service.scan(location, observer=observer)
    progress.success(
        f"Imported {result.imported_count} package versions, skipped {result.skipped_count}"
    )

    skipped_items = [o.to_dict() for o in result.outcomes if not o.is_imported]

    if table:
        # Table display is not suppressed by quiet
        render_packages_table([record.to_dict() for record in result], title=result.url)
        if skipped:
            render_skipped_table(skipped_items)
        print_scan_summary(result.to_dict())
        return None

    items = [record.to_dict() for record in result]
    if skipped:
        items.extend(skipped_items)
    return items
