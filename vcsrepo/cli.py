#!/usr/bin/env python3

import click

from vcsrepo import __version__

from vcsrepo.commands.scan import scan_handler
from vcsrepo.commands.drivers import drivers_handler
from vcsrepo.commands.config import config_cmd


@click.group()
@click.version_option(version=__version__)
def cli():
    """vcsrepo - Package versions from version-control repositories.

    Reads composer.json from every tag and branch of a git, hg, svn or
    GitHub repository and lists the resulting package versions.
    """
    pass


cli.add_command(scan_handler, name='scan')
cli.add_command(drivers_handler, name='drivers')
cli.add_command(config_cmd)


def main():
    cli()

if __name__ == "__main__":
    main()
