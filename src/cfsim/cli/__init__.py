# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

import os
import sys
from pathlib import Path

import click
import numpy as np

from cfsim import __version__
from cfsim.config import configure
from cfsim.logging import LoggingConfig, console, get_logger

from .measures import measures
from .similarity import similarity

__all__ = ["cfsim", "main", "version"]
_log = get_logger(__name__)


def main():
    """
    Run the cfsim CLI.  This just delegates to :func:`cfsim`, but pretty-prints errors.
    """
    np.set_printoptions(threshold=20)
    try:
        ec = cfsim.main(standalone_mode=False)
    except click.ClickException as e:
        _log.error("CLI error, terminating: %s", e)
        sys.exit(2)
    except Exception as e:
        _log.error("cfsim command failed", exc_info=e)
        sys.exit(3)

    if isinstance(ec, int):
        sys.exit(ec)


@click.group("cfsim")
@click.option("-v", "--verbose", "verbosity", count=True, help="Enable verbose logging output")
@click.option("--skip-log-setup", is_flag=True, hidden=True, envvar="CFSIM_SKIP_LOG_SETUP")
@click.option(
    "-C",
    "--config-dir",
    type=Path,
    metavar="DIR",
    help="Read cfsim.toml settings from DIR.",
)
def cfsim(verbosity: int, config_dir: Path | None, skip_log_setup: bool = False):
    """
    Compute collaborative-filtering similarities.
    """

    # this code is run before any other command logic, so we can do global setup
    if not skip_log_setup:
        lc = LoggingConfig()
        if verbosity:
            lc.set_verbose(True)
        lc.apply()

    if config_dir is None and (cd := os.environ.get("CFSIM_CONFIG_DIR")):
        config_dir = Path(cd)

    if config_dir is not None:
        configure(cfg_dir=config_dir)


@cfsim.command("version")
def version():
    """
    Print cfsim version info.
    """
    console.print(f"cfsim version [bold cyan]{__version__}[/bold cyan].")


cfsim.add_command(measures)
cfsim.add_command(similarity)
