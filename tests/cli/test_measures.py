# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

from click.testing import CliRunner

from cfsim.cli import cfsim
from cfsim.measures import measure_names


def test_list_plain():
    runner = CliRunner()
    result = runner.invoke(cfsim, ["--skip-log-setup", "measures", "--plain"])
    assert result.exit_code == 0
    assert result.output.split() == measure_names()


def test_list_table():
    runner = CliRunner()
    result = runner.invoke(cfsim, ["--skip-log-setup", "measures"])
    assert result.exit_code == 0
    assert "cjacmd" in result.output


def test_version():
    runner = CliRunner()
    result = runner.invoke(cfsim, ["--skip-log-setup", "version"])
    assert result.exit_code == 0
    assert "cfsim version" in result.output
