# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

import click
from rich.console import Console
from rich.table import Table

from cfsim.measures import lookup_measure, measure_names


@click.command("measures")
@click.option("--plain", is_flag=True, help="print one name per line")
def measures(plain: bool):
    """
    List the supported similarity measures.
    """
    names = measure_names()
    if plain:
        for name in names:
            click.echo(name)
        return

    table = Table("Measure", "Cached", "Bins", "Columns", title="Similarity measures")
    for name in names:
        m = lookup_measure(name)
        assert m is not None
        table.add_row(
            name,
            "yes" if m.cacheable else "no",
            "yes" if m.needs_bins else "",
            "yes" if m.needs_columns else "",
        )

    Console().print(table)
