# This file is part of cfsim.
# Licensed under the MIT license, see LICENSE.md for details.
# SPDX-License-Identifier: MIT

import json
from pathlib import Path

import click
import pandas as pd

from cfsim.config import load_config_data
from cfsim.data import MemoryDataset, is_used
from cfsim.engine import SimilarityConfig, SimilarityEngine
from cfsim.logging import get_logger

_log = get_logger(__name__)


@click.command("similarity")
@click.option("-m", "--measure", metavar="NAME", help="the similarity measure to use")
@click.option("--items", is_flag=True, help="compare items instead of users")
@click.option("--min-rating", type=float, help="the minimum rating on the scale")
@click.option("--max-rating", type=float, help="the maximum rating on the scale")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=Path,
    metavar="FILE",
    help="read engine configuration from a JSON or TOML file",
)
@click.option(
    "-o",
    "--option",
    "options",
    multiple=True,
    metavar="KEY=VALUE",
    help="set an engine configuration option",
)
@click.option("--param", type=int, multiple=True, help="extra integer measure parameters")
@click.option("--json", "as_json", is_flag=True, help="print the result as JSON")
@click.argument("ratings", type=Path)
@click.argument("id1", type=int)
@click.argument("id2", type=int)
def similarity(
    measure: str | None,
    items: bool,
    min_rating: float | None,
    max_rating: float | None,
    config_file: Path | None,
    options: tuple[str, ...],
    param: tuple[int, ...],
    as_json: bool,
    ratings: Path,
    id1: int,
    id2: int,
):
    """
    Compute the similarity between two users (or items) in a rating file.

    RATINGS is a CSV file with user, item, and rating columns.
    """
    log = _log.bind(path=str(ratings))

    cfg_data: dict[str, object] = {}
    if config_file is not None:
        loaded = load_config_data(config_file)
        if not isinstance(loaded, dict):
            raise click.UsageError(f"{config_file} does not contain a configuration table")
        cfg_data.update(loaded)
    for opt in options:
        key, sep, value = opt.partition("=")
        if not sep:
            raise click.BadParameter(f"expected KEY=VALUE, got {opt}", param_hint="--option")
        cfg_data[key.strip()] = _parse_option(value.strip())
    if measure is not None:
        cfg_data["measure"] = measure
    if items:
        cfg_data["orientation"] = "item"

    config = SimilarityConfig.model_validate(cfg_data)

    log.info("loading ratings")
    df = pd.read_csv(ratings)
    data = MemoryDataset.from_ratings_df(df, min_rating=min_rating, max_rating=max_rating)

    entity = config.orientation
    v1 = data.entity_rating(entity, id1)
    v2 = data.entity_rating(entity, id2)
    if v1 is None or v2 is None:
        missing = id1 if v1 is None else id2
        raise click.ClickException(f"{entity} {missing} not found in {ratings}")

    engine = SimilarityEngine(config)
    engine.setup(data)
    try:
        sim = engine.similarity(v1, v2, None, None, *param)
    finally:
        engine.unsetup()

    value = sim if is_used(sim) else None
    if as_json:
        click.echo(json.dumps({"measure": config.measure, entity: [id1, id2], "similarity": value}))
    elif value is None:
        click.echo("undefined")
    else:
        click.echo(f"{value:.6f}")


def _parse_option(value: str) -> object:
    try:
        return json.loads(value)
    except json.JSONDecodeError:
        return value
