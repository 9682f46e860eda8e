"""Shared fixtures: tiny raw storm data frames in the source's string form."""

import pandas as pd
import pytest

from storm_impact.pipelines.data_processing.nodes import (
    KEEP_COLUMNS,
    clean_events,
    compute_damage,
    filter_by_year,
    select_columns,
)

RAW_COLUMNS = list(KEEP_COLUMNS)


def make_raw_frame(rows):
    """Build a raw frame from (date, type, inj, fat, prop, propexp, crop, cropexp) tuples.

    Every value is stringified, matching what ``load_storm_data`` returns.
    An extra unused column is added the way the real 37-column file has them.
    """
    df = pd.DataFrame([[str(v) for v in row] for row in rows], columns=RAW_COLUMNS)
    df["REMARKS"] = "narrative text"
    return df


def run_processing(raw: pd.DataFrame, min_year: int = 1995) -> pd.DataFrame:
    """Chain the data_processing nodes after the loader, as the pipeline does."""
    cleaned, _report = clean_events(select_columns(raw))
    return compute_damage(filter_by_year(cleaned, min_year))


@pytest.fixture()
def raw_events():
    """Five events across 1990–2011 with a mix of exponent codes."""
    return make_raw_frame(
        [
            ("4/18/1950 0:00:00", "TORNADO", 15, 0, 25, "K", 0, ""),
            ("01/01/2000 00:00:00", "TORNADO", 5, 2, 10, "K", 0, ""),
            ("02/01/1990 00:00:00", "FLOOD", 1, 0, 1, "M", 0, ""),
            ("6/15/2005 14:30:00", "FLOOD", 0, 3, 2.5, "B", 5, "m"),
            ("11/30/2011 0:00:00", "HAIL", 0, 0, 1.5, "h", 3, "?"),
        ]
    )


@pytest.fixture()
def make_raw():
    """Factory fixture: ``make_raw([...rows])`` → raw string frame."""
    return make_raw_frame


@pytest.fixture()
def process():
    """``process(raw, min_year=1995)`` → primary event table."""
    return run_processing
