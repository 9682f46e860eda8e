"""Raw → Primary pipeline for the NOAA Storm Data extract.

This pipeline makes sure the raw CSV is on disk, reads it as strings,
types and decodes the columns the rankings need, drops the sparsely
recorded early years, and outputs a primary event table with damage
in dollars.
"""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import (
    clean_events,
    compute_damage,
    count_events_by_year,
    fetch_raw_data,
    filter_by_year,
    load_storm_data,
    select_columns,
)


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the data_processing pipeline.

    Node chain:
        fetch → load raw CSV → select columns → clean
        → filter by year → compute damage → primary CSV
    Side branch:
        clean → count events by year (cutoff diagnostic)
    """
    return pipeline(
        [
            node(
                func=fetch_raw_data,
                inputs="params:data_source",
                outputs="raw_data_path",
                name="fetch_raw_data",
            ),
            node(
                func=load_storm_data,
                inputs="raw_data_path",
                outputs="storm_data_raw",
                name="load_storm_data",
            ),
            node(
                func=select_columns,
                inputs="storm_data_raw",
                outputs="storm_events_selected",
                name="select_columns",
            ),
            node(
                func=clean_events,
                inputs="storm_events_selected",
                outputs=["storm_events_clean", "parse_report"],
                name="clean_events",
            ),
            node(
                func=count_events_by_year,
                inputs="storm_events_clean",
                outputs="events_by_year",
                name="count_events_by_year",
            ),
            node(
                func=filter_by_year,
                inputs=["storm_events_clean", "params:min_year"],
                outputs="storm_events_filtered",
                name="filter_by_year",
            ),
            node(
                func=compute_damage,
                inputs="storm_events_filtered",
                outputs="storm_events_primary",
                name="compute_damage",
            ),
        ]
    )
