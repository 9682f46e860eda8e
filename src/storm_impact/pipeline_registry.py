"""Project pipelines."""

from __future__ import annotations

from kedro.pipeline import Pipeline

from storm_impact.pipelines import data_processing, event_rankings


def register_pipelines() -> dict[str, Pipeline]:
    """Register the project's pipelines.

    ``__default__`` runs processing then rankings; either half can be run
    alone with ``kedro run --pipeline <name>``.
    """
    processing = data_processing.create_pipeline()
    rankings = event_rankings.create_pipeline()
    return {
        "data_processing": processing,
        "event_rankings": rankings,
        "__default__": processing + rankings,
    }
