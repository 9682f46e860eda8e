"""Primary events → top-N rankings by event type.

Node dependency graph:
    storm_events_primary, top_n → [rank_fatalities]   → fatalities_ranking
    storm_events_primary, top_n → [rank_injuries]     → injuries_ranking
    storm_events_primary, top_n → [rank_total_damage] → total_damage_ranking

The three nodes are independent of each other.
"""

from kedro.pipeline import Pipeline, node, pipeline

from .nodes import rank_fatalities, rank_injuries, rank_total_damage


def create_pipeline(**kwargs) -> Pipeline:  # noqa: ARG001
    """Create the event_rankings pipeline."""
    return pipeline(
        [
            node(
                func=rank_fatalities,
                inputs=["storm_events_primary", "params:top_n"],
                outputs="fatalities_ranking",
                name="rank_fatalities",
            ),
            node(
                func=rank_injuries,
                inputs=["storm_events_primary", "params:top_n"],
                outputs="injuries_ranking",
                name="rank_injuries",
            ),
            node(
                func=rank_total_damage,
                inputs=["storm_events_primary", "params:top_n"],
                outputs="total_damage_ranking",
                name="rank_total_damage",
            ),
        ]
    )
