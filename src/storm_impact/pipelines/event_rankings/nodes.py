"""Top-N event type rankings for the primary storm event table.

One generic ranker (``rank_by``) and three thin Kedro nodes, one per
metric the report presents:

    fatalities   → most harmful to population health (deaths)
    injuries     → most harmful to population health (injuries)
    total_damage → greatest economic consequences (property + crop $)

Event types are grouped by their exact label. NOAA's EVTYPE vocabulary is
uncontrolled ("TSTM WIND" vs "THUNDERSTORM WIND", "Flood" vs "FLOOD");
those near-duplicates stay separate rows.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import pandas as pd

logger = logging.getLogger(__name__)

MetricSelector = Callable[[pd.DataFrame], pd.Series]

# ── Metrics we rank by ───────────────────────────────────────────────
# total_damage is derived from its parts rather than read from a column,
# so the ranking cannot drift from property + crop.
METRICS: dict[str, MetricSelector] = {
    "fatalities": lambda events: events["fatalities"],
    "injuries": lambda events: events["injuries"],
    "total_damage": lambda events: events["property_damage"] + events["crop_damage"],
}


def rank_by(
    events: pd.DataFrame,
    metric: str | MetricSelector,
    top_n: int,
) -> pd.DataFrame:
    """Sum a metric per event type and keep the ``top_n`` largest.

    Ties keep the order in which each event type first appears in
    ``events`` (stable sort over first-appearance groups). Fewer than
    ``top_n`` event types returns all of them; nothing is padded.

    Args:
        events: Primary event table.
        metric: A key of METRICS, or a callable returning one value per row.
        top_n: Maximum number of rows to return.

    Returns:
        DataFrame with ``event_type`` and ``total`` columns, descending.

    Raises:
        ValueError: Unknown metric name or negative ``top_n``.
    """
    if top_n < 0:
        raise ValueError(f"top_n must be >= 0, got {top_n}")

    if callable(metric):
        selector = metric
    elif metric in METRICS:
        selector = METRICS[metric]
    else:
        raise ValueError(
            f"Unknown metric {metric!r}; expected one of {sorted(METRICS)}"
        )

    values = selector(events)
    totals = values.groupby(events["event_type"], sort=False).sum()
    ranked = totals.sort_values(ascending=False, kind="stable").head(top_n)
    return ranked.rename_axis("event_type").reset_index(name="total")


def _log_ranking(label: str, ranking: pd.DataFrame) -> None:
    if ranking.empty:
        logger.warning("%s ranking is empty, no events after filtering", label)
        return
    top = ranking.iloc[0]
    logger.info(
        "%s ranking: %d event types, top is %s with %s",
        label,
        len(ranking),
        top["event_type"],
        f"{top['total']:,.0f}",
    )


# ── Node 1 ──────────────────────────────────────────────────────
def rank_fatalities(storm_events_primary: pd.DataFrame, top_n: int) -> pd.DataFrame:
    """Event types with the most deaths."""
    ranking = rank_by(storm_events_primary, "fatalities", top_n)
    _log_ranking("Fatalities", ranking)
    return ranking


# ── Node 2 ──────────────────────────────────────────────────────
def rank_injuries(storm_events_primary: pd.DataFrame, top_n: int) -> pd.DataFrame:
    """Event types with the most injuries."""
    ranking = rank_by(storm_events_primary, "injuries", top_n)
    _log_ranking("Injuries", ranking)
    return ranking


# ── Node 3 ──────────────────────────────────────────────────────
def rank_total_damage(storm_events_primary: pd.DataFrame, top_n: int) -> pd.DataFrame:
    """Event types with the largest property + crop damage in dollars."""
    ranking = rank_by(storm_events_primary, "total_damage", top_n)
    _log_ranking("Total damage ($)", ranking)
    return ranking
