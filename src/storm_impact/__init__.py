"""storm_impact — health and economic impact of US storm events by type."""

__version__ = "0.1.0"
