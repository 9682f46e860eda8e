"""Event type rankings — fatalities, injuries and total damage."""

from .pipeline import create_pipeline

__all__ = ["create_pipeline"]
