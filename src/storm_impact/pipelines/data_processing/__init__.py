"""Raw → Primary data processing pipeline for the NOAA Storm Data extract."""

from .pipeline import create_pipeline

__all__ = ["create_pipeline"]
