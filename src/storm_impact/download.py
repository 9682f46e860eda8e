"""Fetch and decompress the NOAA Storm Data extract.

The raw file is published as a single bzip2-compressed CSV. This module
downloads it once, decompresses it next to the configured path, and hands
the local path to the data_processing pipeline. Later runs find the CSV on
disk and make no network call.

Run standalone:
    python -m storm_impact.download
"""

from __future__ import annotations

import bz2
import logging
import shutil
from pathlib import Path

import requests

from storm_impact.errors import DataSourceError

logger = logging.getLogger(__name__)

STORM_DATA_URL = (
    "https://d396qusza40orc.cloudfront.net/repdata%2Fdata%2FStormData.csv.bz2"
)
DEFAULT_DESTINATION = Path("data/01_raw/StormData.csv")

_CHUNK_SIZE = 8192


def fetch_storm_data(url: str, destination: str | Path) -> str:
    """Make sure the decompressed storm data CSV exists locally.

    Args:
        url: Location of the ``.csv.bz2`` archive.
        destination: Path the decompressed CSV should live at.

    Returns:
        The destination path as a string, ready for ``load_storm_data``.

    Raises:
        DataSourceError: If the download fails.
    """
    final_file = Path(destination)
    if final_file.exists():
        logger.info("Using cached storm data at %s", final_file)
        return str(final_file)

    final_file.parent.mkdir(parents=True, exist_ok=True)
    compressed_file = final_file.with_name(final_file.name + ".bz2")

    logger.info("Downloading storm data from %s", url)
    try:
        response = requests.get(url, stream=True, timeout=60)
        response.raise_for_status()
        with open(compressed_file, "wb") as f:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                f.write(chunk)
    except requests.RequestException as exc:
        compressed_file.unlink(missing_ok=True)
        raise DataSourceError(f"Could not download storm data from {url}: {exc}") from exc

    logger.info(
        "Downloaded %.1f MB, decompressing to %s",
        compressed_file.stat().st_size / 1024 / 1024,
        final_file,
    )
    try:
        with bz2.open(compressed_file, "rb") as f_in, open(final_file, "wb") as f_out:
            shutil.copyfileobj(f_in, f_out)
    except (OSError, EOFError) as exc:
        final_file.unlink(missing_ok=True)
        raise DataSourceError(f"Could not decompress {compressed_file}: {exc}") from exc
    finally:
        # Remove the archive to save space
        compressed_file.unlink(missing_ok=True)

    logger.info(
        "Storm data ready: %s (%.1f MB)",
        final_file,
        final_file.stat().st_size / 1024 / 1024,
    )
    return str(final_file)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    fetch_storm_data(STORM_DATA_URL, DEFAULT_DESTINATION)
