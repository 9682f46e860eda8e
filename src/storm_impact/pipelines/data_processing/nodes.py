"""Raw → Primary transformation nodes for the NOAA Storm Data extract.

Each function is a Kedro node: pure input → output, no side effects.
Together they take the raw ``StormData.csv`` (37 string columns) and
produce a typed, date-filtered event table with property, crop and total
damage in dollars.

Architecture:
    fetch → load → select columns → clean → filter by year → compute damage
"""

from __future__ import annotations

import logging
import warnings

import pandas as pd

from storm_impact.download import fetch_storm_data
from storm_impact.errors import DataSourceError, ParseWarning

logger = logging.getLogger(__name__)

# ── Raw column → primary column, for the 8 columns we keep ──────────
KEEP_COLUMNS: dict[str, str] = {
    "BGN_DATE": "event_date",
    "EVTYPE": "event_type",
    "INJURIES": "injuries",
    "FATALITIES": "fatalities",
    "PROPDMG": "property_damage_raw",
    "PROPDMGEXP": "property_damage_exp_code",
    "CROPDMG": "crop_damage_raw",
    "CROPDMGEXP": "crop_damage_exp_code",
}

# BGN_DATE looks like "4/18/1950 0:00:00"; only the date part is kept
DATE_FORMAT = "%m/%d/%Y %H:%M:%S"

# ── Power-of-ten exponents for PROPDMGEXP / CROPDMGEXP codes ────────
# The source mixes letters, digits, "+", "-", "?" and blanks. Only the four
# letter codes are trusted; everything else counts as "no multiplier".
_EXPONENTS: dict[str, int] = {
    "B": 9,
    "M": 6,
    "K": 3,
    "H": 2,
}

_INT_COLUMNS = ["injuries", "fatalities"]
_FLOAT_COLUMNS = ["property_damage_raw", "crop_damage_raw"]

# (magnitude, exponent code, multiplier, dollars) per damage kind
_DAMAGE_KINDS = [
    (
        "property_damage_raw",
        "property_damage_exp_code",
        "property_damage_multiplier",
        "property_damage",
    ),
    (
        "crop_damage_raw",
        "crop_damage_exp_code",
        "crop_damage_multiplier",
        "crop_damage",
    ),
]


# ── Helpers: exponent codes ─────────────────────────────────────────
def decode_exponent(code: object) -> int:
    """Map a damage exponent code to its power of ten.

    Case-insensitive. Total: missing or unrecognized codes map to 0.

    Examples:
        "K"  → 3
        "b"  → 9
        "5"  → 0
        ""   → 0
        None → 0
    """
    if code is None or pd.isna(code):
        return 0
    return _EXPONENTS.get(str(code).upper(), 0)


def damage_multiplier(code: object) -> float:
    """Dollar multiplier for an exponent code, e.g. "M" → 1e6."""
    return 10.0 ** decode_exponent(code)


def damage_amount(magnitude: float, code: object) -> float:
    """Dollar damage for a raw magnitude and its exponent code."""
    return float(magnitude) * damage_multiplier(code)


# ── Node 1 ───────────────────────────────────────────────────────────
def fetch_raw_data(data_source: dict[str, str]) -> str:
    """Download the raw file if it is not cached yet; return its path."""
    return fetch_storm_data(data_source["url"], data_source["path"])


# ── Node 2 ───────────────────────────────────────────────────────────
def load_storm_data(raw_data_path: str) -> pd.DataFrame:
    """Read the raw storm data CSV with every column as a string.

    No type inference and no validation happen here: empty cells become
    ``""`` and rows keep their file order. Cleaning is ``clean_events``'s job.

    Args:
        raw_data_path: Path to the decompressed ``StormData.csv``.

    Returns:
        Raw DataFrame, one row per recorded event.

    Raises:
        DataSourceError: If the file is missing, unreadable or empty.
    """
    try:
        df = pd.read_csv(
            raw_data_path,
            dtype=str,
            keep_default_na=False,
        )
    except FileNotFoundError as exc:
        raise DataSourceError(f"Storm data file not found: {raw_data_path}") from exc
    except pd.errors.EmptyDataError as exc:
        raise DataSourceError(f"Storm data file is empty: {raw_data_path}") from exc
    except (OSError, UnicodeDecodeError, pd.errors.ParserError) as exc:
        raise DataSourceError(
            f"Could not read storm data from {raw_data_path}: {exc}"
        ) from exc

    logger.info(
        "Loaded %s: %s rows, %s columns",
        raw_data_path,
        f"{len(df):,}",
        len(df.columns),
    )
    return df


# ── Node 3 ───────────────────────────────────────────────────────────
def select_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Keep the 8 columns the rankings need and give them snake_case names.

    Args:
        df: Raw DataFrame from ``load_storm_data``.

    Returns:
        DataFrame with only the columns in KEEP_COLUMNS, renamed.

    Raises:
        DataSourceError: If any expected column is absent, i.e. the file
            is not the storm data extract.
    """
    missing = [c for c in KEEP_COLUMNS if c not in df.columns]
    if missing:
        raise DataSourceError(f"Expected columns not found in data: {missing}")

    selected = df[list(KEEP_COLUMNS)].rename(columns=KEEP_COLUMNS)

    logger.info(
        "Column selection: kept %d of %d columns",
        len(KEEP_COLUMNS),
        len(df.columns),
    )
    return selected


# ── Node 4 ───────────────────────────────────────────────────────────
def _parse_numeric(values: pd.Series, integral: bool = False) -> tuple[pd.Series, int]:
    """Coerce strings to numbers, defaulting blanks and garbage to 0.

    Counts and magnitudes are non-negative and finite, so "inf", "-3"
    and (for counts) "2.7" are treated as garbage too.

    Returns the parsed series and how many non-blank values failed.
    """
    parsed = pd.to_numeric(values, errors="coerce")
    invalid = parsed.isin([float("inf"), float("-inf")]) | (parsed < 0)
    if integral:
        invalid |= parsed.notna() & (parsed % 1 != 0)
    parsed = parsed.mask(invalid)

    blank = values.isna() | (values.astype(str).str.strip() == "")
    n_unparseable = int((parsed.isna() & ~blank).sum())
    return parsed.fillna(0), n_unparseable


def clean_events(df: pd.DataFrame) -> tuple[pd.DataFrame, dict[str, int]]:
    """Type the selected columns and decode the damage exponent codes.

    - event_date: parsed from "MM/DD/YYYY HH:MM:SS", time dropped.
      Unparseable dates become NaT; the row is kept (the year filter
      drops it later).
    - injuries / fatalities: int64, 0 when blank or unparseable.
    - property / crop magnitudes: float64, 0 when blank or unparseable.
    - *_multiplier: 10 ** decode_exponent(code). The raw codes are kept
      for auditability.

    Args:
        df: DataFrame after column selection.

    Returns:
        The cleaned DataFrame and a parse report with anomaly counts.
    """
    df = df.copy()
    report: dict[str, int] = {"rows": len(df)}

    raw_dates = df["event_date"]
    df["event_date"] = pd.to_datetime(
        raw_dates, format=DATE_FORMAT, errors="coerce"
    ).dt.normalize()
    report["unparseable_dates"] = int(df["event_date"].isna().sum())

    for col in _INT_COLUMNS + _FLOAT_COLUMNS:
        integral = col in _INT_COLUMNS
        parsed, n_unparseable = _parse_numeric(df[col], integral=integral)
        df[col] = parsed.astype("int64" if integral else "float64")
        report[f"unparseable_{col}"] = n_unparseable

    for _raw_col, code_col, multiplier_col, _dollars_col in _DAMAGE_KINDS:
        df[multiplier_col] = df[code_col].map(damage_multiplier).astype("float64")
        codes = df[code_col].fillna("").astype(str).str.upper().value_counts()
        logger.info("%s distribution: %s", code_col, codes.to_dict())

    anomalies = {k: v for k, v in report.items() if k != "rows" and v > 0}
    if anomalies:
        n_anomalies = f"{sum(anomalies.values()):,}"
        logger.warning(
            "%s values could not be parsed and were set to NaT/0: %s",
            n_anomalies,
            anomalies,
        )
        warnings.warn(
            f"{n_anomalies} values could not be parsed: {anomalies}",
            ParseWarning,
            stacklevel=2,
        )

    logger.info(
        "Cleaned %s rows. Date range: %s to %s",
        f"{len(df):,}",
        df["event_date"].min(),
        df["event_date"].max(),
    )
    return df, report


# ── Node 5 ───────────────────────────────────────────────────────────
def count_events_by_year(df: pd.DataFrame) -> pd.DataFrame:
    """Count recorded events per calendar year.

    Diagnostic only: recording practices changed over time and the early
    years are sparse. This table is what the ``min_year`` cutoff was chosen
    from by eye; re-check it here when the source data is refreshed.

    Args:
        df: Cleaned DataFrame (before the year filter).

    Returns:
        DataFrame with ``year`` and ``events`` columns, ascending by year.
        Rows without a date are not counted.
    """
    years = df["event_date"].dropna().dt.year.astype("int64")
    counts = years.value_counts().sort_index()
    by_year = counts.rename_axis("year").reset_index(name="events")

    if len(by_year):
        logger.info(
            "Events by year: %d years (%d–%d), busiest %d with %s events",
            len(by_year),
            by_year["year"].min(),
            by_year["year"].max(),
            by_year.loc[by_year["events"].idxmax(), "year"],
            f"{by_year['events'].max():,}",
        )
    return by_year


# ── Node 6 ───────────────────────────────────────────────────────────
def filter_by_year(df: pd.DataFrame, min_year: int) -> pd.DataFrame:
    """Keep events dated in ``min_year`` or later.

    Early years of the dataset under-report events, so cross-year totals
    before the cutoff are not comparable. Rows with no date are dropped.

    Args:
        df: Cleaned DataFrame.
        min_year: First year to keep (from parameters).

    Returns:
        Filtered DataFrame, original row order, fresh index.
    """
    total = len(df)
    year_mask = df["event_date"].notna() & (df["event_date"].dt.year >= min_year)
    filtered = df[year_mask].reset_index(drop=True)

    dropped = total - len(filtered)
    pct_dropped = (dropped / total * 100) if total > 0 else 0
    logger.info(
        "Year filter (>= %d): kept %s of %s rows (dropped %s = %.1f%%)",
        min_year,
        f"{len(filtered):,}",
        f"{total:,}",
        f"{dropped:,}",
        pct_dropped,
    )
    return filtered


# ── Node 7 ───────────────────────────────────────────────────────────
def compute_damage(df: pd.DataFrame) -> pd.DataFrame:
    """Convert damage magnitudes to dollars.

    property_damage = property_damage_raw × property_damage_multiplier
    crop_damage     = crop_damage_raw × crop_damage_multiplier
    total_damage    = property_damage + crop_damage

    Args:
        df: Year-filtered DataFrame.

    Returns:
        DataFrame with the three dollar columns appended.
    """
    df = df.copy()

    for raw_col, _code_col, multiplier_col, dollars_col in _DAMAGE_KINDS:
        df[dollars_col] = df[raw_col] * df[multiplier_col]
    df["total_damage"] = df["property_damage"] + df["crop_damage"]

    logger.info(
        "Damage computed for %s rows — property: $%s | crop: $%s | total: $%s",
        f"{len(df):,}",
        f"{df['property_damage'].sum():,.0f}",
        f"{df['crop_damage'].sum():,.0f}",
        f"{df['total_damage'].sum():,.0f}",
    )
    return df
