"""Exceptions and warnings raised while reading and cleaning storm data."""


class DataSourceError(OSError):
    """The input dataset is missing, unreadable, or not the expected file.

    Fatal: the run stops and no ranking output is written.
    """


class ParseWarning(UserWarning):
    """Row-level values that could not be parsed and were defaulted.

    Non-fatal: the affected rows are kept with the field set to NaT / 0.
    """
