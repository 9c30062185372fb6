"""Small formatting and validation helpers."""
from typing import Any

MIB = 1024 * 1024


def bytes_to_mb(num_bytes: int) -> str:
    """Formats a byte count as megabytes with two decimals (``'16.00'``)."""
    return f"{num_bytes / MIB:.2f}"


def percentage(current: int, total: int) -> float:
    """
    Share of ``current`` in ``total`` as a percentage rounded to 2 decimals.

    An empty total counts as complete.
    """
    if total <= 0:
        return 100.0
    return round(current / total * 100, 2)


def format_percentage(current: int, total: int) -> str:
    """Formats :func:`percentage` as ``'40.00%'``."""
    return f"{percentage(current, total):.2f}%"


def require(**values: Any) -> None:
    """
    Raises ValueError naming every argument that is empty or missing.

    Example:
        >>> require(url="https://x", credentials=None)
        Traceback (most recent call last):
        ...
        ValueError: Missing required arguments: credentials
    """
    missing = [name for name, value in values.items() if not value]
    if missing:
        raise ValueError(f"Missing required arguments: {', '.join(missing)}")
