"""Plain-text helpers shared by the analyzers and the report formatter.

Kept free of detector imports so analyzers can use them without pulling
in the result models.
"""

from datetime import UTC, datetime

UNKNOWN_DATE = "Unknown"


def format_date(timestamp: int) -> str:
    """Format unix seconds as a UTC YYYY-MM-DD date, or "Unknown" for 0."""
    if timestamp <= 0:
        return UNKNOWN_DATE
    return datetime.fromtimestamp(timestamp, tz=UTC).strftime("%Y-%m-%d")


def truncate_address(address: str, head: int = 6, tail: int = 4) -> str:
    """Truncate a Solana address to ABCDEF...WXYZ format."""
    if len(address) <= head + tail + 3:
        return address
    return f"{address[:head]}...{address[-tail:]}"
