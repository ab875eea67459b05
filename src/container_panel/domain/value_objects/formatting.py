"""Display formatting for sizes, ports and timestamps."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional

NOT_AVAILABLE = "N/A"

SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")
_KIBI = 1024


def format_bytes(size: int | float) -> str:
    """Render a byte count with a binary order-of-magnitude unit.

    The mantissa is rounded half-up to an integer, so 1536 is "2 KB".
    Sizes beyond the largest unit stay in TB.

    Args:
        size: Non-negative byte count.

    Returns:
        Human-readable size such as "5 GB".

    Raises:
        ValueError: If size is negative.
    """
    if size < 0:
        raise ValueError(f"size must be non-negative, got {size}")
    if size == 0:
        return f"0 {SIZE_UNITS[0]}"
    # floor(log_1024(size)) in integer steps; float logs land just under
    # exact powers such as 1024**3.
    index = 0
    while index < len(SIZE_UNITS) - 1 and size >= _KIBI ** (index + 1):
        index += 1
    mantissa = math.floor(size / _KIBI ** index + 0.5)
    return f"{mantissa} {SIZE_UNITS[index]}"


def format_port(
    private_port: int,
    port_type: str,
    public_port: Optional[int] = None,
    ip: Optional[str] = None,
) -> str:
    """Render a port binding.

    Examples: "80/tcp", "8080:80/tcp", "0.0.0.0-8080:80/tcp".
    """
    binding = f"{private_port}/{port_type}"
    if public_port:
        binding = f"{public_port}:{binding}"
    if ip:
        binding = f"{ip}-{binding}"
    return binding


def epoch_to_iso(epoch_seconds: int | float) -> str:
    """Convert epoch seconds to UTC ISO-8601 with milliseconds.

    Example: 1700000000 -> "2023-11-14T22:13:20.000Z".
    """
    moment = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
