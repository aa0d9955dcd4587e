"""Human-readable duration and size formatting for CLI output."""

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def fmt_duration(total_seconds: float) -> str:
    """Format seconds as m:ss, or h:mm:ss past an hour. Unknown (0) is '-'."""
    if not total_seconds or total_seconds <= 0:
        return "-"
    seconds = int(total_seconds % 60)
    minutes = int((total_seconds / 60) % 60)
    hours = int(total_seconds // 3600)
    if hours > 0:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def fmt_size(size_bytes: int) -> str:
    """Format a byte count with 1024-based units, e.g. '1.5 MB'."""
    if not size_bytes or size_bytes <= 0:
        return "-"
    value = float(size_bytes)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    precision = 1 if value < 10 and unit > 0 else 0
    return f"{value:.{precision}f} {SIZE_UNITS[unit]}"
