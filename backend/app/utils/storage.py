"""Human-readable storage sizes."""

SIZE_UNITS = ("B", "KB", "MB", "GB")
_K = 1024


def format_file_size(size_bytes: int) -> str:
    """Format a byte count as e.g. ``"1.5 KB"`` (base 1024, at most 2 decimals)."""
    if size_bytes <= 0:
        return "0 B"
    exponent = 0
    while exponent < len(SIZE_UNITS) - 1 and size_bytes >= _K ** (exponent + 1):
        exponent += 1
    value = f"{size_bytes / _K ** exponent:.2f}".rstrip("0").rstrip(".")
    return f"{value} {SIZE_UNITS[exponent]}"
