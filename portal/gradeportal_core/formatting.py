SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_file_size(num_bytes: int) -> str:
    """Humanize a byte count, e.g. 1536 -> '1.5 KB'."""
    if num_bytes <= 0:
        return "0 Bytes"

    k = 1024
    value = float(num_bytes)
    unit = 0
    while value >= k and unit < len(SIZE_UNITS) - 1:
        value /= k
        unit += 1

    # "1.50" -> "1.5", "2.00" -> "2"
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[unit]}"
