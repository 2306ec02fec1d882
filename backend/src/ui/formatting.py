from datetime import datetime

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_file_size(size: int, decimals: int = 1) -> str:
    """Human readable size, e.g. ``1.5 KB``. Trailing zeros are dropped."""
    if size <= 0:
        return "0 Bytes"
    exponent = 0
    while exponent < len(_SIZE_UNITS) - 1 and size >= 1024 ** (exponent + 1):
        exponent += 1
    value = round(size / 1024**exponent, decimals)
    return f"{value:g} {_SIZE_UNITS[exponent]}"


def format_time(timestamp: datetime) -> str:
    return timestamp.strftime("%I:%M %p")


def format_date(timestamp: datetime) -> str:
    """Short upload date, e.g. ``Mar 4, 09:15 AM``."""
    local = timestamp.astimezone() if timestamp.tzinfo else timestamp
    return f"{local:%b} {local.day}, {local:%I:%M %p}"
