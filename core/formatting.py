from __future__ import annotations

import math

SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(size: int | None) -> str:
    """Render a byte count as e.g. ``"1.5 KB"``; anything past GB stays in GB."""
    if not size:
        return "0 Bytes"

    index = 0
    while index < len(SIZE_UNITS) - 1 and size >= 1024 ** (index + 1):
        index += 1

    scaled = size / 1024**index
    rounded = math.floor(scaled * 100 + 0.5) / 100
    text = f"{rounded:.2f}".rstrip("0").rstrip(".")
    return f"{text} {SIZE_UNITS[index]}"
