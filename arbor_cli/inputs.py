"""
Input decoding shared by the CLI commands.

Data blocks arrive either as UTF-8 text or, with ``--hex``, as hex strings.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

from arbor.crypto.hashing import from_hex


def decode_item(item: str, hex_mode: bool = False) -> bytes:
    """Turn one command-line item into a data block."""
    if hex_mode:
        return from_hex(item)
    return item.encode("utf-8")


def read_items(
    items: Sequence[str] | None,
    from_file: str | None = None,
    hex_mode: bool = False,
) -> list[bytes]:
    """
    Collect data blocks from positional items and/or a file.

    The file holds one item per line; blank lines are skipped.
    """
    raw: list[str] = list(items or [])
    if from_file:
        text = Path(from_file).read_text(encoding="utf-8")
        raw.extend(line for line in text.splitlines() if line.strip())
    return [decode_item(item, hex_mode) for item in raw]
