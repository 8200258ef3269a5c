"""Split pasted broker text into header-delimited blocks."""

from __future__ import annotations

import re

from ..core.enums import CLOSE_TOKEN, OPEN_TOKEN
from ..core.models import RawBlock

HEADER_RE = re.compile(rf"^(\S+)\s+\S+\s+({OPEN_TOKEN}|{CLOSE_TOKEN})$")


def is_header(line: str) -> bool:
    return HEADER_RE.match(line.strip()) is not None


def split_blocks(text: str) -> list[RawBlock]:
    """Partition ``text`` into blocks, one per header line.

    Runs of newlines collapse into a single separator, so blank lines
    never end a block.  Anything before the first header is dropped.
    """
    blocks: list[RawBlock] = []
    current: RawBlock | None = None
    for line in re.split(r"\n+", text.replace("\r", "")):
        if is_header(line):
            if current is not None:
                blocks.append(current)
            current = RawBlock(header=line)
        elif current is not None:
            current.lines.append(line)
    if current is not None:
        blocks.append(current)
    return blocks
