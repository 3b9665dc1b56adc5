"""Build callout blocks for quick insertion."""

from __future__ import annotations

from datetime import datetime

from calloutnav.parser.extract import TIMESTAMP_FORMAT


def format_timestamp(moment: datetime) -> str:
    """Format ``moment`` as ``YYYY-MM-DD HH:MM``."""

    return moment.strftime(TIMESTAMP_FORMAT)


def callout_header(author: str, moment: datetime) -> str:
    """Return the header line of a folded callout written by ``author``."""

    return f"> [!{author}]- {author} ({format_timestamp(moment)})"


def build_callout(
    author: str, selection: str | None = None, moment: datetime | None = None
) -> str:
    """Build a callout block quoting ``selection``.

    Args:
        author: Tag used both as callout type and visible author.
        selection: Text to quote, one ``> `` line per input line. Without a
            selection the block ends in an empty quoted line ready for
            typing.
        moment: Time stamped into the header; defaults to now.

    Returns:
        The callout block. A block quoting a selection ends with a newline.
    """

    header = callout_header(author, moment or datetime.now())

    if selection:
        quoted = "\n".join(f"> {line}" for line in selection.split("\n"))
        return f"{header}\n{quoted}\n"
    return f"{header}\n> "


def insert_callout(text: str, line_index: int, block: str) -> str:
    """Insert ``block`` into ``text`` before the line ``line_index``.

    Indices past the end append the block on a new line.
    """

    lines = text.split("\n")
    line_index = max(0, min(line_index, len(lines)))

    # The line break after the block comes from the line it is inserted before.
    if block.endswith("\n"):
        block = block[:-1]
    lines[line_index:line_index] = block.split("\n")
    return "\n".join(lines)


def append_callout(text: str, block: str) -> str:
    """Append ``block`` at the end of ``text``.

    A final newline of ``text`` is kept after the block.
    """

    if not text:
        return block

    lines = text.split("\n")
    end = len(lines) - 1 if text.endswith("\n") else len(lines)
    return insert_callout(text, end, block)
