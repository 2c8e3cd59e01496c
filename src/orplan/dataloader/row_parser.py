# src/orplan/dataloader/row_parser.py
from __future__ import annotations

from collections.abc import Sequence

RawRecord = dict[str, str]

_BOM = "\ufeff"


def normalize_content(content: str) -> str:
    """Strip a leading BOM and convert CRLF / CR line endings to LF."""
    if content.startswith(_BOM):
        content = content[len(_BOM) :]
    return content.replace("\r\n", "\n").replace("\r", "\n")


def split_lines(content: str) -> list[str]:
    """Normalized content split into physical lines (trailing newline dropped)."""
    text = normalize_content(content)
    if text.endswith("\n"):
        text = text[:-1]
    return text.split("\n") if text else []


def split_line(line: str, delimiter: str = ";") -> list[str]:
    """
    @brief
    Split one CSV line on `delimiter`, honoring double-quoted spans.

    @details
    A quote character toggles the "inside quotes" state and is not copied.
    Inside a quoted span a doubled quote (`""`) yields one literal quote.
    Delimiters inside quotes are kept as text. Every field is trimmed.
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]
        if ch == '"':
            if in_quotes and i + 1 < n and line[i + 1] == '"':
                current.append('"')
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == delimiter and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
        i += 1

    fields.append("".join(current).strip())
    return fields


def parse_line(line: str, headers: Sequence[str], delimiter: str = ";") -> RawRecord:
    """
    @brief
    Map one data line onto the header names by position.

    @details
    Missing trailing fields become "", surplus fields are ignored.
    """
    values = split_line(line, delimiter)
    return {header: (values[i] if i < len(values) else "") for i, header in enumerate(headers)}


__all__ = ["RawRecord", "normalize_content", "split_lines", "split_line", "parse_line"]
