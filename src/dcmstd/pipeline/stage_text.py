"""Text normalization for table cell content.

Module tables mark sequence nesting with leading ``>`` characters and
wrap cell text across lines, e.g. ``\\n  >>Referenced SOP\\n  Class UID``.
The functions here strip those decorations. They are pure and total.
"""

import re

_WS_NL = " \n\r"
_LEADING_MARKERS = set(">" + _WS_NL)
_NAME_SEPARATORS = re.compile(r"[ \n\r\t.]+")


def trim_ws_nl(s: str) -> str:
    """Strip leading and trailing spaces, newlines and carriage returns."""
    return s.strip(_WS_NL)


def sequence_item_depth(s: str) -> int:
    """Count the leading ``>`` markers of a cell.

    Spaces, newlines and carriage returns before and between the markers
    are skipped.

    Examples:
        ``entry`` -> 0, ``>entry`` -> 1, ``  \\n>>entry`` -> 2
    """
    depth = 0
    for c in s:
        if c == ">":
            depth += 1
        elif c in _WS_NL:
            continue
        else:
            break
    return depth


def attribute_name(s: str) -> str:
    """Extract the plain attribute name from decorated cell text.

    Leading markers and whitespace are dropped and every run of spaces,
    newlines, tabs or dots collapses to a single space.
    """
    for i, c in enumerate(s):
        if c not in _LEADING_MARKERS:
            return _NAME_SEPARATORS.sub(" ", s[i:])
    return ""


def attribute_has_include(s: str) -> bool:
    """Check if a cell is an include directive.

    ``Include`` must be preceded only by markers and whitespace.
    """
    index = s.find("Include")
    if index == -1:
        return False
    return all(c in _LEADING_MARKERS for c in s[:index])


def remove_break_hints(s: str) -> str:
    """Drop zero-width spaces the standard uses as line break hints."""
    return s.replace("\u200b", "")
