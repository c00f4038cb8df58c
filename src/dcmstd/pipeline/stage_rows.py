"""Row classification - decode table rows into typed entries.

Rows are classified by their cell count:

- CIOD tables: 4 cells (IE, module, reference, usage) or 3 cells when the
  IE cell of a spanning row is absent.
- Module tables: 1-2 cells for include directives, 3 cells for attributes
  without a type column, 4 cells with one.
- Registry tables: 6 cells (tag, name, keyword, VR, VM, retirement note).

Every decoder raises RowDecodeError for rows it cannot decode.
"""

import logging
import re
from typing import Optional

from lxml import etree

from dcmstd.errors import RowDecodeError
from dcmstd.models import (
    VR,
    AttributeType,
    CiodEntry,
    DataElement,
    DataEntry,
    Entry,
    IncludeEntry,
    RangedTag,
    Tag,
    Usage,
)
from dcmstd.pipeline.stage_query import DocbookQuery, default_query
from dcmstd.pipeline.stage_text import (
    attribute_has_include,
    attribute_name,
    remove_break_hints,
    sequence_item_depth,
    trim_ws_nl,
)
from dcmstd.pipeline.stage_xref import decode_xref

logger = logging.getLogger(__name__)

_VR_SEPARATOR = re.compile(r"\s+or\s+")

REGISTRY_COLUMNS = 6


def row_cells(row: etree._Element, query: Optional[DocbookQuery] = None) -> list[etree._Element]:
    """Get the data cells of a table row.

    Raises:
        RowDecodeError: If the element is not a table row.
    """
    query = query or default_query
    if query.local_name(row) != "tr":
        raise RowDecodeError(f"XML element [{query.local_name(row)}] is not a table row (tr)")
    return query.find_all(row, "td")


def decode_usage(cell: etree._Element, query: Optional[DocbookQuery] = None) -> Usage:
    """Decode the usage column of a CIOD row."""
    query = query or default_query
    text = trim_ws_nl(query.text(cell))
    usage = Usage.parse(text)
    if usage is None:
        raise RowDecodeError(f"Unsupported entry in the usage column [{text}]")
    return usage


def decode_ciod_row(
    cells: list[etree._Element],
    query: Optional[DocbookQuery] = None,
) -> CiodEntry:
    """Decode the cells of a CIOD table row.

    A 3 cell row leaves ``information_entity`` empty; the table builder
    inherits it from the rows above.
    """
    query = query or default_query
    if len(cells) == 4:
        return CiodEntry(
            information_entity=attribute_name(trim_ws_nl(query.text(cells[0]))),
            module=trim_ws_nl(query.text(cells[1])),
            reference=decode_xref(cells[2], query=query),
            usage=decode_usage(cells[3], query),
        )
    if len(cells) == 3:
        return CiodEntry(
            information_entity="",
            module=attribute_name(trim_ws_nl(query.text(cells[0]))),
            reference=decode_xref(cells[1], query=query),
            usage=decode_usage(cells[2], query),
        )
    raise RowDecodeError(f"Table row contains an unsupported number of columns [{len(cells)}]")


def decode_imd_row(
    cells: list[etree._Element],
    query: Optional[DocbookQuery] = None,
) -> Entry:
    """Decode the cells of a module table row into a data or include entry."""
    query = query or default_query
    count = len(cells)
    if count < 1 or count > 4:
        raise RowDecodeError(f"Table row contains an unsupported number of columns [{count}]")

    first = query.text(cells[0])
    if count <= 2:
        entry = IncludeEntry(sequence_indent=sequence_item_depth(first))
        if attribute_has_include(first):
            entry.xref = decode_xref(cells[0], query=query)
        if count == 2:
            entry.description = trim_ws_nl(query.text(cells[1]))
        return entry

    tag_text = query.text(cells[1])
    tag = Tag.parse(tag_text)
    if tag is None:
        raise RowDecodeError(f"Unsupported entry in the Tag column [{trim_ws_nl(tag_text)}]")
    entry = DataEntry(
        sequence_indent=sequence_item_depth(first),
        name=attribute_name(trim_ws_nl(first)),
        tag=tag,
        description=trim_ws_nl(query.text(cells[2])),
    )
    if count == 4:
        token = trim_ws_nl(query.text(cells[2]))
        attribute_type = AttributeType.parse(token)
        if attribute_type is None:
            raise RowDecodeError(f"Unsupported entry in the Type column [{token}]")
        entry.attribute_type = attribute_type
        entry.description = trim_ws_nl(query.text(cells[3]))
    return entry


def decode_vrs(text: str) -> tuple[VR, ...]:
    """Decode a registry VR cell such as ``US or SS or OW``.

    Elements without a VR of their own carry ``See Note`` text or nothing.
    """
    text = trim_ws_nl(text)
    if not text or text.startswith("See Note"):
        return ()
    vrs = []
    for token in _VR_SEPARATOR.split(text):
        vr = VR.parse(token.strip())
        if vr is None:
            raise RowDecodeError(f"Unsupported entry in the VR column [{text}]")
        vrs.append(vr)
    return tuple(vrs)


def decode_data_element_row(
    cells: list[etree._Element],
    query: Optional[DocbookQuery] = None,
) -> DataElement:
    """Decode the cells of a data element registry row."""
    query = query or default_query
    if len(cells) != REGISTRY_COLUMNS:
        raise RowDecodeError(f"Table row contains an unsupported number of columns [{len(cells)}]")
    texts = [trim_ws_nl(query.text(cell)) for cell in cells]
    tag = RangedTag.parse(texts[0])
    if tag is None:
        raise RowDecodeError(f"Unsupported entry in the Tag column [{texts[0]}]")
    return DataElement(
        tag=tag,
        name=remove_break_hints(texts[1]),
        keyword=remove_break_hints(texts[2]),
        value_representations=decode_vrs(texts[3]),
        value_multiplicity=texts[4],
        description=texts[5],
    )
