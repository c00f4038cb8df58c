"""Table Builders - turn DocBook tables into typed definitions.

Flow per table:
1. Check the element is a table with an id and a caption
2. Classify the table by its header shape
3. Decode every body row (any failing row rejects the whole table)
4. Build the Ciod, Imd or registry entries

Single table builders are all-or-nothing and raise TableBuildError.
The chapter level builders skip rejected tables and carry on.
"""

import logging
from typing import Optional

from lxml import etree

from dcmstd.errors import RowDecodeError, TableBuildError
from dcmstd.models import Ciod, DataElement, Imd
from dcmstd.pipeline.stage_query import DocbookQuery, default_query
from dcmstd.pipeline.stage_rows import (
    decode_ciod_row,
    decode_data_element_row,
    decode_imd_row,
    row_cells,
)
from dcmstd.pipeline.stage_text import trim_ws_nl

logger = logging.getLogger(__name__)

CIOD_HEADER = ("ie", "module", "reference", "usage")
IMD_HEADER = ("attribute name", "tag", "type", "attribute description")
IMD_HEADER_NO_TYPE = ("attribute name", "tag", "attribute description")
REGISTRY_HEADER = ("tag", "name", "keyword", "vr", "vm")


def table_caption(table: etree._Element, query: Optional[DocbookQuery] = None) -> str:
    """Get the trimmed caption text of a table, empty if it has none."""
    query = query or default_query
    caption = query.find(table, "caption")
    if caption is None:
        return ""
    return trim_ws_nl(query.text(caption))


def header_rows(table: etree._Element, query: Optional[DocbookQuery] = None) -> list[list[str]]:
    """Get the lower-cased, trimmed header cell texts of every header row."""
    query = query or default_query
    rows = []
    for tr in query.find_all(table, "thead", "tr"):
        cells = query.find_all(tr, "th")
        if cells:
            rows.append([trim_ws_nl(query.text(th).lower()) for th in cells])
    return rows


def has_ciod_table_header(table: etree._Element, query: Optional[DocbookQuery] = None) -> bool:
    """Check for a header row reading exactly IE | Module | Reference | Usage."""
    return any(tuple(row) == CIOD_HEADER for row in header_rows(table, query))


def _contains_all(row: list[str], expected: tuple[str, ...]) -> bool:
    return len(row) == len(expected) and all(e in cell for cell, e in zip(row, expected))


def has_imd_table_header(table: etree._Element, query: Optional[DocbookQuery] = None) -> bool:
    """Check for a module table header.

    Matches ``Attribute Name | Tag | Type | Attribute Description`` or the
    same without the type column.
    """
    return any(
        _contains_all(row, IMD_HEADER) or _contains_all(row, IMD_HEADER_NO_TYPE)
        for row in header_rows(table, query)
    )


def has_registry_table_header(table: etree._Element, query: Optional[DocbookQuery] = None) -> bool:
    """Check for a registry header starting Tag | Name | Keyword | VR | VM."""
    return any(
        len(row) >= len(REGISTRY_HEADER) and tuple(row[: len(REGISTRY_HEADER)]) == REGISTRY_HEADER
        for row in header_rows(table, query)
    )


def _table_identity(
    table: etree._Element,
    query: DocbookQuery,
) -> tuple[str, str, list[str]]:
    """Get id, caption and parent ids of a table or raise TableBuildError."""
    name = query.local_name(table)
    if name != "table":
        raise TableBuildError(f"Expected a table element but got [{name}]")
    table_id = query.xml_id(table)
    if not table_id.strip():
        raise TableBuildError("XML table has no id attribute")
    caption = table_caption(table, query)
    if not caption:
        raise TableBuildError(f"XML table [{table_id}] has no caption", table_id)
    return table_id, caption, query.ancestor_ids(table)


def _body_rows(table: etree._Element, table_id: str, query: DocbookQuery) -> list[etree._Element]:
    rows = query.find_all(table, "tbody", "tr")
    if not rows:
        raise TableBuildError(f"XML table [{table_id}] has no rows", table_id)
    return rows


def _row_failed(table_id: str, kind: str, index: int, err: RowDecodeError) -> TableBuildError:
    err.row_index = index
    logger.error(
        "XML table [%s] row [%d] does not contain a valid %s entry: %s",
        table_id,
        index,
        kind,
        err,
    )
    return TableBuildError(
        f"XML table [{table_id}] row [{index}] does not contain a valid {kind} entry: {err}",
        table_id,
        row_index=index,
    )


def build_ciod(table: etree._Element, query: Optional[DocbookQuery] = None) -> Ciod:
    """Build a Composite Information Object Definition from a table.

    Rows without an IE inherit it from the nearest preceding row that has
    one.

    Raises:
        TableBuildError: If the table is not a valid CIOD table.
    """
    query = query or default_query
    table_id, caption, parent_ids = _table_identity(table, query)
    if not has_ciod_table_header(table, query):
        raise TableBuildError(f"XML table [{table_id}] has no matching CIOD table header", table_id)

    ciod = Ciod(id=table_id, caption=caption, parent_ids=parent_ids)
    for i, tr in enumerate(_body_rows(table, table_id, query)):
        try:
            entry = decode_ciod_row(row_cells(tr, query), query)
        except RowDecodeError as err:
            raise _row_failed(table_id, "CIOD", i, err) from err

        if not entry.information_entity:
            for prev in reversed(ciod.items):
                if prev.information_entity:
                    entry.information_entity = prev.information_entity
                    break
        if not entry.information_entity:
            raise TableBuildError(
                f"XML table [{table_id}] row [{i}] has no IE and none to inherit",
                table_id,
            )
        ciod.items.append(entry)

    return ciod


def build_imd(table: etree._Element, query: Optional[DocbookQuery] = None) -> Imd:
    """Build an Information Module Definition from a module or macro table.

    Raises:
        TableBuildError: If the table is not a valid module table.
    """
    query = query or default_query
    table_id, caption, parent_ids = _table_identity(table, query)
    if not has_imd_table_header(table, query):
        raise TableBuildError(f"XML table [{table_id}] has no matching IMD table header", table_id)

    imd = Imd(id=table_id, caption=caption, parent_ids=parent_ids)
    for i, tr in enumerate(_body_rows(table, table_id, query)):
        try:
            imd.items.append(decode_imd_row(row_cells(tr, query), query))
        except RowDecodeError as err:
            raise _row_failed(table_id, "IMD", i, err) from err

    return imd


def build_data_elements(
    table: etree._Element,
    query: Optional[DocbookQuery] = None,
) -> list[DataElement]:
    """Build the data element registry entries of a registry table.

    Raises:
        TableBuildError: If the table is not a valid registry table.
    """
    query = query or default_query
    table_id, _, _ = _table_identity(table, query)
    if not has_registry_table_header(table, query):
        raise TableBuildError(f"XML table [{table_id}] has no matching registry table header", table_id)

    elements = []
    for i, tr in enumerate(_body_rows(table, table_id, query)):
        try:
            elements.append(decode_data_element_row(row_cells(tr, query), query))
        except RowDecodeError as err:
            raise _row_failed(table_id, "data element", i, err) from err
    return elements


def build_ciods(chapter: etree._Element, query: Optional[DocbookQuery] = None) -> list[Ciod]:
    """Build every valid CIOD table below a chapter, skipping the rest."""
    query = query or default_query
    ciods = []
    for table in query.descendants(chapter, "table"):
        try:
            ciods.append(build_ciod(table, query))
        except TableBuildError as err:
            logger.error("XML table [%s] is no valid CIOD table: %s", query.xml_id(table), err)
    return ciods


def build_imds(chapter: etree._Element, query: Optional[DocbookQuery] = None) -> list[Imd]:
    """Build every valid IMD table below a chapter, skipping the rest."""
    query = query or default_query
    imds = []
    for table in query.descendants(chapter, "table"):
        try:
            imds.append(build_imd(table, query))
        except TableBuildError as err:
            logger.error("XML table [%s] is no valid IMD table: %s", query.xml_id(table), err)
    return imds
