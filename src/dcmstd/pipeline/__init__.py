"""Pipeline stages extracting the standard model from DocBook XML.

Stages (leaf first):
1. stage_query - path queries over element trees (lxml)
2. stage_text - cell text normalization
3. stage_xref - cross-reference decoding
4. stage_rows - row classification and decoding
5. stage_tables - table validation and building
6. stage_resolve - include dependency resolution
7. stage_registry - data element registry (part 06)
8. builder - orchestration into a DicomStandard
9. stage_load - reading XML files and strings

Each stage takes the tree query collaborator as an explicit argument and
can be used on its own.
"""

from .builder import BuildResult, build, build_part03
from .stage_load import load_document, load_document_string, parse, parse_string
from .stage_query import DocbookQuery, default_query
from .stage_registry import build_part06
from .stage_resolve import ResolveReport, resolve_dependents
from .stage_rows import (
    decode_ciod_row,
    decode_data_element_row,
    decode_imd_row,
    decode_usage,
    decode_vrs,
    row_cells,
)
from .stage_tables import (
    build_ciod,
    build_ciods,
    build_data_elements,
    build_imd,
    build_imds,
    has_ciod_table_header,
    has_imd_table_header,
    has_registry_table_header,
    table_caption,
)
from .stage_text import (
    attribute_has_include,
    attribute_name,
    sequence_item_depth,
    trim_ws_nl,
)
from .stage_xref import decode_xref

__all__ = [
    # Query
    "DocbookQuery",
    "default_query",
    # Text
    "attribute_has_include",
    "attribute_name",
    "sequence_item_depth",
    "trim_ws_nl",
    # References
    "decode_xref",
    # Rows
    "decode_ciod_row",
    "decode_data_element_row",
    "decode_imd_row",
    "decode_usage",
    "decode_vrs",
    "row_cells",
    # Tables
    "build_ciod",
    "build_ciods",
    "build_data_elements",
    "build_imd",
    "build_imds",
    "has_ciod_table_header",
    "has_imd_table_header",
    "has_registry_table_header",
    "table_caption",
    # Resolution
    "ResolveReport",
    "resolve_dependents",
    # Registry
    "build_part06",
    # Build
    "BuildResult",
    "build",
    "build_part03",
    # Loading
    "load_document",
    "load_document_string",
    "parse",
    "parse_string",
]
