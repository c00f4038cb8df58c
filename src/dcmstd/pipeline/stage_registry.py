"""Data element registry stage (DICOM standard part 06)."""

import logging
from typing import Optional, Sequence

from dcmstd.config import settings
from dcmstd.errors import TableBuildError
from dcmstd.models import DicomStandard
from dcmstd.pipeline.stage_query import DocbookQuery, default_query
from dcmstd.pipeline.stage_tables import build_data_elements

logger = logging.getLogger(__name__)


def build_part06(
    document,
    standard: DicomStandard,
    query: Optional[DocbookQuery] = None,
    table_ids: Optional[Sequence[str]] = None,
) -> bool:
    """Add the registry tables of a part 06 document to the model.

    Args:
        document: Parsed part 06 document (tree or root element).
        standard: Model to add the data elements to.
        query: Tree query collaborator.
        table_ids: Registry table ids, defaults to the configured ones.

    Returns:
        True if every registry table was found and built.
    """
    query = query or default_query
    root = query.root(document)
    if table_ids is None:
        table_ids = settings.registry_table_ids

    ok = True
    for table_id in table_ids:
        table = query.find_by_id(root, "table", table_id)
        if table is None:
            logger.error("Registry table [%s] is missing from the document", table_id)
            ok = False
            continue
        try:
            elements = build_data_elements(table, query)
        except TableBuildError as err:
            logger.error("XML table [%s] is no valid registry table: %s", table_id, err)
            ok = False
            continue

        added = sum(standard.add_data_element(element) for element in elements)
        logger.debug("Registry table [%s]: %d elements, %d new", table_id, len(elements), added)
    return ok
