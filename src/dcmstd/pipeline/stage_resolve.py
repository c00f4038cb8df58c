"""Dependency Resolver - close the model under Include references.

Module tables include macro and attribute tables defined elsewhere in
part 03. Starting from the modules already in the model, every include
link that is not yet known is looked up in the document and built. New
modules are appended to the worklist so their own includes are visited in
the same pass; the scan ends when the worklist is exhausted.
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from dcmstd.errors import TableBuildError
from dcmstd.models import DicomStandard
from dcmstd.pipeline.stage_query import DocbookQuery, default_query
from dcmstd.pipeline.stage_tables import build_imd

logger = logging.getLogger(__name__)


class ResolveReport(BaseModel):
    """Outcome of a dependency resolution pass."""

    ok: bool = True
    added_ids: list[str] = Field(default_factory=list, description="Tables built and inserted")
    not_found_ids: list[str] = Field(default_factory=list, description="Link ids absent from the document")
    not_module_ids: list[str] = Field(default_factory=list, description="Tables that are not module tables")


def resolve_dependents(
    document,
    standard: DicomStandard,
    query: Optional[DocbookQuery] = None,
) -> ResolveReport:
    """Find, build and insert every table the known modules include.

    Missing link ids do not stop the scan; they are collected and make the
    report fail. Tables that exist but are not module tables are skipped.

    Args:
        document: Parsed part 03 document (tree or root element).
        standard: Model already holding the chapter A and C definitions.
        query: Tree query collaborator.

    Returns:
        ResolveReport, ``ok`` is False if any link id was not found.
    """
    query = query or default_query
    root = query.root(document)
    report = ResolveReport()

    worklist = standard.imd_ids()
    not_module: set[str] = set()
    not_found: set[str] = set()
    # a table may be stored under an id other than the link that found it
    resolved: set[str] = set()

    i = 0
    while i < len(worklist):
        imd = standard.imd(worklist[i])
        i += 1
        if imd is None:
            continue
        for link_id in imd.include_ids():
            if (
                standard.contains(link_id)
                or link_id in resolved
                or link_id in not_module
                or link_id in not_found
            ):
                continue

            table = query.find_by_id(root, "table", link_id)
            if table is None:
                logger.error("Unable to find XML id: %s", link_id)
                not_found.add(link_id)
                report.not_found_ids.append(link_id)
                report.ok = False
                continue

            try:
                dependent = build_imd(table, query)
            except TableBuildError as err:
                logger.warning(
                    "Unable to build Information Module Definition or attribute table from %s: %s",
                    link_id,
                    err,
                )
                not_module.add(link_id)
                report.not_module_ids.append(link_id)
                continue

            resolved.add(link_id)
            if standard.insert_imd(dependent):
                worklist.append(dependent.id)
                report.added_ids.append(dependent.id)

    return report
