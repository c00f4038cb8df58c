"""Standard Builder - orchestrate the stages into one model.

Flow:
1. Part 03: build CIODs from chapter A and IMDs from chapter C
2. Part 03: resolve include references until the model is closed
3. Part 06: add the data element registry

The build is all-or-nothing: any fatal condition yields a failed result
without a model, unless the caller asks to keep the partial model for
diagnostics.
"""

import logging
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from dcmstd.config import settings
from dcmstd.errors import ChapterMissingError
from dcmstd.models import DicomStandard
from dcmstd.pipeline.stage_query import DocbookQuery, default_query
from dcmstd.pipeline.stage_registry import build_part06
from dcmstd.pipeline.stage_resolve import resolve_dependents
from dcmstd.pipeline.stage_tables import build_ciods, build_imds

logger = logging.getLogger(__name__)


class BuildResult(BaseModel):
    """Outcome of a build.

    ``standard`` is None on failure unless the partial model was requested;
    check ``ok`` before trusting it.
    """

    ok: bool = False
    standard: Optional[DicomStandard] = None
    unresolved_ids: list[str] = Field(default_factory=list)
    not_module_ids: list[str] = Field(default_factory=list)
    error: Optional[str] = None


def build_part03(
    document,
    standard: DicomStandard,
    query: Optional[DocbookQuery] = None,
) -> None:
    """Add the CIODs of chapter A and the IMDs of chapter C to the model.

    Raises:
        ChapterMissingError: If either chapter is absent.
    """
    query = query or default_query
    root = query.root(document)

    chapter_a = query.find_by_id(root, "chapter", settings.ciod_chapter_id)
    if chapter_a is None:
        raise ChapterMissingError(settings.ciod_chapter_id)
    chapter_c = query.find_by_id(root, "chapter", settings.imd_chapter_id)
    if chapter_c is None:
        raise ChapterMissingError(settings.imd_chapter_id)

    for ciod in build_ciods(chapter_a, query):
        standard.insert_ciod(ciod)
    for imd in build_imds(chapter_c, query):
        standard.insert_imd(imd)


def build(
    documents: Iterable,
    query: Optional[DocbookQuery] = None,
    keep_partial: Optional[bool] = None,
) -> BuildResult:
    """Build the standard model from parsed standard documents.

    Documents are selected by the id of their root element; other
    documents are ignored.

    Args:
        documents: Parsed XML documents (trees or root elements).
        query: Tree query collaborator.
        keep_partial: Attach the partial model to a failed result.
            Defaults to ``settings.expose_partial_model``.

    Returns:
        BuildResult with the model when ``ok``.
    """
    query = query or default_query
    if keep_partial is None:
        keep_partial = settings.expose_partial_model

    standard = DicomStandard()
    result = BuildResult()

    def failed(error: str) -> BuildResult:
        logger.error(error)
        result.error = error
        result.standard = standard if keep_partial else None
        return result

    for document in documents:
        root_id = query.xml_id(query.root(document))

        if root_id == settings.part03_root_id:
            try:
                build_part03(document, standard, query)
            except ChapterMissingError as err:
                return failed(str(err))
            report = resolve_dependents(document, standard, query)
            result.unresolved_ids.extend(report.not_found_ids)
            result.not_module_ids.extend(report.not_module_ids)
            if not report.ok:
                return failed("Unable to find all dependent elements: " + ", ".join(report.not_found_ids))

        elif root_id == settings.part06_root_id:
            if not build_part06(document, standard, query):
                return failed("Unable to build the data element registry")

        else:
            logger.debug("Skipping document with root id [%s]", root_id)

    result.ok = True
    result.standard = standard
    logger.info(
        "Built standard model: %(ciods)d CIODs, %(imds)d IMDs, %(data_elements)d data elements",
        standard.summary(),
    )
    return result
