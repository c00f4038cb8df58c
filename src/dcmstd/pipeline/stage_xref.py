"""Cross-reference decoding for cells citing other tables or sections."""

from typing import Optional

from lxml import etree

from dcmstd.models import XRef
from dcmstd.pipeline.stage_query import DocbookQuery, default_query


def decode_xref(
    node: etree._Element,
    search_nested: bool = True,
    query: Optional[DocbookQuery] = None,
) -> XRef:
    """Decode the citation carried by a node.

    Args:
        node: An ``xref`` element, or a cell containing one.
        search_nested: Look for the first ``xref`` below ``node`` if
            ``node`` is not one itself.
        query: Tree query collaborator.

    Returns:
        XRef with ``linkend`` and ``xrefstyle`` values; missing element or
        attributes give empty strings. Never fails.
    """
    query = query or default_query
    element = None
    if query.local_name(node) == "xref":
        element = node
    elif search_nested:
        found = query.descendants(node, "xref")
        if found:
            element = found[0]
    if element is None:
        return XRef()
    return XRef(
        link_id=query.attr(element, "linkend"),
        style=query.attr(element, "xrefstyle"),
    )
