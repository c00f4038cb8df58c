"""Tree query collaborator - path lookups over DocBook element trees.

The standard is published as DocBook 5 XML in the
``http://docbook.org/ns/docbook`` namespace, with element identifiers in
``xml:id``. Queries here match on local names so the same code works for
namespaced documents and for plain extracts without a namespace.
"""

from typing import Optional

from lxml import etree

XML_ID = "{http://www.w3.org/XML/1998/namespace}id"

_STRING_VALUE = etree.XPath("string()")


def _step(name: str) -> str:
    if name == "*":
        return "*"
    return f"*[local-name()='{name}']"


class DocbookQuery:
    """XPath backed queries used by all pipeline stages.

    Stage functions take a query instance as an explicit argument; the
    module level ``default_query`` is used when none is given.
    """

    def __init__(self):
        self._cache: dict[str, etree.XPath] = {}

    def _compile(self, expression: str) -> etree.XPath:
        compiled = self._cache.get(expression)
        if compiled is None:
            compiled = etree.XPath(expression)
            self._cache[expression] = compiled
        return compiled

    def find_all(self, node: etree._Element, *path: str) -> list[etree._Element]:
        """Find all elements below ``node`` along a path of child names."""
        expression = "/".join(_step(name) for name in path)
        return [n for n in self._compile(expression)(node) if isinstance(n.tag, str)]

    def find(self, node: etree._Element, *path: str) -> Optional[etree._Element]:
        """Find the first element below ``node`` along a path of child names."""
        found = self.find_all(node, *path)
        return found[0] if found else None

    def descendants(self, node: etree._Element, name: str) -> list[etree._Element]:
        """Find all descendant elements with a local name, in document order."""
        return self._compile(f".//{_step(name)}")(node)

    def find_by_id(
        self,
        node: etree._Element,
        name: str,
        xml_id: str,
    ) -> Optional[etree._Element]:
        """Find the first element with a local name and identifier anywhere in the tree."""
        expression = f"//{_step(name)}[@*[local-name()='id']=$xml_id]"
        found = self._compile(expression)(node, xml_id=xml_id)
        return found[0] if found else None

    def root(self, document) -> etree._Element:
        """Root element of a parsed document or the element itself."""
        if isinstance(document, etree._ElementTree):
            return document.getroot()
        return document

    def local_name(self, node: etree._Element) -> str:
        """Tag name without namespace."""
        if not isinstance(node.tag, str):
            return ""
        return etree.QName(node).localname

    def attr(self, node: etree._Element, name: str) -> str:
        """Attribute value, empty string if absent."""
        return node.get(name, "")

    def xml_id(self, node: etree._Element) -> str:
        """Identifier of an element from ``xml:id`` or ``id``."""
        return node.get(XML_ID) or node.get("id", "")

    def text(self, node: etree._Element) -> str:
        """Concatenation of all descendant text nodes."""
        return str(_STRING_VALUE(node))

    def ancestor_ids(self, node: etree._Element) -> list[str]:
        """Identifiers of all ancestors that carry one, nearest first."""
        ids = []
        for ancestor in node.iterancestors():
            xml_id = self.xml_id(ancestor)
            if xml_id:
                ids.append(xml_id)
        return ids


default_query = DocbookQuery()
