"""Document loading - read standard parts from DocBook XML."""

import re
from pathlib import Path
from typing import Iterable, Optional, Union

from lxml import etree

from dcmstd.errors import DocumentLoadError
from dcmstd.pipeline.builder import BuildResult, build

_XML_DECLARATION = re.compile(r"^\s*<\?xml[^>]*\?>")


def _parser() -> etree.XMLParser:
    # part 03 is large enough to trip libxml2's default limits
    return etree.XMLParser(huge_tree=True, remove_comments=True)


def load_document(path: Union[str, Path]) -> etree._ElementTree:
    """Parse an XML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        DocumentLoadError: If the file is not well-formed XML.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"XML document not found: {path}")
    try:
        return etree.parse(str(path), _parser())
    except etree.XMLSyntaxError as err:
        raise DocumentLoadError(str(path), str(err)) from err


def load_document_string(xml: Union[str, bytes]) -> etree._ElementTree:
    """Parse an XML string.

    Text is already decoded, so any encoding declaration it carries is
    dropped before parsing; bytes are decoded as they declare.

    Raises:
        DocumentLoadError: If the string is not well-formed XML.
    """
    if isinstance(xml, str):
        xml = _XML_DECLARATION.sub("", xml, count=1)
    try:
        return etree.fromstring(xml, _parser()).getroottree()
    except etree.XMLSyntaxError as err:
        raise DocumentLoadError("<string>", str(err)) from err


def parse(paths: Iterable[Union[str, Path]], keep_partial: Optional[bool] = None) -> BuildResult:
    """Load XML files of the standard and build the model from them."""
    return build([load_document(p) for p in paths], keep_partial=keep_partial)


def parse_string(xml: Union[str, bytes], keep_partial: Optional[bool] = None) -> BuildResult:
    """Build the model from a single XML string."""
    return build([load_document_string(xml)], keep_partial=keep_partial)
