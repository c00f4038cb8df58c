"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest
from lxml import etree

from dcmstd.pipeline import DocbookQuery, load_document

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def element(xml: str) -> etree._Element:
    """Parse an inline XML snippet into its root element."""
    return etree.fromstring(xml.strip())


def imd_table(rows: str, table_id: str = "table_T-1", caption: str = "Test Module Attributes") -> str:
    """Wrap body rows into a module table with a typed header."""
    return f"""
        <table xml:id="{table_id}">
          <caption>{caption}</caption>
          <thead>
            <tr><th>Attribute Name</th><th>Tag</th><th>Type</th><th>Attribute Description</th></tr>
          </thead>
          <tbody>{rows}</tbody>
        </table>
    """


def ciod_table(rows: str, table_id: str = "table_A.T-1", caption: str = "Test IOD Modules") -> str:
    """Wrap body rows into a CIOD table."""
    return f"""
        <table xml:id="{table_id}">
          <caption>{caption}</caption>
          <thead>
            <tr><th>IE</th><th>Module</th><th>Reference</th><th>Usage</th></tr>
          </thead>
          <tbody>{rows}</tbody>
        </table>
    """


@pytest.fixture
def fixtures_dir():
    """Directory holding the DocBook extracts."""
    return FIXTURES_DIR


@pytest.fixture
def part03_path():
    """Path to the part 03 extract."""
    return FIXTURES_DIR / "part03.xml"


@pytest.fixture
def part06_path():
    """Path to the part 06 extract."""
    return FIXTURES_DIR / "part06.xml"


@pytest.fixture
def part03_tree(part03_path):
    """Parsed part 03 extract."""
    return load_document(part03_path)


@pytest.fixture
def part06_tree(part06_path):
    """Parsed part 06 extract."""
    return load_document(part06_path)


@pytest.fixture
def query():
    """A fresh tree query collaborator."""
    return DocbookQuery()
