"""Navigation helpers: namespaced XPath and paragraph iteration order."""

from typing import Generator, List

from lxml import etree

from .common import NS


def xpath(elem, expr: str) -> List:
    """
    Execute XPath expression with proper namespace handling.

    python-docx's BaseOxmlElement has namespaces pre-registered,
    while pure lxml elements (used in tests) require explicit namespaces.

    Args:
        elem: Element to query (BaseOxmlElement or lxml.etree.Element)
        expr: XPath expression using namespace prefixes (e.g., './/w:p')

    Returns:
        List of matching elements
    """
    try:
        return elem.xpath(expr)
    except etree.XPathEvalError:
        return elem.xpath(expr, namespaces=NS)


class DocxNavigationMixin:
    def _xpath(self, elem, expr: str):
        return xpath(elem, expr)

    def _iter_table_paragraphs(self, table) -> Generator:
        """
        Yield paragraph elements of a table row by row, cell by cell.

        Horizontally or vertically merged cells are returned repeatedly by
        python-docx; each underlying w:tc is visited once. Tables nested in
        cells are visited after the enclosing table, in document order.
        """
        seen_cells = set()
        stack = [table]
        while stack:
            current = stack.pop()
            nested = []
            for row in current.rows:
                for cell in row.cells:
                    if cell._tc in seen_cells:
                        continue
                    seen_cells.add(cell._tc)
                    for paragraph in cell.paragraphs:
                        yield paragraph._p
                    nested.extend(cell.tables)
            # Reverse so the first nested table is processed first
            stack.extend(reversed(nested))

    def _iter_paragraphs(self, doc) -> Generator:
        """
        Yield every paragraph element in processing order.

        Table paragraphs come first (tables in document order), followed
        by top-level body paragraphs in document order.
        """
        for table in doc.tables:
            yield from self._iter_table_paragraphs(table)
        for paragraph in doc.paragraphs:
            yield paragraph._p
