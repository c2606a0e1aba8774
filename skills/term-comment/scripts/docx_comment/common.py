#!/usr/bin/env python3
"""
ABOUTME: Shared constants, data classes and marker element builders
ABOUTME: used by the term comment workflow
"""

from dataclasses import dataclass, field
from typing import List, Optional

from lxml import etree


# ============================================================
# Constants
# ============================================================

NS = {
    'w': 'http://schemas.openxmlformats.org/wordprocessingml/2006/main',
    'w14': 'http://schemas.microsoft.com/office/word/2010/wordml',
    'r': 'http://schemas.openxmlformats.org/officeDocument/2006/relationships',
    'wp': 'http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing',
    'a': 'http://schemas.openxmlformats.org/drawingml/2006/main',
}

W = f'{{{NS["w"]}}}'

COMMENTS_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.comments+xml"
COMMENTS_PART_NAME = '/word/comments.xml'

DEFAULT_AUTHOR = 'robot'

MARKER_START = 'start'
MARKER_END = 'end'

# Marker tags swept when comments are cleared
COMMENT_MARKER_TAGS = (
    f'{W}commentRangeStart',
    f'{W}commentRangeEnd',
    f'{W}commentReference',
)

# ============================================================
# Data Classes
# ============================================================

@dataclass
class Annotation:
    """A comment created for one term occurrence"""
    id: int
    author: str
    text: str
    term: Optional[str] = None


@dataclass
class RangeMarker:
    """Pending commentRangeStart/commentRangeEnd for one run"""
    kind: str           # MARKER_START | MARKER_END
    comment_id: int


@dataclass
class ParagraphResult:
    """Outcome of annotating a single paragraph"""
    text: str
    annotations: List[Annotation] = field(default_factory=list)
    segments_before: int = 0
    segments_after: int = 0


@dataclass
class ApplyResult:
    """Outcome of one document-level run"""
    removed_ids: List[int] = field(default_factory=list)
    annotations: List[Annotation] = field(default_factory=list)
    paragraphs_visited: int = 0
    paragraphs_annotated: int = 0

# ============================================================
# Marker Builders
# ============================================================

def make_range_start(comment_id: int):
    """Build <w:commentRangeStart w:id=.../>"""
    elem = etree.Element(f'{W}commentRangeStart', nsmap={'w': NS['w']})
    elem.set(f'{W}id', str(comment_id))
    return elem


def make_range_end(comment_id: int):
    """Build <w:commentRangeEnd w:id=.../>"""
    elem = etree.Element(f'{W}commentRangeEnd', nsmap={'w': NS['w']})
    elem.set(f'{W}id', str(comment_id))
    return elem


def make_reference_run(comment_id: int):
    """Build the CommentReference-styled run holding <w:commentReference/>"""
    ref_xml = f'''<w:r xmlns:w="{NS['w']}">
        <w:rPr><w:rStyle w:val="CommentReference"/></w:rPr>
        <w:commentReference w:id="{comment_id}"/>
    </w:r>'''
    return etree.fromstring(ref_xml)
