"""
ABOUTME: Inserts Word comments on dictionary term occurrences in DOCX paragraphs
"""

from .applier import TermCommentApplier
from .comment_store import CommentStore
from .common import NS, Annotation, ApplyResult, ParagraphResult, RangeMarker
from .marker_cleanup import remove_comment_markers
from .range_inserter import RangeInserter
from .segments import RunSegment, SegmentMap

__all__ = [
    'NS',
    'Annotation',
    'ApplyResult',
    'CommentStore',
    'ParagraphResult',
    'RangeInserter',
    'RangeMarker',
    'RunSegment',
    'SegmentMap',
    'TermCommentApplier',
    'remove_comment_markers',
]
