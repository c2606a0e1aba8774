"""Run segments of one paragraph and the flat-offset map used for splitting."""

import copy
from typing import Dict, List, Optional, Tuple

from lxml import etree

from .common import MARKER_START, W, RangeMarker
from .navigation import xpath

# Runs that carry visible paragraph text, in document order
RUN_XPATH = (
    './w:r | ./w:hyperlink/w:r | ./w:ins/w:r | ./w:smartTag/w:r | ./w:fldSimple/w:r'
)

XML_SPACE = '{http://www.w3.org/XML/1998/namespace}space'


def _child_text(child) -> str:
    """Visible text contributed by a single run child element."""
    tag = child.tag
    if tag == f'{W}t':
        return child.text or ''
    if tag == f'{W}tab':
        return '\t'
    if tag in (f'{W}br', f'{W}cr'):
        return '\n'
    if tag == f'{W}noBreakHyphen':
        return '-'
    return ''


class RunSegment:
    """
    A w:r element viewed as one uniformly styled text segment.

    Identity matters: segments are used as dictionary keys, so equality is
    object identity.
    """

    def __init__(self, elem):
        self.elem = elem

    def __repr__(self) -> str:
        return f'RunSegment({self.text!r})'

    @property
    def style(self):
        """The run's w:rPr element (None when the run is unstyled)."""
        return self.elem.find(f'{W}rPr')

    def _content(self) -> List[Tuple[object, str]]:
        return [
            (child, _child_text(child))
            for child in self.elem
            if isinstance(child.tag, str) and child.tag != f'{W}rPr'
        ]

    @property
    def text(self) -> str:
        return ''.join(text for _, text in self._content())

    def split(self, k: int) -> 'RunSegment':
        """
        Split this run so it keeps text[:k]; return a new run holding text[k:].

        The new run is a copy of this one (attributes and w:rPr verbatim)
        inserted directly after it. Non-text children (drawings, field
        characters) stay on the side where they appear.
        """
        right = copy.deepcopy(self.elem)
        for child in list(right):
            if child.tag != f'{W}rPr':
                right.remove(child)

        pos = 0
        moving = False
        for child, text in self._content():
            n = len(text)
            if moving or (pos >= k and n > 0):
                moving = True
                right.append(child)
            elif pos < k < pos + n:
                # Only w:t can straddle the split point
                head, tail = text[:k - pos], text[k - pos:]
                child.text = head
                child.set(XML_SPACE, 'preserve')
                tail_t = etree.SubElement(right, f'{W}t')
                tail_t.text = tail
                tail_t.set(XML_SPACE, 'preserve')
                moving = True
            pos += n

        self.elem.addnext(right)
        return RunSegment(right)


class SegmentMap:
    """
    Per-paragraph flat-text state.

    Maps every flat offset to the segment that owns it, every segment to
    the contiguous range of offsets it owns, and keeps segments in
    paragraph order (a segment's order index is its list position). Also
    holds the range markers recorded against segments until they are
    written into the XML.

    Invariant: ''.join(s.text for s in segments) == text at all times.
    """

    def __init__(self, para_elem):
        self.para_elem = para_elem
        self.segments: List[RunSegment] = []
        self._owner: List[RunSegment] = []
        self._offsets: Dict[RunSegment, range] = {}
        self._start_markers: Dict[RunSegment, List[RangeMarker]] = {}
        self._end_markers: Dict[RunSegment, List[RangeMarker]] = {}
        self._trailing: Optional[RunSegment] = None

        parts = []
        for run in xpath(para_elem, RUN_XPATH):
            if run.find(f'{W}delText') is not None:
                # Tracked deletion: not part of the visible text
                continue
            segment = RunSegment(run)
            text = segment.text
            start = len(self._owner)
            self._offsets[segment] = range(start, start + len(text))
            self._owner.extend([segment] * len(text))
            self.segments.append(segment)
            parts.append(text)
        self.text = ''.join(parts)

    def __len__(self) -> int:
        return len(self.text)

    # ---------------- lookups ----------------

    def owner(self, offset: int) -> RunSegment:
        return self._owner[offset]

    def offsets_of(self, segment: RunSegment) -> range:
        return self._offsets[segment]

    def is_segment_start(self, offset: int) -> bool:
        return self._offsets[self._owner[offset]].start == offset

    def is_segment_end(self, offset: int) -> bool:
        return self._offsets[self._owner[offset]][-1] == offset

    # ---------------- splitting ----------------

    def ensure_trailing_segment(self) -> RunSegment:
        """
        Return the empty run after all paragraph content, appending it once.

        An empty final run left by an earlier pass is reused, so repeated
        runs over the same document do not pile up empty runs.
        """
        if self._trailing is None and self.segments:
            last = self.segments[-1]
            if all(child.tag == f'{W}rPr' for child in last.elem):
                self._trailing = last
        if self._trailing is None:
            run = etree.SubElement(self.para_elem, f'{W}r')
            self._trailing = RunSegment(run)
            self._offsets[self._trailing] = range(len(self.text), len(self.text))
            self.segments.append(self._trailing)
        return self._trailing

    def split_at(self, offset: int) -> RunSegment:
        """
        Make offset a segment boundary and return the segment starting there.

        No-op when offset already starts a segment. offset == len(text)
        returns the (possibly new) empty trailing segment.

        Raises:
            ValueError: offset outside [0, len(text)]
        """
        if offset < 0 or offset > len(self.text):
            raise ValueError(
                f"Split offset {offset} outside paragraph text of length {len(self.text)}"
            )
        if offset == len(self.text):
            return self.ensure_trailing_segment()

        segment = self._owner[offset]
        owned = self._offsets[segment]
        if owned.start == offset:
            return segment

        right = segment.split(offset - owned.start)
        self.segments.insert(self.segments.index(segment) + 1, right)
        self._offsets[segment] = range(owned.start, offset)
        self._offsets[right] = range(offset, owned.stop)
        for pos in range(offset, owned.stop):
            self._owner[pos] = right

        # Pending end markers close text that now lives in the right half
        moved = self._end_markers.pop(segment, None)
        if moved:
            self._end_markers[right] = moved
        return right

    # ---------------- markers ----------------

    def add_marker(self, segment: RunSegment, marker: RangeMarker):
        table = self._start_markers if marker.kind == MARKER_START else self._end_markers
        table.setdefault(segment, []).append(marker)

    def markers_for(self, segment: RunSegment, kind: str) -> List[RangeMarker]:
        table = self._start_markers if kind == MARKER_START else self._end_markers
        return table.get(segment, [])

    def has_markers(self) -> bool:
        return bool(self._start_markers or self._end_markers)

