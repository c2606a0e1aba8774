"""
Per-paragraph comment insertion.

Runs are split so that every matched term occurrence starts and ends on a
run boundary, then commentRangeStart / commentRangeEnd / commentReference
elements are placed around the affected runs. The visible text and run
formatting are left unchanged.
"""

from typing import Dict

from ac_automaton import AcMatcher

from .comment_store import CommentStore
from .common import (
    MARKER_END,
    MARKER_START,
    ParagraphResult,
    RangeMarker,
    make_range_end,
    make_range_start,
    make_reference_run,
)
from .segments import SegmentMap


class RangeInserter:
    def __init__(self, matcher: AcMatcher, dictionary: Dict[str, str],
                 store: CommentStore, verbose: bool = False):
        self.matcher = matcher
        self.dictionary = dictionary
        self.store = store
        self.verbose = verbose

    def annotate_paragraph(self, para_elem) -> ParagraphResult:
        """
        Comment every dictionary term occurrence in one paragraph.

        Occurrences are handled term by term in dictionary order (not by
        position). Marker positions are only recorded while splitting is
        still going on and are written into the XML once every occurrence
        has been handled, so later splits cannot displace them.

        Args:
            para_elem: w:p element

        Returns:
            ParagraphResult with the paragraph text and created annotations
        """
        seg_map = SegmentMap(para_elem)
        result = ParagraphResult(text=seg_map.text, segments_before=len(seg_map.segments))
        if not seg_map.text:
            result.segments_after = result.segments_before
            return result

        matches = self.matcher.match(seg_map.text)
        for term, comment_text in self.dictionary.items():
            for start in matches.get(term, ()):
                end = start + len(term) - 1
                annotation = self.store.create_annotation(comment_text, term)
                self._mark_start(seg_map, start, annotation.id)
                self._mark_end(seg_map, end, annotation.id)
                result.annotations.append(annotation)

        if seg_map.has_markers():
            self._flush(seg_map)
        result.segments_after = len(seg_map.segments)

        if self.verbose and result.annotations:
            terms = ', '.join(sorted({a.term for a in result.annotations}))
            print(f"  [Debug] {len(result.annotations)} comment(s) [{terms}], "
                  f"runs {result.segments_before} -> {result.segments_after}")
        return result

    def _mark_start(self, seg_map: SegmentMap, start: int, comment_id: int):
        if seg_map.is_segment_start(start):
            segment = seg_map.owner(start)
        else:
            segment = seg_map.split_at(start)
        seg_map.add_marker(segment, RangeMarker(MARKER_START, comment_id))

    def _mark_end(self, seg_map: SegmentMap, end: int, comment_id: int):
        if end == len(seg_map) - 1:
            seg_map.ensure_trailing_segment()
        if not seg_map.is_segment_end(end):
            seg_map.split_at(end + 1)
        # Left-hand side of the boundary keeps the matched text; end markers
        # already pending on it stay where they are
        seg_map.add_marker(seg_map.owner(end), RangeMarker(MARKER_END, comment_id))

    def _flush(self, seg_map: SegmentMap):
        """Write recorded markers into the paragraph XML, starts before ends."""
        for segment in seg_map.segments:
            for marker in seg_map.markers_for(segment, MARKER_START):
                segment.elem.addprevious(make_range_start(marker.comment_id))

        for segment in seg_map.segments:
            anchor = segment.elem
            for marker in seg_map.markers_for(segment, MARKER_END):
                range_end = make_range_end(marker.comment_id)
                anchor.addnext(range_end)
                reference = make_reference_run(marker.comment_id)
                range_end.addnext(reference)
                anchor = reference
