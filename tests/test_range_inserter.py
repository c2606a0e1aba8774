#!/usr/bin/env python3
"""
ABOUTME: Tests for per-paragraph comment range insertion
"""

import pytest
from docx import Document
from lxml import etree

from _term_comment_helpers import (
    W, create_paragraph_xml, marker_sequence, run_texts, visible_text, comment_ids,
)

from ac_automaton import build_matcher  # noqa: E402
from docx_comment import CommentStore, RangeInserter  # noqa: E402


def _annotate(p, dictionary, store=None):
    if store is None:
        store = CommentStore(Document(), author='tester')
    inserter = RangeInserter(build_matcher(dictionary.keys()), dictionary, store)
    return inserter.annotate_paragraph(p), store


class TestSingleOccurrence:

    def test_term_inside_single_run(self):
        p = create_paragraph_xml(["a fund raising plan"])
        result, store = _annotate(p, {"fund": "Avoid this term"})

        assert run_texts(p) == ["a ", "fund", " raising plan"]
        assert marker_sequence(p) == [
            'r:a ', 'start:1', 'r:fund', 'end:1', 'ref:1', 'r: raising plan',
        ]
        assert visible_text(p) == "a fund raising plan"
        assert [(a.id, a.term, a.text) for a in result.annotations] == \
            [(1, "fund", "Avoid this term")]
        assert store.comments()[0].text == "Avoid this term"

    def test_term_spanning_two_runs(self):
        p = create_paragraph_xml(["fu", "nd raising"])
        _annotate(p, {"fund": "c"})

        assert marker_sequence(p) == [
            'start:1', 'r:fu', 'r:nd', 'end:1', 'ref:1', 'r: raising',
        ]

    def test_term_at_paragraph_end_adds_trailing_run(self):
        p = create_paragraph_xml(["the fund"])
        result, _ = _annotate(p, {"fund": "c"})

        assert marker_sequence(p) == [
            'r:the ', 'start:1', 'r:fund', 'end:1', 'ref:1', 'r:',
        ]
        assert result.segments_before == 1
        assert result.segments_after == 3

    def test_term_is_whole_paragraph(self):
        p = create_paragraph_xml(["fund"])
        _annotate(p, {"fund": "c"})
        assert marker_sequence(p) == ['start:1', 'r:fund', 'end:1', 'ref:1', 'r:']

    def test_split_runs_keep_formatting(self):
        p = create_paragraph_xml([("bold fund here", True)])
        _annotate(p, {"fund": "c"})
        runs = [r for r in p.findall(f'{W}r') if r.find(f'{W}t') is not None]
        assert len(runs) == 3
        for r in runs:
            assert r.find(f'{W}rPr/{W}b') is not None

    def test_case_insensitive_match_keeps_document_text(self):
        p = create_paragraph_xml(["The FUND"])
        result, _ = _annotate(p, {"fund": "c"})
        assert result.annotations[0].term == "fund"
        assert run_texts(p) == ["The ", "FUND"]
        assert visible_text(p) == "The FUND"

    def test_reference_run_is_styled(self):
        p = create_paragraph_xml(["a fund"])
        _annotate(p, {"fund": "c"})
        ref = next(p.iter(f'{W}commentReference'))
        run = ref.getparent()
        assert run.tag == f'{W}r'
        assert run.find(f'{W}rPr/{W}rStyle').get(f'{W}val') == "CommentReference"


class TestMultipleOccurrences:

    def test_repeated_term_gets_one_comment_each(self):
        p = create_paragraph_xml(["fund and fund"])
        result, store = _annotate(p, {"fund": "c"})
        assert [a.id for a in result.annotations] == [1, 2]
        assert len(store) == 2
        assert marker_sequence(p) == [
            'start:1', 'r:fund', 'end:1', 'ref:1', 'r: and ',
            'start:2', 'r:fund', 'end:2', 'ref:2', 'r:',
        ]

    def test_nested_terms_processed_in_dictionary_order(self):
        p = create_paragraph_xml(["a fund raising plan"])
        _annotate(p, {"fund raising": "A", "raising": "B"})
        assert marker_sequence(p) == [
            'r:a ', 'start:1', 'r:fund ', 'start:2', 'r:raising',
            'end:1', 'ref:1', 'end:2', 'ref:2', 'r: plan',
        ]

    def test_dictionary_order_decides_ids(self):
        p = create_paragraph_xml(["a fund raising plan"])
        _annotate(p, {"raising": "B", "fund raising": "A"})
        assert marker_sequence(p) == [
            'r:a ', 'start:2', 'r:fund ', 'start:1', 'r:raising',
            'end:1', 'ref:1', 'end:2', 'ref:2', 'r: plan',
        ]

    def test_crossing_ranges_keep_both_spans(self):
        """A later split inside an already closed range moves its end marker."""
        p = create_paragraph_xml(["fund raising"])
        _annotate(p, {"fund": "A", "und r": "B"})
        assert marker_sequence(p) == [
            'start:1', 'r:f', 'start:2', 'r:und', 'end:1', 'ref:1',
            'r: r', 'end:2', 'ref:2', 'r:aising',
        ]

    def test_every_range_covers_its_term(self):
        p = create_paragraph_xml(["The fund", " raising fund", "raising plan"])
        dictionary = {"fund raising": "A", "raising": "B", "fund": "C", "plan": "D"}
        result, _ = _annotate(p, dictionary)

        for annotation in result.annotations:
            start = next(e for e in p.iter(f'{W}commentRangeStart')
                         if e.get(f'{W}id') == str(annotation.id))
            covered = []
            for elem in start.itersiblings():
                if elem.tag == f'{W}commentRangeEnd' and \
                        elem.get(f'{W}id') == str(annotation.id):
                    break
                if elem.tag == f'{W}r':
                    covered.append(''.join(t.text or '' for t in elem.iter(f'{W}t')))
            assert ''.join(covered).lower() == annotation.term.lower()
        assert visible_text(p) == "The fund raising fundraising plan"

    def test_ids_continue_across_paragraphs(self):
        store = CommentStore(Document(), author='tester')
        p1 = create_paragraph_xml(["fund"])
        p2 = create_paragraph_xml(["fund"])
        _annotate(p1, {"fund": "c"}, store)
        _annotate(p2, {"fund": "c"}, store)
        assert comment_ids(p1, 'commentRangeStart') == ['1']
        assert comment_ids(p2, 'commentRangeStart') == ['2']
        assert len(store) == 2


class TestNoMatch:

    def test_paragraph_without_terms_is_untouched(self):
        p = create_paragraph_xml(["nothing here", " at all"])
        before = etree.tostring(p)
        result, store = _annotate(p, {"fund": "c"})
        assert etree.tostring(p) == before
        assert result.annotations == []
        assert len(store) == 0

    def test_empty_paragraph(self):
        p = create_paragraph_xml([])
        result, _ = _annotate(p, {"fund": "c"})
        assert result.text == ""
        assert result.annotations == []

    @pytest.mark.parametrize("dictionary", [{}, {"": "ignored"}])
    def test_empty_dictionary(self, dictionary):
        p = create_paragraph_xml(["a fund"])
        result, _ = _annotate(p, dictionary)
        assert result.annotations == []
        assert marker_sequence(p) == ['r:a fund']
