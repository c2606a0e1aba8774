#!/usr/bin/env python3
"""
ABOUTME: Shared helpers for term comment tests.
"""

import sys
from pathlib import Path

from lxml import etree

# Add skills/term-comment/scripts directory to path (must be before import)
_scripts_dir = Path(__file__).parent.parent / 'skills' / 'term-comment' / 'scripts'
sys.path.insert(0, str(_scripts_dir))

from docx_comment.common import NS  # noqa: E402  # type: ignore

W = f'{{{NS["w"]}}}'

NSMAP = {
    'w': NS['w'],
    'w14': NS['w14'],
    'r': NS['r'],
    'wp': NS['wp'],
    'a': NS['a'],
}


# ============================================================
# Paragraph Builders
# ============================================================

def create_paragraph_xml(runs, para_id: str = "12345678") -> etree.Element:
    """
    Create a paragraph element with one w:r per entry.

    Args:
        runs: List of run texts, or (text, bold) tuples for styled runs
        para_id: w14:paraId attribute value

    Returns:
        lxml Element representing <w:p>
    """
    p = etree.Element(f'{W}p', nsmap=NSMAP)
    p.set(f'{{{NS["w14"]}}}paraId', para_id)
    etree.SubElement(p, f'{W}pPr')
    for run in runs:
        text, bold = run if isinstance(run, tuple) else (run, False)
        r = etree.SubElement(p, f'{W}r')
        if bold:
            rPr = etree.SubElement(r, f'{W}rPr')
            etree.SubElement(rPr, f'{W}b')
        t = etree.SubElement(r, f'{W}t')
        t.text = text
    return p


def create_drawing_run(rel_id: str = "rId5") -> etree.Element:
    """Create a run holding an inline picture that references rel_id."""
    run_xml = f'''<w:r xmlns:w="{NS['w']}" xmlns:wp="{NS['wp']}" xmlns:a="{NS['a']}"
            xmlns:r="{NS['r']}"
            xmlns:pic="http://schemas.openxmlformats.org/drawingml/2006/picture">
        <w:drawing>
            <wp:inline>
                <a:graphic>
                    <a:graphicData>
                        <pic:pic>
                            <pic:blipFill><a:blip r:embed="{rel_id}"/></pic:blipFill>
                        </pic:pic>
                    </a:graphicData>
                </a:graphic>
            </wp:inline>
        </w:drawing>
    </w:r>'''
    return etree.fromstring(run_xml)


# ============================================================
# Inspection Helpers
# ============================================================

def run_text(run) -> str:
    return ''.join(t.text or '' for t in run.iter(f'{W}t'))


def run_texts(p) -> list:
    """Texts of the runs that hold w:t content (reference runs excluded)."""
    return [run_text(r) for r in p.iter(f'{W}r') if r.find(f'{W}t') is not None]


def visible_text(p) -> str:
    return ''.join(t.text or '' for t in p.iter(f'{W}t'))


def marker_sequence(p) -> list:
    """
    Flatten direct paragraph children into readable tokens.

    Examples: 'r:fund', 'start:1', 'end:1', 'ref:1'
    """
    tokens = []
    for child in p:
        if child.tag == f'{W}commentRangeStart':
            tokens.append(f"start:{child.get(f'{W}id')}")
        elif child.tag == f'{W}commentRangeEnd':
            tokens.append(f"end:{child.get(f'{W}id')}")
        elif child.tag == f'{W}r':
            ref = child.find(f'{W}commentReference')
            if ref is not None:
                tokens.append(f"ref:{ref.get(f'{W}id')}")
            else:
                tokens.append(f"r:{run_text(child)}")
    return tokens


def comment_ids(root, tag: str) -> list:
    return [elem.get(f'{W}id') for elem in root.iter(f'{W}{tag}')]
