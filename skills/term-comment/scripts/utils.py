#!/usr/bin/env python3
"""
ABOUTME: Term dictionary loading for the comment scripts
ABOUTME: XML sanitization and log formatting helpers
"""

import json
from pathlib import Path
from typing import Dict


def sanitize_xml_string(text: str) -> str:
    """
    Remove control characters that are illegal in XML 1.0.

    XML 1.0 allows: #x9 (tab), #xA (LF), #xD (CR), and #x20-#xD7FF, #xE000-#xFFFD, #x10000-#x10FFFF
    This function removes all other control characters (0x00-0x08, 0x0B, 0x0C, 0x0E-0x1F).

    Args:
        text: Text that may contain control characters

    Returns:
        Sanitized text safe for XML. Returns input unchanged if not a non-empty string.
    """
    if not text or not isinstance(text, str):
        return text
    # Keep: \t (0x09), \n (0x0A), \r (0x0D)
    illegal_chars = ''.join(
        chr(c) for c in range(0x20)
        if c not in (0x09, 0x0A, 0x0D)
    )
    return text.translate(str.maketrans('', '', illegal_chars))


def format_text_preview(text: str, max_len: int = 30) -> str:
    """
    Format text for log output: remove newlines and truncate.

    Args:
        text: Text to format
        max_len: Maximum length before truncation

    Returns:
        Clean, truncated text with "..." suffix if truncated
    """
    clean = text.replace('\n', ' ').replace('\r', '').replace('\t', ' ')
    while '  ' in clean:
        clean = clean.replace('  ', ' ')
    clean = clean.strip()
    if len(clean) > max_len:
        return clean[:max_len] + "..."
    return clean


def _add_term(terms: Dict[str, str], term, comment, where: str):
    if not isinstance(term, str) or not isinstance(comment, str):
        raise ValueError(f"Term and comment must be strings ({where}): {term!r} -> {comment!r}")
    if not term:
        print(f"  [Warning] Empty term ignored ({where})")
        return
    if term in terms:
        print(f"  [Warning] Duplicate term '{term}' ignored ({where}), keeping first comment")
        return
    terms[term] = comment


def _add_entry(terms: Dict[str, str], entry, where: str):
    if not isinstance(entry, dict) or 'term' not in entry:
        raise ValueError(f"Expected an object with 'term' and 'comment' fields ({where})")
    _add_term(terms, entry['term'], entry.get('comment', ''), where)


def load_term_dictionary(file_path: str) -> Dict[str, str]:
    """
    Load the term -> comment text dictionary.

    Supported formats:
    1. JSON object: {"term": "comment", ...}
    2. JSON list: [{"term": "...", "comment": "..."}, ...]
    3. JSON wrapper: {"terms": <object or list>}
    4. JSONL (.jsonl): one {"term": "...", "comment": "..."} object per line

    Insertion order is preserved; it decides the order in which terms are
    processed inside each paragraph.

    Args:
        file_path: Path to dictionary file

    Returns:
        Ordered dict of term -> comment text
    """
    path = Path(file_path)
    terms: Dict[str, str] = {}

    if path.suffix == '.jsonl':
        with open(path, 'r', encoding='utf-8') as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                _add_entry(terms, json.loads(line), f"line {line_num}")
        return terms

    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if isinstance(data, dict) and isinstance(data.get('terms'), (dict, list)):
        data = data['terms']

    if isinstance(data, dict):
        for term, comment in data.items():
            _add_term(terms, term, comment, f"key '{term}'")
    elif isinstance(data, list):
        for index, entry in enumerate(data):
            _add_entry(terms, entry, f"entry {index}")
    else:
        raise ValueError(f"Unknown dictionary format in {file_path}")

    return terms
