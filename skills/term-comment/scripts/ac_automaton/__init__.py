"""
ABOUTME: Aho-Corasick multi-term matching (trie arena, failure links, scanner)
"""

from .automaton import AcAutomaton, AcNode, fold_text
from .matcher import AcMatcher, MatchSpan


def build_matcher(terms) -> AcMatcher:
    """Build an automaton from terms and wrap it in a matcher."""
    return AcMatcher(AcAutomaton(terms))


__all__ = ['AcAutomaton', 'AcNode', 'AcMatcher', 'MatchSpan', 'build_matcher', 'fold_text']
