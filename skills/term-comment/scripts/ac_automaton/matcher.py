"""Single-pass multi-term matching against a built AcAutomaton."""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from .automaton import ROOT, AcAutomaton, AcNode, fold_char

DEFAULT_MASK_CHAR = '*'


@dataclass(frozen=True)
class MatchSpan:
    """One term occurrence in flat-text coordinates (end is inclusive)."""
    term: str
    start: int
    end: int


class AcMatcher:
    """
    Scans text against a read-only automaton.

    All scan state is local to each call, so one matcher can be shared
    across paragraphs (and threads) safely.
    """

    def __init__(self, automaton: AcAutomaton):
        self.automaton = automaton

    def _step(self, current: int, ch: str) -> int:
        """Advance one character, following failure links on mismatch."""
        nodes = self.automaton.nodes
        while ch not in nodes[current].children and current != ROOT:
            current = nodes[current].fail
        return nodes[current].children.get(ch, ROOT)

    def _scan(self, text: str) -> Iterator[Tuple[int, int]]:
        """Yield (position, node index) after consuming each character."""
        current = ROOT
        for i, ch in enumerate(text):
            current = self._step(current, fold_char(ch))
            yield i, current

    def _longest_terminal(self, index: int) -> Optional[AcNode]:
        """First terminal node on the failure chain starting at index."""
        nodes = self.automaton.nodes
        while index != ROOT:
            if nodes[index].is_end:
                return nodes[index]
            index = nodes[index].fail
        return None

    def match(self, text: str) -> Dict[str, List[int]]:
        """
        Find every occurrence of every term.

        The whole failure chain of the current node is walked at each
        position, so a term that is a suffix of another (or any overlapping
        term ending at the same place) is reported alongside it.

        Args:
            text: Flat text to scan

        Returns:
            Mapping of dictionary term -> ascending list of start offsets.
            Terms appear in the order their first occurrence was found.
        """
        nodes = self.automaton.nodes
        found: Dict[str, List[int]] = {}
        for i, current in self._scan(text):
            node_index = current
            while node_index != ROOT:
                node = nodes[node_index]
                if node.is_end:
                    found.setdefault(node.term, []).append(i - node.match_length + 1)
                node_index = node.fail
        return found

    def find_spans(self, text: str) -> List[MatchSpan]:
        """Return match() results as spans ordered by (start, end)."""
        spans = []
        for term, starts in self.match(text).items():
            for start in starts:
                spans.append(MatchSpan(term, start, start + len(term) - 1))
        spans.sort(key=lambda s: (s.start, s.end))
        return spans

    def filter(self, text: str, mask: str = DEFAULT_MASK_CHAR) -> str:
        """
        Mask matched terms in text.

        Unlike match(), only the longest term ending at each position is
        used and masking never goes back over already-masked characters, so
        part of an overlapping match may stay visible. Unmatched characters
        keep their original case.

        Args:
            text: Text to mask
            mask: Single replacement character

        Returns:
            Masked copy of text ("" for empty input)
        """
        if not text:
            return ''
        nodes = self.automaton.nodes
        result = None
        cursor = 0
        for i, current in self._scan(text):
            node = self._longest_terminal(current)
            if node is None:
                continue
            if result is None:
                result = list(text)
            start = max(i - node.match_length + 1, cursor)
            for pos in range(start, i + 1):
                result[pos] = mask
            cursor = i + 1
        return text if result is None else ''.join(result)
