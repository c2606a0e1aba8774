"""Aho-Corasick trie construction over an index-addressed node arena."""

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

ROOT = 0


def fold_char(ch: str) -> str:
    """
    Case-fold a single character without changing text length.

    str.lower() can expand some characters (e.g. 'İ' -> 'i̇'), which would
    shift every flat-text offset after it. Such characters are kept as-is.
    """
    lowered = ch.lower()
    return lowered if len(lowered) == 1 else ch


def fold_text(text: str) -> str:
    """Case-fold text character by character (length preserving)."""
    return ''.join(fold_char(ch) for ch in text)


@dataclass
class AcNode:
    """Trie node. children and fail hold arena indices, not node objects."""
    children: Dict[str, int] = field(default_factory=dict)
    fail: int = ROOT
    is_end: bool = False
    match_length: int = 0        # Only meaningful when is_end
    term: Optional[str] = None   # Dictionary term that first claimed this node


class AcAutomaton:
    """
    Trie plus failure links built from a term list.

    Terms are case-folded on insert and empty terms are skipped. When two
    terms fold onto the same trie path the first one inserted keeps the
    terminal node (its term and match_length are never overwritten).

    The automaton is read-only once constructed.
    """

    def __init__(self, terms: Iterable[str] = ()):
        self.nodes: List[AcNode] = [AcNode()]
        self.term_count = 0
        for term in terms:
            self._insert(term)
        self._build_fail_links()

    @property
    def root(self) -> AcNode:
        return self.nodes[ROOT]

    def __len__(self) -> int:
        return len(self.nodes)

    def child(self, index: int, ch: str) -> Optional[int]:
        """Return the arena index of the child for ch, or None."""
        return self.nodes[index].children.get(ch)

    def _insert(self, term: str):
        if not term:
            return
        current = ROOT
        for ch in fold_text(term):
            node = self.nodes[current]
            next_index = node.children.get(ch)
            if next_index is None:
                next_index = len(self.nodes)
                self.nodes.append(AcNode())
                node.children[ch] = next_index
            current = next_index

        terminal = self.nodes[current]
        if not terminal.is_end:
            terminal.is_end = True
            terminal.match_length = len(term)
            terminal.term = term
            self.term_count += 1

    def _build_fail_links(self):
        """
        Compute failure links breadth-first.

        A node's link depends on its parent's link, so nodes are finalized
        level by level: all depth-1 nodes point to the root, then each deeper
        node follows its parent's failure chain until some node has a child
        for the same character.
        """
        queue = deque()
        for child_index in self.root.children.values():
            self.nodes[child_index].fail = ROOT
            queue.append(child_index)

        while queue:
            parent_index = queue.popleft()
            parent = self.nodes[parent_index]
            for ch, child_index in parent.children.items():
                queue.append(child_index)
                fallback = parent.fail
                while fallback != ROOT and ch not in self.nodes[fallback].children:
                    fallback = self.nodes[fallback].fail
                self.nodes[child_index].fail = self.nodes[fallback].children.get(ch, ROOT)
