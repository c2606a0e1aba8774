"""Document-level term comment workflow."""

from pathlib import Path
from typing import Dict, List, Optional

from docx import Document

from ac_automaton import build_matcher
from drawing_image_extractor import export_document_images

from .comment_store import CommentStore
from .common import DEFAULT_AUTHOR, ApplyResult
from .marker_cleanup import remove_comment_markers
from .navigation import DocxNavigationMixin
from .range_inserter import RangeInserter


class TermCommentApplier(DocxNavigationMixin):
    def __init__(self, docx_path: str, dictionary: Dict[str, str],
                 output_path: str = None, author: str = DEFAULT_AUTHOR,
                 initials: str = None, clear_all_authors: bool = False,
                 verbose: bool = False):
        self.source_path = Path(docx_path)
        self.output_path = Path(output_path) if output_path else \
            self.source_path.with_stem(self.source_path.stem + '_commented')
        self.dictionary = dictionary
        self.author = author
        self.initials = initials
        self.clear_all_authors = clear_all_authors
        self.verbose = verbose

        # Document objects (lazy loaded)
        self.doc: Document = None
        self.store: Optional[CommentStore] = None
        self.result: Optional[ApplyResult] = None

    def load(self):
        """Open the source document and its comment store."""
        self.doc = Document(str(self.source_path))
        self.store = CommentStore(self.doc, self.author, self.initials, verbose=self.verbose)
        return self.doc

    def apply(self) -> ApplyResult:
        """
        Replace this author's comments with fresh term comments.

        1. Remove existing comments by the author (or by everyone) together
           with their range markers and references
        2. Build the matcher once for the whole document
        3. Annotate table paragraphs, then body paragraphs
        4. Write comments.xml back into the package
        """
        if self.doc is None:
            self.load()
        result = ApplyResult()

        # 1. Clear previous run
        clear_author = None if self.clear_all_authors else self.author
        result.removed_ids = self.store.clear_by_author(clear_author)
        remove_comment_markers(self.doc.element, result.removed_ids, verbose=self.verbose)

        # 2. Matcher
        matcher = build_matcher(self.dictionary.keys())
        inserter = RangeInserter(matcher, self.dictionary, self.store, verbose=self.verbose)

        # 3. Paragraphs
        for para_elem in self._iter_paragraphs(self.doc):
            result.paragraphs_visited += 1
            para_result = inserter.annotate_paragraph(para_elem)
            if para_result.annotations:
                result.paragraphs_annotated += 1
                result.annotations.extend(para_result.annotations)

        if self.verbose:
            body = self.doc.element.body
            rs = self._xpath(body, './/w:commentRangeStart')
            rend = self._xpath(body, './/w:commentRangeEnd')
            rf = self._xpath(body, './/w:commentReference')
            print(
                f"[Comments] Markers in document.xml: "
                f"rangeStart={len(rs)} rangeEnd={len(rend)} reference={len(rf)}"
            )

        # 4. Persist comments
        self.store.save()

        self.result = result
        return result

    def export_images(self, output_dir: str) -> List[Path]:
        """Export images embedded in document paragraphs to output_dir."""
        if self.doc is None:
            self.load()
        paragraphs = list(self._iter_paragraphs(self.doc))
        return export_document_images(self.doc, paragraphs, Path(output_dir), verbose=self.verbose)

    def save(self, dry_run: bool = False):
        """Save modified document"""
        if dry_run:
            print(f"[DRY RUN] Would save to: {self.output_path}")
            return

        self.doc.save(str(self.output_path))
        print(f"Saved to: {self.output_path}")
