"""Comment store backed by the /word/comments.xml part."""

from datetime import datetime, timezone
from typing import List, Optional

from docx.opc.constants import RELATIONSHIP_TYPE as RT
from docx.opc.packuri import PackURI
from docx.opc.part import Part, XmlPart
from docx.oxml import parse_xml
from lxml import etree

from utils import sanitize_xml_string

from .common import (
    COMMENTS_CONTENT_TYPE,
    COMMENTS_PART_NAME,
    DEFAULT_AUTHOR,
    NS,
    W,
    Annotation,
)


def _comment_id(comment_elem) -> Optional[int]:
    """Numeric w:id of a w:comment element, or None when absent/invalid."""
    try:
        return int(comment_elem.get(f'{W}id'))
    except (TypeError, ValueError):
        return None


class CommentStore:
    """
    Owns comment ids and bodies for one document instance.

    Ids are seeded from the largest w:id already present in comments.xml
    (0 when the document has no comments) and grow by one per created
    comment, so they are unique and strictly increasing within a run.
    A missing or unparsable comments part is treated as an empty store.
    """

    def __init__(self, doc, author: str = DEFAULT_AUTHOR, initials: Optional[str] = None,
                 verbose: bool = False):
        self.doc = doc
        self.author = author
        self.initials = initials if initials else author[:2] if len(author) >= 2 else author
        self.verbose = verbose
        self.timestamp = datetime.now(timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')

        self.part = None
        self.root = None
        self.created: List[Annotation] = []
        self.removed_ids: List[int] = []
        self._load()
        self.max_id = self._scan_max_id()

    def _load(self):
        try:
            self.part = self.doc.part.part_related_by(RT.COMMENTS)
        except KeyError:
            self.part = None

        if self.part is not None:
            try:
                self.root = etree.fromstring(self.part.blob)
            except (etree.XMLSyntaxError, ValueError) as e:
                print(f"  [Warning] Existing comments.xml could not be parsed, starting empty: {e}")
                self.root = None

        if self.root is None:
            self.root = etree.fromstring(
                f'<w:comments xmlns:w="{NS["w"]}" xmlns:w14="{NS["w14"]}"/>'
            )

    def _scan_max_id(self) -> int:
        ids = [_comment_id(c) for c in self.root.findall(f'{W}comment')]
        return max((cid for cid in ids if cid is not None), default=0)

    def __len__(self) -> int:
        return len(self.root.findall(f'{W}comment'))

    def __bool__(self) -> bool:
        # An empty store is still a store
        return True

    def comments(self) -> List[Annotation]:
        """All comments currently in the store, in XML order."""
        result = []
        for comment in self.root.findall(f'{W}comment'):
            text = ''.join(t.text or '' for t in comment.iter(f'{W}t'))
            cid = _comment_id(comment)
            result.append(Annotation(
                id=cid if cid is not None else -1,
                author=comment.get(f'{W}author', ''),
                text=text,
            ))
        return result

    def clear_by_author(self, author: Optional[str]) -> List[int]:
        """
        Remove comments written by author.

        Args:
            author: Exact author name, or None to remove every comment

        Returns:
            Ids of the removed comments, in XML order
        """
        removed = []
        for comment in list(self.root.findall(f'{W}comment')):
            if author is not None and comment.get(f'{W}author') != author:
                continue
            cid = _comment_id(comment)
            self.root.remove(comment)
            if cid is not None:
                removed.append(cid)
            elif self.verbose:
                print("  [Debug] Removed comment without a numeric id")
        self.removed_ids.extend(removed)
        if self.verbose:
            who = 'all authors' if author is None else author
            print(f"[Comments] Cleared {len(removed)} comment(s) by {who}")
        return removed

    def create_annotation(self, text: str, term: Optional[str] = None) -> Annotation:
        """Append a new comment and return it."""
        self.max_id += 1
        comment_elem = etree.SubElement(self.root, f'{W}comment')
        comment_elem.set(f'{W}id', str(self.max_id))
        comment_elem.set(f'{W}author', self.author)
        comment_elem.set(f'{W}date', self.timestamp)
        comment_elem.set(f'{W}initials', self.initials)

        p = etree.SubElement(comment_elem, f'{W}p')
        r = etree.SubElement(p, f'{W}r')
        t = etree.SubElement(r, f'{W}t')
        # Preserve whitespace (Word drops leading/trailing spaces without this)
        t.set('{http://www.w3.org/XML/1998/namespace}space', 'preserve')
        t.text = sanitize_xml_string(text)

        annotation = Annotation(id=self.max_id, author=self.author, text=text, term=term)
        self.created.append(annotation)
        return annotation

    def create(self, text: str, term: Optional[str] = None) -> int:
        """Append a new comment and return its id."""
        return self.create_annotation(text, term).id

    def save(self):
        """Write comments back through the OPC part, creating it if needed."""
        if not self.created and not self.removed_ids:
            return

        blob = etree.tostring(self.root, xml_declaration=True, encoding='UTF-8', standalone=True)

        if self.part is None:
            self.part = Part(
                PackURI(COMMENTS_PART_NAME),
                COMMENTS_CONTENT_TYPE,
                blob,
                self.doc.part.package
            )
            self.doc.part.relate_to(self.part, RT.COMMENTS)
        elif isinstance(self.part, XmlPart):
            # Newer python-docx loads comments.xml as an XmlPart whose blob
            # is serialized from its element tree
            self.part._element = parse_xml(blob)
        else:
            self.part._blob = blob

        if self.verbose:
            print(f"[Comments] Saved {len(self)} comment(s) to comments.xml "
                  f"({len(self.created)} new, {len(self.removed_ids)} removed)")
