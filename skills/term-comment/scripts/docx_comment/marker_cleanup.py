"""Removal of comment range markers and references by comment id."""

from typing import Iterable

from .common import COMMENT_MARKER_TAGS, W


def remove_comment_markers(root, comment_ids: Iterable[int], verbose: bool = False) -> int:
    """
    Remove commentRangeStart/commentRangeEnd/commentReference for the given ids.

    Markers may sit at any depth (inside w:hyperlink, w:ins, table cells,
    or at odd levels in documents edited by other tools), so the whole tree
    under root is swept with an iterative walk. A reference run left with
    nothing but its w:rPr is removed as well.

    Args:
        root: Element to sweep (usually the w:document or w:body element)
        comment_ids: Ids of cleared comments
        verbose: Print a summary line

    Returns:
        Number of marker elements removed
    """
    targets = {str(cid) for cid in comment_ids}
    if not targets:
        return 0

    # Materialize first: removing while iterating would skip siblings
    doomed = [
        elem for elem in root.iter(*COMMENT_MARKER_TAGS)
        if elem.get(f'{W}id') in targets
    ]
    for elem in doomed:
        parent = elem.getparent()
        if parent is None:
            continue
        parent.remove(elem)
        if parent.tag == f'{W}r' and all(child.tag == f'{W}rPr' for child in parent):
            holder = parent.getparent()
            if holder is not None:
                holder.remove(parent)

    if verbose:
        print(f"[Comments] Removed {len(doomed)} marker(s) for {len(targets)} cleared comment(s)")
    return len(doomed)
