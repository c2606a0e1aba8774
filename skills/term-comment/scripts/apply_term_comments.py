#!/usr/bin/env python3
"""
ABOUTME: Adds Word comments to every occurrence of dictionary terms in a DOCX file
ABOUTME: Re-running for the same author replaces that author's previous comments
"""

import argparse
import os
import sys
from collections import Counter

from docx_comment import TermCommentApplier
from docx_comment.common import DEFAULT_AUTHOR
from utils import format_text_preview, load_term_dictionary

# ============================================================
# Main Function
# ============================================================

def main() -> int:
    parser = argparse.ArgumentParser(
        description="Comment dictionary term occurrences in a Word document"
    )
    parser.add_argument('docx_file', help='Source document (.docx)')
    parser.add_argument('dictionary_file',
                       help='Term dictionary (JSON object, JSON list or JSONL)')
    parser.add_argument('-o', '--output',
                       help='Output file path (default: <source>_commented.docx)')
    parser.add_argument('--author', default=os.getenv('TERM_COMMENT_AUTHOR', DEFAULT_AUTHOR),
                       help=f'Comment author; existing comments by this author are '
                            f'replaced (default: $TERM_COMMENT_AUTHOR or {DEFAULT_AUTHOR})')
    parser.add_argument('--initials',
                       help='Author initials for comments (default: first 2 chars of author)')
    parser.add_argument('--all-authors', action='store_true',
                       help='Remove existing comments from every author, not only --author')
    parser.add_argument('--export-images', metavar='DIR',
                       help='Also export images embedded in paragraphs to DIR')
    parser.add_argument('--dry-run', action='store_true',
                       help='Process the document but do not save')
    parser.add_argument('-v', '--verbose', action='store_true',
                       help='Verbose output')

    args = parser.parse_args()

    try:
        dictionary = load_term_dictionary(args.dictionary_file)

        applier = TermCommentApplier(
            args.docx_file,
            dictionary,
            output_path=args.output,
            author=args.author,
            initials=args.initials,
            clear_all_authors=args.all_authors,
            verbose=args.verbose
        )

        print(f"Source file: {applier.source_path}")
        print(f"Output to: {applier.output_path}")
        print(f"Terms: {len(dictionary)}")
        if args.verbose:
            print("-" * 50)

        if args.export_images:
            exported = applier.export_images(args.export_images)
            print(f"Exported {len(exported)} image(s) to: {args.export_images}")

        result = applier.apply()

        per_term = Counter(a.term for a in result.annotations)
        if per_term:
            print("\nMatched terms:")
            for term, count in per_term.most_common():
                print(f"  - {format_text_preview(term)}: {count}")

        print("-" * 50)
        print(f"Completed: {len(result.annotations)} comment(s) in "
              f"{result.paragraphs_annotated}/{result.paragraphs_visited} paragraph(s), "
              f"{len(result.removed_ids)} previous comment(s) removed")

        applier.save(dry_run=args.dry_run)
        return 0

    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
