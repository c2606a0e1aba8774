#!/usr/bin/env python3
"""
ABOUTME: Drawing/image helpers for DOCX paragraphs
ABOUTME: Resolves w:drawing -> a:blip relationships and exports embedded images
"""

from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Dict, Iterable, List

from lxml import etree

NS = {
    "w": "http://schemas.openxmlformats.org/wordprocessingml/2006/main",
    "wp": "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing",
    "a": "http://schemas.openxmlformats.org/drawingml/2006/main",
    "r": "http://schemas.openxmlformats.org/officeDocument/2006/relationships",
}

# Both inline and anchored (floating) pictures end in an a:blip
BLIP_EMBED_XPATH = './/w:r//w:drawing//a:blip/@r:embed'


def collect_paragraph_image_ids(para_elem) -> List[str]:
    """
    Return relationship ids of images embedded in a paragraph's runs.

    Args:
        para_elem: w:p element (python-docx or plain lxml)

    Returns:
        r:embed ids in document order, duplicates kept
    """
    try:
        ids = para_elem.xpath(BLIP_EMBED_XPATH)
    except etree.XPathEvalError:
        ids = para_elem.xpath(BLIP_EMBED_XPATH, namespaces=NS)
    return [str(rel_id) for rel_id in ids]


@dataclass
class ImageExportContext:
    """Tracks exported parts and file names for one export directory."""

    output_dir: Path
    _exported_part_to_path: Dict[str, Path] = field(default_factory=dict)
    _used_filenames: Dict[str, str] = field(default_factory=dict)

    def export_part(self, part) -> Path:
        """Write an image part blob once; return the file it was written to."""
        partname = str(part.partname)
        if partname in self._exported_part_to_path:
            return self._exported_part_to_path[partname]

        filename = self._dedupe_filename(PurePosixPath(partname).name or "image")
        output_file = self.output_dir / filename
        output_file.write_bytes(part.blob)
        self._exported_part_to_path[partname] = output_file
        return output_file

    def _dedupe_filename(self, base_name: str) -> str:
        if base_name not in self._used_filenames:
            self._used_filenames[base_name] = base_name
            return base_name

        stem = Path(base_name).stem
        suffix = Path(base_name).suffix
        index = 2
        while True:
            candidate = f"{stem}_{index}{suffix}"
            if candidate not in self._used_filenames:
                self._used_filenames[candidate] = candidate
                return candidate
            index += 1


def export_document_images(doc, paragraphs: Iterable, output_dir: Path,
                           verbose: bool = False) -> List[Path]:
    """
    Export every image referenced from the given paragraphs.

    External (linked) images have no part in the package and are skipped.

    Args:
        doc: python-docx Document the paragraphs belong to
        paragraphs: w:p elements to scan
        output_dir: Directory to write into (created if missing)
        verbose: Print one line per skipped relationship

    Returns:
        Paths of the written files, each image part written once
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    context = ImageExportContext(output_dir)
    rels = doc.part.rels
    written: List[Path] = []

    for para_elem in paragraphs:
        for rel_id in collect_paragraph_image_ids(para_elem):
            rel = rels.get(rel_id)
            if rel is None or rel.is_external:
                if verbose:
                    print(f"  [Debug] Image relationship {rel_id} has no embedded part, skipped")
                continue
            path = context.export_part(rel.target_part)
            if path not in written:
                written.append(path)
    return written
