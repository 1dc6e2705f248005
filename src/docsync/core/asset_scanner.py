"""Find relative asset references in the markdown doc tree."""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List

import structlog

logger = structlog.get_logger(__name__)

ASSET_REFERENCE_PATTERN = re.compile(r"\.\./\.\./assets[^\s)\"'>]*")


@dataclass(frozen=True)
class AssetReference:
    """One ``../../assets`` reference inside a markdown file."""

    file: Path
    line: int
    reference: str


def find_markdown_files(base_path: Path) -> List[Path]:
    """
    Recursively list ``*.md`` files under ``base_path``.

    Directories whose name ends with ``.bin`` are skipped.
    """
    files: List[Path] = []
    for item in sorted(base_path.iterdir()):
        if item.is_dir():
            if item.name.endswith(".bin"):
                continue
            files.extend(find_markdown_files(item))
        elif item.suffix == ".md":
            files.append(item)
    return files


def find_asset_references(text: str, file: Path) -> List[AssetReference]:
    """Return every asset reference of ``text`` with its 1-based line number."""
    references = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        for match in ASSET_REFERENCE_PATTERN.finditer(line):
            references.append(
                AssetReference(file=file, line=line_number, reference=match.group(0))
            )
    return references


def scan_docs(base_path: Path) -> List[AssetReference]:
    """
    Scan a docs tree for relative asset references.

    Docs pointing at ``../../assets`` work in the repository but not once
    published, so these are the files whose images need uploading.
    Bytes that are not valid UTF-8 are replaced rather than failing the scan.

    Raises:
        FileNotFoundError: If ``base_path`` does not exist
    """
    if not base_path.is_dir():
        raise FileNotFoundError(f"Docs directory not found: {base_path}")

    references: List[AssetReference] = []
    markdown_files = find_markdown_files(base_path)
    for path in markdown_files:
        text = path.read_text(encoding="utf-8", errors="replace")
        references.extend(find_asset_references(text, path))

    logger.info(
        "docs_scanned",
        base_path=str(base_path),
        files=len(markdown_files),
        references=len(references),
    )
    return references
