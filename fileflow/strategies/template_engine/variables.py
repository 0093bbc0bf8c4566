"""Template variable engine.

Finds `{{ name }}` placeholders in document text, extracts the set of
distinct variable names and substitutes values for them.

The same compiled pattern is used for extraction, substitution and
document rendering so the three paths agree on the syntax:
`{{`, optional whitespace, a name without `}`, optional whitespace, `}}`.
"""

import html
import logging
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from fileflow.interfaces.extractor import BaseExtractor, ExtractedText

logger = logging.getLogger(__name__)

PLACEHOLDER_PATTERN = re.compile(r"\{\{\s*([^}]+?)\s*\}\}")
XML_TAG = re.compile(r"<[^>]+>")
OPEN_DELIMITER = "{{"
CLOSE_DELIMITER = "}}"


def normalize_value(value: Any) -> str:
    """Normalize a ValueMap entry to the string that gets substituted."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def strip_tags(markup: str) -> str:
    """Remove XML/HTML tags from a text region and decode its entities."""
    return html.unescape(XML_TAG.sub("", markup))


def extract_variables(text: str) -> set[str]:
    """Extract distinct variable names from text.

    Args:
        text: Text that may contain placeholders.

    Returns:
        The set of trimmed, non-empty variable names.
    """
    names: set[str] = set()
    for match in PLACEHOLDER_PATTERN.finditer(text or ""):
        name = match.group(1).strip()
        if name:
            names.add(name)
    return names


def extract_from_regions(body: str, regions: Mapping[str, str] | Iterable[str] = ()) -> set[str]:
    """Extract variable names from a body and its auxiliary regions.

    Auxiliary regions (headers, footers) are stripped of markup before
    scanning so that placeholders split across XML runs are still found.

    Args:
        body: The document body text.
        regions: Auxiliary text regions, as a mapping or any iterable of strings.

    Returns:
        The union of names found in every region.
    """
    names = extract_variables(body)
    region_texts = regions.values() if isinstance(regions, Mapping) else regions
    for region in region_texts:
        names |= extract_variables(strip_tags(region))
    return names


def substitute(text: str, values: Mapping[str, Any]) -> str:
    """Replace every placeholder in text with its mapped value.

    Matching is case-sensitive on the name and ignores whitespace inside
    the delimiters. Names missing from `values`, and None values, are
    replaced by the empty string.

    Args:
        text: Source text.
        values: Variable name to value mapping.

    Returns:
        The text with all placeholders resolved.
    """
    if OPEN_DELIMITER not in text:
        return text

    def _replace(match: re.Match[str]) -> str:
        return normalize_value(values.get(match.group(1).strip()))

    return PLACEHOLDER_PATTERN.sub(_replace, text)


def find_malformed_placeholders(text: str) -> list[str]:
    """Find placeholder fragments that cannot be resolved.

    Detects empty tags (`{{ }}`), opening delimiters that are never
    closed and closing delimiters that were never opened.

    Args:
        text: Text to inspect.

    Returns:
        The offending fragments, in document order.
    """
    problems: list[str] = []
    pos = 0
    while True:
        open_at = text.find(OPEN_DELIMITER, pos)
        close_at = text.find(CLOSE_DELIMITER, pos)

        if open_at == -1 and close_at == -1:
            break

        if open_at == -1 or (close_at != -1 and close_at < open_at):
            start = max(0, close_at - 20)
            problems.append(text[start:close_at + 2])
            pos = close_at + 2
            continue

        match = PLACEHOLDER_PATTERN.match(text, open_at)
        if match is not None and match.group(1).strip() and OPEN_DELIMITER not in match.group(1):
            pos = match.end()
            continue

        end = text.find(CLOSE_DELIMITER, open_at + 2)
        next_open = text.find(OPEN_DELIMITER, open_at + 2)
        if end != -1 and (next_open == -1 or end < next_open):
            # Closed, but without a usable name.
            problems.append(text[open_at:end + 2])
            pos = end + 2
        else:
            problems.append(text[open_at:open_at + 22])
            pos = open_at + 2

    return problems


class VariableEngine:
    """Extracts variables from documents using pluggable extractors.

    Header and footer regions that cannot be read degrade to body-only
    extraction; extraction never fails because an auxiliary region is
    missing.
    """

    def __init__(self, extractors: Iterable[BaseExtractor]) -> None:
        """Initialize the engine.

        Args:
            extractors: Extractors to choose from by file extension.
        """
        self._extractors = list(extractors)

    def get_extractor(self, file_path: str) -> BaseExtractor:
        """Return the extractor that handles a file.

        Raises:
            ValueError: If no extractor supports the file type.
        """
        for extractor in self._extractors:
            if extractor.supports_file(file_path):
                return extractor
        raise ValueError(f"Unsupported file type: {Path(file_path).suffix or file_path}")

    async def extract_document(self, file_path: str) -> tuple[set[str], ExtractedText]:
        """Extract the variable set from a document.

        Args:
            file_path: Path to the document.

        Returns:
            The distinct variable names and the extracted text they came from.

        Raises:
            FileNotFoundError: If the file doesn't exist.
            ValueError: If the file type is unsupported.
        """
        extracted = await self.get_extractor(file_path).extract(file_path)

        for warning in extracted.warnings:
            logger.warning(f"Extraction warning for {file_path}: {warning}")

        names = extract_from_regions(extracted.content, extracted.regions)
        logger.info(
            f"Extracted {len(names)} variables from {file_path} "
            f"({len(extracted.regions)} auxiliary regions)"
        )
        return names, extracted
