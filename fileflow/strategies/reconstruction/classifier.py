"""Structural line classifier.

Maps one line of extracted text to a semantic block kind. The rules
overlap, so they are evaluated in a fixed order and the first match wins:

1. Heading      - fully upper-case, 3 < length < 100
2. Sub-heading  - 5 < length < 80, ends with ':' or starts "Xy"
3. Table row    - a tab or a run of 2+ whitespace characters
4. Numbered     - "1. ..."
5. Bullet       - "• ...", "- ...", "* ..."
6. Emphasized   - 10 < length < 200 and bold markers, all caps or capitalised
7. Paragraph
"""

import re

from fileflow.interfaces.blocks import BlockKind

SUBHEADING_START = re.compile(r"^[A-Z][a-z]")
TABLE_GAP = re.compile(r"\s{2,}|\t")
NUMBERED_ITEM = re.compile(r"^\d+\.\s")
BULLET_ITEM = re.compile(r"^[•\-\*]\s")
CAPITALISED = re.compile(r"^[A-Z]")
BOLD_MARKERS = ("**", "__")


def is_heading(line: str) -> bool:
    return line.isupper() and 3 < len(line) < 100


def is_subheading(line: str) -> bool:
    return 5 < len(line) < 80 and (
        line.endswith(":") or SUBHEADING_START.match(line) is not None
    )


def is_table_row(line: str) -> bool:
    return TABLE_GAP.search(line) is not None


def is_numbered_item(line: str) -> bool:
    return NUMBERED_ITEM.match(line) is not None


def is_bullet_item(line: str) -> bool:
    return BULLET_ITEM.match(line) is not None


def is_emphasized(line: str) -> bool:
    return 10 < len(line) < 200 and (
        any(marker in line for marker in BOLD_MARKERS)
        or line.isupper()
        or CAPITALISED.match(line) is not None
    )


# Order matters: categories are not mutually exclusive.
_RULES: tuple[tuple[BlockKind, int], ...] = (
    (BlockKind.HEADING, 1),
    (BlockKind.HEADING, 2),
    (BlockKind.TABLE_ROW, 0),
    (BlockKind.NUMBERED_ITEM, 0),
    (BlockKind.BULLET_ITEM, 0),
    (BlockKind.EMPHASIZED, 0),
)
_PREDICATES = (
    is_heading,
    is_subheading,
    is_table_row,
    is_numbered_item,
    is_bullet_item,
    is_emphasized,
)


def classify(line: str) -> tuple[BlockKind, int]:
    """Classify a line and return its kind together with a heading level.

    Args:
        line: One line of extracted text. Surrounding whitespace is ignored.

    Returns:
        (kind, level) where level is 1 for headings, 2 for sub-headings
        and 0 for every other kind.
    """
    line = line.strip()
    if not line:
        return BlockKind.BLANK, 0

    for predicate, (kind, level) in zip(_PREDICATES, _RULES):
        if predicate(line):
            return kind, level

    return BlockKind.PARAGRAPH, 0


def classify_line(line: str) -> BlockKind:
    """Classify a line of text into a block kind.

    Args:
        line: One line of extracted text.

    Returns:
        The block kind of the first matching rule.
    """
    return classify(line)[0]
