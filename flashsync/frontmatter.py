"""
Reads the deck name from a document's YAML frontmatter.
"""

from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigurationError
from .parser import split_lines

FRONTMATTER_FENCE = "---"


def read_frontmatter(text: str) -> Optional[Dict[str, Any]]:
    """
    Parse the leading `---` fenced YAML block of a Markdown document.

    Returns:
        Optional[Dict[str, Any]]: The parsed mapping, or None when the
        document does not start with a closed frontmatter block or the block
        is empty.

    Raises:
        ConfigurationError: If the block is not valid YAML or is not a mapping.
    """
    lines = split_lines(text)
    if not lines or lines[0].rstrip() != FRONTMATTER_FENCE:
        return None

    for end, line in enumerate(lines[1:], start=1):
        if line.rstrip() == FRONTMATTER_FENCE:
            break
    else:
        return None

    block = "\n".join(lines[1:end])
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in frontmatter: {e}", e
        ) from e

    if data is None:
        return None
    if not isinstance(data, dict):
        raise ConfigurationError("Frontmatter must be a YAML mapping.")
    return data


def get_deck_name(text: str) -> str:
    """
    Return the `deck` field of the document's frontmatter.

    Raises:
        ConfigurationError: If there is no frontmatter or no usable `deck` field.
    """
    frontmatter = read_frontmatter(text)
    if not frontmatter:
        raise ConfigurationError("No frontmatter found in the current file.")

    deck = frontmatter.get("deck")
    if deck is None or not str(deck).strip():
        raise ConfigurationError("Missing 'deck' field in frontmatter.")
    return str(deck).strip()
