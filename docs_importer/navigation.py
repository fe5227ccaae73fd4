"""Navigation description parsing and URL rewriting."""
import logging
from typing import Any, List, Optional

import yaml
from pydantic import ValidationError

from .errors import NavigationParseError
from .models import NavNode, NavTree, Release

logger = logging.getLogger(__name__)


def rewrite_urls(nodes: Optional[List[NavNode]], base_url: str) -> Optional[List[NavNode]]:
    """
    Prefix every node url with ``base_url``, recursively.

    Returns a new tree; absent children stay absent and empty ones stay empty.
    """
    if nodes is None:
        return None
    return [
        node.model_copy(update={
            "url": base_url + node.url,
            "children": rewrite_urls(node.children, base_url),
        })
        for node in nodes
    ]


def parse_nav(text: str, path: str) -> Optional[List[NavNode]]:
    """
    Parse a YAML navigation description.

    Args:
        text: nav.yml content
        path: Source path, for error messages

    Returns:
        Top-level nodes, or None for an empty document
    """
    try:
        data: Any = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise NavigationParseError(path, str(e)) from e

    if data is None:
        return None
    if not isinstance(data, list):
        raise NavigationParseError(path, f"expected a sequence, got {type(data).__name__}")

    try:
        return [NavNode.model_validate(item) for item in data]
    except ValidationError as e:
        raise NavigationParseError(path, str(e)) from e


def build_nav(text: str, release: Release, path: str) -> NavTree:
    """
    Build the release-scoped navigation tree.

    Args:
        text: nav.yml content
        release: Release whose url prefixes every node
        path: Source-control path of the description

    Returns:
        NavTree with rewritten urls
    """
    children = rewrite_urls(parse_nav(text, path), release.url)
    logger.debug(
        f"Built nav for {release.id} from {path}: "
        f"{len(children or [])} sections, {sum(1 for _ in walk(children))} nodes"
    )
    return NavTree(path=path, children=children)


def walk(nodes: Optional[List[NavNode]]):
    """Yield every node of a tree, depth first."""
    for node in nodes or []:
        yield node
        yield from walk(node.children)
