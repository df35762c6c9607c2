"""Devfile layout normalization.

Workspace resources written against the 2.0 devfile schema keep the
workspace name under ``metadata.name`` and the schema version under
``apiVersion``.  The parser reads the 1.0 layout, so 2.0 trees are rewritten:

- ``metadata.name`` moves to a top-level ``name`` (``metadata`` is dropped
  once empty);
- ``apiVersion`` is renamed to ``specVersion``.

The rewrite is only applied when the layout is explicitly configured as 2.0.
"""

from __future__ import annotations

import copy
from typing import Any

from cherestapis.models.enums import DevfileLayout


def normalize_devfile_tree(tree: dict[str, Any], layout: DevfileLayout) -> dict[str, Any]:
    """Return a copy of ``tree`` rewritten into the 1.0 reading layout."""
    if layout is DevfileLayout.V1:
        return tree
    return _from_v2(tree)


def _from_v2(tree: dict[str, Any]) -> dict[str, Any]:
    result = copy.deepcopy(tree)

    metadata = result.get("metadata")
    if isinstance(metadata, dict) and "name" in metadata:
        result.setdefault("name", metadata.pop("name"))
        if not metadata:
            del result["metadata"]

    if "apiVersion" in result:
        result.setdefault("specVersion", result.pop("apiVersion"))

    return result
