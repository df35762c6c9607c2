"""Devfile parsing.

Parsing is fatal: without a devfile there is no workspace to answer with.
Integrity validation is advisory and lives in ``validator``.
"""

from __future__ import annotations

import yaml
from pydantic import ValidationError

from cherestapis.errors import DevfileParseError
from cherestapis.models.devfile import Devfile


def parse_devfile(text: str) -> Devfile:
    """Parse YAML (or JSON) devfile text.

    Raises ``DevfileParseError`` when the text is not YAML, is not a mapping,
    or does not match the devfile schema.
    """
    try:
        tree = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        msg = f"The devfile is not valid yaml: {exc}"
        raise DevfileParseError(msg) from exc

    if not isinstance(tree, dict):
        msg = f"The devfile must be a mapping, got {type(tree).__name__}"
        raise DevfileParseError(msg)

    try:
        return Devfile.model_validate(tree)
    except ValidationError as exc:
        msg = f"The devfile could not be parsed correctly: {exc}"
        raise DevfileParseError(msg) from exc
