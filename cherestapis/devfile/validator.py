"""Devfile integrity checks.

Validation never blocks workspace construction: each broken rule yields a
``DevfileWarning`` which the caller logs.  Serving a best-effort view beats
refusing to answer.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from cherestapis.models.devfile import Devfile
from cherestapis.models.enums import ComponentType


@dataclass(frozen=True)
class DevfileWarning:
    """One broken integrity rule."""

    code: str
    message: str

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


def validate_devfile(devfile: Devfile) -> list[DevfileWarning]:
    """Run every integrity check and return the warnings in check order."""
    warnings: list[DevfileWarning] = []
    warnings += _duplicates("duplicate-component", "component alias", (c.alias for c in devfile.components))
    warnings += _duplicates("duplicate-command", "command name", (c.name for c in devfile.commands))
    warnings += _duplicates("duplicate-project", "project name", (p.name for p in devfile.projects))
    warnings += _check_editor(devfile)
    warnings += _check_components(devfile)
    warnings += _check_command_targets(devfile)
    return warnings


def _duplicates(code: str, what: str, values: Iterable[str | None]) -> list[DevfileWarning]:
    counts = Counter(v for v in values if v)
    return [DevfileWarning(code, f"Duplicate {what} found: '{value}'") for value, n in counts.items() if n > 1]


def _check_editor(devfile: Devfile) -> list[DevfileWarning]:
    editors = devfile.components_of(ComponentType.CHE_EDITOR)
    if len(editors) > 1:
        ids = ", ".join(e.id or e.alias or "?" for e in editors)
        return [DevfileWarning("multiple-editors", f"Multiple editor components found: {ids}")]
    return []


def _check_components(devfile: Devfile) -> list[DevfileWarning]:
    warnings: list[DevfileWarning] = []
    for component in devfile.components:
        label = component.alias or component.id or component.type
        if component.type == ComponentType.DOCKERIMAGE and not component.image:
            warnings.append(DevfileWarning("missing-image", f"Component '{label}' of type dockerimage has no image"))
        if component.type in (ComponentType.KUBERNETES, ComponentType.OPENSHIFT) and not (
            component.reference or component.reference_content
        ):
            warnings.append(
                DevfileWarning(
                    "missing-reference",
                    f"Component '{label}' of type {component.type} has neither reference nor referenceContent",
                )
            )
        if component.type in (ComponentType.CHE_EDITOR, ComponentType.CHE_PLUGIN) and not (
            component.id or component.reference
        ):
            warnings.append(DevfileWarning("missing-id", f"Component '{label}' of type {component.type} has no id"))
        endpoint_names = Counter(e.name for e in component.endpoints)
        warnings += [
            DevfileWarning("duplicate-endpoint", f"Duplicate endpoint '{name}' in component '{label}'")
            for name, n in endpoint_names.items()
            if n > 1
        ]
    return warnings


def _check_command_targets(devfile: Devfile) -> list[DevfileWarning]:
    aliases = {c.alias for c in devfile.components if c.alias}
    warnings: list[DevfileWarning] = []
    for command in devfile.commands:
        if not command.actions:
            warnings.append(DevfileWarning("empty-command", f"Command '{command.name}' has no actions"))
        for action in command.actions:
            if action.component and action.component not in aliases:
                warnings.append(
                    DevfileWarning(
                        "unknown-component",
                        f"Command '{command.name}' refers to unknown component '{action.component}'",
                    )
                )
    return warnings
