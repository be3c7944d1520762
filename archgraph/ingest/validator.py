"""
Spec Validator

Local, side-effect free semantic checks on a parsed ArchitectureSpec.
"""

from typing import Dict

from archgraph.core.errors import ValidationError
from archgraph.core.names import strip_entity_prefix
from .spec_model import ArchitectureSpec


def validate(spec: ArchitectureSpec) -> None:
    """
    Reject specs with empty or duplicate (case-insensitive) service names
    or dependencies with an empty endpoint.
    """
    if spec is None:
        raise ValidationError("spec is missing")

    seen: Dict[str, str] = {}
    for i, svc in enumerate(spec.services):
        name = strip_entity_prefix(svc.name)
        if not name:
            raise ValidationError(f"services[{i}]: service name is empty", subject=f"services[{i}]")
        key = name.lower()
        if key in seen:
            raise ValidationError(
                f"duplicate service: {name!r} (already declared as {seen[key]!r})", subject=name,
            )
        seen[key] = name

    for i, dep in enumerate(spec.dependencies):
        if not dep.from_.strip() or not dep.to.strip():
            raise ValidationError(
                f"dependencies[{i}]: dependency has empty from/to", subject=f"dependencies[{i}]",
            )
