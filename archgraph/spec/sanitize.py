"""
Spec Sanitizer

Normalizes a fixed spec tree before it is merged back onto the original:
trims leaked ``SERVICE:`` / ``DATABASE:`` prefixes, lower-cases relationship
kinds and collapses every service ``type`` onto ``service`` or ``database``.
"""

from typing import Any, Dict

from archgraph.core.names import normalize_type, strip_entity_prefix


def sanitize(root: Dict[str, Any]) -> Dict[str, Any]:
    """Sanitize ``root`` in place and return it."""
    if not root:
        return root

    deps = root.get("dependencies")
    if isinstance(deps, list):
        for dep in deps:
            if not isinstance(dep, dict):
                continue
            for key in ("from", "to"):
                if isinstance(dep.get(key), str):
                    dep[key] = strip_entity_prefix(dep[key])
            if isinstance(dep.get("kind"), str):
                dep["kind"] = dep["kind"].strip().lower()

    services = root.get("services")
    if isinstance(services, list):
        for svc in services:
            if not isinstance(svc, dict):
                continue
            if isinstance(svc.get("name"), str):
                svc["name"] = strip_entity_prefix(svc["name"])
            svc["type"] = normalize_type(svc.get("type") if isinstance(svc.get("type"), str) else "")
            for call in svc.get("calls") or []:
                if isinstance(call, dict) and isinstance(call.get("to"), str):
                    call["to"] = strip_entity_prefix(call["to"])
    return root
