"""
Architecture Spec Model

Strongly-typed projection of the architecture document. Strategies mutate
this view; unknown keys at every level are kept in ``extra`` so that
re-serializing the projection never silently drops authored fields. Known
keys the document spelled out are recorded in ``present`` and written back
even when they hold a default (``per_item: false``, ``calls: []``).

Document shape:
    services:      [{name, type, calls: [{to, endpoints, rate_per_min, per_item, sync}],
                     databases: {reads: [], writes: []}}]
    databases:     [{name}]
    datastores:    [{name, type}]
    dependencies:  [{from, to, kind, sync}]
    apis:          [{name, protocol}]
    topics:        [{name}]
    metadata:      {...}
    (configs, constraints, trace, gaps, conflicts, ... are kept verbatim)
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from archgraph.core.errors import ParseError


# =============================================================================
# Coercion helpers
# =============================================================================

def _mapping(value: Any, where: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ParseError(f"{where}: expected a mapping, got {type(value).__name__}")
    return value


def _sequence(value: Any, where: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ParseError(f"{where}: expected a list, got {type(value).__name__}")
    return value


def _text(value: Any, where: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ParseError(f"{where}: expected a scalar, got {type(value).__name__}")
    return str(value)


def _integer(value: Any, where: str) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ParseError(f"{where}: expected an integer, got a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    raise ParseError(f"{where}: expected an integer, got {value!r}")


def _flag(value: Any, where: str) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    raise ParseError(f"{where}: expected a boolean, got {value!r}")


def _strings(value: Any, where: str) -> List[str]:
    return [_text(v, f"{where}[{i}]") for i, v in enumerate(_sequence(value, where))]


def _scalars(value: Any, where: str) -> List[Any]:
    """Scalar list kept as authored (``200`` stays an int)."""
    items = _sequence(value, where)
    for i, v in enumerate(items):
        if isinstance(v, (dict, list)):
            raise ParseError(f"{where}[{i}]: expected a scalar, got {type(v).__name__}")
    return [v for v in items if v is not None]


def _extra(data: Dict[str, Any], known: tuple) -> Dict[str, Any]:
    return {k: copy.deepcopy(v) for k, v in data.items() if k not in known}


def _present(data: Dict[str, Any], known: tuple) -> Set[str]:
    return {k for k in known if data.get(k) is not None}


def _present_field():
    return field(default_factory=set, repr=False, compare=False)


# =============================================================================
# Leaf sections
# =============================================================================

@dataclass
class CallSpec:
    """One outgoing call declared by a service."""
    to: str
    endpoints: List[Any] = field(default_factory=list)
    rate_per_min: int = 0
    per_item: bool = False
    sync: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    present: Set[str] = _present_field()

    _KNOWN = ("to", "endpoints", "rate_per_min", "per_item", "sync")

    @property
    def is_sync(self) -> bool:
        return True if self.sync is None else self.sync

    @property
    def endpoint_names(self) -> List[str]:
        return [str(e) for e in self.endpoints]

    @classmethod
    def from_dict(cls, data: Any, where: str) -> "CallSpec":
        data = _mapping(data, where)
        return cls(
            to=_text(data.get("to"), f"{where}.to"),
            endpoints=_scalars(data.get("endpoints"), f"{where}.endpoints"),
            rate_per_min=_integer(data.get("rate_per_min"), f"{where}.rate_per_min"),
            per_item=bool(_flag(data.get("per_item"), f"{where}.per_item")),
            sync=_flag(data.get("sync"), f"{where}.sync"),
            extra=_extra(data, cls._KNOWN),
            present=_present(data, cls._KNOWN),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"to": self.to}
        if self.endpoints or "endpoints" in self.present:
            out["endpoints"] = list(self.endpoints)
        if self.rate_per_min or "rate_per_min" in self.present:
            out["rate_per_min"] = self.rate_per_min
        if self.per_item or "per_item" in self.present:
            out["per_item"] = self.per_item
        if self.sync is not None:
            out["sync"] = self.sync
        out.update(copy.deepcopy(self.extra))
        return out


@dataclass
class DatabaseRefs:
    """Databases a service reads from and writes to."""
    reads: List[str] = field(default_factory=list)
    writes: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)
    present: Set[str] = _present_field()

    @classmethod
    def from_dict(cls, data: Any, where: str) -> "DatabaseRefs":
        data = _mapping(data, where)
        return cls(
            reads=_strings(data.get("reads"), f"{where}.reads"),
            writes=_strings(data.get("writes"), f"{where}.writes"),
            extra=_extra(data, ("reads", "writes")),
            present=_present(data, ("reads", "writes")),
        )

    def is_empty(self) -> bool:
        return not (self.reads or self.writes or self.extra)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.reads or "reads" in self.present:
            out["reads"] = list(self.reads)
        if self.writes or "writes" in self.present:
            out["writes"] = list(self.writes)
        out.update(copy.deepcopy(self.extra))
        return out


@dataclass
class ServiceSpec:
    """A declared service (or, with type: database, a declared data store)."""
    name: str
    type: str = ""
    calls: List[CallSpec] = field(default_factory=list)
    databases: DatabaseRefs = field(default_factory=DatabaseRefs)
    extra: Dict[str, Any] = field(default_factory=dict)
    present: Set[str] = _present_field()

    _KNOWN = ("name", "type", "calls", "databases")

    @classmethod
    def from_dict(cls, data: Any, where: str) -> "ServiceSpec":
        data = _mapping(data, where)
        return cls(
            name=_text(data.get("name"), f"{where}.name"),
            type=_text(data.get("type"), f"{where}.type"),
            calls=[CallSpec.from_dict(c, f"{where}.calls[{i}]")
                   for i, c in enumerate(_sequence(data.get("calls"), f"{where}.calls"))],
            databases=DatabaseRefs.from_dict(data.get("databases"), f"{where}.databases"),
            extra=_extra(data, cls._KNOWN),
            present=_present(data, cls._KNOWN),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name}
        if self.type:
            out["type"] = self.type
        if self.calls or "calls" in self.present:
            out["calls"] = [c.to_dict() for c in self.calls]
        if not self.databases.is_empty() or "databases" in self.present:
            out["databases"] = self.databases.to_dict()
        out.update(copy.deepcopy(self.extra))
        return out


@dataclass
class DependencySpec:
    """One entry of the free-form ``dependencies`` list."""
    from_: str
    to: str
    kind: str = ""
    sync: Optional[bool] = None
    extra: Dict[str, Any] = field(default_factory=dict)
    present: Set[str] = _present_field()

    _KNOWN = ("from", "to", "kind", "sync")

    @property
    def is_sync(self) -> bool:
        return bool(self.sync)

    @classmethod
    def from_dict(cls, data: Any, where: str) -> "DependencySpec":
        data = _mapping(data, where)
        return cls(
            from_=_text(data.get("from"), f"{where}.from"),
            to=_text(data.get("to"), f"{where}.to"),
            kind=_text(data.get("kind"), f"{where}.kind"),
            sync=_flag(data.get("sync"), f"{where}.sync"),
            extra=_extra(data, cls._KNOWN),
            present=_present(data, cls._KNOWN),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"from": self.from_, "to": self.to}
        if self.kind or "kind" in self.present:
            out["kind"] = self.kind
        if self.sync is not None:
            out["sync"] = self.sync
        out.update(copy.deepcopy(self.extra))
        return out


@dataclass
class NamedSpec:
    """Generic ``{name, ...}`` entry (databases, datastores, apis, topics)."""
    name: str
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, where: str) -> "NamedSpec":
        data = _mapping(data, where)
        return cls(name=_text(data.get("name"), f"{where}.name"), extra=_extra(data, ("name",)))

    @property
    def type(self) -> str:
        return str(self.extra.get("type", "") or "")

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"name": self.name}
        out.update(copy.deepcopy(self.extra))
        return out


# =============================================================================
# Document
# =============================================================================

_SECTION_KEYS = ("services", "databases", "datastores", "dependencies", "apis", "topics", "metadata")


@dataclass
class ArchitectureSpec:
    """Typed view over one architecture document."""
    services: List[ServiceSpec] = field(default_factory=list)
    databases: List[NamedSpec] = field(default_factory=list)
    datastores: List[NamedSpec] = field(default_factory=list)
    dependencies: List[DependencySpec] = field(default_factory=list)
    apis: List[NamedSpec] = field(default_factory=list)
    topics: List[NamedSpec] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)
    present: Set[str] = _present_field()

    @property
    def dependency_style(self) -> bool:
        """True when the document describes edges through ``dependencies``."""
        return len(self.dependencies) > 0

    @classmethod
    def from_dict(cls, data: Any) -> "ArchitectureSpec":
        """
        Build the typed view. Raises ParseError on any structural mismatch;
        nothing is returned on failure.
        """
        data = _mapping(data, "document")

        def named(key: str) -> List[NamedSpec]:
            return [NamedSpec.from_dict(item, f"{key}[{i}]")
                    for i, item in enumerate(_sequence(data.get(key), key))]

        return cls(
            services=[ServiceSpec.from_dict(s, f"services[{i}]")
                      for i, s in enumerate(_sequence(data.get("services"), "services"))],
            databases=named("databases"),
            datastores=named("datastores"),
            dependencies=[DependencySpec.from_dict(d, f"dependencies[{i}]")
                          for i, d in enumerate(_sequence(data.get("dependencies"), "dependencies"))],
            apis=named("apis"),
            topics=named("topics"),
            metadata=copy.deepcopy(_mapping(data.get("metadata"), "metadata")),
            extra=_extra(data, _SECTION_KEYS),
            present=_present(data, _SECTION_KEYS),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.metadata or "metadata" in self.present:
            out["metadata"] = copy.deepcopy(self.metadata)
        out["services"] = [s.to_dict() for s in self.services]
        if self.databases or "databases" in self.present:
            out["databases"] = [d.to_dict() for d in self.databases]
        if self.datastores or "datastores" in self.present:
            out["datastores"] = [d.to_dict() for d in self.datastores]
        if self.dependencies or "dependencies" in self.present:
            out["dependencies"] = [d.to_dict() for d in self.dependencies]
        if self.apis or "apis" in self.present:
            out["apis"] = [a.to_dict() for a in self.apis]
        if self.topics or "topics" in self.present:
            out["topics"] = [t.to_dict() for t in self.topics]
        out.update(copy.deepcopy(self.extra))
        return out
