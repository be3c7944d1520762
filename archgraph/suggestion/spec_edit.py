"""
Spec Editing Helpers

Conservative, name-based edits on the typed ArchitectureSpec used by the
auto-fix strategies. A "link" is a directed from → to reference: an entry
of ``dependencies`` for dependency-style documents, otherwise a service's
outgoing ``calls`` entry. Every mutating helper returns a human-readable
note when it changed something and ``None`` when it did not.
"""

from typing import List, Optional

from archgraph.core.models import CallAttrs
from archgraph.core.names import same_name, strip_entity_prefix
from archgraph.ingest.spec_model import ArchitectureSpec, CallSpec, DependencySpec, ServiceSpec

DEFAULT_LINK_KIND = "rest"


def _find_ci(items: List[str], value: str) -> int:
    for i, item in enumerate(items):
        if same_name(item, value):
            return i
    return -1


def join_nice(names: List[str]) -> str:
    """``a``, ``a and b``, ``a, b, and c``."""
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    if len(names) == 2:
        return f"{names[0]} and {names[1]}"
    return ", ".join(names[:-1]) + f", and {names[-1]}"


class SpecEditor:
    """
    Edits one ArchitectureSpec in place.

    The editing mode (dependencies vs. service calls) is fixed when the
    editor is created, so removing the last dependency does not silently
    switch later edits to the calls list.
    """

    def __init__(self, spec: ArchitectureSpec):
        self.spec = spec
        self.dependency_mode = spec.dependency_style

    # ------------------------------------------------------------------
    # Services / databases
    # ------------------------------------------------------------------

    def find_service(self, name: str) -> Optional[ServiceSpec]:
        for svc in self.spec.services:
            if same_name(svc.name, name):
                return svc
        return None

    def _name_taken(self, name: str) -> bool:
        if self.find_service(name) is not None:
            return True
        return any(same_name(d.name, name) for d in self.spec.databases + self.spec.datastores)

    def unique_name(self, base: str) -> str:
        """``base`` if unused, otherwise ``base-1``, ``base-2``, ..."""
        base = strip_entity_prefix(base) or "service"
        candidate = base
        i = 0
        while self._name_taken(candidate):
            i += 1
            candidate = f"{base}-{i}"
        return candidate

    def ensure_service(self, name: str) -> ServiceSpec:
        clean = strip_entity_prefix(name)
        svc = self.find_service(clean)
        if svc is not None:
            if not svc.type:
                svc.type = "service"
            return svc
        svc = ServiceSpec(name=clean, type="service")
        self.spec.services.append(svc)
        return svc

    def ensure_database(self, name: str) -> ServiceSpec:
        """Declare a data store as a ``type: database`` service entry."""
        clean = strip_entity_prefix(name)
        svc = self.find_service(clean)
        if svc is not None:
            if not svc.type:
                svc.type = "database"
            return svc
        svc = ServiceSpec(name=clean, type="database")
        self.spec.services.append(svc)
        return svc

    # ------------------------------------------------------------------
    # Link lookup
    # ------------------------------------------------------------------

    def _dep_index(self, source: str, target: str) -> int:
        for i, dep in enumerate(self.spec.dependencies):
            if same_name(dep.from_, source) and same_name(dep.to, target):
                return i
        return -1

    def _call_index(self, source: str, target: str) -> int:
        svc = self.find_service(source)
        if svc is None:
            return -1
        for i, call in enumerate(svc.calls):
            if same_name(call.to, target):
                return i
        return -1

    def has_link(self, source: str, target: str) -> bool:
        if self.dependency_mode:
            return self._dep_index(source, target) >= 0
        return self._call_index(source, target) >= 0

    def targets_of(self, source: str) -> List[str]:
        """Outgoing link targets of ``source``, in document order."""
        if self.dependency_mode:
            return [strip_entity_prefix(d.to) for d in self.spec.dependencies
                    if same_name(d.from_, source) and d.to.strip()]
        svc = self.find_service(source)
        if svc is None:
            return []
        return [strip_entity_prefix(c.to) for c in svc.calls if c.to.strip()]

    def find_call(self, source: str, target: str) -> Optional[CallSpec]:
        """The first typed call ``source → target`` (calls mode only)."""
        if self.dependency_mode:
            return None
        i = self._call_index(source, target)
        return self.find_service(source).calls[i] if i >= 0 else None

    def find_call_for_edge(self, source: str, target: str, attrs: CallAttrs) -> Optional[CallSpec]:
        """
        The ``source → target`` call that produced a CALLS edge with ``attrs``.

        A service may call the same target several times; the call whose
        endpoints, rate and per-item flag match the edge wins, otherwise the
        first call to ``target``.
        """
        if self.dependency_mode:
            return None
        svc = self.find_service(source)
        if svc is None:
            return None
        candidates = [c for c in svc.calls if same_name(c.to, target)]
        wanted = (attrs.endpoints, attrs.rate_per_min, attrs.per_item)
        for call in candidates:
            if (tuple(call.endpoint_names), call.rate_per_min, call.per_item) == wanted:
                return call
        return candidates[0] if candidates else None

    def link_is_sync(self, source: str, target: str) -> Optional[bool]:
        if self.dependency_mode:
            i = self._dep_index(source, target)
            return self.spec.dependencies[i].is_sync if i >= 0 else None
        call = self.find_call(source, target)
        return call.is_sync if call is not None else None

    # ------------------------------------------------------------------
    # Link edits
    # ------------------------------------------------------------------

    def remove_link(self, source: str, target: str) -> Optional[str]:
        s, t = strip_entity_prefix(source), strip_entity_prefix(target)
        if self.dependency_mode:
            i = self._dep_index(s, t)
            if i < 0:
                return None
            del self.spec.dependencies[i]
            return f"Removed dependency: {s} → {t}"
        i = self._call_index(s, t)
        if i < 0:
            return None
        del self.find_service(s).calls[i]
        return f"Removed call: {s} → {t}"

    def set_link_sync(self, source: str, target: str, sync: bool) -> Optional[str]:
        s, t = strip_entity_prefix(source), strip_entity_prefix(target)
        if self.dependency_mode:
            i = self._dep_index(s, t)
            if i < 0:
                return None
            entry = self.spec.dependencies[i]
        else:
            entry = self.find_call(s, t)
            if entry is None:
                return None
        before = entry.is_sync
        if before == sync:
            return None
        entry.sync = sync
        return f"Updated sync on {s} → {t}: {before} → {sync}"

    def retarget_link(self, source: str, old_target: str, new_target: str) -> Optional[str]:
        s, o, n = (strip_entity_prefix(v) for v in (source, old_target, new_target))
        if self.dependency_mode:
            i = self._dep_index(s, o)
            if i < 0:
                return None
            self.spec.dependencies[i].to = n
        else:
            call = self.find_call(s, o)
            if call is None:
                return None
            call.to = n
        return f"Retargeted {s} → {n} (was {o})"

    def add_link(self, source: str, target: str, kind: str = DEFAULT_LINK_KIND,
                 sync: bool = True, endpoints: Optional[List[str]] = None,
                 rate_per_min: int = 0) -> Optional[str]:
        """Add ``source → target`` unless such a link already exists."""
        s, t = strip_entity_prefix(source), strip_entity_prefix(target)
        if not s or not t or self.has_link(s, t):
            return None
        if self.dependency_mode:
            self.spec.dependencies.append(
                DependencySpec(from_=s, to=t, kind=kind.strip().lower(), sync=sync)
            )
            return f"Added dependency: {s} → {t}"
        svc = self.ensure_service(s)
        svc.calls.append(CallSpec(
            to=t,
            endpoints=list(endpoints or []),
            rate_per_min=rate_per_min,
            sync=sync,
        ))
        return f"Added call: {s} → {t}"

    def move_link(self, source: str, target: str, new_source: str) -> Optional[str]:
        """
        Re-home the first ``source → target`` link onto ``new_source``,
        keeping its attributes. If ``new_source → target`` already exists
        the old link is simply dropped.
        """
        s, t, n = (strip_entity_prefix(v) for v in (source, target, new_source))
        if self.has_link(n, t):
            if self.remove_link(s, t) is None:
                return None
            return f"Moved {s} → {t} onto existing {n} → {t}"
        if self.dependency_mode:
            i = self._dep_index(s, t)
            if i < 0:
                return None
            self.spec.dependencies[i].from_ = n
        else:
            i = self._call_index(s, t)
            if i < 0:
                return None
            call = self.find_service(s).calls.pop(i)
            self.ensure_service(n).calls.append(call)
        return f"Moved {s} → {t} to {n} → {t}"

    # ------------------------------------------------------------------
    # Database references
    # ------------------------------------------------------------------

    @staticmethod
    def remove_ref(refs: List[str], name: str) -> bool:
        i = _find_ci(refs, name)
        if i < 0:
            return False
        del refs[i]
        return True

    @staticmethod
    def add_ref(refs: List[str], name: str) -> None:
        if _find_ci(refs, name) < 0:
            refs.append(name)
