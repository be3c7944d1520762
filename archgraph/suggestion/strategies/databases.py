"""
Database Strategies

shared_database, shared_db_writes, cross_db_read
"""

from archgraph.analysis.models import AntiPatternKind, Detection
from archgraph.core.models import Graph
from archgraph.ingest.spec_model import ArchitectureSpec
from ..models import Suggestion
from ..spec_edit import SpecEditor, join_nice
from .base import NO_CHANGE, FixResult, Strategy, node_names


class SharedDatabaseStrategy(Strategy):
    """Give every client of a shared database node its own database."""

    kind = AntiPatternKind.SHARED_DATABASE

    def suggest(self, graph: Graph, detection: Detection) -> Suggestion:
        names = node_names(graph, detection)
        db, clients = (names[0], names[1:]) if names else ("", [])

        bullets = []
        if db and clients:
            bullets.append(f"{db} is used directly by {len(clients)} services: {join_nice(clients)}.")
        else:
            bullets.append("Multiple services depend on the same database component.")
        bullets.extend([
            "Fix: split the database per bounded context or access it via one owning service.",
            "Auto-fix: create a database per client and retarget each client to it.",
        ])
        for client in clients:
            bullets.append(f"• {client} will use: {client.lower()}-db")
        title = f"Reduce shared database ({db})" if db else "Reduce shared database"
        return Suggestion(kind=self.kind, title=title, bullets=bullets)

    def apply(self, spec: ArchitectureSpec, graph: Graph, detection: Detection) -> FixResult:
        names = node_names(graph, detection)
        if len(names) < 3:
            return NO_CHANGE
        db, clients = names[0], names[1:]

        editor = SpecEditor(spec)
        notes = []
        for client in clients:
            if not editor.has_link(client, db):
                continue
            new_db = editor.unique_name(f"{client.strip().lower()}-db")
            editor.ensure_database(new_db)
            note = editor.retarget_link(client, db, new_db)
            if note:
                notes.append(note)

        if not notes:
            return NO_CHANGE
        notes.append(f"Split shared DB {db} into per-service databases.")
        return True, notes


class SharedDbWritesStrategy(Strategy):
    """Keep the first writer on the database; move every other writer to its own."""

    kind = AntiPatternKind.SHARED_DB_WRITES

    def suggest(self, graph: Graph, detection: Detection) -> Suggestion:
        names = node_names(graph, detection)
        db, writers = (names[0], names[1:]) if names else ("", [])

        if db and writers:
            title = f"Stop multiple writers to {db} ({len(writers)} writers)"
            bullets = [
                f"Detected shared DB writes: {db} is written by {join_nice(writers)}.",
                "Why it matters: multi-writes can cause data corruption, conflicting transactions, "
                "and unclear ownership.",
                f"Auto-fix: {writers[0]} keeps {db}; every other writer gets a dedicated database.",
            ]
            for writer in writers[1:]:
                bullets.append(f"• {writer} will write to: {db}_{writer}")
        else:
            title = "Give each service its own database"
            bullets = ["More than one service is writing to the same database."]
        bullets.append("Recommended: share data via APIs/events instead of letting many services "
                       "write to one DB.")
        return Suggestion(kind=self.kind, title=title, bullets=bullets)

    def apply(self, spec: ArchitectureSpec, graph: Graph, detection: Detection) -> FixResult:
        names = node_names(graph, detection)
        if len(names) < 3:
            return NO_CHANGE
        db, writers = names[0], names[1:]

        editor = SpecEditor(spec)
        notes = []
        for writer in writers[1:]:
            svc = editor.find_service(writer)
            if svc is None or not editor.remove_ref(svc.databases.writes, db):
                continue
            new_db = f"{db}_{writer}"
            editor.ensure_database(new_db)
            editor.add_ref(svc.databases.writes, new_db)
            notes.append(f"Moved writer {writer} from DB {db} to its own DB {new_db}")

        return (True, notes) if notes else NO_CHANGE


class CrossDbReadStrategy(Strategy):
    """Replace a direct read of another service's database with an API call."""

    kind = AntiPatternKind.CROSS_DB_READ

    READ_RATE_PER_MIN = 60

    def suggest(self, graph: Graph, detection: Detection) -> Suggestion:
        owner = str(detection.evidence.get("owner", ""))
        reader = str(detection.evidence.get("reader", ""))
        names = node_names(graph, detection)
        db = names[1] if len(names) >= 2 else ""

        if owner and reader and db:
            title = f"Replace {reader} reading {db} (owned by {owner})"
            bullets = [
                f"Detected cross-DB read: {reader} reads {db} (owned by {owner}).",
                f"Why it matters: schema changes in {owner} can break {reader} instantly.",
                f"Auto-fix: remove '{db}' from {reader}.databases.reads and add API call "
                f"{reader} → {owner} (GET /{db}/read).",
                f"Alternative: consume {owner} events to build a local read model (CQRS).",
            ]
        else:
            title = "Do not read another service's database"
            bullets = [
                "This service reads a database owned by another service.",
                "Auto-fix: remove the direct DB read and call the owning service instead.",
            ]
        return Suggestion(kind=self.kind, title=title, bullets=bullets)

    def apply(self, spec: ArchitectureSpec, graph: Graph, detection: Detection) -> FixResult:
        owner = str(detection.evidence.get("owner", ""))
        reader = str(detection.evidence.get("reader", ""))
        names = node_names(graph, detection)
        if not owner or not reader or len(names) < 2:
            return NO_CHANGE
        db = names[1]

        editor = SpecEditor(spec)
        svc = editor.find_service(reader)
        if svc is None or not editor.remove_ref(svc.databases.reads, db):
            return NO_CHANGE

        notes = [f"Removed cross-DB read ({reader} reads {db})."]
        note = editor.add_link(
            reader, owner,
            endpoints=[f"GET /{db}/read"],
            rate_per_min=self.READ_RATE_PER_MIN,
        )
        if note:
            notes.append(f"{note} (GET /{db}/read)")
        return True, notes
