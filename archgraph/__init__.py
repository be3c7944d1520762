"""
archgraph - Service Architecture Anti-Pattern Analysis

Ingests a declarative description of a service-oriented architecture,
compiles it into a dependency graph, detects architectural anti-patterns,
ranks them, and proposes (or applies) heuristic remediations.
"""

__version__ = "1.0.0"
