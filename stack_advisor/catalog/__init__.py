"""
Candidate catalog: the read-only registry of technology stacks.

  catalog/registry.py — load config/catalog.toml, integrity-check every entry,
                        and expose platform / stack_id lookups.
"""

from stack_advisor.catalog.registry import CandidateRegistry, load_registry

__all__ = [
    "CandidateRegistry",
    "load_registry",
]
