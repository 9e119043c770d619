"""
Per-project session tracking and advisory handoff notices.

Modules
-------
triggers     Diff two requirement profiles and classify the change.
coordinator  AgentCoordinator: stores the last recommendation per project and
             re-evaluates when requirements change.
"""
