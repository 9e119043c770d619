"""
AgentCoordinator — per-project recommendation bookkeeping and handoff notices.

The coordinator remembers, per project key, the last successful
(RequirementProfile, Recommendation) pair.  When requirements change it
re-runs the full pipeline and, if the primary stack changes, returns a
``HandoffNotice`` describing the switch.  It never dispatches work: acting on
a notice is up to a human or the calling system.

Concurrency
-----------
Session state is the only shared mutable resource in the system.  Each
project key has its own lock (single writer per key), so a trigger-driven
re-evaluation can never interleave with a fresh request for the same
project, while different projects proceed in parallel.  A caller that
cannot obtain the lock within ``lock_timeout_seconds`` gets a
``ConcurrencyConflictError`` and should retry.

Sessions live in memory only and are updated exclusively by successful
pipeline runs: a request that fails validation or resolution leaves the
stored pair untouched.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterator, Mapping, Optional

from stack_advisor.coordination.triggers import diff_profiles
from stack_advisor.errors import ConcurrencyConflictError
from stack_advisor.models.profile import RequirementProfile
from stack_advisor.models.recommendation import HandoffNotice, Recommendation, TriggerEvent
from stack_advisor.pipeline.recommend import RecommendationPipeline
from stack_advisor.profile.builder import build_profile
from stack_advisor.utils.time_utils import utcnow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionRecord:
    """Last successful evaluation for one project."""

    profile:        RequirementProfile
    recommendation: Recommendation
    updated_at:     datetime


class AgentCoordinator:
    """Tracks recommendations per project and emits advisory handoff notices."""

    def __init__(
        self,
        pipeline: RecommendationPipeline,
        lock_timeout_seconds: Optional[float] = None,
    ) -> None:
        self.pipeline = pipeline
        self.lock_timeout_seconds = (
            lock_timeout_seconds
            if lock_timeout_seconds is not None
            else pipeline.config.coordinator.lock_timeout_seconds
        )
        self._sessions: dict[str, SessionRecord] = {}
        self._locks: dict[str, threading.Lock] = {}
        self._state_lock = threading.Lock()

    # ── Public operations ─────────────────────────────────────────────────────

    def recommend(self, project_key: str, request: Mapping[str, Any]) -> Recommendation:
        """Evaluate a fresh request for a project and store the result.

        Raises:
            RequirementValidationError, NoViableCandidateError: From the pipeline.
            ConcurrencyConflictError: If the project is busy past the timeout.
        """
        profile = build_profile(request)
        with self._project_lock(project_key):
            recommendation = self.pipeline.recommend_profile(profile)
            self._store(project_key, profile, recommendation)
        return recommendation

    def notify_change(
        self,
        project_key: str,
        new_request: Mapping[str, Any],
    ) -> Optional[HandoffNotice]:
        """Re-evaluate a project after its requirements changed.

        With no stored session the new evaluation becomes the baseline and
        ``None`` is returned.  An unchanged profile also returns ``None``.

        Raises:
            RequirementValidationError, NoViableCandidateError: From the pipeline.
            ConcurrencyConflictError: If the project is busy past the timeout.
        """
        profile = build_profile(new_request)
        with self._project_lock(project_key):
            previous = self._sessions.get(project_key)
            if previous is None:
                recommendation = self.pipeline.recommend_profile(profile)
                self._store(project_key, profile, recommendation)
                logger.info(
                    "No prior session for project=%s; baseline primary=%s",
                    project_key, recommendation.primary_stack_id,
                )
                return None

            event = diff_profiles(previous.profile, profile)
            if event is None:
                logger.debug("Project=%s requirements unchanged", project_key)
                return None
            return self._reevaluate(project_key, event, previous)

    def handle_trigger(
        self,
        project_key: str,
        event: TriggerEvent,
    ) -> Optional[HandoffNotice]:
        """Re-run the pipeline for ``event.current`` and compare primaries.

        The event must have been computed against the stored profile; a
        trigger whose ``previous`` no longer matches the session is stale.

        Raises:
            NoViableCandidateError: From the pipeline (session left untouched).
            ConcurrencyConflictError: If the project is busy past the timeout,
                or ``event.previous`` differs from the stored profile.
        """
        with self._project_lock(project_key):
            previous = self._sessions.get(project_key)
            if previous is None:
                recommendation = self.pipeline.recommend_profile(event.current)
                self._store(project_key, event.current, recommendation)
                return None
            if event.previous != previous.profile:
                logger.warning(
                    "Stale trigger for project=%s (%s); session changed since it was computed",
                    project_key, event.kind,
                )
                raise ConcurrencyConflictError(
                    project_key,
                    reason="changed since the trigger was computed",
                )
            return self._reevaluate(project_key, event, previous)

    def session(self, project_key: str) -> Optional[SessionRecord]:
        with self._state_lock:
            return self._sessions.get(project_key)

    def project_keys(self) -> list[str]:
        with self._state_lock:
            return sorted(self._sessions)

    def forget(self, project_key: str) -> bool:
        """Drop a project's session.  Returns True if one existed.

        The per-key lock is kept: a waiter may already hold a reference to
        it, and replacing it would admit a second writer.  The lock table is
        bounded by the number of distinct project keys ever seen.
        """
        with self._project_lock(project_key):
            with self._state_lock:
                return self._sessions.pop(project_key, None) is not None

    # ── Internals ─────────────────────────────────────────────────────────────

    def _reevaluate(
        self,
        project_key: str,
        event: TriggerEvent,
        previous: SessionRecord,
    ) -> Optional[HandoffNotice]:
        """Caller must hold the project lock."""
        recommendation = self.pipeline.recommend_profile(event.current)
        self._store(project_key, event.current, recommendation)

        old_primary = previous.recommendation.primary
        new_primary = recommendation.primary
        if new_primary.stack_id == old_primary.stack_id:
            logger.info(
                "Project=%s re-evaluated after %s; primary unchanged (%s)",
                project_key, event.kind, new_primary.stack_id,
            )
            return None

        notice = HandoffNotice(
            project_key=project_key,
            previous_owner=old_primary.owner,
            new_owner=new_primary.owner,
            previous_stack_id=old_primary.stack_id,
            new_stack_id=new_primary.stack_id,
            reason=(
                f"{event.kind} ({', '.join(event.changed_fields)}): primary changed "
                f"from {old_primary.stack_id} to {new_primary.stack_id}; "
                f"{recommendation.rationale}"
            ),
            trigger=event.kind,
            issued_at=utcnow(),
        )
        logger.warning(
            "Handoff advised | project=%s %s/%s -> %s/%s trigger=%s",
            project_key,
            notice.previous_stack_id, notice.previous_owner,
            notice.new_stack_id, notice.new_owner,
            notice.trigger,
            extra={"project_key": project_key, "trigger": str(notice.trigger)},
        )
        return notice

    def _store(
        self,
        project_key: str,
        profile: RequirementProfile,
        recommendation: Recommendation,
    ) -> None:
        with self._state_lock:
            self._sessions[project_key] = SessionRecord(
                profile=profile,
                recommendation=recommendation,
                updated_at=utcnow(),
            )

    @contextmanager
    def _project_lock(self, project_key: str) -> Iterator[None]:
        with self._state_lock:
            lock = self._locks.setdefault(project_key, threading.Lock())
        if not lock.acquire(timeout=self.lock_timeout_seconds):
            logger.warning(
                "Lock timeout for project=%s after %.1fs",
                project_key, self.lock_timeout_seconds,
            )
            raise ConcurrencyConflictError(project_key, self.lock_timeout_seconds)
        try:
            yield
        finally:
            lock.release()
