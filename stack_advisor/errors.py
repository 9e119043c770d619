"""
Error taxonomy for the stack advisor.

Four failure families, kept as distinct types so callers can tell
"fix your request" apart from "the system itself is unusable":

  RequirementValidationError — recoverable; the caller corrects request
                               fields.  Lists every invalid field at once.
  ConfigurationIntegrityError — fatal; raised only while loading the
                               catalog or initializing scoring.
  NoViableCandidateError     — recoverable; hard constraints eliminated
                               every candidate.  Never resolved to a default.
  ConcurrencyConflictError   — coordinator session contention; retry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Sequence

if TYPE_CHECKING:
    from stack_advisor.models.profile import RequirementProfile


class StackAdvisorError(Exception):
    """Base class for all errors raised by the stack advisor."""


@dataclass(frozen=True)
class FieldError:
    """One invalid request field.

    Attributes:
        field:  Dotted field path, e.g. ``"scale"`` or ``"team_skills.web"``.
        reason: Human-readable explanation.
    """

    field:  str
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "reason": self.reason}


class RequirementValidationError(StackAdvisorError, ValueError):
    """Raised when a raw requirement request has one or more invalid fields.

    Attributes:
        errors: Every invalid field found in a single validation pass.
    """

    def __init__(self, errors: Sequence[FieldError]) -> None:
        self.errors: list[FieldError] = list(errors)
        detail = "; ".join(f"{e.field}: {e.reason}" for e in self.errors)
        super().__init__(
            f"{len(self.errors)} invalid requirement field(s): {detail}"
        )

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]


class ConfigurationIntegrityError(StackAdvisorError, RuntimeError):
    """Raised when the catalog or scoring configuration is unusable.

    The process must not start with a partially valid configuration.

    Attributes:
        problems: Every integrity problem found.
    """

    def __init__(self, problems: Sequence[str], source: str | None = None) -> None:
        self.problems: list[str] = list(problems)
        self.source = source
        where = f" in {source}" if source else ""
        super().__init__(
            f"Configuration integrity check failed{where} "
            f"({len(self.problems)} problem(s)):\n  - "
            + "\n  - ".join(self.problems)
        )


class NoViableCandidateError(StackAdvisorError, LookupError):
    """Raised when hard constraints leave no candidate standing.

    Attributes:
        profile:      The profile that could not be satisfied.
        eliminations: ``Elimination`` records explaining each removal.
    """

    def __init__(
        self,
        profile: "RequirementProfile",
        eliminations: Sequence[Any] = (),
    ) -> None:
        self.profile = profile
        self.eliminations = list(eliminations)
        platforms = ", ".join(sorted(profile.platforms))
        super().__init__(
            f"No viable candidate for platforms [{platforms}] at performance "
            f"'{profile.performance}' (budget '{profile.budget}').  "
            "Relax the requirements and try again."
        )


class ConcurrencyConflictError(StackAdvisorError, RuntimeError):
    """Raised when a project's session cannot be safely updated.

    Either the project lock was busy beyond the timeout, or a trigger was
    computed against a profile that is no longer the stored one.

    Attributes:
        project_key:     The contended project.
        timeout_seconds: Lock timeout that elapsed, or None for a stale trigger.
    """

    def __init__(
        self,
        project_key: str,
        timeout_seconds: Optional[float] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.project_key = project_key
        self.timeout_seconds = timeout_seconds
        if reason is None:
            reason = (
                f"is being re-evaluated by another caller.  "
                f"Lock not acquired within {timeout_seconds:.1f}s"
            )
        super().__init__(f"Project '{project_key}' {reason}; retry the operation.")
