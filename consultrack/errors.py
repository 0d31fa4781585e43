"""Error taxonomy shared by the rule engine, repositories, and API.

Pure components raise EngagementValidationError before computing anything.
Repositories wrap every I/O failure in RepositoryError and never retry.
Missing optional data (no rating, no duration) is not an error: such
records are just left out of the statistic that needs the value.
"""


class EngagementValidationError(ValueError):
    """Invalid input reached a rule or a model (rating out of range, negative amount)."""


class InvalidTransitionError(EngagementValidationError):
    """Lifecycle transition not allowed from the engagement's current status."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot move engagement from {current} to {target}.")


class RepositoryError(RuntimeError):
    """Persistence or retrieval failed. Surfaced to the caller unchanged."""


class EngagementNotFoundError(RepositoryError):
    """No engagement exists with the requested id."""

    def __init__(self, engagement_id: object) -> None:
        self.engagement_id = engagement_id
        super().__init__(f"Engagement {engagement_id} not found.")
