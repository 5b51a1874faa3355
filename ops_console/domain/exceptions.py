"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ValidationError(DomainException):
    """Malformed input to a calculator or rule"""

    pass


class InvalidPeriod(ValidationError):
    """Pay period starts after it ends"""

    def __init__(self, period_start, period_end):
        self.period_start = period_start
        self.period_end = period_end
        super().__init__(f"Period start {period_start} is after end {period_end}")


class InvalidTransition(ValidationError):
    """Status change not allowed from the current state"""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move from '{current}' to '{target}'")


class UnknownProfile(DomainException):
    """Profile is missing or its work cannot be priced"""

    def __init__(self, profile_id: str, reason: str = "profile not found"):
        self.profile_id = profile_id
        self.reason = reason
        super().__init__(f"Profile {profile_id}: {reason}")


class RosterLocked(DomainException):
    """Edit attempted on a roster entry that is no longer editable"""

    def __init__(self, roster_id: str, approved_count: int, is_locked: bool = False):
        self.roster_id = roster_id
        self.approved_count = approved_count
        self.is_locked = is_locked
        super().__init__(
            f"Roster {roster_id} is not editable: "
            f"{approved_count} hour(s) already approved"
            + (", entry is locked" if is_locked else "")
        )


class RecordNotFound(DomainException):
    """Requested record does not exist in the store"""

    def __init__(self, entity: str, record_id: str):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} {record_id} not found")


class StoreError(DomainException):
    """Persistence collaborator failed"""

    pass


class ConnectivityError(StoreError):
    """Store is unreachable or timed out; caller may retry"""

    pass


class ConstraintError(StoreError):
    """Store rejected the write (foreign key, uniqueness, check); not retryable"""

    pass
