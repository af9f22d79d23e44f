from core.exceptions import DomainError


class TeamRuleViolation(DomainError):
    """
    Raised by the service layer when a request breaks a team rule
    (membership, capacity, date, leadership, slot).
    """
