"""Database models."""

from releasegate.models.project import Milestone, Project
from releasegate.models.profile import Profile
from releasegate.models.audit import DecisionLog, EventLog

__all__ = ["Project", "Milestone", "Profile", "EventLog", "DecisionLog"]
