from .agent_profile import AgentProfile
from .login_credit import LoginCredit
from .goal import AgentGoal
from .activity import CallFeedback, ContactHistory
from .lead import Lead
from .milestone_award import MilestoneAward

__all__ = [
    "AgentProfile",
    "LoginCredit",
    "AgentGoal",
    "CallFeedback",
    "ContactHistory",
    "Lead",
    "MilestoneAward",
]
