"""
Phase handlers for night actions, day speeches, voting and death reactions.
"""

from .night_phase import NightPhaseHandler
from .day_phase import DayPhaseHandler
from .voting import VotingHandler
from .reactions import ReactionHandler

__all__ = ['NightPhaseHandler', 'DayPhaseHandler', 'VotingHandler', 'ReactionHandler']
