"""
Core game components: state, roles, resolvers, win evaluation and the transition table.
"""

from .game_engine import GameState, GamePhase, Death, DeathCause, NightSubmission, VoteRecord
from .player import Player
from .roles import Role, Team, get_role_distribution, deal_roles, count_roles
from .exceptions import InvalidTarget, IllegalPhaseTransition, StaleResponse
from .night_resolver import NightResolver, NightAction, NightOutcome, ANTIDOTE, POISON
from .vote_resolver import VoteResolver, VoteResult, VoteKind
from .transitions import TransitionContext, next_phase, check_transition, VALID_TRANSITIONS
from .moderator import Moderator
from . import win_evaluator

__all__ = [
    'GameState',
    'GamePhase',
    'Death',
    'DeathCause',
    'NightSubmission',
    'VoteRecord',
    'Player',
    'Role',
    'Team',
    'get_role_distribution',
    'deal_roles',
    'count_roles',
    'InvalidTarget',
    'IllegalPhaseTransition',
    'StaleResponse',
    'NightResolver',
    'NightAction',
    'NightOutcome',
    'ANTIDOTE',
    'POISON',
    'VoteResolver',
    'VoteResult',
    'VoteKind',
    'TransitionContext',
    'next_phase',
    'check_transition',
    'VALID_TRANSITIONS',
    'Moderator',
    'win_evaluator',
]
