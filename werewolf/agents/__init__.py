"""
Decision sources for Werewolf seats and the broker that queries them.
"""

from .base_agent import BaseAgent, AgentContext, parse_seat, parse_witch_action, parse_yes
from .llm_agent import SimpleLLMAgent
from .dummy_agent import DummyAgent
from .human_agent import HumanAgent, ConsoleReader
from .broker import DecisionBroker
from .exceptions import LLMEmptyResponseError, DecisionTimeout

__all__ = [
    'BaseAgent',
    'AgentContext',
    'parse_seat',
    'parse_witch_action',
    'parse_yes',
    'SimpleLLMAgent',
    'DummyAgent',
    'HumanAgent',
    'ConsoleReader',
    'DecisionBroker',
    'LLMEmptyResponseError',
    'DecisionTimeout',
]
