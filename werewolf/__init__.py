"""
Werewolf game master: one human seat, AI seats, and a deterministic phase machine.
"""

__version__ = "0.1.0"
