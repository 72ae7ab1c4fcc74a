"""
Exceptions for agent-related errors.
"""


class LLMEmptyResponseError(Exception):
    """Raised when LLM API call returns an empty response."""

    def __init__(self, seat: int, action_type: str, message: str = ""):
        self.seat = seat
        self.action_type = action_type
        self.message = message or f"LLM returned empty response for seat {seat} during {action_type}"
        super().__init__(self.message)


class DecisionTimeout(Exception):
    """Raised when a seat does not answer within its decision timeout."""

    def __init__(self, seat: int, action_type: str, timeout: float):
        self.seat = seat
        self.action_type = action_type
        self.timeout = timeout
        self.message = f"Seat {seat} did not answer {action_type} within {timeout:g}s"
        super().__init__(self.message)
