"""
Concierge AI exceptions
"""


class ConciergeError(Exception):
    """Base class for all pipeline errors"""


class UnknownTravelTypeError(ConciergeError, KeyError):
    """Raised when a registry accessor receives a code that is not one of the 16 types"""
    
    def __init__(self, code: object):
        self.code = code
        super().__init__(f"Unknown travel type code: {code!r}")
    
    def __str__(self) -> str:
        return self.args[0]


class IntentClassificationError(ConciergeError):
    """Raised by the AI classification strategy when the model call or its output is unusable"""
