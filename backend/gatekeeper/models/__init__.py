from gatekeeper.models.token import Token, TokenType
from gatekeeper.models.user import User

__all__ = [
    "Token",
    "TokenType",
    "User",
]
