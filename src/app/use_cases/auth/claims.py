"""
Token claims derived from the current user record.
"""

from typing import Any, Dict

from src.domain.entities import User


def user_claims(user: User) -> Dict[str, Any]:
    """Custom claims carried by access tokens"""
    return {
        "user_id": str(user.id),
        "email": user.email,
        "roles": list(user.roles or []),
    }
