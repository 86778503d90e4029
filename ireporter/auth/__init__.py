"""
iReporter - Authentication
Session handling against the /auth endpoints.
"""

from ireporter.auth.service import (
    AuthService,
    LoginCredentials,
    SignupCredentials,
    User,
)

__all__ = [
    "AuthService",
    "LoginCredentials",
    "SignupCredentials",
    "User",
]
