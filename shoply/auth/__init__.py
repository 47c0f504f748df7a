"""
Auth — who the current owner is.

    from shoply.auth import UserSession

    session = UserSession()
    session.sign_in("user-1")
    session.current_user()  # "user-1"
"""

from __future__ import annotations

from shoply.auth._session import CurrentUser, UserSession, FirebaseSession

__all__ = ("CurrentUser", "UserSession", "FirebaseSession")
