"""Anonymous per-browser identity

Every visitor gets a random user ID (UUID4) kept in Flask's signed session
cookie (named `user_cookie`, valid for 100 days). A missing, expired or
tampered cookie simply yields a fresh identity; no request is ever rejected.

Functions:
    ensure_user_identity() -> None
        `before_request` hook assigning `g.user_id`.
    current_user_id() -> str
        Return the identity of the current request.
"""

import logging
import uuid

from flask import g, session

from shortener.web.constants import USER_ID_SESSION_KEY


logger = logging.getLogger(__name__)


def ensure_user_identity() -> None:
    user_id = session.get(USER_ID_SESSION_KEY)
    if not isinstance(user_id, str) or not user_id:
        user_id = str(uuid.uuid4())
        session[USER_ID_SESSION_KEY] = user_id
        session.permanent = True
        logger.debug('Issued new anonymous user identity.', extra={'userId': user_id})
    g.user_id = user_id


def current_user_id() -> str:
    return g.user_id
