# auth.py
import hmac
import logging
from typing import Any, Dict, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from config import get_settings
from errors import DuplicateUserError
from schemas import RegisterRequest
from storage import MongoStore

logger = logging.getLogger(__name__)


def register_user(store: MongoStore, body: RegisterRequest) -> str:
    existing = store.find_user(body.email, body.phoneNumber)
    if existing:
        raise DuplicateUserError("User with this email or phone number already exists")

    user_id = store.create_user(
        username=body.username,
        email=body.email,
        phone_number=body.phoneNumber,
        password_hash=generate_password_hash(body.password),
    )
    logger.info("Registered user %s", user_id)
    return user_id


def authenticate(store: MongoStore, identifier: str, password: str) -> Optional[Dict[str, Any]]:
    """
    Look the user up by email or phone number and check the password.
    Returns the user without its password hash, or None.
    """
    user = store.find_user(identifier, identifier)
    if not user or not check_password_hash(user.get("password", ""), password):
        return None

    user.pop("password", None)
    return user


def check_admin_credentials(email: str, password: str) -> bool:
    """
    Raises RuntimeError when the admin credentials are not configured.
    """
    settings = get_settings()
    if not settings.admin_email or not settings.admin_password:
        raise RuntimeError("Admin credentials are not set in environment variables.")

    email_ok = hmac.compare_digest(email.encode(), settings.admin_email.encode())
    password_ok = hmac.compare_digest(password.encode(), settings.admin_password.encode())
    return email_ok and password_ok
