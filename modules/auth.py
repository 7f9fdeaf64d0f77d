import datetime
import logging

import bcrypt
import streamlit as st
from bson import ObjectId
from jose import JWTError, jwt
from pymongo.errors import PyMongoError

from utils import sanitize_input

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"


def _user_id(user_id):
    if isinstance(user_id, str) and ObjectId.is_valid(user_id):
        return ObjectId(user_id)
    return user_id


def is_admin(db, user_id):
    """True if the user exists and has the admin role."""
    if not user_id:
        return False
    try:
        user = db.users.find_one({"_id": _user_id(user_id)}, {"role": 1})
    except PyMongoError as e:
        logger.error(f"Admin check failed for {user_id}: {e}")
        return False
    return bool(user) and user.get("role") == "admin"


def login_user(db, email, password):
    user = db.users.find_one({"email": email})
    if user and user.get("password"):
        if bcrypt.checkpw(password.encode('utf-8'), user['password'].encode('utf-8')):
            logger.info("Login succeeded.")
            return user
    logger.warning("Login failed: wrong email or password.")
    return None


def create_user_token(user, secret_key, expires_minutes=600):
    expire = datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(minutes=expires_minutes)
    to_encode = {"sub": str(user["_id"]), "exp": expire}
    return jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)


def user_id_from_token(token, secret_key):
    try:
        payload = jwt.decode(token, secret_key, algorithms=[ALGORITHM])
    except JWTError as e:
        logger.error(f"Token verification failed: {e}")
        return None
    return payload.get("sub")


# Admin sign-in form; stores the session token in session_state
def admin_login(db, secret_key):
    st.subheader("Admin Login")
    email = sanitize_input(st.text_input("Email"))
    password = st.text_input("Password", type="password")
    if st.button("Sign In"):
        user = login_user(db, email, password)
        if user and is_admin(db, user["_id"]):
            st.session_state['admin_token'] = create_user_token(user, secret_key)
            st.success("Signed in.")
            st.rerun()
        else:
            st.error("Wrong email or password.")


def current_admin_id(db, secret_key):
    """User id of the signed-in admin, or None."""
    token = st.session_state.get('admin_token')
    if not token:
        return None
    user_id = user_id_from_token(token, secret_key)
    if user_id and is_admin(db, user_id):
        return user_id
    return None
