from __future__ import annotations

from typing import Optional

import pandas as pd

from data import records as R
from data.connection import RecordNotFound, StoreAuthError, StoreError
from logs import get_logger

logger = get_logger("staff")

STAFF_COLUMNS = ["uid", "name", "email", "phone", "staff_type"]


def list_staff(store) -> pd.DataFrame:
    rows = store.select(R.STAFF, eq={"role": "staff"}, order="name")
    df = pd.DataFrame(rows)
    for col in STAFF_COLUMNS:
        if col not in df.columns:
            df[col] = None
    return df[STAFF_COLUMNS]


def create_staff(
    store,
    name: str,
    email: str,
    password: str,
    phone: Optional[str] = None,
    staff_type: str = "ontrack",
) -> R.StaffProfile:
    """
    Create the auth account first, then the profile row; if the profile
    can't be written the account is removed again.

    The password only lives in the auth backend; the profile never stores it.
    """
    R.require(name=name, email=email, password=password)
    if staff_type not in R.STAFF_TYPES:
        raise R.ValidationError(f"Unknown staff type: {staff_type}")

    email = email.strip().lower()
    uid = store.create_auth_user(email, password)
    profile = R.StaffProfile(
        uid=uid,
        email=email,
        name=name.strip(),
        role="staff",
        staff_type=staff_type,
        phone=(phone or "").strip() or None,
    )
    try:
        store.insert(R.STAFF, [profile.to_row()])
    except StoreError:
        logger.warning("staff_profile_insert_failed_removing_account", uid=uid, email=email)
        store.delete_auth_user(uid)
        raise
    logger.info("staff_created", uid=uid, email=email, staff_type=staff_type)
    return profile


def update_staff(
    store,
    uid: str,
    name: str,
    email: str,
    phone: Optional[str],
    staff_type: str,
    password: Optional[str] = None,
) -> None:
    R.require(name=name, email=email)
    store.update(
        R.STAFF,
        {
            "name": name.strip(),
            "email": email.strip().lower(),
            "phone": (phone or "").strip() or None,
            "staff_type": staff_type,
        },
        eq={"uid": uid},
    )
    if password:
        store.set_auth_password(uid, password)
    logger.info("staff_updated", uid=uid, password_reset=bool(password))


def delete_staff(store, uid: str) -> None:
    store.delete(R.STAFF, eq={"uid": uid})
    store.delete_auth_user(uid)
    logger.info("staff_deleted", uid=uid)


def get_profile(store, uid: str) -> R.StaffProfile:
    rows = store.select(R.STAFF, eq={"uid": uid})
    if not rows:
        raise RecordNotFound(f"No staff profile for {uid}")
    return R.StaffProfile.from_row(rows[0])


def authenticate(store, email: str, password: str) -> R.StaffProfile:
    """Sign in and return the profile; only admins may use the console."""
    R.require(email=email, password=password)
    uid = store.sign_in(email.strip().lower(), password)
    try:
        profile = get_profile(store, uid)
    except RecordNotFound as e:
        raise StoreAuthError("This account has no staff profile.") from e
    if not profile.is_admin:
        raise StoreAuthError("This console is for administrators only.")
    logger.info("signed_in", uid=uid)
    return profile
