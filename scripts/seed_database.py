#!/usr/bin/env python3
"""
Seed a live Supabase project with the starter accounts, departments and batches.

Existing accounts are skipped; departments and batches are upserted by id, so
re-running is safe.

Usage:
  python scripts/seed_database.py            # uses SUPABASE_* from env / .env
  python scripts/seed_database.py --dry-run  # print what would be written
"""

from __future__ import annotations

import argparse
import os
import sys

APP_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "app"))
if APP_DIR not in sys.path:
    sys.path.insert(0, APP_DIR)

from config import get_config  # noqa: E402
from data import records as R  # noqa: E402
from data.connection import DuplicateRecordError, StoreError, SupabaseStore  # noqa: E402
from data.mock_data import BATCH_NAMES, DEPARTMENTS  # noqa: E402
from logs import get_logger, setup_logging  # noqa: E402

logger = get_logger("seed")

ACCOUNTS = [
    # email, password, name, role
    ("admin@sports.com", "admin123", "System Admin", "admin"),
    ("staff@sports.com", "staff123", "Staff Member", "staff"),
]


def seed_accounts(store: SupabaseStore) -> int:
    created = 0
    for email, password, name, role in ACCOUNTS:
        try:
            uid = store.create_auth_user(email, password)
        except DuplicateRecordError:
            logger.info("account_exists_skipping", email=email)
            continue
        profile = R.StaffProfile(uid=uid, email=email, name=name, role=role,
                                 staff_type="ontrack" if role == "staff" else None)
        store.upsert(R.STAFF, [profile.to_row()], on_conflict="uid")
        logger.info("account_created", email=email, role=role)
        created += 1
    return created


def department_rows() -> list[dict]:
    return [R.Department(id=dept_id, name=name, code=code).to_row() for dept_id, name, code in DEPARTMENTS]


def batch_rows() -> list[dict]:
    return [
        R.Batch(id=f"{dept_id}-{batch_name[:4]}", name=batch_name, department_id=dept_id).to_row()
        for dept_id, _, _ in DEPARTMENTS
        for batch_name in BATCH_NAMES[:2]
    ]


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--dry-run", action="store_true", help="Print the rows instead of writing them")
    args = ap.parse_args()

    cfg = get_config()
    setup_logging(cfg.log_level, cfg.log_json)

    depts, batches = department_rows(), batch_rows()
    if args.dry_run:
        for email, _, name, role in ACCOUNTS:
            print(f"account: {email} ({role}, {name})")
        for row in depts:
            print(f"department: {row['id']} {row['code']} {row['name']}")
        for row in batches:
            print(f"batch: {row['id']} {row['name']}")
        return

    if not cfg.live_configured or not cfg.supabase_service_key:
        print("ERROR: SUPABASE_URL, SUPABASE_KEY and SUPABASE_SERVICE_KEY required")
        sys.exit(1)

    store = SupabaseStore(cfg=cfg)
    try:
        created = seed_accounts(store)
        store.upsert(R.DEPARTMENTS, depts)
        store.upsert(R.BATCHES, batches)
    except StoreError as e:
        logger.error("seed_failed", error=e.message)
        print(f"ERROR: {e.message}")
        sys.exit(1)

    print(f"Seeded: {created} new account(s), {len(depts)} departments, {len(batches)} batches")
    for email, password, _, role in ACCOUNTS:
        print(f"  {role}: {email} / {password}")


if __name__ == "__main__":
    main()
