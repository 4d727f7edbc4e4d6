"""
Store layer.

Two interchangeable backends expose the same small CRUD surface:
- SupabaseStore: live Supabase project (Postgres tables, Storage, Auth)
- MemoryStore (data/mock_data.py): seeded in-process demo data

Domain modules take a store and never import the Supabase client directly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Iterable, Optional

from postgrest.exceptions import APIError
from supabase import Client, create_client

from config import AppConfig
from logs import get_logger

logger = get_logger("store")

UNIQUE_VIOLATION = "23505"


class StoreError(RuntimeError):
    """A backend call failed."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class StoreAuthError(StoreError):
    """Missing credentials, rejected sign-in, or a non-admin account."""


class DuplicateRecordError(StoreError):
    """A unique constraint was violated."""


class RecordNotFound(StoreError):
    """The requested row does not exist."""


Filters = Optional[dict[str, Any]]
InFilter = Optional[tuple[str, Iterable[Any]]]


def _api_error(action: str, table: str, e: APIError) -> StoreError:
    code = getattr(e, "code", None)
    message = getattr(e, "message", None) or str(e)
    if code == UNIQUE_VIOLATION:
        return DuplicateRecordError(message, code=code)
    return StoreError(f"{action} on {table} failed: {message}", code=code)


@lru_cache(maxsize=4)
def _client(url: str, key: str) -> Client:
    return create_client(url, key)


@dataclass
class SupabaseStore:
    cfg: AppConfig
    _anon: Optional[Client] = field(default=None, init=False, repr=False)

    @property
    def name(self) -> str:
        return "supabase"

    def _db(self) -> Client:
        if not self.cfg.live_configured:
            raise StoreAuthError(
                "Missing SUPABASE_URL / SUPABASE_KEY. Set them for live mode, or switch on demo data."
            )
        if self._anon is None:
            self._anon = _client(self.cfg.supabase_url, self.cfg.supabase_key)
        return self._anon

    def _admin(self) -> Client:
        if not self.cfg.supabase_service_key:
            raise StoreAuthError("Managing staff accounts requires SUPABASE_SERVICE_KEY.")
        return _client(self.cfg.supabase_url, self.cfg.supabase_service_key)

    # --- tables ---

    @staticmethod
    def _filtered(q, eq: Filters, in_: InFilter):
        for col, value in (eq or {}).items():
            q = q.eq(col, value)
        if in_ is not None:
            col, values = in_
            q = q.in_(col, list(values))
        return q

    def select(
        self,
        table: str,
        eq: Filters = None,
        in_: InFilter = None,
        order: Optional[str] = None,
        desc: bool = False,
        columns: str = "*",
    ) -> list[dict]:
        if in_ is not None and not list(in_[1]):
            return []
        q = self._filtered(self._db().table(table).select(columns), eq, in_)
        if order:
            q = q.order(order, desc=desc)
        try:
            return list(q.execute().data or [])
        except APIError as e:
            raise _api_error("select", table, e) from e

    def insert(self, table: str, rows: list[dict]) -> list[dict]:
        try:
            return list(self._db().table(table).insert(rows).execute().data or [])
        except APIError as e:
            raise _api_error("insert", table, e) from e

    def update(self, table: str, values: dict, eq: Filters = None, in_: InFilter = None) -> list[dict]:
        if not eq and in_ is None:
            raise StoreError(f"Refusing unfiltered update on {table}")
        q = self._filtered(self._db().table(table).update(values), eq, in_)
        try:
            return list(q.execute().data or [])
        except APIError as e:
            raise _api_error("update", table, e) from e

    def upsert(self, table: str, rows: list[dict], on_conflict: Optional[str] = None) -> list[dict]:
        kwargs = {"on_conflict": on_conflict} if on_conflict else {}
        try:
            return list(self._db().table(table).upsert(rows, **kwargs).execute().data or [])
        except APIError as e:
            raise _api_error("upsert", table, e) from e

    def delete(self, table: str, eq: Filters = None, in_: InFilter = None) -> None:
        if not eq and in_ is None:
            raise StoreError(f"Refusing unfiltered delete on {table}")
        if in_ is not None and not list(in_[1]):
            return
        q = self._filtered(self._db().table(table).delete(), eq, in_)
        try:
            q.execute()
        except APIError as e:
            raise _api_error("delete", table, e) from e

    # --- storage ---

    def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        storage = self._db().storage.from_(bucket)
        try:
            storage.upload(path, content, {"content-type": content_type})
        except Exception as e:
            raise StoreError(f"Upload of {path} to {bucket} failed: {e}") from e
        return storage.get_public_url(path)

    # --- auth ---

    def sign_in(self, email: str, password: str) -> str:
        try:
            res = self._db().auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            raise StoreAuthError(f"Sign-in failed: {e}") from e
        if not res.user:
            raise StoreAuthError("Sign-in failed: invalid credentials")
        return res.user.id

    def sign_out(self) -> None:
        try:
            self._db().auth.sign_out()
        except Exception as e:
            logger.warning("sign_out_failed", error=str(e))

    def create_auth_user(self, email: str, password: str) -> str:
        try:
            res = self._admin().auth.admin.create_user(
                {"email": email, "password": password, "email_confirm": True}
            )
        except StoreAuthError:
            raise
        except Exception as e:
            if "already" in str(e).lower():
                raise DuplicateRecordError("Email is already in use.") from e
            raise StoreError(f"Creating auth account failed: {e}") from e
        return res.user.id

    def set_auth_password(self, uid: str, password: str) -> None:
        try:
            self._admin().auth.admin.update_user_by_id(uid, {"password": password})
        except StoreAuthError:
            raise
        except Exception as e:
            raise StoreError(f"Updating auth password failed: {e}") from e

    def delete_auth_user(self, uid: str) -> None:
        try:
            self._admin().auth.admin.delete_user(uid)
        except StoreAuthError:
            raise
        except Exception as e:
            raise StoreError(f"Deleting auth account failed: {e}") from e


def get_store(cfg: AppConfig, use_mock: bool):
    """Demo store when `use_mock`, otherwise a live Supabase store."""
    if use_mock:
        from data.mock_data import get_demo_store

        return get_demo_store()
    return SupabaseStore(cfg=cfg)
