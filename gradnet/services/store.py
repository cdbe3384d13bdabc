import logging
from contextlib import contextmanager
from typing import Dict, List, Optional

import httpx
from postgrest.exceptions import APIError

from gradnet.exceptions import NotFoundError, StoreError

logger = logging.getLogger(__name__)

PROFILES = "profiles"
MESSAGES = "messages"
ANNOUNCEMENTS = "announcements"


@contextmanager
def _store_call(table: str, action: str):
    try:
        yield
    except APIError as e:
        logger.error(f"Supabase {action} on '{table}' failed: {e.message} (code={e.code})")
        raise StoreError(e.message or f"{action} on {table} failed", code=e.code) from e
    except httpx.HTTPError as e:
        logger.error(f"Supabase {action} on '{table}' failed: {str(e)}")
        raise StoreError(f"Connection to data store failed during {action} on {table}") from e


def select_rows(
    supabase,
    table: str,
    columns: str = "*",
    filters: Optional[Dict] = None,
    exclude: Optional[Dict] = None,
    any_of: Optional[str] = None,
    order: Optional[str] = None,
    desc: bool = False,
    limit: Optional[int] = None,
) -> List[Dict]:
    query = supabase.table(table).select(columns)
    for column, value in (filters or {}).items():
        query = query.eq(column, value)
    for column, value in (exclude or {}).items():
        query = query.neq(column, value)
    if any_of:
        query = query.or_(any_of)
    if order:
        query = query.order(order, desc=desc)
    if limit:
        query = query.limit(limit)

    with _store_call(table, "select"):
        response = query.execute()
    return response.data or []


def select_one(supabase, table: str, row_id: str, columns: str = "*") -> Dict:
    rows = select_rows(supabase, table, columns=columns, filters={"id": row_id}, limit=1)
    if not rows:
        raise NotFoundError(table, row_id)
    return rows[0]


def count_rows(supabase, table: str, filters: Optional[Dict] = None) -> int:
    query = supabase.table(table).select("*", count="exact", head=True)
    for column, value in (filters or {}).items():
        query = query.eq(column, value)

    with _store_call(table, "count"):
        response = query.execute()
    return response.count or 0


def insert_row(supabase, table: str, row: Dict) -> Dict:
    with _store_call(table, "insert"):
        response = supabase.table(table).insert(row).execute()
    if not response.data:
        raise StoreError(f"Insert into {table} returned no row")
    logger.info(f"Inserted row into '{table}': {response.data[0].get('id')}")
    return response.data[0]


def upsert_row(supabase, table: str, row: Dict) -> Dict:
    with _store_call(table, "upsert"):
        response = supabase.table(table).upsert(row).execute()
    if not response.data:
        raise StoreError(f"Upsert into {table} returned no row")
    logger.info(f"Upserted row into '{table}': {response.data[0].get('id')}")
    return response.data[0]


def update_row(supabase, table: str, row_id: str, patch: Dict) -> Dict:
    with _store_call(table, "update"):
        response = supabase.table(table).update(patch).eq("id", row_id).execute()
    if not response.data:
        raise NotFoundError(table, row_id)
    return response.data[0]


def delete_row(supabase, table: str, row_id: str) -> Dict:
    with _store_call(table, "delete"):
        response = supabase.table(table).delete().eq("id", row_id).execute()
    if not response.data:
        raise NotFoundError(table, row_id)
    logger.info(f"Deleted row '{row_id}' from '{table}'")
    return response.data[0]
