# core/supabase_client.py
# Supabase client for reading the hosted registration roster

import logging

from django.conf import settings

logger = logging.getLogger("core.supabase")

_supabase_client = None


class SupabaseNotConfigured(Exception):
    pass


def get_supabase_client():
    """
    Get the Supabase client instance (singleton pattern).
    Uses service_role key so row level security does not hide roster rows.
    """
    global _supabase_client

    if _supabase_client is None:
        from supabase import create_client

        url = settings.SUPABASE_URL
        key = settings.SUPABASE_SERVICE_ROLE_KEY

        if not url or not key:
            raise SupabaseNotConfigured("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        _supabase_client = create_client(url, key)
        logger.info("Supabase client initialized")

    return _supabase_client


def fetch_registrations(event_key: str, page_size: int = 1000, client=None) -> list:
    """
    Read every roster row of one event from the hosted registration table.

    Rows are dicts with at least `user_email`, `event_key` and
    `event_date`; `reg_no` is passed through when the table has it.
    """
    client = client or get_supabase_client()
    table = settings.SUPABASE_REGISTRATION_TABLE

    rows = []
    start = 0
    while True:
        result = (
            client.table(table)
            .select("*")
            .eq("event_key", event_key)
            .range(start, start + page_size - 1)
            .execute()
        )
        batch = result.data or []
        rows.extend(batch)
        if len(batch) < page_size:
            break
        start += page_size

    logger.info(f"Fetched {len(rows)} registration rows for {event_key} from {table}")
    return rows
