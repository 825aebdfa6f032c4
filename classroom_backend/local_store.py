"""
Local JSON Store
================
Fallback persistence for assignments and submissions when Supabase is not
configured or not reachable. Each collection is one JSON file holding a
list of records.
"""

import os
import json
import logging
import threading

logger = logging.getLogger(__name__)

_store_lock = threading.RLock()


def ensure_data_dir(path: str):
    """Create the parent directory of a store file if it doesn't exist."""
    parent = os.path.dirname(str(path))
    if parent:
        os.makedirs(parent, exist_ok=True)


def load_records(path: str) -> list:
    """
    Load all records of a collection.

    A missing or unreadable file is treated as an empty collection.
    """
    path = str(path)
    with _store_lock:
        if not os.path.exists(path):
            return []
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read %s, treating as empty: %s", path, e)
            return []

    return data if isinstance(data, list) else []


def save_records(path: str, records: list):
    """Replace the collection with the given records."""
    path = str(path)
    with _store_lock:
        ensure_data_dir(path)
        tmp_path = path + ".tmp"
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(records, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, path)


def update_record(path: str, record_id: str, update_fn):
    """
    Apply update_fn to the record with the given id and save.

    Returns the updated record, or None if no record has that id.
    """
    with _store_lock:
        records = load_records(path)
        for index, record in enumerate(records):
            if record.get("id") == record_id:
                records[index] = update_fn(dict(record))
                save_records(path, records)
                return records[index]
    return None


def append_record(path: str, record: dict) -> dict:
    """Append one record to the collection."""
    with _store_lock:
        records = load_records(path)
        records.append(record)
        save_records(path, records)
    return record


def remove_record(path: str, record_id: str) -> bool:
    """Remove the record with the given id. Returns True if it existed."""
    with _store_lock:
        records = load_records(path)
        remaining = [r for r in records if r.get("id") != record_id]
        if len(remaining) == len(records):
            return False
        save_records(path, remaining)
    return True
