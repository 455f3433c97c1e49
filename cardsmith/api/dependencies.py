from cardsmith.config import settings
from cardsmith.storage.key_value import JsonFileStore, KeyValueStore


def get_store() -> KeyValueStore:
    """Key-value store backing the recents registry."""
    return JsonFileStore(settings.recents_file)
