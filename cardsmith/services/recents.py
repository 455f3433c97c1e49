"""
Recent projects registry.

Maintains a most-recently-used list of project file locations under one key
in a host-supplied key-value store. The store is passed into every call; there
is no ambient global store.

This is a best-effort convenience: reading never raises and a failed write
never blocks the document save that triggered it. Concurrent writers race with
last-write-wins semantics.
"""

import json
import logging
from collections.abc import Sequence

from pydantic import ValidationError

from cardsmith.config import settings
from cardsmith.models.failure import StorageUnavailableError
from cardsmith.models.project import Project, utc_now
from cardsmith.models.recents import RecentProject
from cardsmith.storage.key_value import KeyValueStore

logger = logging.getLogger(__name__)


def load_recent_projects(
    store: KeyValueStore | None,
    key: str | None = None,
) -> list[RecentProject]:
    """
    Load the recents list.

    Returns:
        Entries most-recent-first. Empty if the store is missing or failing,
        the key is absent, or the stored value is not a JSON list. Entries
        that do not have the expected shape are dropped.
    """
    key = key or settings.recents_key
    if store is None:
        return []

    try:
        raw = store.get(key)
    except Exception as e:
        logger.warning("Recent projects store unavailable: %s", e)
        return []

    if not raw:
        return []

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Recent projects entry is corrupt: %s", e)
        return []

    if not isinstance(parsed, list):
        logger.warning("Recent projects entry is not a list, ignoring")
        return []

    recents: list[RecentProject] = []
    for entry in parsed:
        try:
            recents.append(RecentProject.model_validate(entry))
        except ValidationError:
            logger.debug("Dropping malformed recent project entry: %r", entry)
    return recents


def save_recent_projects(
    store: KeyValueStore | None,
    recents: Sequence[RecentProject],
    key: str | None = None,
) -> None:
    """
    Persist the recents list as a JSON array.

    Raises:
        StorageUnavailableError: If there is no store
    """
    if store is None:
        raise StorageUnavailableError("No key-value store supplied")
    payload = [entry.model_dump(by_alias=True) for entry in recents]
    store.set(key or settings.recents_key, json.dumps(payload))


def add_recent_project(
    store: KeyValueStore | None,
    project: Project,
    file_path: str,
    key: str | None = None,
) -> list[RecentProject]:
    """
    Record that `project` was opened or saved at `file_path`.

    Any existing entry for the same path is removed, the new entry goes to
    the front, and the list is truncated to the configured capacity.

    Returns:
        The updated list, whether or not it could be persisted.
    """
    entry = RecentProject(
        name=str(project.meta.name), file_path=file_path, last_opened=utc_now()
    )
    others = [r for r in load_recent_projects(store, key) if r.file_path != file_path]
    updated = [entry, *others][: settings.recents_capacity]

    try:
        save_recent_projects(store, updated, key)
    except Exception as e:
        logger.warning("Could not save recent projects: %s", e)

    return updated
