"""Media storage backed by Django's configured file storage."""

import logging
import os
import uuid
from collections.abc import Iterable
from typing import BinaryIO

from django.core.files import File
from django.core.files.storage import Storage, default_storage

from events.domain import Media
from events.stores.interfaces import MediaStore

logger = logging.getLogger(__name__)


class DjangoMediaStore(MediaStore):
    """Stores uploads under ``folder`` with a random name.

    The storage name doubles as the media public_id.
    """

    def __init__(self, storage: Storage | None = None) -> None:
        self._storage = storage or default_storage

    def upload(self, content: BinaryIO, folder: str) -> Media:
        extension = os.path.splitext(getattr(content, "name", "") or "")[1].lower()
        name = f"{folder.strip('/')}/{uuid.uuid4().hex}{extension}"
        if not isinstance(content, File):
            content = File(content, name=name)
        saved = self._storage.save(name, content)
        return Media(url=self._storage.url(saved), public_id=saved)

    def delete(self, public_id: str) -> None:
        self._storage.delete(public_id)


def release_media(store: MediaStore, media: Iterable[Media]) -> list[Media]:
    """Delete media objects, logging failures instead of raising.

    Returns the media that could not be deleted so the caller can report or
    retry them.
    """
    failed: list[Media] = []
    for item in media:
        try:
            store.delete(item.public_id)
        except Exception:
            logger.warning("Failed to delete media %s", item.public_id, exc_info=True)
            failed.append(item)
    return failed
