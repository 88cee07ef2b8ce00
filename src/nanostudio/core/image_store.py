"""Local persistence for generated images.

The store is append-only: images are never updated, and the only removal
is :meth:`ImageStore.clear`, which empties the whole gallery.  Reads
return images newest first, with each appended batch kept in the order it
was given.
"""

import logging
import sqlite3
from abc import ABC, abstractmethod
from collections.abc import Iterable
from pathlib import Path

from .errors import StoreError
from .models import GeneratedImage

logger = logging.getLogger(__name__)


class ImageStore(ABC):
    """Repository interface injected into the generation orchestrator."""

    @abstractmethod
    def append_many(self, images: Iterable[GeneratedImage]) -> None:
        """Prepend a batch of images as one unit.

        Either every image of the batch is stored or none is.

        Raises:
            StoreError: If the batch could not be written (including a
                duplicate ``id``).
        """

    @abstractmethod
    def get_all(self) -> list[GeneratedImage]:
        """Return every stored image, newest first."""

    @abstractmethod
    def clear(self) -> None:
        """Remove every stored image."""

    def append(self, image: GeneratedImage) -> None:
        self.append_many([image])

    def count(self) -> int:
        return len(self.get_all())


class InMemoryImageStore(ImageStore):
    """Non-durable store with the same contract, for tests and previews."""

    def __init__(self, images: Iterable[GeneratedImage] | None = None):
        self._images: list[GeneratedImage] = list(images or [])

    def append_many(self, images: Iterable[GeneratedImage]) -> None:
        batch = list(images)
        known = {image.id for image in self._images}
        seen: set[str] = set()
        for image in batch:
            if image.id in known or image.id in seen:
                raise StoreError(f"Image {image.id} is already stored")
            seen.add(image.id)
        self._images = batch + self._images

    def get_all(self) -> list[GeneratedImage]:
        return list(self._images)

    def clear(self) -> None:
        self._images = []

    def count(self) -> int:
        return len(self._images)


class SQLiteImageStore(ImageStore):
    """Durable image store backed by a single SQLite file.

    Images are keyed by ``id``.  A monotonically increasing ``seq`` column
    records insertion order; batches are inserted last-to-first so that
    ordering by ``seq`` descending yields newest batches first with each
    batch still in its original order.
    """

    def __init__(self, db_path: Path):
        """Open (and if needed create) the gallery database.

        Args:
            db_path: Path to the SQLite database file

        Raises:
            StoreError: If the database cannot be created.
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize_db()
        logger.info(f"Initialized image store at {self.db_path}")

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self.db_path)

    def _initialize_db(self) -> None:
        """Create database schema if it doesn't exist."""
        try:
            with self._connect() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS images (
                        seq INTEGER PRIMARY KEY AUTOINCREMENT,
                        id TEXT NOT NULL UNIQUE,
                        url TEXT NOT NULL,
                        prompt TEXT NOT NULL DEFAULT '',
                        model TEXT NOT NULL,
                        timestamp INTEGER NOT NULL
                    )
                    """)
        except sqlite3.Error as e:
            logger.error(f"Error initializing image store {self.db_path}: {e}")
            raise StoreError(f"Image store unavailable: {e}") from e

    def append_many(self, images: Iterable[GeneratedImage]) -> None:
        batch = list(images)
        if not batch:
            return

        rows = [
            (image.id, image.url, image.prompt, image.model, image.timestamp)
            for image in reversed(batch)
        ]

        conn = None
        try:
            conn = self._connect()
            # The connection context manager commits on success and rolls
            # back the whole batch on any error.
            with conn:
                conn.executemany(
                    """
                    INSERT INTO images (id, url, prompt, model, timestamp)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    rows,
                )
        except sqlite3.Error as e:
            logger.error(f"Error saving {len(batch)} image(s): {e}")
            raise StoreError(f"Could not save images: {e}") from e
        finally:
            if conn is not None:
                conn.close()

        logger.debug(f"Stored {len(batch)} image(s)")

    def get_all(self) -> list[GeneratedImage]:
        conn = None
        try:
            conn = self._connect()
            rows = conn.execute("""
                SELECT id, url, prompt, model, timestamp FROM images ORDER BY seq DESC
                """).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Error loading images: {e}")
            raise StoreError(f"Could not load images: {e}") from e
        finally:
            if conn is not None:
                conn.close()

        return [
            GeneratedImage(id=row[0], url=row[1], prompt=row[2], model=row[3], timestamp=row[4])
            for row in rows
        ]

    def count(self) -> int:
        conn = None
        try:
            conn = self._connect()
            result = conn.execute("SELECT COUNT(*) FROM images").fetchone()
            return result[0] if result else 0
        except sqlite3.Error as e:
            logger.error(f"Error counting images: {e}")
            raise StoreError(f"Could not load images: {e}") from e
        finally:
            if conn is not None:
                conn.close()

    def clear(self) -> None:
        conn = None
        try:
            conn = self._connect()
            with conn:
                conn.execute("DELETE FROM images")
        except sqlite3.Error as e:
            logger.error(f"Error clearing images: {e}")
            raise StoreError(f"Could not clear images: {e}") from e
        finally:
            if conn is not None:
                conn.close()

        logger.info("Cleared all images")
