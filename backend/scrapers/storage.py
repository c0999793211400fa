"""
Snapshot stores for the last successful extraction of each site.

A snapshot is overwritten wholesale on every successful run; there is no
history. Keys are site identifiers, so concurrent runs for different sites
never write the same record.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union
import json
import logging
import os
import tempfile

from .base import ListingRecord
from .exceptions import SnapshotError

logger = logging.getLogger(__name__)


def serialize_listings(listings: List[ListingRecord]) -> List[Dict[str, str]]:
    """Snapshot format: ordered list of {title, raw_price, image_url}."""
    return [
        {
            'title': listing.title,
            'raw_price': listing.raw_price,
            'image_url': listing.image_url,
        }
        for listing in listings
    ]


class SnapshotStore(ABC):
    """Key-value store holding one snapshot per site."""

    @abstractmethod
    def save(self, site_key: str, listings: List[ListingRecord]) -> None:
        """Replace the snapshot for site_key."""
        pass

    @abstractmethod
    def load(self, site_key: str) -> Optional[List[Dict[str, str]]]:
        """Return the stored snapshot, or None if the site has none."""
        pass


class JsonFileSnapshotStore(SnapshotStore):
    """
    Stores each snapshot as an indented UTF-8 JSON file.

    Writes go to a temporary file in the same directory which is then
    renamed over the target, so readers never see a half-written file.
    """

    FILENAME_TEMPLATE = 'productos_{site_key}.json'

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)

    def path_for(self, site_key: str) -> Path:
        return self.data_dir / self.FILENAME_TEMPLATE.format(site_key=site_key)

    def save(self, site_key: str, listings: List[ListingRecord]) -> None:
        target = self.path_for(site_key)
        payload = json.dumps(serialize_listings(listings), indent=2, ensure_ascii=False)

        tmp_path = None
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                'w',
                encoding='utf-8',
                dir=self.data_dir,
                prefix=f".{site_key}.",
                suffix='.tmp',
                delete=False
            ) as tmp:
                tmp_path = tmp.name
                tmp.write(payload)
            os.replace(tmp_path, target)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise SnapshotError(f"Could not write snapshot {target}: {e}") from e

        logger.info(f"Saved {len(listings)} listings to {target}")

    def load(self, site_key: str) -> Optional[List[Dict[str, str]]]:
        path = self.path_for(site_key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            raise SnapshotError(f"Could not read snapshot {path}: {e}") from e


class DatabaseSnapshotStore(SnapshotStore):
    """
    Stores snapshots in the `snapshots` table, one row per site.

    Args:
        session_factory: Callable returning a new SQLAlchemy session
    """

    def __init__(self, session_factory: Callable):
        self.session_factory = session_factory

    def save(self, site_key: str, listings: List[ListingRecord]) -> None:
        # Import here to avoid circular imports
        from sqlalchemy.exc import SQLAlchemyError
        from api.database import Snapshot

        db = self.session_factory()
        try:
            snapshot = db.query(Snapshot).filter_by(site_key=site_key).first()
            if snapshot is None:
                snapshot = Snapshot(site_key=site_key)
                db.add(snapshot)

            snapshot.listings = json.dumps(serialize_listings(listings), ensure_ascii=False)
            snapshot.listing_count = len(listings)
            snapshot.saved_at = datetime.now(timezone.utc)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise SnapshotError(f"Could not write snapshot for {site_key}: {e}") from e
        finally:
            db.close()

        logger.info(f"Saved {len(listings)} listings to snapshot '{site_key}'")

    def load(self, site_key: str) -> Optional[List[Dict[str, str]]]:
        from sqlalchemy.exc import SQLAlchemyError
        from api.database import Snapshot

        db = self.session_factory()
        try:
            snapshot = db.query(Snapshot).filter_by(site_key=site_key).first()
            if snapshot is None:
                return None
            return json.loads(snapshot.listings)
        except (SQLAlchemyError, ValueError) as e:
            raise SnapshotError(f"Could not read snapshot for {site_key}: {e}") from e
        finally:
            db.close()
