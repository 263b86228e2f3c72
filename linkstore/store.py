"""In-memory link store with JSON snapshot persistence."""

import logging
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional, Any

from .models import Link
from .persistence import SnapshotFile
from .rwlock import ReadWriteLock
from .shortcode import ShortCodeGenerator
from .common.validators import normalize_url


class ShortCodeCollisionError(ValueError):
    """Raised when no free short code was found within the retry budget."""


class LinkStore:
    """Record table plus owner index, guarded by one readers-writer lock.

    Records are keyed by short code. The owner index maps an owner IP to the
    codes it created, in creation order; it is derived from the records and
    rebuilt on load, never persisted.
    """

    def __init__(
        self,
        snapshot: SnapshotFile,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 5,
    ):
        """Initialize link store.

        Args:
            snapshot: Snapshot file used by persist() and load()
            short_code_generator: Optional short code generator
            logger: Optional logger
            max_collision_retries: Extra attempts when a generated code is
                taken. A negative value disables the check, so a colliding
                code overwrites the existing record.
        """
        self.snapshot = snapshot
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.max_collision_retries = max_collision_retries

        self._links: Dict[str, Link] = {}
        self._owner_index: Dict[str, List[str]] = {}
        self._lock = ReadWriteLock()
        # Serializes snapshot+write so an older snapshot never lands last
        self._save_lock = threading.Lock()

    def create(self, original_url: str, owner_ip: str) -> Link:
        """Create a link for owner_ip and persist synchronously.

        Args:
            original_url: URL to shorten; "https://" is prefixed if no scheme
            owner_ip: IP of the creator

        Returns:
            Copy of the new record

        Raises:
            ShortCodeCollisionError: If every generated code was taken
        """
        url = normalize_url(original_url)

        with self._lock.write_locked():
            short_code = self._pick_code()
            link = Link(
                original_url=url,
                short_code=short_code,
                created_at=datetime.now(timezone.utc),
                ip=owner_ip,
                visits=0,
            )
            replaced = self._links.get(short_code)
            if replaced is not None:
                self.logger.warning(
                    f"Short code {short_code} collided; overwriting link owned by {replaced.ip}"
                )
                self._unindex(replaced)
            self._links[short_code] = link
            self._owner_index.setdefault(owner_ip, []).append(short_code)
            result = link.copy()

        self.logger.info(f"Created short link: {short_code} -> {url} (owner {owner_ip})")
        self.persist()
        return result

    def resolve(self, short_code: str) -> Optional[str]:
        """Return the original URL and count one visit, or None if unknown."""
        with self._lock.read_locked():
            exists = short_code in self._links
        if not exists:
            return None

        with self._lock.write_locked():
            # Deleted between the two lock sections
            link = self._links.get(short_code)
            if link is None:
                return None
            link.visits += 1
            return link.original_url

    def get(self, short_code: str) -> Optional[Link]:
        """Look up a record without counting a visit."""
        with self._lock.read_locked():
            link = self._links.get(short_code)
            return link.copy() if link else None

    def delete(self, short_code: str, requester_ip: str) -> bool:
        """Delete a link if requester_ip owns it.

        Returns:
            True if deleted. Unknown codes and foreign owners both give False.
        """
        with self._lock.write_locked():
            link = self._links.get(short_code)
            if link is None or link.ip != requester_ip:
                return False
            del self._links[short_code]
            self._unindex(link)

        self.logger.info(f"Deleted short link: {short_code} (owner {requester_ip})")
        self.persist()
        return True

    def list_by_owner(self, owner_ip: str) -> List[Link]:
        """Live records of owner_ip in creation order."""
        with self._lock.read_locked():
            codes = self._owner_index.get(owner_ip, [])
            return [self._links[c].copy() for c in codes if c in self._links]

    def top_n(self, n: int) -> List[Link]:
        """Records by visits descending, newest first on ties. n <= 0 means all."""
        with self._lock.read_locked():
            links = [link.copy() for link in self._links.values()]

        links.sort(key=lambda link: (link.visits, link.created_at), reverse=True)
        if n > 0:
            return links[:n]
        return links

    def statistics(self) -> Dict[str, Any]:
        """Totals across the store."""
        with self._lock.read_locked():
            return {
                "total_links": len(self._links),
                "total_visits": sum(link.visits for link in self._links.values()),
                "unique_owners": len(self._owner_index),
            }

    def __len__(self) -> int:
        with self._lock.read_locked():
            return len(self._links)

    def __contains__(self, short_code: str) -> bool:
        with self._lock.read_locked():
            return short_code in self._links

    def persist(self) -> bool:
        """Write every record to the snapshot file.

        Returns:
            True if written. Failures are logged, never raised.
        """
        with self._save_lock:
            with self._lock.read_locked():
                records = [link.to_dict() for link in self._links.values()]
            try:
                self.snapshot.write(records)
            except (OSError, TypeError, ValueError) as e:
                self.logger.error(f"Failed to save snapshot {self.snapshot.path}: {e}")
                return False

        self.logger.debug(f"Saved {len(records)} links to {self.snapshot.path}")
        return True

    def load(self) -> bool:
        """Replace the in-memory state with the snapshot on disk.

        A missing file means an empty store. An unreadable or malformed file
        is logged and also leaves the store empty.

        Returns:
            False if the snapshot existed but could not be used
        """
        path = self.snapshot.path
        self.logger.info(f"Loading snapshot: {path}")

        with self._lock.write_locked():
            self._links = {}
            self._owner_index = {}

            if not self.snapshot.exists():
                self.logger.info("Snapshot not found, starting with an empty store")
                return True

            try:
                records = self.snapshot.read()
                links = [Link.from_dict(record) for record in records]
            except (OSError, ValueError, KeyError, TypeError) as e:
                self.logger.error(f"Failed to load snapshot {path}: {e}")
                return False

            for link in links:
                previous = self._links.get(link.short_code)
                if previous is not None:
                    self._unindex(previous)
                self._links[link.short_code] = link
                self._owner_index.setdefault(link.ip, []).append(link.short_code)

        self.logger.info(f"Loaded {len(links)} links")
        return True

    def _pick_code(self) -> str:
        """Generate a short code. Caller must hold the write lock."""
        if self.max_collision_retries < 0:
            return self.generator.generate_random()

        for attempt in range(self.max_collision_retries + 1):
            code = self.generator.generate_random()
            if code not in self._links:
                if attempt:
                    self.logger.debug(f"Generated code after {attempt + 1} attempts: {code}")
                return code

        raise ShortCodeCollisionError(
            "Unable to generate unique short code after multiple attempts"
        )

    def _unindex(self, link: Link) -> None:
        """Drop link's code from its owner's list. Caller must hold the write lock."""
        codes = self._owner_index.get(link.ip)
        if not codes:
            return
        remaining = [c for c in codes if c != link.short_code]
        if remaining:
            self._owner_index[link.ip] = remaining
        else:
            del self._owner_index[link.ip]
