"""Business logic service for the link shortener."""

import asyncio
import logging
from typing import Optional, Dict, Any, List

from .models import Link
from .store import LinkStore
from .persistence import AutosaveWorker
from .common.validators import is_valid_url, normalize_url


class LinkShortenerService:
    """Async facade over the link store used by the HTTP layer."""

    def __init__(
        self,
        store: LinkStore,
        autosave: Optional[AutosaveWorker] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize link shortener service.

        Args:
            store: Link store instance
            autosave: Optional background saver; without one, visit counts
                reach disk with the next create or delete
            logger: Optional logger
        """
        self.store = store
        self.autosave = autosave
        self.logger = logger or logging.getLogger(__name__)

    async def start(self) -> None:
        """Start background saving. Must run inside the event loop."""
        if self.autosave:
            self.autosave.start()

    async def create_short_link(self, original_url: str, owner_ip: str) -> Link:
        """Create a new short link.

        Args:
            original_url: The original long URL, scheme optional
            owner_ip: IP of the requester, who becomes the owner

        Returns:
            The created link

        Raises:
            ValueError: If the URL is invalid or no free code was found
        """
        if not original_url or not original_url.strip():
            raise ValueError("Invalid URL: URL is required")

        url = normalize_url(original_url)
        is_valid, error = is_valid_url(url)
        if not is_valid:
            raise ValueError(f"Invalid URL: {error}")

        # create() writes the snapshot before returning
        return await asyncio.to_thread(self.store.create, url, owner_ip)

    async def resolve(self, short_code: str) -> Optional[str]:
        """Get the original URL for a short code, counting one visit.

        Args:
            short_code: The short code to lookup

        Returns:
            Original URL or None if not found
        """
        original_url = self.store.resolve(short_code)

        if original_url is None:
            self.logger.warning(f"Short code not found: {short_code}")
            return None

        if self.autosave:
            self.autosave.notify()

        self.logger.debug(f"Resolved: {short_code} -> {original_url}")
        return original_url

    async def get_link(self, short_code: str) -> Optional[Link]:
        """Get a link without counting a visit."""
        return self.store.get(short_code)

    async def delete_link(self, short_code: str, requester_ip: str) -> bool:
        """Delete a link owned by requester_ip.

        Returns:
            True if deleted. Callers should not reveal the result to the
            requester, so non-owners cannot probe for codes.
        """
        deleted = await asyncio.to_thread(self.store.delete, short_code, requester_ip)
        if not deleted:
            self.logger.debug(f"Delete ignored: {short_code} requested by {requester_ip}")
        return deleted

    async def list_my_links(self, owner_ip: str) -> List[Link]:
        """Links of owner_ip, most visited first."""
        links = self.store.list_by_owner(owner_ip)
        # sort() is stable, so equal counts keep creation order
        links.sort(key=lambda link: link.visits, reverse=True)
        return links

    async def top_links(self, limit: int = 50) -> List[Link]:
        """Most visited links across all owners. limit <= 0 returns all."""
        return self.store.top_n(limit)

    async def get_statistics(self) -> Dict[str, Any]:
        """Get service statistics."""
        return {
            **self.store.statistics(),
            "autosave_enabled": self.autosave is not None and self.autosave.running,
        }

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        autosave_healthy = self.autosave is None or self.autosave.running
        return {
            "store": True,
            "autosave": autosave_healthy,
            "overall": autosave_healthy,
        }

    async def close(self) -> None:
        """Stop background saving and flush the store."""
        if self.autosave:
            await self.autosave.stop()
        else:
            await asyncio.to_thread(self.store.persist)
