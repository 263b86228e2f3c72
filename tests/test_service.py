"""Tests for the link shortener service."""

import asyncio

import pytest

from linkstore.persistence import AutosaveWorker
from linkstore.service import LinkShortenerService


@pytest.mark.asyncio
class TestLinkShortenerService:
    """Test service business logic."""

    async def test_create_short_link(self, service, sample_urls):
        """Test creating a short link."""
        link = await service.create_short_link(sample_urls[0], "1.1.1.1")

        assert link.short_code
        assert link.original_url == sample_urls[0]
        assert link.ip == "1.1.1.1"
        assert link.visits == 0

    async def test_create_adds_scheme(self, service):
        """URLs without a scheme are stored as https."""
        link = await service.create_short_link("  example.com/page ", "1.1.1.1")

        assert link.original_url == "https://example.com/page"

    @pytest.mark.parametrize("url", ["", "   ", "http://", "https://", "https://" + "a" * 2048])
    async def test_create_invalid_url(self, service, url):
        """Test that invalid URLs are rejected."""
        with pytest.raises(ValueError, match="Invalid URL"):
            await service.create_short_link(url, "1.1.1.1")

        assert len(service.store) == 0

    async def test_resolve(self, service, sample_urls):
        """Test resolving a short code counts one visit."""
        link = await service.create_short_link(sample_urls[0], "1.1.1.1")

        assert await service.resolve(link.short_code) == sample_urls[0]
        assert await service.resolve(link.short_code) == sample_urls[0]

        info = await service.get_link(link.short_code)
        assert info.visits == 2

    async def test_resolve_not_found(self, service):
        """Test resolving a nonexistent code."""
        assert await service.resolve("nonexistent") is None

    async def test_resolve_notifies_autosave(self, store, logger):
        """A visit schedules a background save."""
        saves = []

        def save():
            saves.append(1)
            return store.persist()

        autosave = AutosaveWorker(save=save, interval_seconds=60, logger=logger)
        service = LinkShortenerService(store=store, autosave=autosave, logger=logger)
        await service.start()
        try:
            link = await service.create_short_link("https://example.com", "1.1.1.1")
            await service.resolve(link.short_code)

            for _ in range(200):
                if store.snapshot.read()[0]["visits"] == 1:
                    break
                await asyncio.sleep(0.01)

            assert saves
            assert store.snapshot.read()[0]["visits"] == 1
        finally:
            await service.close()

    async def test_list_my_links_most_visited_first(self, service):
        """Own links are ordered by visits, creation order on ties."""
        first = await service.create_short_link("https://example.com/1", "1.1.1.1")
        second = await service.create_short_link("https://example.com/2", "1.1.1.1")
        third = await service.create_short_link("https://example.com/3", "1.1.1.1")
        await service.create_short_link("https://example.com/other", "2.2.2.2")
        await service.resolve(second.short_code)

        links = await service.list_my_links("1.1.1.1")

        assert [l.short_code for l in links] == [
            second.short_code, first.short_code, third.short_code
        ]

    async def test_delete_link(self, service):
        """Only the owner deletes."""
        link = await service.create_short_link("https://example.com", "1.1.1.1")

        assert await service.delete_link(link.short_code, "2.2.2.2") is False
        assert await service.get_link(link.short_code) is not None

        assert await service.delete_link(link.short_code, "1.1.1.1") is True
        assert await service.get_link(link.short_code) is None

    async def test_top_links(self, service):
        """Test the ranking across owners."""
        a = await service.create_short_link("https://example.com/a", "1.1.1.1")
        b = await service.create_short_link("https://example.com/b", "2.2.2.2")
        for _ in range(3):
            await service.resolve(b.short_code)
        await service.resolve(a.short_code)

        top = await service.top_links(limit=1)

        assert [l.short_code for l in top] == [b.short_code]
        assert len(await service.top_links(limit=0)) == 2

    async def test_statistics(self, service):
        """Test statistics."""
        link = await service.create_short_link("https://example.com", "1.1.1.1")
        await service.resolve(link.short_code)

        stats = await service.get_statistics()

        assert stats == {
            "total_links": 1,
            "total_visits": 1,
            "unique_owners": 1,
            "autosave_enabled": False,
        }

    async def test_health_check_without_autosave(self, service):
        """Test health check."""
        health = await service.health_check()

        assert health == {"store": True, "autosave": True, "overall": True}

    async def test_close_persists_visits(self, service):
        """Closing writes visit counts that were not saved yet."""
        link = await service.create_short_link("https://example.com", "1.1.1.1")
        await service.resolve(link.short_code)
        assert service.store.snapshot.read()[0]["visits"] == 0

        await service.close()

        assert service.store.snapshot.read()[0]["visits"] == 1
