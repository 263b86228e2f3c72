"""Tests for the HTML pages and the redirect route."""

from urllib.parse import unquote

import pytest

OWNER = {"X-Forwarded-For": "1.1.1.1"}
STRANGER = {"X-Forwarded-For": "2.2.2.2"}


async def create_via_form(client, url, headers=None) -> str:
    """Submit the form and return the new short code."""
    response = await client.post("/shorten", data={"url": url}, headers=headers)
    assert response.status_code == 303
    short_url = unquote(response.headers["location"].split("result=", 1)[1])
    return short_url.rsplit("/", 1)[1]


@pytest.mark.asyncio
class TestWebPages:
    """Test the web interface."""

    async def test_homepage(self, client):
        """Test GET / serves the form."""
        response = await client.get("/")

        assert response.status_code == 200
        assert "Link Shorter" in response.text
        assert 'name="url"' in response.text
        assert "http://testserver" in response.text

    async def test_form_submission_redirects_with_result(self, client, service):
        """Test POST /shorten."""
        response = await client.post("/shorten", data={"url": "example.com"})

        assert response.status_code == 303
        location = response.headers["location"]
        assert location.startswith("/?result=")

        code = unquote(location.split("result=", 1)[1]).rsplit("/", 1)[1]
        link = await service.get_link(code)
        assert link.original_url == "https://example.com"

    async def test_result_is_shown(self, client):
        """The homepage displays the result parameter."""
        response = await client.get("/", params={"result": "http://testserver/aZ3kq1"})

        assert "http://testserver/aZ3kq1" in response.text

    async def test_empty_form_goes_back(self, client, service):
        """An empty submission creates nothing."""
        response = await client.post("/shorten", data={"url": "  "})

        assert response.status_code == 303
        assert response.headers["location"] == "/"
        assert len(service.store) == 0

    async def test_invalid_form_url(self, client):
        """An invalid URL renders the error page."""
        response = await client.post("/shorten", data={"url": "https://"})

        assert response.status_code == 400
        assert "Invalid URL" in response.text

    async def test_get_shorten_redirects_home(self, client):
        """GET /shorten goes back to the form."""
        response = await client.get("/shorten")

        assert response.status_code == 302
        assert response.headers["location"] == "/"

    async def test_redirect(self, client, service):
        """Test GET /{code} redirects and counts the visit."""
        code = await create_via_form(client, "https://example.com/target")

        response = await client.get(f"/{code}")

        assert response.status_code == 302
        assert response.headers["location"] == "https://example.com/target"
        assert (await service.get_link(code)).visits == 1

    async def test_redirect_unknown_code(self, client):
        """Test GET /{code} with nonexistent code."""
        response = await client.get("/nope00")

        assert response.status_code == 404
        assert "nope00" in response.text

    async def test_redirect_malformed_code(self, client):
        """Codes outside the alphabet are never looked up."""
        response = await client.get("/bad-code")

        assert response.status_code == 404

    async def test_my_page(self, client):
        """Test GET /my lists the caller's links."""
        code = await create_via_form(client, "https://example.com/mine", headers=OWNER)

        response = await client.get("/my", headers=OWNER)

        assert response.status_code == 200
        assert "1.1.1.1" in response.text
        assert code in response.text
        assert f'action="/delete/{code}"' in response.text

        response = await client.get("/my", headers=STRANGER)
        assert code not in response.text
        assert "You have not created any links yet" in response.text

    async def test_delete_page(self, client, service):
        """Test /delete/{code} only removes the caller's links."""
        code = await create_via_form(client, "https://example.com/mine", headers=OWNER)

        response = await client.post(f"/delete/{code}", headers=STRANGER)
        assert response.status_code == 303
        assert response.headers["location"] == "/my"
        assert await service.get_link(code) is not None

        response = await client.get(f"/delete/{code}", headers=OWNER)
        assert response.status_code == 303
        assert await service.get_link(code) is None

    async def test_stats_page(self, client):
        """Test GET /stats shows totals and the top links."""
        code = await create_via_form(client, "https://example.com/popular", headers=OWNER)
        await create_via_form(client, "https://example.com/other", headers=STRANGER)
        await client.get(f"/{code}")

        response = await client.get("/stats")

        assert response.status_code == 200
        assert "Top 5 most visited links" in response.text
        assert "Unique IPs" in response.text
        assert "https://example.com/popular" in response.text

    async def test_stats_page_empty(self, client):
        """Test GET /stats with no links."""
        response = await client.get("/stats")

        assert "No links yet" in response.text

    async def test_top_page(self, client):
        """Test GET /top ranks links and honors limit."""
        first = await create_via_form(client, "https://example.com/first")
        second = await create_via_form(client, "https://example.com/second")
        await client.get(f"/{second}")

        response = await client.get("/top", params={"limit": 1})

        assert response.status_code == 200
        assert second in response.text
        assert first not in response.text
        assert "Showing <strong>1</strong> of <strong>2</strong> links" in response.text

    async def test_top_page_bad_limit(self, client):
        """An unparsable limit falls back to the default."""
        await create_via_form(client, "https://example.com/first")

        response = await client.get("/top", params={"limit": "abc"})

        assert response.status_code == 200
        assert '<option value="50" selected>' in response.text

    async def test_top_page_empty(self, client):
        """Test GET /top with no links."""
        response = await client.get("/top")

        assert "No data yet" in response.text

    async def test_health(self, client):
        """Test the plain health endpoint."""
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    async def test_path_prefix_from_proxy(self, client):
        """Links and redirects carry X-Forwarded-Prefix."""
        headers = {"X-Forwarded-Prefix": "/s"}

        response = await client.post("/shorten", data={"url": "example.com"}, headers=headers)

        assert response.headers["location"].startswith("/s/?result=")
        assert "http%3A%2F%2Ftestserver%2Fs%2F" in response.headers["location"]
