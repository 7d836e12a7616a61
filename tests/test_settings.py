"""
Site and contact settings tests.
"""

from httpx import AsyncClient


class TestSiteSettings:

    async def test_defaults_created_on_first_read(self, client: AsyncClient):
        response = await client.get("/api/settings")

        assert response.status_code == 200
        data = response.json()
        assert data["home_page"]["title"] == "Welcome to My Portfolio"
        assert data["visibility"] == {
            "show_skills": True,
            "show_projects": True,
            "show_experiences": True,
        }

    async def test_update_merges_sections(self, client: AsyncClient, admin_headers: dict):
        response = await client.put(
            "/api/settings",
            json={
                "home_page": {"title": "Hi, I'm Ann"},
                "visibility": {"show_projects": False},
            },
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["home_page"]["title"] == "Hi, I'm Ann"
        assert data["home_page"]["subtitle"] == "Full Stack Developer"
        assert data["visibility"]["show_projects"] is False
        assert data["visibility"]["show_skills"] is True

        response = await client.get("/api/settings")
        assert response.json()["home_page"]["title"] == "Hi, I'm Ann"

    async def test_update_requires_auth(self, client: AsyncClient):
        response = await client.put("/api/settings", json={"home_page": {"title": "x"}})
        assert response.status_code == 401


class TestContactSettings:

    async def test_defaults(self, client: AsyncClient):
        response = await client.get("/api/contact-settings")

        assert response.status_code == 200
        data = response.json()
        assert data["connect_with_me_title"] == "Connect With Me"
        assert data["email"] == "contact@example.com"

    async def test_empty_values_keep_current(self, client: AsyncClient, admin_headers: dict):
        await client.put(
            "/api/contact-settings",
            json={"github_link": "https://github.com/ann"},
            headers=admin_headers,
        )

        response = await client.put(
            "/api/contact-settings",
            json={"github_link": "", "phone": "+1 555 0100"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["github_link"] == "https://github.com/ann"
        assert data["phone"] == "+1 555 0100"

    async def test_update_requires_auth(self, client: AsyncClient):
        response = await client.put("/api/contact-settings", json={"phone": "1"})
        assert response.status_code == 401
