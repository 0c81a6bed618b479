"""API tests for /albums: CRUD, media membership and owner-or-admin changes."""

import unittest

from sqlalchemy import select

from smanzy.models import Album, Media
from smanzy.models.album import album_media

from support import API, ApiTestCase


class AlbumsApiTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.owner = self.make_user("owner@example.com", "Owner")
        self.other = self.make_user("other@example.com", "Other")
        self.admin = self.make_user("admin@example.com", "Admin", admin=True)
        self.owner_headers = self.login_as(self.owner)
        self.other_headers = self.login_as(self.other)
        self.admin_headers = self.login_as(self.admin)

    def create_album(self, headers: dict[str, str], title: str = "Holidays", description: str = "") -> dict:
        response = self.client.post(f"{API}/albums", json={"title": title, "description": description}, headers=headers)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def upload(self, headers: dict[str, str], name: str = "beach.jpg") -> dict:
        response = self.client.post(f"{API}/media", files={"file": (name, b"img", "image/jpeg")}, headers=headers)
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()


class TestAlbumCrud(AlbumsApiTestCase):
    def test_create_and_get(self) -> None:
        album = self.create_album(self.owner_headers, "Holidays", "Summer 2025")
        self.assertEqual(album["owner_id"], self.owner.id)
        self.assertEqual(album["media_files"], [])

        response = self.client.get(f"{API}/albums/{album['id']}", headers=self.other_headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["description"], "Summer 2025")

    def test_blank_title_is_400(self) -> None:
        response = self.client.post(f"{API}/albums", json={"title": "   "}, headers=self.owner_headers)
        self.assertEqual(response.status_code, 400)

    def test_requires_auth(self) -> None:
        self.assertEqual(self.client.post(f"{API}/albums", json={"title": "x"}).status_code, 401)
        self.assertEqual(self.client.get(f"{API}/albums").status_code, 401)

    def test_list_returns_only_own_albums(self) -> None:
        mine = self.create_album(self.owner_headers, "Mine")
        self.create_album(self.other_headers, "Theirs")
        response = self.client.get(f"{API}/albums", headers=self.owner_headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual([a["id"] for a in response.json()], [mine["id"]])

    def test_update_keeps_omitted_fields(self) -> None:
        album = self.create_album(self.owner_headers, "Holidays", "keep me")
        response = self.client.put(f"{API}/albums/{album['id']}", json={"title": "Trips"}, headers=self.owner_headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["title"], "Trips")
        self.assertEqual(response.json()["description"], "keep me")

    def test_non_owner_cannot_update_or_delete(self) -> None:
        album = self.create_album(self.owner_headers)
        url = f"{API}/albums/{album['id']}"
        self.assertEqual(self.client.put(url, json={"title": "Mine now"}, headers=self.other_headers).status_code, 403)
        self.assertEqual(self.client.delete(url, headers=self.other_headers).status_code, 403)
        stored = self.reload(Album, album["id"])
        self.assertEqual(stored.title, "Holidays")
        self.assertIsNone(stored.deleted_at)

    def test_admin_can_update_any_album(self) -> None:
        album = self.create_album(self.owner_headers)
        response = self.client.put(
            f"{API}/albums/{album['id']}",
            json={"description": "moderated"},
            headers=self.admin_headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["owner_id"], self.owner.id)

    def test_soft_delete(self) -> None:
        album = self.create_album(self.owner_headers)
        response = self.client.delete(f"{API}/albums/{album['id']}", headers=self.owner_headers)
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.get(f"{API}/albums/{album['id']}", headers=self.owner_headers).status_code, 404)
        self.assertIsNotNone(self.reload(Album, album["id"]).deleted_at)

    def test_permanent_delete_keeps_media(self) -> None:
        album = self.create_album(self.owner_headers)
        media = self.upload(self.owner_headers)
        self.client.post(f"{API}/albums/{album['id']}/media", json={"media_id": media["id"]}, headers=self.owner_headers)

        response = self.client.delete(f"{API}/albums/{album['id']}?permanent=true", headers=self.owner_headers)
        self.assertEqual(response.status_code, 200)
        self.assertIsNone(self.reload(Album, album["id"]))
        self.assertIsNotNone(self.db.get(Media, media["id"]))
        self.assertEqual(self.db.execute(select(album_media)).all(), [])


class TestAlbumMedia(AlbumsApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.album = self.create_album(self.owner_headers)
        self.media = self.upload(self.owner_headers)
        self.url = f"{API}/albums/{self.album['id']}/media"

    def test_add_is_idempotent(self) -> None:
        for _ in range(2):
            response = self.client.post(self.url, json={"media_id": self.media["id"]}, headers=self.owner_headers)
            self.assertEqual(response.status_code, 200)
        self.assertEqual([m["id"] for m in response.json()["media_files"]], [self.media["id"]])

    def test_owner_may_add_media_uploaded_by_someone_else(self) -> None:
        theirs = self.upload(self.other_headers, "theirs.jpg")
        response = self.client.post(self.url, json={"media_id": theirs["id"]}, headers=self.owner_headers)
        self.assertEqual(response.status_code, 200)

    def test_non_owner_cannot_add(self) -> None:
        response = self.client.post(self.url, json={"media_id": self.media["id"]}, headers=self.other_headers)
        self.assertEqual(response.status_code, 403)

    def test_unknown_media_is_404(self) -> None:
        response = self.client.post(self.url, json={"media_id": 9999}, headers=self.owner_headers)
        self.assertEqual(response.status_code, 404)

    def test_remove_and_remove_again(self) -> None:
        self.client.post(self.url, json={"media_id": self.media["id"]}, headers=self.owner_headers)
        for _ in range(2):
            response = self.client.request("DELETE", self.url, json={"media_id": self.media["id"]}, headers=self.owner_headers)
            self.assertEqual(response.status_code, 200)
            self.assertEqual(response.json()["media_files"], [])

    def test_deleted_media_drops_out_of_album(self) -> None:
        self.client.post(self.url, json={"media_id": self.media["id"]}, headers=self.owner_headers)
        self.client.delete(f"{API}/media/{self.media['id']}", headers=self.owner_headers)
        response = self.client.get(f"{API}/albums/{self.album['id']}", headers=self.owner_headers)
        self.assertEqual(response.json()["media_files"], [])


if __name__ == "__main__":
    unittest.main()
