"""Tests for archive and album API endpoints."""


def _create_item(client, actor_id="u1", title="Whale"):
    response = client.post(
        "/api/archive/items/create",
        json={
            "actor_id": actor_id,
            "title": title,
            "content_type": "artwork",
            "media_url": "http://testserver/media/object/archive/u1/archive/w.png",
        },
    )
    assert response.status_code == 200, response.json()
    return response.json()["item"]


def _create_album(client, title="Gathering"):
    response = client.post("/api/albums/create", json={"actor_id": "admin", "title": title})
    assert response.status_code == 200, response.json()
    return response.json()["album"]


class TestArchiveEndpoints:
    def test_partial_update(self, client):
        item = _create_item(client)
        response = client.post(
            "/api/archive/items/update",
            json={"actor_id": "u1", "item_id": item["id"], "artist_name": "Moby"},
        )
        updated = response.json()["item"]
        assert updated["artist_name"] == "Moby"
        assert updated["title"] == "Whale"

    def test_other_actor_cannot_delete(self, client):
        item = _create_item(client)
        response = client.post(
            "/api/archive/items/delete", json={"actor_id": "u2", "item_id": item["id"]}
        )
        assert response.status_code == 403

    def test_like_and_comment(self, client):
        item = _create_item(client)
        toggle = client.post(
            "/api/archive/likes/toggle", json={"actor_id": "u2", "item_id": item["id"]}
        )
        assert toggle.json()["liked"] is True

        comment = client.post(
            "/api/archive/comments/create",
            json={"actor_id": "u2", "item_id": item["id"], "content": "gorgeous"},
        ).json()["comment"]
        listed = client.get(f"/api/archive/items/{item['id']}/comments").json()["comments"]
        assert [c["id"] for c in listed] == [comment["id"]]

        deleted = client.post(
            "/api/archive/comments/delete", json={"actor_id": "u2", "comment_id": comment["id"]}
        )
        assert deleted.status_code == 200


class TestAlbumEndpoints:
    def test_update_full_replace(self, client):
        created = client.post(
            "/api/albums/create",
            json={"actor_id": "admin", "title": "Gathering", "event_location": "Shore"},
        ).json()["album"]

        response = client.post(
            "/api/albums/update",
            json={"actor_id": "other-admin", "album_id": created["id"], "title": "Renamed"},
        )
        album = response.json()["album"]
        assert album["title"] == "Renamed"
        assert album["event_location"] is None

    def test_update_requires_title(self, client):
        album = _create_album(client)
        response = client.post(
            "/api/albums/update", json={"actor_id": "admin", "album_id": album["id"]}
        )
        assert response.status_code == 400

    def test_membership_flow(self, client):
        album = _create_album(client)
        first = _create_item(client, title="first")
        second = _create_item(client, title="second")

        for item in (first, second):
            response = client.post(
                "/api/albums/items/add",
                json={"actor_id": "admin", "album_id": album["id"], "item_id": item["id"]},
            )
            assert response.status_code == 200

        duplicate = client.post(
            "/api/albums/items/add",
            json={"actor_id": "admin", "album_id": album["id"], "item_id": first["id"]},
        )
        assert duplicate.status_code == 409
        assert duplicate.json()["success"] is False

        reorder = client.post(
            "/api/albums/items/reorder",
            json={
                "actor_id": "admin",
                "album_id": album["id"],
                "orders": [
                    {"item_id": first["id"], "sort_order": 2},
                    {"item_id": "ghost", "sort_order": 0},
                ],
            },
        )
        assert reorder.json() == {"success": True, "reordered": 1}

        removed = client.post(
            "/api/albums/items/remove",
            json={"actor_id": "admin", "album_id": album["id"], "item_id": second["id"]},
        )
        assert removed.status_code == 200

        again = client.post(
            "/api/albums/items/remove",
            json={"actor_id": "admin", "album_id": album["id"], "item_id": second["id"]},
        )
        assert again.status_code == 404

    def test_delete_missing_album(self, client):
        response = client.post("/api/albums/delete", json={"actor_id": "admin", "album_id": "nope"})
        assert response.status_code == 404
        assert response.json() == {"success": False, "error": "Album not found"}
