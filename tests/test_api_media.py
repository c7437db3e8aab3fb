"""Tests for media API endpoints and object serving."""

from urllib.parse import urlsplit

from warden.media.categories import CATEGORIES, MB

PNG = b"\x89PNG\r\n\x1a\nfake"


def _upload(client, category="post", content_type="image/png", data=PNG, actor_id="u1", **form):
    return client.post(
        "/api/media/upload",
        data={"category": category, "actor_id": actor_id, **form},
        files={"file": ("photo.png", data, content_type)},
    )


def _path_and_query(url):
    parts = urlsplit(url)
    return f"{parts.path}?{parts.query}" if parts.query else parts.path


class TestUpload:
    def test_public_upload_served(self, client):
        response = _upload(client)
        assert response.status_code == 200, response.json()
        body = response.json()
        assert body["bucket"] == "post"
        assert body["path"].startswith("u1/post/")
        assert body["url"] == f"http://testserver/media/public/post/{body['path']}"

        served = client.get(_path_and_query(body["url"]))
        assert served.status_code == 200
        assert served.content == PNG
        assert served.headers["content-type"] == "image/png"

    def test_private_upload_not_directly_fetchable(self, client):
        body = _upload(client, category="journal").json()
        assert "/media/object/journal/" in body["url"]
        assert client.get(_path_and_query(body["url"])).status_code == 403

        public_path = f"/media/public/journal/{body['path']}"
        assert client.get(public_path).status_code == 404

    def test_unsupported_type(self, client):
        response = _upload(client, content_type="text/html", data=b"<html>")
        assert response.status_code == 400
        assert "Invalid file type" in response.json()["error"]

    def test_too_large(self, client):
        limit = CATEGORIES["avatar"].max_bytes
        response = _upload(client, category="avatar", data=b"x" * (limit + 1))
        assert response.status_code == 400
        assert "too large" in response.json()["error"]

    def test_exact_limit_accepted(self, client):
        response = _upload(client, category="avatar", data=b"x" * (5 * MB))
        assert response.status_code == 200

    def test_unknown_category(self, client):
        response = _upload(client, category="banner")
        assert response.status_code == 400

    def test_bad_folder(self, client):
        response = _upload(client, folder="../escape")
        assert response.status_code == 400


class TestDeleteMedia:
    def test_owner_only(self, client):
        body = _upload(client).json()

        denied = client.post(
            "/api/media/delete", json={"actor_id": "u2", "category": "post", "path": body["path"]}
        )
        assert denied.status_code == 403

        deleted = client.post(
            "/api/media/delete", json={"actor_id": "u1", "category": "post", "path": body["path"]}
        )
        assert deleted.status_code == 200
        assert client.get(_path_and_query(body["url"])).status_code == 404


class TestLimits:
    def test_limits_match_table(self, client):
        categories = client.get("/api/media/limits").json()["categories"]
        by_name = {c["category"]: c for c in categories}
        assert by_name["archive"]["max_bytes"] == 20 * MB
        assert by_name["avatar"]["max_size"] == "5MB"
        assert "application/pdf" in by_name["archive"]["allowed_types"]
        assert by_name["journal"]["public"] is False


class TestSignedUrls:
    def test_batch_and_fetch(self, client):
        stored = _upload(client, category="archive", content_type="application/pdf", data=b"%PDF").json()
        response = client.post(
            "/api/media/signed-urls", json={"refs": [stored["url"], "garbage"]}
        )
        assert response.status_code == 200
        good, bad = response.json()["data"]

        assert good["ref"] == stored["url"]
        assert "expires_at" in good and "error" not in good
        assert bad == {"ref": "garbage", "url": "garbage", "error": "Invalid URL format"}

        served = client.get(_path_and_query(good["url"]))
        assert served.status_code == 200
        assert served.content == b"%PDF"

    def test_bad_signature_forbidden(self, client):
        stored = _upload(client, category="journal").json()
        signed = client.post("/api/media/signed-urls", json={"refs": [stored["url"]]}).json()
        url = signed["data"][0]["url"]
        tampered = url[:-4] + ("0000" if not url.endswith("0000") else "1111")

        response = client.get(_path_and_query(tampered))
        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Invalid or expired signature"}

    def test_refs_required(self, client):
        response = client.post("/api/media/signed-urls", json={})
        assert response.status_code == 400
