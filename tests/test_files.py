# tests/test_files.py
"""
File-backed resource tests
Tests: albums/images, folders/documents, personal information, signed URLs
"""

from urllib.parse import urlsplit

import pytest
from fastapi import status

from core.storage import BUCKET_NAME, get_view_url
from models.album import Image
from models.document import Document
from models.personal_information import PersonalInformation


def _relative(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.path}?{parts.query}" if parts.query else parts.path


def _object(storage_root, key):
    return storage_root / BUCKET_NAME / key


def _png(name="cat.png", data=b"\x89PNG fake image"):
    return ("files", (name, data, "image/png"))


def _pdf(name="tax return.pdf", data=b"%PDF-1.7 fake", field="files"):
    return (field, (name, data, "application/pdf"))


class TestImages:
    """Albums and images"""

    def test_single_upload_requires_title(self, client, alice):
        response = client.post("/images", headers=alice, files=[_png()])

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "title" in response.json()["detail"].lower()

    def test_multiple_files_need_an_album(self, client, alice):
        response = client.post("/images", headers=alice, data={"title": "x"}, files=[_png(), _png("dog.png")])

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_no_files(self, client, alice):
        response = client.post("/images", headers=alice, data={"title": "x"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "No files uploaded"

    def test_upload_and_view(self, client, alice, storage_root, db_session):
        response = client.post("/images", headers=alice, data={"title": "Cat"}, files=[_png()])

        assert response.status_code == status.HTTP_201_CREATED
        image = response.json()["images"][0]
        assert image["title"] == "Cat"

        row = db_session.get(Image, image["id"])
        assert row.file_path.startswith("images/")
        assert row.file_path.endswith("_cat.png")
        assert _object(storage_root, row.file_path).read_bytes() == b"\x89PNG fake image"

        fetched = client.get(_relative(image["file_path"]))
        assert fetched.status_code == status.HTTP_200_OK
        assert fetched.content == b"\x89PNG fake image"

    def test_album_upload_uses_file_names(self, client, alice):
        album = client.post("/albums", headers=alice, json={"name": "Holiday"}).json()["album"]

        response = client.post(
            "/images",
            headers=alice,
            data={"album_id": str(album["id"])},
            files=[_png("a.png"), _png("b.png")],
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert sorted(i["title"] for i in response.json()["images"]) == ["a.png", "b.png"]
        listed = client.get(f"/images?album_id={album['id']}", headers=alice).json()
        assert len(listed) == 2

    def test_cannot_upload_into_foreign_album(self, client, alice, bob):
        album = client.post("/albums", headers=alice, json={"name": "Private"}).json()["album"]

        response = client.post("/images", headers=bob, data={"album_id": str(album["id"])}, files=[_png()])

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"detail": "Album not found"}

    def test_album_filter_cannot_widen_listing(self, client, alice, bob):
        album = client.post("/albums", headers=alice, json={"name": "Private"}).json()["album"]
        client.post("/images", headers=alice, data={"album_id": str(album["id"])}, files=[_png()])

        assert client.get(f"/images?album_id={album['id']}", headers=bob).json() == []

    def test_delete_album_cascades(self, client, alice, storage_root, db_session):
        album = client.post("/albums", headers=alice, json={"name": "Holiday"}).json()["album"]
        images = client.post(
            "/images", headers=alice, data={"album_id": str(album["id"])}, files=[_png("a.png"), _png("b.png")],
        ).json()["images"]
        keys = [db_session.get(Image, i["id"]).file_path for i in images]

        response = client.delete(f"/albums/{album['id']}", headers=alice)

        assert response.status_code == status.HTTP_200_OK
        assert client.get("/images", headers=alice).json() == []
        assert client.get("/albums", headers=alice).json() == []
        for key in keys:
            assert not _object(storage_root, key).exists()

    def test_foreign_album_delete_is_not_found(self, client, alice, bob):
        album = client.post("/albums", headers=alice, json={"name": "Private"}).json()["album"]
        client.post("/images", headers=alice, data={"album_id": str(album["id"])}, files=[_png()])

        as_bob = client.delete(f"/albums/{album['id']}", headers=bob)
        missing = client.delete("/albums/999999", headers=alice)

        assert as_bob.status_code == missing.status_code == status.HTTP_404_NOT_FOUND
        assert as_bob.json() == missing.json()
        assert len(client.get("/images", headers=alice).json()) == 1

    def test_delete_image_removes_object(self, client, alice, bob, storage_root, db_session):
        image = client.post("/images", headers=alice, data={"title": "Cat"}, files=[_png()]).json()["images"][0]
        key = db_session.get(Image, image["id"]).file_path

        assert client.delete(f"/images/{image['id']}", headers=bob).status_code == status.HTTP_404_NOT_FOUND
        assert _object(storage_root, key).exists()

        assert client.delete(f"/images/{image['id']}", headers=alice).status_code == status.HTTP_200_OK
        assert not _object(storage_root, key).exists()

    def test_album_name_required(self, client, alice):
        response = client.post("/albums", headers=alice, json={"name": "  "})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestDocuments:
    """Folders and documents"""

    @pytest.fixture
    def folder(self, client, alice) -> dict:
        return client.post("/folders", headers=alice, json={"name": "Taxes"}).json()["folder"]

    def _upload(self, client, headers, folder_id=None, title=None, names=("tax return.pdf",)):
        data = {}
        if folder_id is not None:
            data["folder_id"] = str(folder_id)
        if title is not None:
            data["title"] = title
        return client.post("/documents", headers=headers, data=data, files=[_pdf(n) for n in names])

    def test_upload_sanitises_file_name(self, client, alice, db_session):
        response = self._upload(client, alice, title="Tax 2025")

        assert response.status_code == status.HTTP_201_CREATED
        document = response.json()["documents"][0]
        key = db_session.get(Document, document["id"]).file_path
        assert key.startswith("documents/")
        assert key.endswith("_tax_return.pdf")

    def test_download_redirects_to_signed_url(self, client, alice):
        document = self._upload(client, alice, title="Tax 2025").json()["documents"][0]

        response = client.get(f"/documents/{document['id']}/download", headers=alice, follow_redirects=False)

        assert response.status_code == status.HTTP_307_TEMPORARY_REDIRECT
        fetched = client.get(_relative(response.headers["location"]))
        assert fetched.status_code == status.HTTP_200_OK
        assert fetched.content == b"%PDF-1.7 fake"
        assert "attachment" in fetched.headers["content-disposition"]
        assert "tax_return.pdf" in fetched.headers["content-disposition"]

    def test_foreign_download_is_not_found(self, client, alice, bob):
        document = self._upload(client, alice, title="Tax 2025").json()["documents"][0]

        response = client.get(f"/documents/{document['id']}/download", headers=bob, follow_redirects=False)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_title_and_file(self, client, alice, storage_root, db_session):
        document = self._upload(client, alice, title="Old").json()["documents"][0]
        old_key = db_session.get(Document, document["id"]).file_path

        response = client.put(
            f"/documents/{document['id']}",
            headers=alice,
            data={"title": "New"},
            files=[_pdf("v2.pdf", b"%PDF v2", field="file")],
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["document"]["title"] == "New"
        db_session.expire_all()
        new_key = db_session.get(Document, document["id"]).file_path
        assert new_key != old_key
        assert not _object(storage_root, old_key).exists()
        assert _object(storage_root, new_key).read_bytes() == b"%PDF v2"

    def test_update_with_nothing_is_bad_request(self, client, alice):
        document = self._upload(client, alice, title="Old").json()["documents"][0]

        response = client.put(f"/documents/{document['id']}", headers=alice, data={})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_foreign_update_leaves_file_alone(self, client, alice, bob, storage_root, db_session):
        document = self._upload(client, alice, title="Mine").json()["documents"][0]
        key = db_session.get(Document, document["id"]).file_path

        response = client.put(
            f"/documents/{document['id']}",
            headers=bob,
            data={"title": "Stolen"},
            files=[_pdf("evil.pdf", b"evil", field="file")],
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert _object(storage_root, key).exists()

    def test_batch_delete_only_touches_own_documents(self, client, alice, bob):
        mine = self._upload(client, alice, title="Mine").json()["documents"][0]
        theirs = self._upload(client, bob, title="Theirs").json()["documents"][0]

        response = client.post("/documents/delete-batch", headers=alice, json={"ids": [mine["id"], theirs["id"]]})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["deleted"] == 1
        assert client.get("/documents", headers=alice).json() == []
        assert [d["id"] for d in client.get("/documents", headers=bob).json()] == [theirs["id"]]

    def test_batch_delete_requires_ids(self, client, alice):
        response = client.post("/documents/delete-batch", headers=alice, json={"ids": []})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_folder_cascades(self, client, alice, folder, storage_root, db_session):
        documents = self._upload(
            client, alice, folder_id=folder["id"], names=("a.pdf", "b.pdf"),
        ).json()["documents"]
        keys = [db_session.get(Document, d["id"]).file_path for d in documents]
        loose = self._upload(client, alice, title="Loose").json()["documents"][0]

        response = client.delete(f"/folders/{folder['id']}", headers=alice)

        assert response.status_code == status.HTTP_200_OK
        assert [d["id"] for d in client.get("/documents", headers=alice).json()] == [loose["id"]]
        for key in keys:
            assert not _object(storage_root, key).exists()

    def test_foreign_folder_is_not_found(self, client, alice, bob, folder):
        assert client.delete(f"/folders/{folder['id']}", headers=bob).status_code == status.HTTP_404_NOT_FOUND
        upload = self._upload(client, bob, folder_id=folder["id"])
        assert upload.status_code == status.HTTP_404_NOT_FOUND
        assert upload.json() == {"detail": "Folder not found"}
        assert client.get("/folders", headers=bob).json() == []

    def test_folder_filter(self, client, alice, folder):
        self._upload(client, alice, folder_id=folder["id"], names=("a.pdf",))
        self._upload(client, alice, title="Loose")

        in_folder = client.get(f"/documents?folder_id={folder['id']}", headers=alice).json()

        assert [d["title"] for d in in_folder] == ["a.pdf"]


class TestPersonalInformation:
    """Personal-information files"""

    def _add(self, client, headers, title="Passport", data=b"scan"):
        return client.post(
            "/personal-info",
            headers=headers,
            data={"title": title},
            files=[("file", ("passport.jpg", data, "image/jpeg"))],
        )

    def test_title_and_file_required(self, client, alice):
        no_title = client.post("/personal-info", headers=alice, files=[("file", ("p.jpg", b"x", "image/jpeg"))])
        no_file = client.post("/personal-info", headers=alice, data={"title": "Passport"})

        assert no_title.status_code == status.HTTP_400_BAD_REQUEST
        assert no_file.status_code == status.HTTP_400_BAD_REQUEST

    def test_crud(self, client, alice, storage_root, db_session):
        created = self._add(client, alice)
        assert created.status_code == status.HTTP_201_CREATED
        info_id = created.json()["document"]["id"]
        key = db_session.get(PersonalInformation, info_id).file_path
        assert key.startswith("personal-info/")

        renamed = client.put(f"/personal-info/{info_id}", headers=alice, data={"title": "Passport 2030"})
        assert renamed.json()["document"]["title"] == "Passport 2030"

        listed = client.get("/personal-info", headers=alice).json()
        assert [i["title"] for i in listed] == ["Passport 2030"]

        assert client.delete(f"/personal-info/{info_id}", headers=alice).status_code == status.HTTP_200_OK
        assert not _object(storage_root, key).exists()
        assert client.get("/personal-info", headers=alice).json() == []

    def test_other_user_sees_not_found(self, client, alice, bob):
        info_id = self._add(client, alice).json()["document"]["id"]

        for method, path in [
            ("get", f"/personal-info/{info_id}/download"),
            ("put", f"/personal-info/{info_id}"),
            ("delete", f"/personal-info/{info_id}"),
        ]:
            kwargs = {"data": {"title": "x"}} if method == "put" else {}
            response = client.request(method, path, headers=bob, follow_redirects=False, **kwargs)
            assert response.status_code == status.HTTP_404_NOT_FOUND
            assert response.json() == {"detail": "Information not found"}

        assert client.get("/personal-info", headers=bob).json() == []


class TestSignedUrls:
    """GET /files/{key}"""

    def test_unsigned_request_is_not_found(self, client, alice, db_session):
        image = client.post("/images", headers=alice, data={"title": "Cat"}, files=[_png()]).json()["images"][0]
        key = db_session.get(Image, image["id"]).file_path

        assert client.get(f"/files/{key}").status_code == status.HTTP_404_NOT_FOUND
        assert client.get(f"/files/{key}?token=junk").status_code == status.HTTP_404_NOT_FOUND

    def test_token_is_bound_to_one_key(self, client, alice, db_session):
        first = client.post("/images", headers=alice, data={"title": "A"}, files=[_png("a.png")]).json()["images"][0]
        second = client.post("/images", headers=alice, data={"title": "B"}, files=[_png("b.png")]).json()["images"][0]
        second_key = db_session.get(Image, second["id"]).file_path
        token = urlsplit(first["file_path"]).query.split("token=")[1]

        response = client.get(f"/files/{second_key}?token={token}")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_file_token_is_not_a_bearer_token(self, client, alice):
        url = get_view_url("images/anything.png")
        token = urlsplit(url).query.split("token=")[1]

        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_path_traversal_rejected(self, client):
        url = get_view_url("../../etc/passwd")

        assert client.get(_relative(url)).status_code == status.HTTP_404_NOT_FOUND
