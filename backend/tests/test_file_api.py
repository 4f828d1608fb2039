"""
Blog Backend — File Endpoint Tests
====================================

What:  /file routes and the /uploads static mount.

Test Strategy:
    ✅ Upload requires a token
    ✅ text/plain → 400; allowed types → 201 and retrievable under /uploads
    ✅ Delete: traversal name → 400, missing → 404, existing → 200
    ✅ Listing reflects uploads
"""

import pytest

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def upload(client, token, filename="pic.png", content=PNG_BYTES, content_type="image/png"):
    return await client.post(
        "/file/upload",
        files={"file": (filename, content, content_type)},
        headers=auth_header(token),
    )


class TestUploadEndpoint:

    @pytest.mark.asyncio
    async def test_requires_token(self, test_client):
        response = await test_client.post(
            "/file/upload", files={"file": ("pic.png", PNG_BYTES, "image/png")}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_text_plain_rejected(self, test_client, create_user, upload_dir):
        _, token = await create_user("uploader_1")
        response = await upload(test_client, token, filename="notes.txt", content=b"hi", content_type="text/plain")

        assert response.status_code == 400
        assert "image/jpeg" in response.json()["message"]
        assert list(upload_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_missing_file(self, test_client, create_user):
        _, token = await create_user("uploader_1")
        response = await test_client.post("/file/upload", headers=auth_header(token))
        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "filename,content_type",
        [
            ("pic.png", "image/png"),
            ("photo.jpg", "image/jpeg"),
            ("doc.pdf", "application/pdf"),
            ("bundle.zip", "application/zip"),
        ],
    )
    async def test_allowed_upload_is_served(self, test_client, create_user, filename, content_type):
        _, token = await create_user("uploader_1")
        content = b"payload-" + filename.encode()

        response = await upload(test_client, token, filename=filename, content=content, content_type=content_type)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["originalName"] == filename
        assert data["mimetype"] == content_type
        assert data["size"] == len(content)
        assert data["url"] == f"/uploads/{data['name']}"
        assert data["uploadTime"].endswith("Z")

        served = await test_client.get(data["url"])
        assert served.status_code == 200
        assert served.content == content


class TestDeleteEndpoint:

    @pytest.mark.asyncio
    async def test_delete_lifecycle(self, test_client, create_user):
        _, token = await create_user("uploader_1")
        name = (await upload(test_client, token)).json()["data"]["name"]

        response = await test_client.delete(f"/file/delete?fileName={name}", headers=auth_header(token))
        assert response.status_code == 200
        assert response.json()["data"] == {"fileName": name}

        again = await test_client.delete(f"/file/delete?fileName={name}", headers=auth_header(token))
        assert again.status_code == 404
        assert (await test_client.get(f"/uploads/{name}")).status_code == 404

    @pytest.mark.asyncio
    async def test_traversal_rejected(self, test_client, create_user):
        _, token = await create_user("uploader_1")
        response = await test_client.delete(
            "/file/delete", params={"fileName": "../test.db"}, headers=auth_header(token)
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_missing_name(self, test_client, create_user):
        _, token = await create_user("uploader_1")
        response = await test_client.delete("/file/delete", headers=auth_header(token))
        assert response.status_code == 400


class TestListEndpoint:

    @pytest.mark.asyncio
    async def test_list_after_uploads(self, test_client, create_user):
        _, token = await create_user("uploader_1")
        names = sorted(
            [
                (await upload(test_client, token)).json()["data"]["name"],
                (await upload(test_client, token, filename="d.pdf", content_type="application/pdf")).json()["data"]["name"],
            ]
        )

        response = await test_client.get("/file/list", headers=auth_header(token))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["total"] == 2
        assert data["page"] == 1
        assert data["size"] == 10
        assert [f["name"] for f in data["list"]] == names
        assert all("createTime" in f for f in data["list"])

    @pytest.mark.asyncio
    async def test_invalid_paging(self, test_client, create_user):
        _, token = await create_user("uploader_1")
        response = await test_client.get("/file/list?page=0", headers=auth_header(token))
        assert response.status_code == 400

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["size=101", "page=10000000000000000000"])
    async def test_paging_upper_bounds(self, test_client, create_user, query):
        _, token = await create_user("uploader_1")
        response = await test_client.get(f"/file/list?{query}", headers=auth_header(token))
        assert response.status_code == 400
        assert response.json()["message"] == "Page must be at most 10000000 and size at most 100"
