# tests/domains/test_about_n.py

"""
'about' 도메인 (소개 페이지 섹션) API 엔드포인트에 대한 통합 테스트를 정의하는 모듈입니다.

- 섹션 생성 (이미지 한 장 필수, paragraphs JSON 배열)
- 공개 목록 / 관리용 전체 목록 / 공개 단건 조회
- 이미지 교체 (이전 파일 삭제), 섹션 삭제 (파일 포함)
"""

import json

import pytest
from httpx import AsyncClient

from tests.conftest import JPEG_BYTES, PNG_BYTES

ABOUT_URL = "/api/v1/about-sections"


def image_file(name: str = "artisan.jpg", content_type: str = "image/jpeg", data: bytes = JPEG_BYTES):
    return [("image", (name, data, content_type))]


async def create_section(
    client: AsyncClient, title: str = "Our Story", paragraphs=("First.", "Second."), with_image=True, **form
):
    data = {
        "title": title,
        "paragraphs": json.dumps(list(paragraphs)),
        "image_alt": "Artisan at the loom",
        "published": "true",
    }
    data.update(form)
    if with_image:
        return await client.post(ABOUT_URL, data=data, files=image_file())
    return await client.post(ABOUT_URL, data=data)


def files_in(upload_dir):
    directory = upload_dir / "about-sections"
    return sorted(p.name for p in directory.iterdir()) if directory.exists() else []


# --- 섹션 생성 ---

@pytest.mark.asyncio
async def test_create_section_with_image(client: AsyncClient, upload_dir):
    response = await create_section(client, sort_order="2")
    print(f"Response JSON: {response.json()}")
    assert response.status_code == 201

    data = response.json()
    assert data["title"] == "Our Story"
    assert data["paragraphs"] == ["First.", "Second."]
    assert data["sort_order"] == 2
    assert data["published"] is True
    assert data["image"]["alt_text"] == "Artisan at the loom"
    assert data["image"]["is_primary"] is True
    assert data["image"]["url"] == f"http://test/uploads/about-sections/{data['image']['filename']}"
    assert files_in(upload_dir) == [data["image"]["filename"]]


@pytest.mark.asyncio
async def test_create_section_requires_image(client: AsyncClient, upload_dir):
    response = await create_section(client, with_image=False)
    assert response.status_code == 400
    assert files_in(upload_dir) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("paragraphs", ['"not a list"', "[]", '["ok", ""]'])
async def test_create_section_rejects_invalid_paragraphs(client: AsyncClient, upload_dir, paragraphs):
    response = await client.post(
        ABOUT_URL,
        data={"title": "Our Story", "paragraphs": paragraphs, "image_alt": "alt"},
        files=image_file(),
    )
    assert response.status_code == 422
    assert files_in(upload_dir) == []


@pytest.mark.asyncio
async def test_create_section_paragraphs_must_be_json(client: AsyncClient):
    response = await client.post(
        ABOUT_URL, data={"title": "Our Story", "paragraphs": "[oops", "image_alt": "alt"}, files=image_file()
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_sections_with_same_title_are_allowed(client: AsyncClient):
    assert (await create_section(client)).status_code == 201
    assert (await create_section(client)).status_code == 201


# --- 조회 ---

@pytest.mark.asyncio
async def test_published_and_all_sections(client: AsyncClient):
    await create_section(client, title="Second", sort_order="2")
    await create_section(client, title="First", sort_order="1")
    draft = (await create_section(client, title="Draft", published="false")).json()

    response = await client.get(ABOUT_URL)
    assert response.status_code == 200
    assert [s["title"] for s in response.json()] == ["First", "Second"]

    response = await client.get(f"{ABOUT_URL}/all")
    assert [s["title"] for s in response.json()] == ["Draft", "First", "Second"]

    response = await client.get(f"{ABOUT_URL}/{draft['id']}")
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


@pytest.mark.asyncio
async def test_read_published_section(client: AsyncClient):
    section = (await create_section(client)).json()

    response = await client.get(f"{ABOUT_URL}/{section['id']}")
    assert response.status_code == 200
    assert response.json()["image"]["id"] == section["image"]["id"]


# --- 수정 ---

@pytest.mark.asyncio
async def test_update_section_text(client: AsyncClient, upload_dir):
    section = (await create_section(client)).json()

    response = await client.patch(
        f"{ABOUT_URL}/{section['id']}", json={"paragraphs": ["Rewritten."], "published": False}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["paragraphs"] == ["Rewritten."]
    assert data["published"] is False
    assert data["image"]["filename"] == section["image"]["filename"]
    assert files_in(upload_dir) == [section["image"]["filename"]]


@pytest.mark.asyncio
async def test_update_section_rejects_null_title(client: AsyncClient):
    section = (await create_section(client)).json()

    response = await client.patch(f"{ABOUT_URL}/{section['id']}", json={"title": None})
    assert response.status_code == 400
    assert response.json()["field"] == "title"


# --- 이미지 교체 ---

@pytest.mark.asyncio
async def test_replace_section_image(client: AsyncClient, upload_dir):
    section = (await create_section(client)).json()
    old = section["image"]

    response = await client.patch(
        f"{ABOUT_URL}/{section['id']}/image",
        data={"image_alt": "New view"},
        files=image_file("new.png", "image/png", PNG_BYTES),
    )
    assert response.status_code == 200

    image = response.json()["image"]
    assert image["id"] == old["id"]
    assert image["alt_text"] == "New view"
    assert image["filename"] != old["filename"]
    assert image["filename"].endswith(".png")
    assert files_in(upload_dir) == [image["filename"]]
    assert (upload_dir / "about-sections" / image["filename"]).read_bytes() == PNG_BYTES


@pytest.mark.asyncio
async def test_replace_image_keeps_alt_text_when_omitted(client: AsyncClient):
    section = (await create_section(client)).json()

    response = await client.patch(f"{ABOUT_URL}/{section['id']}/image", files=image_file("again.jpg"))
    assert response.status_code == 200
    assert response.json()["image"]["alt_text"] == "Artisan at the loom"


@pytest.mark.asyncio
async def test_replace_image_requires_file_and_existing_section(client: AsyncClient, upload_dir):
    section = (await create_section(client)).json()

    response = await client.patch(f"{ABOUT_URL}/{section['id']}/image", data={"image_alt": "x"})
    assert response.status_code == 400

    response = await client.patch(
        f"{ABOUT_URL}/00000000-0000-0000-0000-000000000000/image", files=image_file()
    )
    assert response.status_code == 404
    assert files_in(upload_dir) == [section["image"]["filename"]]


# --- 삭제 ---

@pytest.mark.asyncio
async def test_delete_section_removes_image_file(client: AsyncClient, upload_dir):
    section = (await create_section(client)).json()

    response = await client.delete(f"{ABOUT_URL}/{section['id']}")
    assert response.status_code == 204
    assert files_in(upload_dir) == []

    response = await client.delete(f"{ABOUT_URL}/{section['id']}")
    assert response.status_code == 404
