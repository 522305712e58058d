# tests/domains/test_media_coordinator_n.py

"""
MediaCreationCoordinator에 대한 단위 테스트 모듈입니다.

InMemoryContentRepository와 임시 디렉토리의 AssetStore를 사용하며,
monkeypatch로 저장소/리포지토리 단계에 장애를 주입하여 되돌림 동작을 검증합니다.
"""

import logging
import uuid
from pathlib import Path
from typing import List

import pytest

from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    PartialSuccessError,
    StorageError,
    ValidationError,
)
from app.domains.blog.models import BlogArticle, BlogArticleImage
from app.domains.products.models import Product, ProductImage
from app.domains.media.repository import InMemoryContentRepository
from app.domains.media.schemas import AssetInput
from app.domains.media.services import MediaCreationCoordinator
from app.domains.media.storage import AssetStore

BASE_URL = "http://test"
LOGGER_NAME = "tests.coordinator"


def files_in(upload_dir: Path, namespace: str) -> List[str]:
    directory = upload_dir / namespace
    if not directory.exists():
        return []
    return sorted(p.name for p in directory.iterdir())


@pytest.fixture
def blog_repo() -> InMemoryContentRepository:
    return InMemoryContentRepository(
        BlogArticle, BlogArticleImage, ("slug",),
        parent_label="BlogArticle", asset_label="BlogArticleImage",
    )


@pytest.fixture
def coordinator(blog_repo, asset_store: AssetStore) -> MediaCreationCoordinator:
    return MediaCreationCoordinator(
        blog_repo, asset_store, "blog", logger=logging.getLogger(LOGGER_NAME)
    )


def article_fields(slug: str = "hello-world") -> dict:
    return {"title": "Hello World", "slug": slug, "content": "<p>hi</p>"}


# =============================================================================
# 1. 생성
# =============================================================================
@pytest.mark.asyncio
@pytest.mark.parametrize("count", [0, 1, 3])
async def test_create_with_n_images_assigns_positions_and_primary(
    coordinator, blog_repo, make_inputs, upload_dir, count
):
    names = [f"img{i}.jpg" for i in range(count)]
    bundle = await coordinator.create_with_assets(article_fields(), make_inputs(*names), base_url=BASE_URL)

    assert bundle.record.id in blog_repo.records
    assert [a.position for a in bundle.assets] == list(range(count))
    assert [a.is_primary for a in bundle.assets] == [i == 0 for i in range(count)]
    assert len(files_in(upload_dir, "blog")) == count
    for asset in bundle.assets:
        assert asset.parent_id == bundle.record.id
        assert asset.url == f"{BASE_URL}/uploads/blog/{asset.filename}"
        assert asset.filename.endswith(".jpg")


@pytest.mark.asyncio
async def test_create_conflict_is_detected_before_any_file_is_written(
    coordinator, blog_repo, make_inputs, upload_dir, monkeypatch
):
    await coordinator.create_with_assets(article_fields(), [], base_url=BASE_URL)

    async def must_not_write(*args, **kwargs):
        raise AssertionError("storage must not be touched")

    monkeypatch.setattr(coordinator.store, "write", must_not_write)
    with pytest.raises(ConflictError) as exc_info:
        await coordinator.create_with_assets(article_fields(), make_inputs("a.jpg"), base_url=BASE_URL)

    assert 'slug "hello-world"' in exc_info.value.message
    assert len(blog_repo.records) == 1
    assert files_in(upload_dir, "blog") == []


@pytest.mark.asyncio
async def test_create_rolls_back_earlier_writes_when_a_write_fails(
    coordinator, blog_repo, asset_store, make_inputs, upload_dir, monkeypatch
):
    original_write = asset_store.write
    calls = {"n": 0}

    async def flaky_write(source, filename, namespace):
        calls["n"] += 1
        if calls["n"] == 3:
            raise StorageError("disk full")
        return await original_write(source, filename, namespace)

    monkeypatch.setattr(asset_store, "write", flaky_write)

    with pytest.raises(StorageError):
        await coordinator.create_with_assets(
            article_fields(), make_inputs("a.jpg", "b.jpg", "c.jpg", "d.jpg"), base_url=BASE_URL
        )

    assert calls["n"] == 3
    assert blog_repo.records == {}
    assert blog_repo.assets == {}
    assert files_in(upload_dir, "blog") == []


@pytest.mark.asyncio
async def test_create_rolls_back_all_writes_when_record_creation_fails(
    coordinator, blog_repo, make_inputs, upload_dir, monkeypatch, caplog
):
    async def losing_race(fields):
        raise ConflictError("slug taken by a concurrent request")

    monkeypatch.setattr(blog_repo, "create", losing_race)

    with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
        with pytest.raises(ConflictError):
            await coordinator.create_with_assets(
                article_fields(), make_inputs("a.jpg", "b.jpg"), base_url=BASE_URL
            )

    assert files_in(upload_dir, "blog") == []
    assert blog_repo.assets == {}
    assert any("creation failed" in r.getMessage() for r in caplog.records if r.name == LOGGER_NAME)


@pytest.mark.asyncio
async def test_create_reports_partial_success_when_assets_cannot_be_attached(
    coordinator, blog_repo, make_inputs, upload_dir, monkeypatch
):
    async def broken_add_assets(parent_id, rows):
        raise RuntimeError("connection lost")

    monkeypatch.setattr(blog_repo, "add_assets", broken_add_assets)

    with pytest.raises(PartialSuccessError) as exc_info:
        await coordinator.create_with_assets(
            article_fields(), make_inputs("a.jpg", "b.jpg"), base_url=BASE_URL
        )

    error = exc_info.value
    assert error.record_id in blog_repo.records
    assert error.to_response()["record_id"] == str(error.record_id)
    assert len(error.cleaned_files) == 2
    assert files_in(upload_dir, "blog") == []


@pytest.mark.asyncio
async def test_create_requires_minimum_images(asset_store, make_inputs, upload_dir):
    repo = InMemoryContentRepository(Product, ProductImage, ("name", "category"), parent_label="Product")
    coordinator = MediaCreationCoordinator(repo, asset_store, "products", min_assets=1)

    with pytest.raises(ValidationError) as exc_info:
        await coordinator.create_with_assets({"name": "Rug", "category": "rug"}, [], base_url=BASE_URL)

    assert exc_info.value.field == "images"
    assert repo.records == {}


@pytest.mark.asyncio
async def test_create_requires_uniqueness_key(coordinator, make_inputs):
    with pytest.raises(ValidationError) as exc_info:
        await coordinator.create_with_assets({"title": "No slug", "slug": ""}, [], base_url=BASE_URL)
    assert exc_info.value.field == "slug"


@pytest.mark.asyncio
async def test_create_rejects_input_without_content(coordinator, blog_repo):
    empty = AssetInput(source=None, original_name="a.jpg", mime_type="image/jpeg")
    with pytest.raises(ValidationError):
        await coordinator.create_with_assets(article_fields(), [empty], base_url=BASE_URL)
    assert blog_repo.records == {}


@pytest.mark.asyncio
async def test_create_rejects_unknown_image_attributes(coordinator, make_inputs):
    with pytest.raises(ValidationError) as exc_info:
        await coordinator.create_with_assets(
            article_fields(), make_inputs("a.jpg", show_on_home=True), base_url=BASE_URL
        )
    assert exc_info.value.field == "show_on_home"


@pytest.mark.asyncio
async def test_create_stores_domain_image_flags(asset_store, make_inputs):
    repo = InMemoryContentRepository(Product, ProductImage, ("name", "category"), parent_label="Product")
    coordinator = MediaCreationCoordinator(
        repo, asset_store, "products", min_assets=1, asset_fields=("show_on_home",)
    )
    bundle = await coordinator.create_with_assets(
        {"name": "Rug", "category": "rug"}, make_inputs("a.jpg", show_on_home=True), base_url=BASE_URL
    )
    assert bundle.assets[0].show_on_home is True


# =============================================================================
# 2. 추가
# =============================================================================
@pytest.mark.asyncio
async def test_append_continues_numbering_and_leaves_existing_untouched(
    coordinator, make_inputs
):
    bundle = await coordinator.create_with_assets(
        article_fields(), make_inputs("a.jpg", "b.jpg"), base_url=BASE_URL
    )
    before = [(a.id, a.position, a.is_primary, a.filename) for a in bundle.assets]

    appended = await coordinator.append_assets(bundle.record.id, make_inputs("c.jpg", "d.jpg"), base_url=BASE_URL)

    assert [a.position for a in appended] == [2, 3]
    assert all(a.is_primary is False for a in appended)
    current = await coordinator.get_bundle(bundle.record.id)
    assert [(a.id, a.position, a.is_primary, a.filename) for a in current.assets[:2]] == before
    assert len(current.assets) == 4


@pytest.mark.asyncio
async def test_append_to_parent_without_images_starts_at_zero(coordinator, make_inputs):
    bundle = await coordinator.create_with_assets(article_fields(), [], base_url=BASE_URL)
    appended = await coordinator.append_assets(bundle.record.id, make_inputs("a.jpg"), base_url=BASE_URL)
    assert [a.position for a in appended] == [0]
    assert appended[0].is_primary is False


@pytest.mark.asyncio
async def test_append_to_unknown_parent_raises_not_found(coordinator, make_inputs, upload_dir):
    with pytest.raises(NotFoundError):
        await coordinator.append_assets(uuid.uuid4(), make_inputs("a.jpg"), base_url=BASE_URL)
    assert files_in(upload_dir, "blog") == []


@pytest.mark.asyncio
async def test_append_requires_images(coordinator):
    bundle = await coordinator.create_with_assets(article_fields(), [], base_url=BASE_URL)
    with pytest.raises(ValidationError):
        await coordinator.append_assets(bundle.record.id, [], base_url=BASE_URL)


@pytest.mark.asyncio
async def test_append_rolls_back_new_files_when_rows_fail(
    coordinator, blog_repo, make_inputs, upload_dir, monkeypatch
):
    bundle = await coordinator.create_with_assets(article_fields(), make_inputs("a.jpg"), base_url=BASE_URL)
    existing = files_in(upload_dir, "blog")

    async def broken_add_assets(parent_id, rows):
        raise RuntimeError("insert failed")

    monkeypatch.setattr(blog_repo, "add_assets", broken_add_assets)
    with pytest.raises(RuntimeError):
        await coordinator.append_assets(bundle.record.id, make_inputs("b.jpg", "c.jpg"), base_url=BASE_URL)

    assert files_in(upload_dir, "blog") == existing
    assert len(blog_repo.assets) == 1


# =============================================================================
# 3. 메타데이터 수정 / 대표 이미지
# =============================================================================
@pytest.mark.asyncio
async def test_update_metadata_does_not_touch_siblings_or_files(coordinator, make_inputs, upload_dir):
    bundle = await coordinator.create_with_assets(
        article_fields(), make_inputs("a.jpg", "b.jpg"), base_url=BASE_URL
    )
    first, second = bundle.assets
    files_before = files_in(upload_dir, "blog")

    updated = await coordinator.update_asset_metadata(
        second.id, {"is_primary": True, "alt_text": "Second"}, parent_id=bundle.record.id
    )

    assert updated.is_primary is True
    assert updated.alt_text == "Second"
    assert first.is_primary is True
    assert files_in(upload_dir, "blog") == files_before


@pytest.mark.asyncio
async def test_update_metadata_rejects_file_fields(coordinator, make_inputs):
    bundle = await coordinator.create_with_assets(article_fields(), make_inputs("a.jpg"), base_url=BASE_URL)
    with pytest.raises(ValidationError) as exc_info:
        await coordinator.update_asset_metadata(bundle.assets[0].id, {"filename": "other.jpg"})
    assert exc_info.value.field == "filename"


@pytest.mark.asyncio
async def test_update_metadata_checks_asset_belongs_to_parent(coordinator, make_inputs):
    one = await coordinator.create_with_assets(article_fields("one"), make_inputs("a.jpg"), base_url=BASE_URL)
    two = await coordinator.create_with_assets(article_fields("two"), [], base_url=BASE_URL)
    with pytest.raises(NotFoundError):
        await coordinator.update_asset_metadata(one.assets[0].id, {"alt_text": "x"}, parent_id=two.record.id)


@pytest.mark.asyncio
async def test_set_primary_clears_siblings(coordinator, make_inputs):
    bundle = await coordinator.create_with_assets(
        article_fields(), make_inputs("a.jpg", "b.jpg", "c.jpg"), base_url=BASE_URL
    )
    target = bundle.assets[2]

    await coordinator.set_primary_asset(target.id, parent_id=bundle.record.id)

    current = await coordinator.get_bundle(bundle.record.id)
    assert [a.is_primary for a in current.assets] == [False, False, True]


# =============================================================================
# 4. 교체
# =============================================================================
@pytest.mark.asyncio
async def test_replace_asset_swaps_file_and_keeps_position(coordinator, make_inputs, upload_dir):
    bundle = await coordinator.create_with_assets(
        article_fields(), make_inputs("a.jpg", "b.jpg"), base_url=BASE_URL
    )
    target = bundle.assets[1]
    old_filename = target.filename

    replacement = make_inputs("new.png")[0]
    updated = await coordinator.replace_asset(target.id, replacement, base_url=BASE_URL)

    assert updated.position == 1
    assert updated.is_primary is False
    assert updated.filename != old_filename
    assert updated.filename.endswith(".png")
    assert updated.url.endswith(f"/uploads/blog/{updated.filename}")
    remaining = files_in(upload_dir, "blog")
    assert old_filename not in remaining
    assert updated.filename in remaining


@pytest.mark.asyncio
async def test_replace_asset_compensates_new_file_when_row_update_fails(
    coordinator, blog_repo, make_inputs, upload_dir, monkeypatch
):
    bundle = await coordinator.create_with_assets(article_fields(), make_inputs("a.jpg"), base_url=BASE_URL)
    files_before = files_in(upload_dir, "blog")

    async def broken_update(asset, fields):
        raise RuntimeError("update failed")

    monkeypatch.setattr(blog_repo, "update_asset", broken_update)
    with pytest.raises(RuntimeError):
        await coordinator.replace_asset(bundle.assets[0].id, make_inputs("b.jpg")[0], base_url=BASE_URL)

    assert files_in(upload_dir, "blog") == files_before


# =============================================================================
# 5. 삭제
# =============================================================================
@pytest.mark.asyncio
async def test_remove_asset_with_missing_file_still_removes_row(
    coordinator, blog_repo, asset_store, make_inputs, caplog
):
    bundle = await coordinator.create_with_assets(article_fields(), make_inputs("a.jpg"), base_url=BASE_URL)
    asset = bundle.assets[0]
    await asset_store.delete(asset.filename, "blog")

    with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
        await coordinator.remove_asset(asset.id)

    assert asset.id not in blog_repo.assets
    assert any(asset.filename in r.getMessage() for r in caplog.records if r.name == LOGGER_NAME)


@pytest.mark.asyncio
async def test_remove_unknown_asset_raises_not_found(coordinator):
    with pytest.raises(NotFoundError):
        await coordinator.remove_asset(uuid.uuid4())


@pytest.mark.asyncio
async def test_remove_content_record_cascades_even_when_files_are_missing(
    coordinator, blog_repo, asset_store, make_inputs, upload_dir
):
    bundle = await coordinator.create_with_assets(
        article_fields(), make_inputs("a.jpg", "b.jpg", "c.jpg"), base_url=BASE_URL
    )
    missing = bundle.assets[1].filename
    await asset_store.delete(missing, "blog")

    failed = await coordinator.remove_content_record(bundle.record.id)

    assert failed == [missing]
    assert blog_repo.records == {}
    assert blog_repo.assets == {}
    assert files_in(upload_dir, "blog") == []


@pytest.mark.asyncio
async def test_remove_unknown_record_raises_not_found(coordinator):
    with pytest.raises(NotFoundError):
        await coordinator.remove_content_record(uuid.uuid4())


@pytest.fixture
def failing_delete(asset_store, monkeypatch):
    """저장소의 delete가 항상 StorageError를 내도록 바꾸고, 시도된 파일명을 기록합니다."""
    attempted: List[str] = []

    async def broken_delete(filename, namespace):
        attempted.append(filename)
        raise StorageError(f"Failed to delete file '{namespace}/{filename}': permission denied")

    monkeypatch.setattr(asset_store, "delete", broken_delete)
    return attempted


@pytest.mark.asyncio
async def test_remove_asset_when_file_delete_fails_still_removes_row(
    coordinator, blog_repo, make_inputs, upload_dir, failing_delete, caplog
):
    bundle = await coordinator.create_with_assets(
        article_fields(), make_inputs("a.jpg", "b.jpg"), base_url=BASE_URL
    )
    asset = bundle.assets[0]

    with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
        await coordinator.remove_asset(asset.id)

    assert failing_delete == [asset.filename]
    assert asset.id not in blog_repo.assets
    assert bundle.assets[1].id in blog_repo.assets
    assert asset.filename in files_in(upload_dir, "blog")
    assert any(
        asset.filename in r.getMessage() and "permission denied" in r.getMessage()
        for r in caplog.records
        if r.name == LOGGER_NAME
    )


@pytest.mark.asyncio
async def test_remove_content_record_when_file_deletes_fail_returns_failures(
    coordinator, blog_repo, make_inputs, failing_delete, caplog
):
    bundle = await coordinator.create_with_assets(
        article_fields(), make_inputs("a.jpg", "b.jpg"), base_url=BASE_URL
    )
    filenames = [a.filename for a in bundle.assets]

    with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
        failed = await coordinator.remove_content_record(bundle.record.id)

    assert failed == filenames
    assert failing_delete == filenames
    assert blog_repo.records == {}
    assert blog_repo.assets == {}
    logged = [r.getMessage() for r in caplog.records if r.name == LOGGER_NAME]
    assert all(any(name in message for message in logged) for name in filenames)


@pytest.mark.asyncio
async def test_replace_asset_when_old_file_delete_fails_keeps_new_file(
    coordinator, blog_repo, make_inputs, upload_dir, failing_delete, caplog
):
    bundle = await coordinator.create_with_assets(article_fields(), make_inputs("a.jpg"), base_url=BASE_URL)
    old_filename = bundle.assets[0].filename

    with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
        updated = await coordinator.replace_asset(
            bundle.assets[0].id, make_inputs("b.png")[0], base_url=BASE_URL
        )

    assert failing_delete == [old_filename]
    assert blog_repo.assets[updated.id].filename == updated.filename
    assert updated.filename != old_filename
    assert sorted(files_in(upload_dir, "blog")) == sorted([old_filename, updated.filename])
    assert any(old_filename in r.getMessage() for r in caplog.records if r.name == LOGGER_NAME)


# =============================================================================
# 6. 레코드 수정
# =============================================================================
@pytest.mark.asyncio
async def test_update_record_rechecks_uniqueness(coordinator):
    await coordinator.create_with_assets(article_fields("taken"), [], base_url=BASE_URL)
    bundle = await coordinator.create_with_assets(article_fields("mine"), [], base_url=BASE_URL)

    with pytest.raises(ConflictError):
        await coordinator.update_record(bundle.record.id, {"slug": "taken"})

    updated = await coordinator.update_record(bundle.record.id, {"slug": "mine", "title": "Renamed"})
    assert updated.record.title == "Renamed"


@pytest.mark.asyncio
async def test_null_for_required_fields_is_rejected_before_reaching_repository(
    coordinator, blog_repo, make_inputs
):
    bundle = await coordinator.create_with_assets(article_fields(), make_inputs("a.jpg"), base_url=BASE_URL)

    with pytest.raises(ValidationError) as exc_info:
        await coordinator.update_record(bundle.record.id, {"title": None})
    assert exc_info.value.field == "title"
    assert blog_repo.records[bundle.record.id].title == "Hello World"

    with pytest.raises(ValidationError) as exc_info:
        await coordinator.update_asset_metadata(bundle.assets[0].id, {"position": None})
    assert exc_info.value.field == "position"

    updated = await coordinator.update_asset_metadata(bundle.assets[0].id, {"alt_text": None})
    assert updated.alt_text is None


# =============================================================================
# 7. 전체 시나리오
# =============================================================================
@pytest.mark.asyncio
async def test_create_append_remove_scenario(coordinator, make_inputs):
    bundle = await coordinator.create_with_assets(
        article_fields(), make_inputs("a.jpg", "b.jpg"), base_url=BASE_URL
    )
    assert [(a.position, a.is_primary) for a in bundle.assets] == [(0, True), (1, False)]

    appended = await coordinator.append_assets(bundle.record.id, make_inputs("c.jpg"), base_url=BASE_URL)
    assert [(a.position, a.is_primary) for a in appended] == [(2, False)]

    await coordinator.remove_asset(bundle.assets[0].id)

    current = await coordinator.get_bundle(bundle.record.id)
    assert [a.position for a in current.assets] == [1, 2]
    assert not any(a.is_primary for a in current.assets)
