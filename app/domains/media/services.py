# app/domains/media/services.py

"""
콘텐츠 레코드와 이미지 파일의 생성/추가/교체/삭제 흐름을 조율하는 서비스 모듈입니다.

파일 저장소(AssetStore)와 DB(ContentRepository) 사이에는 트랜잭션이 없으므로,
각 흐름은 명시적인 되돌림 지점을 가진 단계의 나열로 구현됩니다.
파일이 먼저 기록되고 DB 단계가 실패하면 CleanupCompensator가 기록된 파일을 삭제합니다.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from pydantic import BaseModel

from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    PartialSuccessError,
    StorageError,
    ValidationError,
)
from app.domains.media.compensator import CleanupCompensator
from app.domains.media.ordering import ImageOrderingPolicy
from app.domains.media.repository import ContentRepository
from app.domains.media.schemas import AssetInput, MediaBundle
from app.domains.media.storage import AssetStore

# 메타데이터 수정으로 변경할 수 있는 자산 필드 (파일을 건드리지 않는 필드)
ASSET_METADATA_FIELDS = frozenset({"alt_text", "is_primary", "position"})


class MediaCreationCoordinator:
    """
    하나의 부모 레코드와 순서가 있는 이미지 자산 목록을 함께 관리합니다.

    Args:
        repository: 부모/자산 영속성 (ContentRepository)
        store: 파일 저장소
        namespace: 파일이 저장될 네임스페이스 (예: "products")
        compensator: 보상 삭제 담당. 없으면 store와 logger로 생성합니다.
        policy: 위치/대표 이미지 정책
        min_assets: 생성 시 필요한 최소 이미지 수 (상품은 1)
        asset_fields: 도메인별로 자산에 추가로 허용되는 표시 플래그 (예: "show_on_home")
        logger: 최선 노력 실패를 보고할 로거
    """

    def __init__(
        self,
        repository: ContentRepository,
        store: AssetStore,
        namespace: str,
        *,
        compensator: Optional[CleanupCompensator] = None,
        policy: Optional[ImageOrderingPolicy] = None,
        min_assets: int = 0,
        asset_fields: Iterable[str] = (),
        logger: Optional[logging.Logger] = None,
    ):
        self.repository = repository
        self.store = store
        self.namespace = namespace
        self.logger = logger or logging.getLogger(__name__)
        self.compensator = compensator or CleanupCompensator(store, self.logger)
        self.policy = policy or ImageOrderingPolicy()
        self.min_assets = min_assets
        self.asset_fields = frozenset(asset_fields)

    # =========================================================================
    # 1. 생성
    # =========================================================================
    async def create_with_assets(
        self, fields: Dict[str, Any], inputs: Sequence[AssetInput], *, base_url: str
    ) -> MediaBundle:
        """
        부모 레코드를 이미지와 함께 생성합니다.

        1) 고유 키 확인 (파일 I/O 이전) -> ConflictError
        2) 네임스페이스 준비
        3) 파일을 순서대로 기록. 실패 시 앞서 기록된 파일 삭제 후 StorageError
        4) 레코드 생성. 실패 시 기록된 모든 파일 삭제 후 원래 오류 전파
        5) 자산 행 저장. 실패 시 파일을 정리하고 레코드는 남긴 채 PartialSuccessError
        """
        inputs = list(inputs)
        self._check_unique_fields_present(fields)
        if len(inputs) < self.min_assets:
            raise ValidationError(
                f"At least {self.min_assets} image(s) required for {self.repository.parent_label}",
                field="images",
            )
        self._check_inputs(inputs)

        conflict = await self.repository.find_conflict(fields)
        if conflict is not None:
            raise ConflictError(self._conflict_message(fields))

        await self.store.ensure_namespace(self.namespace)
        written = await self._write_all(inputs)

        try:
            record = await self.repository.create(fields)
        except Exception as e:
            await self.compensator.compensate(
                written, self.namespace, f"{self.repository.parent_label} creation failed: {e}"
            )
            raise

        assignment = self.policy.assign_on_create(len(written))
        rows = [
            self._asset_row(item, filename, base_url, position, index == assignment.primary_index)
            for index, (item, filename, position) in enumerate(zip(inputs, written, assignment.positions))
        ]
        try:
            assets = await self.repository.add_assets(record.id, rows) if rows else []
        except Exception as e:
            leaked = await self.compensator.compensate(
                written, self.namespace, f"attaching assets to {record.id} failed: {e}"
            )
            raise PartialSuccessError(
                record.id,
                f"{self.repository.parent_label} {record.id} was created but its images could not be attached",
                cleaned_files=[f for f in written if f not in leaked],
            ) from e

        self.logger.info(
            "Created %s %s with %d image(s)", self.repository.parent_label, record.id, len(assets)
        )
        return MediaBundle(record=record, assets=sorted(assets, key=lambda a: a.position))

    # =========================================================================
    # 2. 추가 / 조회 / 수정
    # =========================================================================
    async def append_assets(
        self, parent_id: Any, inputs: Sequence[AssetInput], *, base_url: str
    ) -> List[Any]:
        """기존 자산 뒤에 새 자산을 이어 붙입니다. 기존 자산은 변경하지 않습니다."""
        inputs = list(inputs)
        await self._get_record(parent_id)
        if not inputs:
            raise ValidationError("No images to append", field="images")
        self._check_inputs(inputs)

        await self.store.ensure_namespace(self.namespace)
        written = await self._write_all(inputs)

        try:
            current_max = await self.repository.max_position(parent_id)
            positions = self.policy.assign_on_append(current_max, len(written))
            rows = [
                self._asset_row(item, filename, base_url, position, False)
                for item, filename, position in zip(inputs, written, positions)
            ]
            assets = await self.repository.add_assets(parent_id, rows)
        except Exception as e:
            await self.compensator.compensate(
                written, self.namespace, f"appending assets to {parent_id} failed: {e}"
            )
            raise

        self.logger.info("Appended %d image(s) to %s", len(assets), parent_id)
        return sorted(assets, key=lambda a: a.position)

    async def get_bundle(self, parent_id: Any) -> MediaBundle:
        record = await self._get_record(parent_id)
        assets = await self.repository.list_assets(parent_id)
        return MediaBundle(record=record, assets=assets)

    async def update_record(self, parent_id: Any, fields: Dict[str, Any]) -> MediaBundle:
        """부모 레코드의 필드를 수정합니다. 고유 키가 바뀌면 다른 레코드와의 충돌을 다시 확인합니다."""
        self._check_not_null(self.repository.parent_model, fields)
        record = await self._get_record(parent_id)
        if fields and any(name in fields for name in self.repository.unique_fields):
            merged = {
                name: fields.get(name, getattr(record, name))
                for name in self.repository.unique_fields
            }
            if await self.repository.find_conflict(merged, exclude_id=record.id) is not None:
                raise ConflictError(self._conflict_message(merged))
        if fields:
            record = await self.repository.update(record, fields)
        assets = await self.repository.list_assets(parent_id)
        return MediaBundle(record=record, assets=assets)

    async def update_asset_metadata(
        self,
        asset_id: Any,
        patch: Union[Dict[str, Any], BaseModel],
        *,
        parent_id: Any = None,
    ) -> Any:
        """
        자산의 메타데이터(alt_text, is_primary, position 및 도메인 표시 플래그)만 수정합니다.
        is_primary를 설정해도 형제 자산의 플래그는 해제하지 않습니다 (set_primary_asset 참고).
        """
        if isinstance(patch, BaseModel):
            patch = patch.model_dump(exclude_unset=True)
        allowed = ASSET_METADATA_FIELDS | self.asset_fields
        for key in patch:
            if key not in allowed:
                raise ValidationError(f"Field '{key}' cannot be updated on an image", field=key)
        self._check_not_null(self.repository.asset_model, patch)

        asset = await self._get_asset(asset_id, parent_id)
        if not patch:
            return asset
        return await self.repository.update_asset(asset, dict(patch))

    async def set_primary_asset(self, asset_id: Any, *, parent_id: Any = None) -> Any:
        """대상 자산을 대표 이미지로 지정하고 같은 부모의 다른 자산에서는 플래그를 해제합니다."""
        asset = await self._get_asset(asset_id, parent_id)
        for sibling in await self.repository.list_assets(asset.parent_id):
            if sibling.id != asset.id and sibling.is_primary:
                await self.repository.update_asset(sibling, {"is_primary": False})
        return await self.repository.update_asset(asset, {"is_primary": True})

    async def replace_asset(
        self, asset_id: Any, item: AssetInput, *, base_url: str, parent_id: Any = None
    ) -> Any:
        """
        자산의 저장 파일을 교체합니다. 위치와 플래그는 유지됩니다.
        새 파일을 먼저 기록하고 행을 갱신한 뒤, 이전 파일은 최선 노력으로 삭제합니다.
        """
        self._check_inputs([item])
        asset = await self._get_asset(asset_id, parent_id)
        old_filename = asset.filename

        await self.store.ensure_namespace(self.namespace)
        written = await self._write_all([item])
        new_filename = written[0]

        changes: Dict[str, Any] = {
            "filename": new_filename,
            "url": self.store.url_for(new_filename, base_url, self.namespace),
        }
        if item.alt_text is not None:
            changes["alt_text"] = item.alt_text
        try:
            updated = await self.repository.update_asset(asset, changes)
        except Exception as e:
            await self.compensator.compensate(
                written, self.namespace, f"replacing image {asset_id} failed: {e}"
            )
            raise

        await self._delete_file_best_effort(old_filename)
        return updated

    # =========================================================================
    # 3. 삭제
    # =========================================================================
    async def remove_asset(self, asset_id: Any, *, parent_id: Any = None) -> None:
        """
        파일 삭제를 시도한 뒤 (실패는 로그만 남김) 자산 행을 무조건 삭제합니다.
        남은 자산의 위치는 다시 매기지 않으며 새 대표 이미지를 지정하지도 않습니다.
        """
        asset = await self._get_asset(asset_id, parent_id)
        await self._delete_file_best_effort(asset.filename)
        await self.repository.delete_asset(asset)
        self.logger.info("Removed image %s from %s", asset_id, asset.parent_id)

    async def remove_content_record(self, parent_id: Any) -> List[str]:
        """
        모든 자식 파일 삭제를 시도하고, 자식 행과 부모 레코드를 삭제합니다.

        Returns:
            삭제하지 못한 파일명 목록 (스윕으로 회수 가능)
        """
        record = await self._get_record(parent_id)
        assets = await self.repository.list_assets(parent_id)

        failed = await self.store.delete_many([a.filename for a in assets], self.namespace)
        for filename in failed:
            self.logger.warning(
                "File %s/%s of %s %s could not be deleted",
                self.namespace, filename, self.repository.parent_label, parent_id,
            )

        await self.repository.delete_assets(parent_id)
        await self.repository.delete(record)
        self.logger.info(
            "Deleted %s %s with %d image(s)", self.repository.parent_label, parent_id, len(assets)
        )
        return failed

    # =========================================================================
    # 4. 내부 헬퍼
    # =========================================================================
    async def _get_record(self, parent_id: Any) -> Any:
        record = await self.repository.get(parent_id)
        if record is None:
            raise NotFoundError(self.repository.parent_label, parent_id)
        return record

    async def _get_asset(self, asset_id: Any, parent_id: Any = None) -> Any:
        asset = await self.repository.get_asset(asset_id)
        if asset is None or (parent_id is not None and asset.parent_id != parent_id):
            raise NotFoundError(self.repository.asset_label, asset_id)
        return asset

    async def _write_all(self, inputs: Sequence[AssetInput]) -> List[str]:
        written: List[str] = []
        for item in inputs:
            filename = self.store.generate_filename(item.original_name)
            try:
                await self.store.write(item.source, filename, self.namespace)
            except StorageError as e:
                await self.compensator.compensate(
                    written, self.namespace, f"writing '{item.original_name}' failed: {e.message}"
                )
                raise
            written.append(filename)
        return written

    async def _delete_file_best_effort(self, filename: str) -> None:
        try:
            await self.store.delete(filename, self.namespace)
        except (NotFoundError, StorageError) as e:
            self.logger.warning(
                "Failed to delete file %s/%s: %s", self.namespace, filename, e.message
            )

    def _asset_row(
        self, item: AssetInput, filename: str, base_url: str, position: int, is_primary: bool
    ) -> Dict[str, Any]:
        row = {
            "filename": filename,
            "url": self.store.url_for(filename, base_url, self.namespace),
            "alt_text": item.alt_text,
            "is_primary": is_primary,
            "position": position,
        }
        row.update(item.attributes)
        return row

    def _check_inputs(self, inputs: Sequence[AssetInput]) -> None:
        for index, item in enumerate(inputs):
            if item.source is None:
                raise ValidationError(f"Image #{index + 1} has no content", field="images")
            for key in item.attributes:
                if key not in self.asset_fields:
                    raise ValidationError(f"Unknown image attribute '{key}'", field=key)

    @staticmethod
    def _check_not_null(model: Any, fields: Dict[str, Any]) -> None:
        """NOT NULL 컬럼에 명시적인 null이 들어오면 DB에 닿기 전에 ValidationError로 거부합니다."""
        columns = model.__table__.columns
        for name, value in fields.items():
            column = columns.get(name)
            if value is None and column is not None and not column.nullable:
                raise ValidationError(f"'{name}' cannot be null", field=name)

    def _check_unique_fields_present(self, fields: Dict[str, Any]) -> None:
        for name in self.repository.unique_fields:
            if fields.get(name) in (None, ""):
                raise ValidationError(f"'{name}' is required", field=name)

    def _conflict_message(self, fields: Dict[str, Any]) -> str:
        key = ", ".join(f'{name} "{fields.get(name)}"' for name in self.repository.unique_fields)
        return f"{self.repository.parent_label} with {key} already exists"
