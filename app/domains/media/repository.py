# app/domains/media/repository.py

"""
부모 콘텐츠 레코드와 자산 행의 영속성 인터페이스(ContentRepository)와 구현체입니다.

- ContentRepository: 코디네이터가 의존하는 비동기 Protocol
- SQLContentRepository: CRUDBase + AsyncSession 기반 구현 (요청당 세션 1개)
- InMemoryContentRepository: dict 기반 구현 (코디네이터 단위 테스트, 장애 주입용)

각 메서드는 자체적으로 커밋하므로 "레코드 생성"과 "자산 연결"은 서로 독립된 단계입니다.
"""

import uuid
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple, Type, runtime_checkable

from sqlalchemy import func
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.crud_base import CRUDBase
from app.core.exceptions import ConflictError


# =============================================================================
# 1. 인터페이스
# =============================================================================
@runtime_checkable
class ContentRepository(Protocol):
    unique_fields: Tuple[str, ...]
    parent_label: str
    asset_label: str
    parent_model: Type[SQLModel]
    asset_model: Type[SQLModel]

    async def find_conflict(self, fields: Dict[str, Any], exclude_id: Any = None) -> Optional[Any]: ...

    async def create(self, fields: Dict[str, Any]) -> Any: ...

    async def get(self, parent_id: Any) -> Optional[Any]: ...

    async def update(self, record: Any, fields: Dict[str, Any]) -> Any: ...

    async def delete(self, record: Any) -> None: ...

    async def add_assets(self, parent_id: Any, rows: Sequence[Dict[str, Any]]) -> List[Any]: ...

    async def get_asset(self, asset_id: Any) -> Optional[Any]: ...

    async def update_asset(self, asset: Any, fields: Dict[str, Any]) -> Any: ...

    async def delete_asset(self, asset: Any) -> None: ...

    async def delete_assets(self, parent_id: Any) -> int: ...

    async def list_assets(self, parent_id: Any) -> List[Any]: ...

    async def max_position(self, parent_id: Any) -> Optional[int]: ...


# =============================================================================
# 2. SQL 구현
# =============================================================================
class SQLContentRepository:
    """
    CRUDBase 두 개(부모, 자산)를 묶어 ContentRepository를 구현합니다.
    도메인별 하위 클래스가 parent_crud, asset_crud, unique_fields를 지정합니다.
    """
    parent_crud: CRUDBase
    asset_crud: CRUDBase
    unique_fields: Tuple[str, ...] = ()
    parent_label: str = "Record"
    asset_label: str = "Asset"

    def __init__(self, db: AsyncSession):
        self.db = db

    @property
    def parent_model(self) -> Type[SQLModel]:
        return self.parent_crud.model

    @property
    def asset_model(self) -> Type[SQLModel]:
        return self.asset_crud.model

    # --- 부모 레코드 ---
    async def find_conflict(self, fields: Dict[str, Any], exclude_id: Any = None) -> Optional[Any]:
        if not self.unique_fields:
            return None
        statement = select(self.parent_model)
        for name in self.unique_fields:
            statement = statement.where(getattr(self.parent_model, name) == fields.get(name))
        if exclude_id is not None:
            statement = statement.where(self.parent_model.id != exclude_id)
        result = await self.db.execute(statement)
        return result.scalars().first()

    async def create(self, fields: Dict[str, Any]) -> Any:
        return await self.parent_crud.create(self.db, obj_in=fields)

    async def get(self, parent_id: Any) -> Optional[Any]:
        return await self.parent_crud.get(self.db, id=parent_id)

    async def update(self, record: Any, fields: Dict[str, Any]) -> Any:
        return await self.parent_crud.update(self.db, db_obj=record, obj_in=fields)

    async def delete(self, record: Any) -> None:
        await self.parent_crud.delete(self.db, id=record.id)

    # --- 자산 ---
    async def add_assets(self, parent_id: Any, rows: Sequence[Dict[str, Any]]) -> List[Any]:
        if not rows:
            return []
        return await self.asset_crud.create_many(
            self.db, objs_in=[{**row, "parent_id": parent_id} for row in rows]
        )

    async def get_asset(self, asset_id: Any) -> Optional[Any]:
        return await self.asset_crud.get(self.db, id=asset_id)

    async def update_asset(self, asset: Any, fields: Dict[str, Any]) -> Any:
        return await self.asset_crud.update(self.db, db_obj=asset, obj_in=fields)

    async def delete_asset(self, asset: Any) -> None:
        await self.asset_crud.delete(self.db, id=asset.id)

    async def delete_assets(self, parent_id: Any) -> int:
        return await self.asset_crud.delete_where(self.db, filters={"parent_id": parent_id})

    async def list_assets(self, parent_id: Any) -> List[Any]:
        return await self.asset_crud.get_filtered(
            self.db,
            filters={"parent_id": parent_id},
            order_by=[self.asset_model.position, self.asset_model.created_at],
            limit=None,
        )

    async def max_position(self, parent_id: Any) -> Optional[int]:
        statement = select(func.max(self.asset_model.position)).where(
            self.asset_model.parent_id == parent_id
        )
        result = await self.db.execute(statement)
        return result.scalar_one_or_none()


# =============================================================================
# 3. 인메모리 구현
# =============================================================================
class InMemoryContentRepository:
    """
    dict 기반 ContentRepository. SQL 구현과 같은 의미를 가지며,
    고유 키 충돌은 ConflictError로 보고합니다.
    """

    def __init__(
        self,
        parent_model: Type[SQLModel],
        asset_model: Type[SQLModel],
        unique_fields: Sequence[str] = (),
        *,
        parent_label: str = "Record",
        asset_label: str = "Asset",
    ):
        self.parent_model = parent_model
        self.asset_model = asset_model
        self.unique_fields = tuple(unique_fields)
        self.parent_label = parent_label
        self.asset_label = asset_label
        self.records: Dict[uuid.UUID, Any] = {}
        self.assets: Dict[uuid.UUID, Any] = {}

    def _key(self, source: Any) -> Tuple[Any, ...]:
        if isinstance(source, dict):
            return tuple(source.get(name) for name in self.unique_fields)
        return tuple(getattr(source, name) for name in self.unique_fields)

    async def find_conflict(self, fields: Dict[str, Any], exclude_id: Any = None) -> Optional[Any]:
        if not self.unique_fields:
            return None
        key = self._key(fields)
        for record in self.records.values():
            if record.id != exclude_id and self._key(record) == key:
                return record
        return None

    async def create(self, fields: Dict[str, Any]) -> Any:
        record = self.parent_model.model_validate(fields)
        if await self.find_conflict(fields):
            raise ConflictError(f"{self.parent_model.__name__} violates a uniqueness constraint")
        self.records[record.id] = record
        return record

    async def get(self, parent_id: Any) -> Optional[Any]:
        return self.records.get(parent_id)

    async def update(self, record: Any, fields: Dict[str, Any]) -> Any:
        merged = {name: fields.get(name, getattr(record, name)) for name in self.unique_fields}
        if await self.find_conflict(merged, exclude_id=record.id):
            raise ConflictError(f"{self.parent_model.__name__} violates a uniqueness constraint")
        for key, value in fields.items():
            setattr(record, key, value)
        return record

    async def delete(self, record: Any) -> None:
        self.records.pop(record.id, None)
        for asset_id in [a.id for a in self.assets.values() if a.parent_id == record.id]:
            self.assets.pop(asset_id)

    async def add_assets(self, parent_id: Any, rows: Sequence[Dict[str, Any]]) -> List[Any]:
        created = [self.asset_model.model_validate({**row, "parent_id": parent_id}) for row in rows]
        for asset in created:
            self.assets[asset.id] = asset
        return created

    async def get_asset(self, asset_id: Any) -> Optional[Any]:
        return self.assets.get(asset_id)

    async def update_asset(self, asset: Any, fields: Dict[str, Any]) -> Any:
        for key, value in fields.items():
            setattr(asset, key, value)
        return asset

    async def delete_asset(self, asset: Any) -> None:
        self.assets.pop(asset.id, None)

    async def delete_assets(self, parent_id: Any) -> int:
        doomed = [a.id for a in self.assets.values() if a.parent_id == parent_id]
        for asset_id in doomed:
            self.assets.pop(asset_id)
        return len(doomed)

    async def list_assets(self, parent_id: Any) -> List[Any]:
        children = [a for a in self.assets.values() if a.parent_id == parent_id]
        return sorted(children, key=lambda a: a.position)

    async def max_position(self, parent_id: Any) -> Optional[int]:
        positions = [a.position for a in self.assets.values() if a.parent_id == parent_id]
        return max(positions) if positions else None
