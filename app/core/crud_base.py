# app/core/crud_base.py

"""
공통 CRUD(Create, Read, Update, Delete) 작업을 위한 기본 클래스 모듈입니다.
모든 메서드는 비동기(async) 환경에서 동작합니다.

고유 제약 조건 위반(IntegrityError)은 세션을 롤백한 뒤 ConflictError로 변환하여
상위 계층(코디네이터)이 HTTP와 무관하게 처리할 수 있도록 합니다.
NOT NULL, 외래 키 위반 등 그 외의 무결성 오류는 롤백 후 그대로 전파됩니다.
"""

from typing import Generic, List, Optional, Sequence, Type, TypeVar, Any, Dict, Union

from sqlalchemy import delete as sa_delete, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from pydantic import BaseModel

from app.core.exceptions import ConflictError

ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)

# PostgreSQL unique_violation SQLSTATE
UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """
    IntegrityError가 고유 제약 조건 위반인지 판별합니다.
    NOT NULL, 외래 키 위반 등 다른 무결성 오류는 False 입니다.
    """
    orig = error.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code == UNIQUE_VIOLATION_SQLSTATE
    # SQLite는 SQLSTATE를 제공하지 않으므로 메시지로 판별합니다.
    return "unique constraint" in str(orig).lower()


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    """
    모든 CRUD 작업에 대한 기본 클래스를 정의합니다.
    """
    def __init__(self, model: Type[ModelType]):
        self.model = model

    async def get(self, db: AsyncSession, id: Any) -> Optional[ModelType]:
        """
        ID를 기준으로 단일 레코드를 조회합니다.
        """
        return await db.get(self.model, id)

    async def get_by_attribute(
        self, db: AsyncSession, *, attribute: str, value: Any
    ) -> Optional[ModelType]:
        statement = select(self.model).where(getattr(self.model, attribute) == value)
        response = await db.execute(statement)
        return response.scalars().first()

    async def get_filtered(
        self,
        db: AsyncSession,
        *,
        filters: Optional[Dict[str, Any]] = None,  # 다중 속성 필터: {"attribute_name": "value"}
        order_by: Optional[Sequence[Any]] = None,  # 정렬 기준 컬럼 표현식 목록
        skip: int = 0,
        limit: Optional[int] = 100
    ) -> List[ModelType]:
        """
        다중 속성 필터와 정렬, 페이징을 지원하는 다중 조회.
        """
        query = select(self.model)
        conditions = []

        if filters:
            for attribute, value in filters.items():
                if not hasattr(self.model, attribute):
                    raise AttributeError(f"Model {self.model.__name__} has no attribute '{attribute}'")
                conditions.append(getattr(self.model, attribute) == value)

        if conditions:
            query = query.where(*conditions)

        if order_by:
            query = query.order_by(*order_by)

        query = query.offset(skip)
        if limit is not None:
            query = query.limit(limit)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def count(self, db: AsyncSession, *, filters: Optional[Dict[str, Any]] = None) -> int:
        """조건을 만족하는 레코드 수를 반환합니다."""
        query = select(func.count()).select_from(self.model)
        for attribute, value in (filters or {}).items():
            query = query.where(getattr(self.model, attribute) == value)
        result = await db.execute(query)
        return int(result.scalar_one())

    async def create(
        self, db: AsyncSession, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        새로운 레코드를 생성합니다.
        """
        db_obj = self.model.model_validate(obj_in)
        db.add(db_obj)
        await self._commit(db)
        await db.refresh(db_obj)
        return db_obj

    async def create_many(
        self, db: AsyncSession, *, objs_in: Sequence[Union[CreateSchemaType, Dict[str, Any]]]
    ) -> List[ModelType]:
        """
        여러 레코드를 하나의 트랜잭션으로 생성합니다. 하나라도 실패하면 전체가 롤백됩니다.
        """
        db_objs = [self.model.model_validate(obj_in) for obj_in in objs_in]
        db.add_all(db_objs)
        await self._commit(db)
        for db_obj in db_objs:
            await db.refresh(db_obj)
        return db_objs

    async def update(
        self, db: AsyncSession, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        """
        기존 레코드를 업데이트합니다.
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(db_obj, key, value)

        db.add(db_obj)
        await self._commit(db)
        await db.refresh(db_obj)
        return db_obj

    async def delete(self, db: AsyncSession, *, id: Any) -> Optional[ModelType]:
        """
        ID를 기준으로 레코드를 삭제합니다.
        """
        db_obj = await db.get(self.model, id)
        if db_obj:
            await db.delete(db_obj)
            await self._commit(db)
        return db_obj

    async def delete_where(self, db: AsyncSession, *, filters: Dict[str, Any]) -> int:
        """
        조건을 만족하는 모든 레코드를 삭제하고 삭제된 행 수를 반환합니다.
        """
        statement = sa_delete(self.model)
        for attribute, value in filters.items():
            statement = statement.where(getattr(self.model, attribute) == value)
        result = await db.execute(statement)
        await self._commit(db)
        return result.rowcount or 0

    async def _commit(self, db: AsyncSession) -> None:
        try:
            await db.commit()
        except IntegrityError as e:
            await db.rollback()
            if not is_unique_violation(e):
                raise
            raise ConflictError(
                f"{self.model.__name__} violates a uniqueness constraint: {e.orig}"
            ) from e
        except Exception:
            await db.rollback()
            raise
