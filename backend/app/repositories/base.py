"""
Repository base com operações CRUD genéricas.

Os repositories apenas fazem flush; o commit fica com a unidade de
trabalho aberta pelo service.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Repository base com operações CRUD.

    Uso:
        class ProcessoRepository(BaseRepository[Processo]):
            def __init__(self, db: AsyncSession):
                super().__init__(Processo, db)
    """

    def __init__(self, model: type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    async def get_by_id(self, id: UUID) -> ModelType | None:
        """Busca entidade por ID."""
        return await self.db.get(self.model, id)

    async def add(self, instance: ModelType) -> ModelType:
        """Adiciona uma instância já montada."""
        self.db.add(instance)
        await self.db.flush()
        await self.db.refresh(instance)
        return instance

    async def create(self, **kwargs: Any) -> ModelType:
        """Cria nova entidade."""
        return await self.add(self.model(**kwargs))

    async def update(self, instance: ModelType, **kwargs: Any) -> ModelType:
        """Atualiza campos informados (None é ignorado)."""
        for key, value in kwargs.items():
            if value is not None:
                setattr(instance, key, value)
        await self.db.flush()
        await self.db.refresh(instance)
        return instance

    async def delete(self, instance: ModelType) -> None:
        """Remove entidade (hard delete)."""
        await self.db.delete(instance)
        await self.db.flush()

    async def count_created_between(
        self,
        inicio: datetime | None = None,
        fim: datetime | None = None,
    ) -> int:
        """Conta entidades criadas na janela (limites inclusivos e opcionais)."""
        query = select(func.count()).select_from(self.model)
        if inicio:
            query = query.where(self.model.created_at >= inicio)
        if fim:
            query = query.where(self.model.created_at <= fim)
        result = await self.db.execute(query)
        return result.scalar_one()
