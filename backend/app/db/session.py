"""
Configuração da sessão de banco de dados assíncrona.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.config import settings

logger = structlog.get_logger()

# Engine assíncrona
engine = create_async_engine(
    str(settings.DATABASE_URL),
    echo=False,
    poolclass=NullPool,
)

# Session factory
async_session_maker = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@asynccontextmanager
async def unidade_de_trabalho(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Delimita uma unidade de trabalho.

    Tudo que for gravado dentro do bloco é confirmado junto no final;
    qualquer exceção desfaz a transação inteira e é repropagada.

    Uso:
        async with unidade_de_trabalho(self.db):
            ...
    """
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        logger.warning("Transação desfeita")
        raise
