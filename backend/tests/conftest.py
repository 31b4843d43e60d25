"""
Pytest fixtures para testes da Conciliação Fiscal.
"""
import os
from datetime import date
from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.dependencies import get_db
from app.core.security import create_access_token
from app.db.base import Base
from app.main import app
from app.models.julgamento import Decisao, TipoDecisao, TipoResultado
from app.models.processo import Processo, StatusProcesso, TipoProcesso
from app.models.usuario import UserRole, Usuario

# Banco em memória compartilhado por todas as conexões (StaticPool)
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite://")

test_engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    poolclass=StaticPool,
    connect_args={"check_same_thread": False} if TEST_DATABASE_URL.startswith("sqlite") else {},
)
TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Cria sessão de banco de dados para cada teste."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def _criar_usuario(db: AsyncSession, role: UserRole, email: str) -> Usuario:
    user = Usuario(
        id=uuid4(),
        email=email,
        nome=f"Usuário {role.value}",
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> Usuario:
    """Usuário administrador."""
    return await _criar_usuario(db_session, UserRole.ADMIN, "admin@conciliacao.test")


@pytest_asyncio.fixture
async def visualizador(db_session: AsyncSession) -> Usuario:
    """Usuário somente leitura."""
    return await _criar_usuario(db_session, UserRole.VISUALIZADOR, "leitura@conciliacao.test")


@pytest_asyncio.fixture
async def funcionario(db_session: AsyncSession) -> Usuario:
    return await _criar_usuario(db_session, UserRole.FUNCIONARIO, "func@conciliacao.test")


@pytest_asyncio.fixture
async def app_db(db_session: AsyncSession) -> AsyncGenerator[None, None]:
    """Aponta a dependência de banco da aplicação para a sessão de teste."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.pop(get_db, None)


def _cliente_como(user: Usuario) -> AsyncClient:
    """Cliente com o próprio token; vários podem coexistir no mesmo teste."""
    token = create_access_token(user.id, additional_claims={"role": user.role.value})
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {token}"},
    )


@pytest_asyncio.fixture
async def client(app_db, test_user: Usuario) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP autenticado como administrador."""
    async with _cliente_como(test_user) as ac:
        yield ac


@pytest_asyncio.fixture
async def client_visualizador(app_db, visualizador: Usuario) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP autenticado como visualizador."""
    async with _cliente_como(visualizador) as ac:
        yield ac


@pytest_asyncio.fixture
async def client_funcionario(app_db, funcionario: Usuario) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP autenticado como funcionário."""
    async with _cliente_como(funcionario) as ac:
        yield ac


@pytest_asyncio.fixture
async def unauthenticated_client() -> AsyncGenerator[AsyncClient, None]:
    """Cria cliente HTTP sem autenticação."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def criar_processo(db_session: AsyncSession):
    """
    Factory de processos já persistidos.

    Com `tipo_decisao`, o processo nasce JULGADO com essa decisão.
    """
    contador = iter(range(1, 1000))

    async def _criar(
        tipo: TipoProcesso = TipoProcesso.TRANSACAO_EXCEPCIONAL,
        status: StatusProcesso | None = None,
        tipo_decisao: TipoDecisao | None = TipoDecisao.DEFERIDO,
        data_decisao: date = date(2023, 12, 1),
    ) -> Processo:
        decisoes = []
        if tipo_decisao is not None:
            decisoes.append(
                Decisao(
                    tipo_resultado=TipoResultado.JULGADO,
                    tipo_decisao=tipo_decisao,
                    data_decisao=data_decisao,
                )
            )
        processo = Processo(
            numero=f"{next(contador):05d}/2023",
            tipo=tipo,
            status=status or (StatusProcesso.JULGADO if decisoes else StatusProcesso.RECEPCIONADO),
            valor_original=10000,
            data_abertura=date(2023, 6, 1),
            contribuinte_nome="Contribuinte Teste Ltda",
            contribuinte_documento="12345678000190",
            decisoes=decisoes,
            pautas=[],
            acordos=[],
            historicos=[],
        )
        db_session.add(processo)
        await db_session.commit()
        return processo

    return _criar


@pytest.fixture
def payload_transacao():
    """
    Corpo de criação de acordo de transação: débitos de 2.000,00,
    proposta de 1.200,00 à vista e honorários de 300,00.
    """

    def _payload(processo_id, **detalhe) -> dict:
        return {
            "processo_id": str(processo_id),
            "data_assinatura": "2024-01-05",
            "data_vencimento": "2024-01-10",
            "detalhe": {
                "tipo": "transacao_excepcional",
                "valor_total_proposto": 1200,
                "metodo_pagamento": "avista",
                "honorarios_valor": 300,
                "inscricoes": [
                    {
                        "numero_inscricao": "IMB-2019-0001",
                        "tipo_inscricao": "imobiliaria",
                        "valor_total": 2000,
                        "debitos": [
                            {"descricao": "IPTU 2019", "valor_lancado": 1200},
                            {"descricao": "IPTU 2020", "valor_lancado": 800},
                        ],
                    }
                ],
                **detalhe,
            },
        }

    return _payload
