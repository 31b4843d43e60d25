"""
Testes para utilitários e helpers.
"""
from datetime import date, timedelta
from uuid import uuid4

import pytest
from httpx import AsyncClient

from app.core.exceptions import DuplicateActiveAgreementError, InvalidDateRangeError, ResourceNotFoundError
from app.core.middleware import status_para_excecao
from app.core.security import create_access_token, verify_token
from app.schemas.base import APIResponse, PaginatedResponse


def test_create_access_token():
    """Token carrega o usuário no sub e claims extras."""
    user_id = uuid4()
    token = create_access_token(user_id, additional_claims={"role": "admin"})

    payload = verify_token(token)
    assert payload["sub"] == str(user_id)
    assert payload["role"] == "admin"


def test_verify_token_expirado():
    token = create_access_token("abc", expires_delta=timedelta(seconds=-1))
    assert verify_token(token) is None


def test_verify_token_invalido():
    assert verify_token("nao-e-um-jwt") is None


def test_api_response_model():
    """Testa modelo de resposta da API."""
    response = APIResponse(success=True, data={"key": "value"}, message="OK")

    assert response.success is True
    assert response.data == {"key": "value"}
    assert response.message == "OK"


def test_paginated_response_pages():
    response = PaginatedResponse(data=[1, 2], total=45, page=1, page_size=20)
    assert response.pages == 3


def test_status_http_das_excecoes():
    assert status_para_excecao(ResourceNotFoundError("Acordo")) == 404
    assert status_para_excecao(DuplicateActiveAgreementError(uuid4())) == 409
    assert status_para_excecao(InvalidDateRangeError(date(2024, 2, 1), date(2024, 1, 1))) == 422


@pytest.mark.asyncio
async def test_rota_protegida_sem_token(unauthenticated_client: AsyncClient):
    response = await unauthenticated_client.get("/api/v1/processos")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_rota_protegida_com_token_invalido(unauthenticated_client: AsyncClient):
    response = await unauthenticated_client.get(
        "/api/v1/processos",
        headers={"Authorization": "Bearer token-invalido"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_clientes_mantem_papeis_distintos(
    client_visualizador: AsyncClient,
    client: AsyncClient,
):
    """Cada cliente autentica com o próprio token, independente da ordem das fixtures."""
    payload = {
        "numero": "00077/2024",
        "tipo": "transacao_excepcional",
        "data_abertura": "2024-01-02",
        "contribuinte_nome": "Contribuinte Papéis",
    }

    negado = await client_visualizador.post("/api/v1/processos", json=payload)
    criado = await client.post("/api/v1/processos", json=payload)

    assert negado.status_code == 403
    assert criado.status_code == 200
