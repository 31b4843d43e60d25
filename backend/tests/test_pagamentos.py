"""
Testes de pagamentos de parcelas e da rotina de vencimento.
"""
from datetime import date

import pytest
from httpx import AsyncClient

from app.models.acordo import StatusAcordo
from app.models.parcela import StatusParcela
from app.services.pagamento_service import PagamentoService


async def _criar_acordo(client: AsyncClient, criar_processo, payload_transacao, **detalhe) -> dict:
    processo = await criar_processo()
    response = await client.post("/api/v1/acordos", json=payload_transacao(processo.id, **detalhe))
    assert response.status_code == 200, response.text
    return response.json()["data"]


def _parcela(acordo: dict, tipo: str) -> dict:
    return next(p for p in acordo["parcelas"] if p["tipo_parcela"] == tipo)


async def _pagar(client: AsyncClient, parcela_id: str, valor: float, data: str = "2024-01-15"):
    return await client.post(
        f"/api/v1/parcelas/{parcela_id}/pagamentos",
        json={"valor_pago": valor, "data_pagamento": data, "forma_pagamento": "pix"},
    )


@pytest.mark.asyncio
async def test_pagamento_parcial(client: AsyncClient, criar_processo, payload_transacao):
    acordo = await _criar_acordo(client, criar_processo, payload_transacao)
    parcela = _parcela(acordo, "parcela_acordo")

    response = await _pagar(client, parcela["id"], 500)

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "pendente"
    assert data["valor_pago"] == 500.0
    assert data["valor_restante"] == 700.0
    assert len(data["pagamentos"]) == 1


@pytest.mark.asyncio
async def test_pagamento_acima_do_restante(client: AsyncClient, criar_processo, payload_transacao):
    acordo = await _criar_acordo(client, criar_processo, payload_transacao)
    parcela = _parcela(acordo, "parcela_acordo")
    await _pagar(client, parcela["id"], 500)

    response = await _pagar(client, parcela["id"], 800)

    assert response.status_code == 422
    erro = response.json()["error"]
    assert erro["code"] == "INVALID_AMOUNT"
    assert "Valor restante: R$ 700,00" in erro["message"]

    atual = (await client.get(f"/api/v1/parcelas/{parcela['id']}")).json()["data"]
    assert atual["valor_pago"] == 500.0


@pytest.mark.asyncio
async def test_quitacao_completa_cumpre_acordo(client: AsyncClient, criar_processo, payload_transacao):
    acordo = await _criar_acordo(client, criar_processo, payload_transacao)
    principal = _parcela(acordo, "parcela_acordo")
    honorarios = _parcela(acordo, "parcela_honorarios")

    pago = (await _pagar(client, principal["id"], 1200)).json()["data"]
    assert pago["status"] == "pago"
    assert pago["data_pagamento"] == "2024-01-15"

    parcial = (await client.get(f"/api/v1/acordos/{acordo['id']}")).json()["data"]
    assert parcial["status"] == "ativo"

    await _pagar(client, honorarios["id"], 300)

    final = (await client.get(f"/api/v1/acordos/{acordo['id']}")).json()["data"]
    assert final["status"] == "cumprido"
    assert final["resumo"]["valor_restante"] == 0.0
    assert final["resumo"]["percentual_pago"] == 100.0

    processo = (await client.get(f"/api/v1/processos/{acordo['processo_id']}")).json()["data"]
    assert processo["status"] == "concluido"


@pytest.mark.asyncio
async def test_custas_pendentes_impedem_cumprimento(client: AsyncClient, criar_processo, payload_transacao):
    acordo = await _criar_acordo(
        client,
        criar_processo,
        payload_transacao,
        honorarios_valor=None,
        custas_advocaticias=150,
        custas_data_vencimento="2024-02-01",
    )

    await _pagar(client, _parcela(acordo, "parcela_acordo")["id"], 1200)

    pendente = (await client.get(f"/api/v1/acordos/{acordo['id']}")).json()["data"]
    assert pendente["status"] == "ativo"

    response = await client.patch(
        f"/api/v1/acordos/{acordo['id']}/custas",
        json={"custas_data_vencimento": "2024-02-01", "custas_data_pagamento": "2024-01-30"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["status"] == "cumprido"
    assert data["transacao"]["custas_data_pagamento"] == "2024-01-30"


@pytest.mark.asyncio
async def test_parcela_paga_nao_aceita_pagamento(client: AsyncClient, criar_processo, payload_transacao):
    acordo = await _criar_acordo(client, criar_processo, payload_transacao)
    parcela = _parcela(acordo, "parcela_honorarios")
    await _pagar(client, parcela["id"], 300)

    response = await _pagar(client, parcela["id"], 10)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_acordo_cancelado_nao_aceita_pagamento(client: AsyncClient, criar_processo, payload_transacao):
    acordo = await _criar_acordo(client, criar_processo, payload_transacao)
    await client.post(f"/api/v1/acordos/{acordo['id']}/cancelar", json={"motivo": "Desistência"})

    response = await _pagar(client, _parcela(acordo, "parcela_acordo")["id"], 100)

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "BUSINESS_RULE_VIOLATION"


@pytest.mark.asyncio
async def test_parcela_inexistente(client: AsyncClient):
    response = await _pagar(client, "00000000-0000-0000-0000-000000000000", 100)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_visualizador_nao_registra_pagamento(
    client: AsyncClient,
    client_visualizador: AsyncClient,
    criar_processo,
    payload_transacao,
):
    acordo = await _criar_acordo(client, criar_processo, payload_transacao)

    response = await _pagar(client_visualizador, _parcela(acordo, "parcela_acordo")["id"], 100)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_listar_vencidas_com_encargos(client: AsyncClient, criar_processo, payload_transacao):
    acordo = await _criar_acordo(client, criar_processo, payload_transacao)
    await _pagar(client, _parcela(acordo, "parcela_acordo")["id"], 200)

    response = await client.get("/api/v1/parcelas/vencidas")

    assert response.status_code == 200
    vencidas = {p["tipo_parcela"]: p for p in response.json()["data"]}
    assert set(vencidas) == {"parcela_acordo", "parcela_honorarios"}
    principal = vencidas["parcela_acordo"]
    assert principal["numero_termo"] == acordo["numero_termo"]
    assert principal["valor_restante"] == 1000.0
    assert principal["dias_atraso"] > 0
    assert principal["valor_multa"] > 0
    assert principal["valor_atualizado"] > principal["valor_restante"]


@pytest.mark.asyncio
async def test_atualizar_status_vencidas(db_session, client: AsyncClient, criar_processo, payload_transacao):
    acordo = await _criar_acordo(client, criar_processo, payload_transacao)
    service = PagamentoService(db_session)

    antes = await service.atualizar_status_vencidas(hoje=date(2024, 1, 10))
    assert antes == {"acordos": 0, "parcelas": 0}

    resultado = await service.atualizar_status_vencidas(hoje=date(2024, 3, 1))
    assert resultado == {"acordos": 1, "parcelas": 2}

    atualizado = (await client.get(f"/api/v1/acordos/{acordo['id']}")).json()["data"]
    assert atualizado["status"] == "vencido"
    assert {p["status"] for p in atualizado["parcelas"]} == {"atrasado"}

    # Rodar de novo não encontra acordos ativos
    assert await service.atualizar_status_vencidas(hoje=date(2024, 3, 1)) == {"acordos": 0, "parcelas": 0}


@pytest.mark.asyncio
async def test_honorarios_atrasados_nao_vencem_acordo(
    db_session,
    client: AsyncClient,
    criar_processo,
    payload_transacao,
):
    acordo = await _criar_acordo(client, criar_processo, payload_transacao)
    await _pagar(client, _parcela(acordo, "parcela_acordo")["id"], 1200, data="2024-01-08")

    resultado = await PagamentoService(db_session).atualizar_status_vencidas(hoje=date(2024, 3, 1))

    assert resultado == {"acordos": 0, "parcelas": 1}
    atual = (await client.get(f"/api/v1/acordos/{acordo['id']}")).json()["data"]
    assert atual["status"] == "ativo"
    assert _parcela(atual, "parcela_honorarios")["status"] == "atrasado"


@pytest.mark.asyncio
async def test_pagamento_de_acordo_vencido_o_reativa(
    db_session,
    client: AsyncClient,
    criar_processo,
    payload_transacao,
):
    acordo = await _criar_acordo(client, criar_processo, payload_transacao, honorarios_valor=None)
    await PagamentoService(db_session).atualizar_status_vencidas(hoje=date(2024, 3, 1))

    parcela = _parcela(acordo, "parcela_acordo")
    pago = (await _pagar(client, parcela["id"], 1200, data="2024-03-05")).json()["data"]

    assert pago["status"] == StatusParcela.PAGO.value
    final = (await client.get(f"/api/v1/acordos/{acordo['id']}")).json()["data"]
    assert final["status"] == StatusAcordo.CUMPRIDO.value
