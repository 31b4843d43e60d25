"""
Testes dos endpoints de acordos.
"""
import pytest
from httpx import AsyncClient

from app.models.julgamento import TipoDecisao
from app.models.processo import StatusProcesso, TipoProcesso


def _payload_compensacao(processo_id) -> dict:
    return {
        "processo_id": str(processo_id),
        "data_assinatura": "2024-01-20",
        "data_vencimento": "2024-02-20",
        "detalhe": {
            "tipo": "compensacao",
            "honorarios_valor": 250,
            "creditos": [
                {"tipo_credito": "PRECATORIO", "numero_credito": "PRC-2018-44", "valor": 8000},
            ],
            "inscricoes": [
                {
                    "numero_inscricao": "ECO-2021-0007",
                    "tipo_inscricao": "economica",
                    "valor_total": 9999,
                    "debitos": [
                        {"descricao": "ISS 2021", "valor_lancado": 3000},
                        {"descricao": "ISS 2022", "valor_lancado": 2000},
                    ],
                },
            ],
        },
    }


def _payload_dacao(processo_id) -> dict:
    return {
        "processo_id": str(processo_id),
        "data_assinatura": "2024-02-01",
        "data_vencimento": "2024-02-01",
        "detalhe": {
            "tipo": "dacao_pagamento",
            "inscricoes_oferecidas": [
                {
                    "numero_inscricao": "IMV-0077",
                    "tipo_inscricao": "imobiliaria",
                    "valor_total": 30000,
                    "descricao": "Terreno urbano, lote 12",
                },
            ],
            "inscricoes_compensar": [
                {
                    "numero_inscricao": "ECO-2020-0100",
                    "tipo_inscricao": "economica",
                    "debitos": [{"descricao": "ISS 2020", "valor_lancado": 25000}],
                },
            ],
        },
    }


async def _status_processo(client: AsyncClient, processo_id) -> str:
    response = await client.get(f"/api/v1/processos/{processo_id}")
    return response.json()["data"]["status"]


# === CRIAÇÃO ===


@pytest.mark.asyncio
async def test_criar_acordo_transacao_parcelado(client: AsyncClient, criar_processo, payload_transacao):
    processo = await criar_processo()
    payload = payload_transacao(
        processo.id,
        valor_total_proposto=10000,
        metodo_pagamento="parcelado",
        quantidade_parcelas=3,
        valor_entrada=2000,
        honorarios_valor=0,
        inscricoes=[
            {
                "numero_inscricao": "IMB-2019-0001",
                "tipo_inscricao": "imobiliaria",
                "valor_total": 15000,
                "debitos": [
                    {"descricao": "IPTU 2019", "valor_lancado": 8000},
                    {"descricao": "IPTU 2020", "valor_lancado": 7000},
                ],
            }
        ],
    )

    response = await client.post("/api/v1/acordos", json=payload)

    assert response.status_code == 200, response.text
    acordo = response.json()["data"]
    assert acordo["numero_termo"] == "0001/2024"
    assert acordo["status"] == "ativo"
    assert acordo["transacao"]["quantidade_parcelas"] == 3
    assert acordo["transacao"]["valor_parcela"] == 2666.67

    parcelas = sorted(
        (p["tipo_parcela"], p["numero"], p["valor"], p["data_vencimento"]) for p in acordo["parcelas"]
    )
    assert parcelas == [
        ("entrada", 0, 2000.0, "2024-01-10"),
        ("parcela_acordo", 1, 2666.67, "2024-02-10"),
        ("parcela_acordo", 2, 2666.67, "2024-03-10"),
        ("parcela_acordo", 3, 2666.66, "2024-04-10"),
    ]

    resumo = acordo["resumo"]
    assert resumo["valor_original"] == 15000.0
    assert resumo["valor_final"] == 10000.0
    assert resumo["valor_desconto"] == 5000.0
    assert resumo["valor_total_parcelas"] == 10000.0

    assert await _status_processo(client, processo.id) == "em_cumprimento"


@pytest.mark.asyncio
async def test_criar_acordo_a_vista_com_honorarios(client: AsyncClient, criar_processo, payload_transacao):
    processo = await criar_processo()

    response = await client.post("/api/v1/acordos", json=payload_transacao(processo.id))

    acordo = response.json()["data"]
    tipos = {p["tipo_parcela"]: p["valor"] for p in acordo["parcelas"]}
    assert tipos == {"parcela_acordo": 1200.0, "parcela_honorarios": 300.0}
    assert acordo["transacao"]["quantidade_parcelas"] == 1
    assert len(acordo["inscricoes"][0]["debitos"]) == 2

    historico = (await client.get(f"/api/v1/processos/{processo.id}/historico")).json()["data"]
    assert historico[0]["titulo"] == "Acordo de Transação Excepcional Criado"


@pytest.mark.asyncio
async def test_numero_termo_sequencial_no_ano(client: AsyncClient, criar_processo, payload_transacao):
    primeiro = await criar_processo()
    segundo = await criar_processo()

    r1 = await client.post("/api/v1/acordos", json=payload_transacao(primeiro.id))
    r2 = await client.post("/api/v1/acordos", json=payload_transacao(segundo.id))

    assert r1.json()["data"]["numero_termo"] == "0001/2024"
    assert r2.json()["data"]["numero_termo"] == "0002/2024"


@pytest.mark.asyncio
async def test_criar_acordo_compensacao(client: AsyncClient, criar_processo):
    processo = await criar_processo(tipo=TipoProcesso.COMPENSACAO, tipo_decisao=TipoDecisao.PARCIAL)

    response = await client.post("/api/v1/acordos", json=_payload_compensacao(processo.id))

    assert response.status_code == 200, response.text
    acordo = response.json()["data"]
    assert acordo["compensacao"]["valor_total_creditos"] == 8000.0
    assert acordo["compensacao"]["valor_total_debitos"] == 5000.0
    assert acordo["compensacao"]["valor_liquido"] == 3000.0
    assert acordo["resumo"]["valor_original"] == 8000.0
    assert acordo["resumo"]["valor_final"] == 5000.0
    inscricao = acordo["inscricoes"][0]
    assert inscricao["finalidade"] == "oferecida_compensacao"
    assert inscricao["valor_total"] == 5000.0
    assert sum(d["valor_lancado"] for d in inscricao["debitos"]) == 5000.0
    assert [(p["tipo_parcela"], p["valor"]) for p in acordo["parcelas"]] == [
        ("parcela_honorarios", 250.0)
    ]


@pytest.mark.asyncio
async def test_criar_acordo_dacao(client: AsyncClient, criar_processo):
    processo = await criar_processo(tipo=TipoProcesso.DACAO_PAGAMENTO)

    response = await client.post("/api/v1/acordos", json=_payload_dacao(processo.id))

    assert response.status_code == 200, response.text
    acordo = response.json()["data"]
    assert acordo["dacao"]["valor_total_oferecido"] == 30000.0
    assert acordo["dacao"]["valor_total_compensar"] == 25000.0
    assert acordo["resumo"]["valor_final"] == 25000.0
    assert acordo["resumo"]["valor_desconto"] == 0.0
    assert {i["finalidade"] for i in acordo["inscricoes"]} == {"oferecida_dacao", "incluida_acordo"}
    totais = {i["finalidade"]: i["valor_total"] for i in acordo["inscricoes"]}
    assert totais == {"oferecida_dacao": 30000.0, "incluida_acordo": 25000.0}
    assert acordo["creditos"][0]["tipo_credito"] == "DACAO_IMOVEL"
    assert acordo["parcelas"] == []


@pytest.mark.asyncio
async def test_acordo_processo_indeferido(client: AsyncClient, criar_processo, payload_transacao):
    processo = await criar_processo(tipo_decisao=TipoDecisao.INDEFERIDO)
    processo_id = processo.id

    response = await client.post("/api/v1/acordos", json=payload_transacao(processo_id))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "PROCESSO_NAO_ELEGIVEL"
    assert await _status_processo(client, processo_id) == "julgado"


@pytest.mark.asyncio
async def test_acordo_processo_nao_julgado(client: AsyncClient, criar_processo, payload_transacao):
    processo = await criar_processo(tipo_decisao=None, status=StatusProcesso.EM_PAUTA)

    response = await client.post("/api/v1/acordos", json=payload_transacao(processo.id))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "PROCESSO_NAO_ELEGIVEL"


@pytest.mark.asyncio
async def test_acordo_ativo_duplicado(client: AsyncClient, db_session, criar_processo, payload_transacao):
    processo = await criar_processo()
    await client.post("/api/v1/acordos", json=payload_transacao(processo.id))

    # Status forçado de volta para simular processo reaberto com acordo vigente
    processo.status = StatusProcesso.JULGADO
    await db_session.commit()

    response = await client.post("/api/v1/acordos", json=payload_transacao(processo.id))

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_ACTIVE_AGREEMENT"


@pytest.mark.asyncio
async def test_detalhe_de_outro_tipo(client: AsyncClient, criar_processo):
    processo = await criar_processo()
    processo_id = processo.id

    response = await client.post("/api/v1/acordos", json=_payload_compensacao(processo_id))

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert await _status_processo(client, processo_id) == "julgado"


@pytest.mark.asyncio
async def test_proposta_acima_dos_debitos(client: AsyncClient, criar_processo, payload_transacao):
    processo = await criar_processo()

    response = await client.post(
        "/api/v1/acordos",
        json=payload_transacao(processo.id, valor_total_proposto=2500),
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_AMOUNT"


@pytest.mark.asyncio
async def test_quantidade_de_parcelas_invalida(client: AsyncClient, criar_processo, payload_transacao):
    processo = await criar_processo()
    processo_id = processo.id

    response = await client.post(
        "/api/v1/acordos",
        json=payload_transacao(processo_id, metodo_pagamento="parcelado", quantidade_parcelas=0),
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_INSTALLMENT_COUNT"
    listagem = (await client.get("/api/v1/acordos", params={"processo_id": str(processo_id)})).json()
    assert listagem["total"] == 0


@pytest.mark.asyncio
async def test_inscricao_sem_debitos(client: AsyncClient, criar_processo, payload_transacao):
    processo = await criar_processo()

    response = await client.post(
        "/api/v1/acordos",
        json=payload_transacao(
            processo.id,
            inscricoes=[{"numero_inscricao": "IMB-1", "tipo_inscricao": "imobiliaria", "valor_total": 2000}],
        ),
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_compensacao_exige_debitos_nas_inscricoes(client: AsyncClient, criar_processo):
    processo = await criar_processo(tipo=TipoProcesso.COMPENSACAO)
    payload = _payload_compensacao(processo.id)
    payload["detalhe"]["inscricoes"][0]["debitos"] = []

    response = await client.post("/api/v1/acordos", json=payload)

    assert response.status_code == 422
    erro = response.json()["error"]
    assert erro["code"] == "VALIDATION_ERROR"
    assert erro["field"] == "inscricoes"


@pytest.mark.asyncio
async def test_dacao_exige_valor_do_imovel_oferecido(client: AsyncClient, criar_processo):
    processo = await criar_processo(tipo=TipoProcesso.DACAO_PAGAMENTO)
    payload = _payload_dacao(processo.id)
    del payload["detalhe"]["inscricoes_oferecidas"][0]["valor_total"]

    response = await client.post("/api/v1/acordos", json=payload)

    assert response.status_code == 422


# === CONSULTA ===


@pytest.mark.asyncio
async def test_listar_acordos(client: AsyncClient, criar_processo, payload_transacao):
    transacao = await criar_processo()
    compensacao = await criar_processo(tipo=TipoProcesso.COMPENSACAO)
    await client.post("/api/v1/acordos", json=payload_transacao(transacao.id))
    await client.post("/api/v1/acordos", json=_payload_compensacao(compensacao.id))

    response = await client.get("/api/v1/acordos")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    valores = {a["tipo_processo"]: a["valor_final"] for a in body["data"]}
    assert valores == {"transacao_excepcional": 1200.0, "compensacao": 5000.0}
    assert {a["status_label"] for a in body["data"]} == {"Ativo"}

    filtrado = (await client.get("/api/v1/acordos", params={"tipo_processo": "compensacao"})).json()
    assert filtrado["total"] == 1


@pytest.mark.asyncio
async def test_buscar_acordo(client_visualizador: AsyncClient, client: AsyncClient, criar_processo, payload_transacao):
    processo = await criar_processo()
    criado = (await client.post("/api/v1/acordos", json=payload_transacao(processo.id))).json()["data"]

    response = await client_visualizador.get(f"/api/v1/acordos/{criado['id']}")

    assert response.status_code == 200
    assert response.json()["data"]["resumo"]["parcelas_total"] == 2


# === CICLO DE VIDA ===


@pytest.mark.asyncio
async def test_concluir_compensacao(client: AsyncClient, criar_processo):
    processo = await criar_processo(tipo=TipoProcesso.COMPENSACAO)
    acordo = (await client.post("/api/v1/acordos", json=_payload_compensacao(processo.id))).json()["data"]

    response = await client.post(
        f"/api/v1/acordos/{acordo['id']}/concluir",
        json={"observacoes": "Créditos homologados"},
    )

    assert response.status_code == 200
    assert response.json()["data"]["status"] == "cumprido"
    assert await _status_processo(client, processo.id) == "concluido"


@pytest.mark.asyncio
async def test_concluir_sem_concluir_processo(client: AsyncClient, criar_processo):
    processo = await criar_processo(tipo=TipoProcesso.DACAO_PAGAMENTO)
    acordo = (await client.post("/api/v1/acordos", json=_payload_dacao(processo.id))).json()["data"]

    response = await client.post(
        f"/api/v1/acordos/{acordo['id']}/concluir",
        json={"concluir_processo": False},
    )

    assert response.status_code == 200
    assert await _status_processo(client, processo.id) == "em_cumprimento"


@pytest.mark.asyncio
async def test_concluir_transacao_manual_bloqueado(client: AsyncClient, criar_processo, payload_transacao):
    processo = await criar_processo()
    acordo = (await client.post("/api/v1/acordos", json=payload_transacao(processo.id))).json()["data"]

    response = await client.post(f"/api/v1/acordos/{acordo['id']}/concluir", json={})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_cancelar_acordo_reabre_processo(client: AsyncClient, criar_processo, payload_transacao):
    processo = await criar_processo()
    acordo = (await client.post("/api/v1/acordos", json=payload_transacao(processo.id))).json()["data"]

    response = await client.post(
        f"/api/v1/acordos/{acordo['id']}/cancelar",
        json={"motivo": "Contribuinte desistiu"},
    )

    assert response.status_code == 200
    cancelado = response.json()["data"]
    assert cancelado["status"] == "cancelado"
    assert {p["status"] for p in cancelado["parcelas"]} == {"cancelado"}
    assert "Contribuinte desistiu" in cancelado["observacoes"]
    assert await _status_processo(client, processo.id) == "julgado"

    novo = await client.post("/api/v1/acordos", json=payload_transacao(processo.id))
    assert novo.status_code == 200
    assert novo.json()["data"]["numero_termo"] == "0002/2024"


@pytest.mark.asyncio
async def test_cancelar_acordo_cumprido(client: AsyncClient, criar_processo):
    processo = await criar_processo(tipo=TipoProcesso.COMPENSACAO)
    acordo = (await client.post("/api/v1/acordos", json=_payload_compensacao(processo.id))).json()["data"]
    await client.post(f"/api/v1/acordos/{acordo['id']}/concluir", json={})

    response = await client.post(
        f"/api/v1/acordos/{acordo['id']}/cancelar",
        json={"motivo": "Engano"},
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_excluir_acordo(client: AsyncClient, criar_processo, payload_transacao):
    processo = await criar_processo()
    acordo = (await client.post("/api/v1/acordos", json=payload_transacao(processo.id))).json()["data"]

    response = await client.delete(f"/api/v1/acordos/{acordo['id']}")

    assert response.status_code == 200
    assert (await client.get(f"/api/v1/acordos/{acordo['id']}")).status_code == 404
    assert await _status_processo(client, processo.id) == "julgado"


@pytest.mark.asyncio
async def test_excluir_acordo_exige_admin(client_funcionario: AsyncClient, criar_processo, payload_transacao):
    processo = await criar_processo()
    criado = await client_funcionario.post("/api/v1/acordos", json=payload_transacao(processo.id))
    assert criado.status_code == 200

    response = await client_funcionario.delete(f"/api/v1/acordos/{criado.json()['data']['id']}")

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_excluir_acordo_com_pagamento(client: AsyncClient, criar_processo, payload_transacao):
    processo = await criar_processo()
    acordo = (await client.post("/api/v1/acordos", json=payload_transacao(processo.id))).json()["data"]
    parcela = next(p for p in acordo["parcelas"] if p["tipo_parcela"] == "parcela_acordo")
    await client.post(
        f"/api/v1/parcelas/{parcela['id']}/pagamentos",
        json={"valor_pago": 100, "data_pagamento": "2024-01-10", "forma_pagamento": "pix"},
    )

    response = await client.delete(f"/api/v1/acordos/{acordo['id']}")

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_custas_apenas_em_transacao(client: AsyncClient, criar_processo):
    processo = await criar_processo(tipo=TipoProcesso.COMPENSACAO)
    acordo = (await client.post("/api/v1/acordos", json=_payload_compensacao(processo.id))).json()["data"]

    response = await client.patch(
        f"/api/v1/acordos/{acordo['id']}/custas",
        json={"custas_data_vencimento": "2024-03-01"},
    )

    assert response.status_code == 400
