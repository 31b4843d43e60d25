"""
Service de Acordos.

Criação do acordo (detalhe, inscrições, créditos e cronograma numa
única transação) e o ciclo de vida depois dela: conclusão,
cancelamento, exclusão e custas.
"""

from datetime import date
from uuid import UUID

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.calculos.cronograma import (
    ParcelaGerada,
    gerar_cronograma,
    gerar_parcela_honorarios,
    valor_parcela_padrao,
)
from app.calculos.moeda import arredondar_centavos, para_decimal, para_float
from app.calculos.situacao import resumir_parcelas, todas_quitadas
from app.calculos.valores_acordo import (
    DetalheAcordo,
    DetalheCompensacao,
    DetalheDacao,
    DetalheTransacao,
    calcular_valores,
    resolver_tipo,
    valores_do_acordo,
)
from app.core.exceptions import (
    AgreementDetailNotConfiguredError,
    BusinessRuleError,
    DuplicateActiveAgreementError,
    InvalidAmountError,
    ProcessoNaoElegivelError,
    ResourceNotFoundError,
    ValidationError,
)
from app.db.session import unidade_de_trabalho
from app.models.acordo import (
    Acordo,
    AcordoCompensacao,
    AcordoCredito,
    AcordoDacao,
    AcordoDebito,
    AcordoInscricao,
    AcordoTransacao,
    FinalidadeInscricao,
    MetodoPagamento,
    StatusAcordo,
)
from app.models.parcela import Parcela, StatusParcela
from app.models.processo import Processo, StatusProcesso, TipoProcesso, pode_transicionar
from app.repositories.acordo_repository import AcordoRepository
from app.repositories.processo_repository import ProcessoRepository
from app.schemas.acordo import (
    AcordoCancelar,
    AcordoConcluir,
    AcordoCreate,
    CompensacaoIn,
    CustasUpdate,
    DacaoIn,
    InscricaoIn,
    ResumoAcordo,
    TransacaoIn,
)
from app.services.processo_service import mudar_status, registrar_historico

logger = structlog.get_logger()

INDICE_ACORDO_ATIVO = "uq_acordos_ativo_por_processo"

TITULO_CRIACAO = {
    TipoProcesso.TRANSACAO_EXCEPCIONAL: "Acordo de Transação Excepcional Criado",
    TipoProcesso.COMPENSACAO: "Acordo de Compensação Criado",
    TipoProcesso.DACAO_PAGAMENTO: "Acordo de Dação em Pagamento Criado",
}

STATUS_EM_VIGOR = (StatusAcordo.ATIVO, StatusAcordo.VENCIDO)


def montar_resumo(acordo: Acordo, hoje: date | None = None) -> ResumoAcordo:
    """Valores calculados do acordo mais a situação das parcelas."""
    valores = valores_do_acordo(acordo)
    parcelas = resumir_parcelas(acordo.parcelas, hoje)
    return ResumoAcordo(
        valor_original=valores.valor_original,
        valor_final=valores.valor_final,
        valor_desconto=valores.valor_desconto,
        percentual_desconto=valores.percentual_desconto,
        valor_total_parcelas=parcelas.valor_total,
        valor_pago=parcelas.valor_pago,
        valor_restante=parcelas.valor_restante,
        percentual_pago=parcelas.percentual_pago,
        parcelas_total=parcelas.parcelas_total,
        parcelas_pagas=parcelas.parcelas_pagas,
        parcelas_pendentes=parcelas.parcelas_pendentes,
        parcelas_atrasadas=parcelas.parcelas_atrasadas,
    )


def concluir_se_quitado(acordo: Acordo, usuario_id: UUID | None = None) -> bool:
    """
    Marca a transação como CUMPRIDA quando tudo estiver pago.

    Exige todas as parcelas quitadas e, havendo custas, a data de
    pagamento delas. O processo vai para CONCLUIDO.
    """
    if acordo.tipo_processo != TipoProcesso.TRANSACAO_EXCEPCIONAL:
        return False
    if acordo.status not in STATUS_EM_VIGOR:
        return False
    if not acordo.parcelas or not todas_quitadas(acordo.parcelas):
        return False
    if acordo.transacao is not None and not acordo.transacao.custas_quitadas:
        return False

    acordo.status = StatusAcordo.CUMPRIDO
    processo = acordo.processo
    if pode_transicionar(processo.status, StatusProcesso.CONCLUIDO):
        processo.status = StatusProcesso.CONCLUIDO
    registrar_historico(
        processo,
        "Acordo de Pagamento Cumprido",
        f"Termo {acordo.numero_termo}: parcelas e custas quitadas",
        tipo="ACORDO",
        usuario_id=usuario_id,
    )
    logger.info(
        "Acordo cumprido",
        acordo_id=str(acordo.id),
        numero_termo=acordo.numero_termo,
    )
    return True


def _soma(valores) -> float:
    return arredondar_centavos(sum(para_float(v) for v in valores))


def _inscricao(
    dados: InscricaoIn,
    finalidade: FinalidadeInscricao,
    valor_total: float,
) -> AcordoInscricao:
    inscricao = AcordoInscricao(
        numero_inscricao=dados.numero_inscricao,
        tipo_inscricao=dados.tipo_inscricao,
        finalidade=finalidade,
        valor_total=para_decimal(valor_total),
        descricao=dados.descricao,
        data_vencimento=dados.data_vencimento,
        debitos=[],
    )
    for debito in dados.debitos:
        inscricao.debitos.append(
            AcordoDebito(
                descricao=debito.descricao,
                valor_lancado=para_decimal(debito.valor_lancado),
                data_vencimento=debito.data_vencimento,
            )
        )
    return inscricao


def _inscricao_de_debitos(
    dados: InscricaoIn,
    finalidade: FinalidadeInscricao,
    campo: str,
) -> AcordoInscricao:
    """Inscrição de débitos: o valor total é a soma dos débitos lançados."""
    if not dados.debitos:
        raise ValidationError(
            f"Inscrição {dados.numero_inscricao} sem débitos lançados",
            field=campo,
        )
    return _inscricao(dados, finalidade, _soma(d.valor_lancado for d in dados.debitos))


def _montar_transacao(
    acordo: Acordo,
    dados: TransacaoIn,
) -> tuple[DetalheAcordo, AcordoTransacao]:
    for inscricao in dados.inscricoes:
        acordo.inscricoes.append(
            _inscricao_de_debitos(inscricao, FinalidadeInscricao.INCLUIDA_ACORDO, "inscricoes")
        )

    debitos = tuple(
        debito.valor_lancado for inscricao in dados.inscricoes for debito in inscricao.debitos
    )
    if dados.valor_total_proposto - _soma(debitos) > 0.005:
        raise InvalidAmountError(
            "Valor proposto não pode exceder o total dos débitos",
            field="valor_total_proposto",
        )

    parcelado = dados.metodo_pagamento == MetodoPagamento.PARCELADO
    quantidade = 1
    if parcelado and dados.quantidade_parcelas is not None:
        quantidade = dados.quantidade_parcelas
    transacao = AcordoTransacao(
        valor_total_proposto=para_decimal(dados.valor_total_proposto),
        metodo_pagamento=dados.metodo_pagamento,
        valor_entrada=para_decimal(dados.valor_entrada) if parcelado and dados.valor_entrada else None,
        quantidade_parcelas=quantidade,
        custas_advocaticias=para_decimal(dados.custas_advocaticias) if dados.custas_advocaticias else None,
        custas_data_vencimento=dados.custas_data_vencimento,
        honorarios_valor=para_decimal(dados.honorarios_valor) if dados.honorarios_valor else None,
    )
    detalhe = DetalheTransacao(
        valor_total_proposto=dados.valor_total_proposto,
        valores_debitos=debitos,
    )
    return detalhe, transacao


def _montar_compensacao(
    acordo: Acordo,
    dados: CompensacaoIn,
) -> tuple[DetalheAcordo, AcordoCompensacao]:
    for credito in dados.creditos:
        acordo.creditos.append(
            AcordoCredito(
                tipo_credito=credito.tipo_credito,
                numero_credito=credito.numero_credito,
                valor=para_decimal(credito.valor),
                descricao=credito.descricao,
                data_vencimento=credito.data_vencimento,
            )
        )
    inscricoes = [
        _inscricao_de_debitos(inscricao, FinalidadeInscricao.OFERECIDA_COMPENSACAO, "inscricoes")
        for inscricao in dados.inscricoes
    ]
    acordo.inscricoes.extend(inscricoes)

    creditos = _soma(c.valor for c in dados.creditos)
    debitos = _soma(i.valor_total for i in inscricoes)
    compensacao = AcordoCompensacao(
        valor_total_creditos=para_decimal(creditos),
        valor_total_debitos=para_decimal(debitos),
        valor_liquido=para_decimal(creditos - debitos),
        custas_advocaticias=para_decimal(dados.custas_advocaticias) if dados.custas_advocaticias else None,
        honorarios_valor=para_decimal(dados.honorarios_valor) if dados.honorarios_valor else None,
    )
    return DetalheCompensacao(total_creditos=creditos, total_debitos=debitos), compensacao


def _montar_dacao(
    acordo: Acordo,
    dados: DacaoIn,
) -> tuple[DetalheAcordo, AcordoDacao]:
    # Imóvel oferecido é avaliado pelo valor_total; não tem débitos
    for oferecida in dados.inscricoes_oferecidas:
        if oferecida.valor_total is None:
            raise ValidationError(
                f"Informe o valor de avaliação do imóvel {oferecida.numero_inscricao}",
                field="inscricoes_oferecidas",
            )
        acordo.inscricoes.append(
            _inscricao(oferecida, FinalidadeInscricao.OFERECIDA_DACAO, oferecida.valor_total)
        )
        acordo.creditos.append(
            AcordoCredito(
                tipo_credito="DACAO_IMOVEL",
                numero_credito=oferecida.numero_inscricao,
                valor=para_decimal(oferecida.valor_total),
                descricao=oferecida.descricao,
                data_vencimento=oferecida.data_vencimento,
            )
        )
    compensar = [
        _inscricao_de_debitos(inscricao, FinalidadeInscricao.INCLUIDA_ACORDO, "inscricoes_compensar")
        for inscricao in dados.inscricoes_compensar
    ]
    acordo.inscricoes.extend(compensar)

    oferecido = _soma(i.valor_total for i in dados.inscricoes_oferecidas)
    debitos = _soma(i.valor_total for i in compensar)
    dacao = AcordoDacao(
        valor_total_oferecido=para_decimal(oferecido),
        valor_total_compensar=para_decimal(debitos),
        valor_liquido=para_decimal(oferecido - debitos),
        custas_advocaticias=para_decimal(dados.custas_advocaticias) if dados.custas_advocaticias else None,
        honorarios_valor=para_decimal(dados.honorarios_valor) if dados.honorarios_valor else None,
    )
    return DetalheDacao(total_oferecido=oferecido, total_debitos=debitos), dacao


def proximo_numero_termo(termos_do_ano: list[str], ano: int) -> str:
    """Próximo termo NNNN/AAAA a partir dos já emitidos no ano."""
    sequencias = [
        int(termo.split("/", 1)[0])
        for termo in termos_do_ano
        if termo.split("/", 1)[0].isdigit()
    ]
    return f"{max(sequencias, default=0) + 1:04d}/{ano}"


class AcordoService:
    """
    Service para operações com Acordo.

    Toda escrita acontece dentro de `unidade_de_trabalho`: qualquer
    erro de cálculo ou de banco desfaz o acordo inteiro.
    """

    def __init__(self, db: AsyncSession):
        self._db = db
        self._acordo_repo = AcordoRepository(db)
        self._processo_repo = ProcessoRepository(db)

    # === CRIAÇÃO ===

    async def criar_acordo(
        self,
        dados: AcordoCreate,
        usuario_id: UUID | None = None,
    ) -> Acordo:
        """
        Cria acordo para processo julgado com decisão favorável.

        Fluxo:
            1. Trava o processo e valida elegibilidade e acordo ativo
            2. Monta detalhe, inscrições e créditos conforme o tipo
            3. Calcula valores e gera o cronograma de parcelas
            4. Processo vai para EM_CUMPRIMENTO e ganha entrada no histórico

        Raises:
            ProcessoNaoElegivelError: processo não julgado ou decisão desfavorável
            DuplicateActiveAgreementError: processo já tem acordo ativo
            InvalidInstallmentCountError, InvalidAmountError: cronograma inválido
        """
        async with unidade_de_trabalho(self._db):
            processo = await self._processo_repo.get_for_update(dados.processo_id)
            if not processo:
                raise ResourceNotFoundError("Processo", dados.processo_id)

            tipo = resolver_tipo(processo.tipo)
            if dados.detalhe.tipo != tipo.value:
                raise ValidationError(
                    f"Detalhe '{dados.detalhe.tipo}' não corresponde ao tipo do processo '{tipo.value}'",
                    field="detalhe",
                )
            if dados.data_vencimento < dados.data_assinatura:
                raise ValidationError(
                    "Vencimento não pode ser anterior à assinatura",
                    field="data_vencimento",
                )

            self._validar_elegibilidade(processo)
            if await self._acordo_repo.get_ativo_by_processo(processo.id):
                raise DuplicateActiveAgreementError(processo.id)

            termos = await self._acordo_repo.get_termos_do_ano(dados.data_assinatura.year)
            acordo = Acordo(
                numero_termo=proximo_numero_termo(termos, dados.data_assinatura.year),
                tipo_processo=tipo,
                data_assinatura=dados.data_assinatura,
                data_vencimento=dados.data_vencimento,
                status=StatusAcordo.ATIVO,
                observacoes=dados.observacoes,
                compensacao=None,
                dacao=None,
                transacao=None,
                inscricoes=[],
                creditos=[],
                parcelas=[],
            )

            parcelas = self._montar_detalhe(acordo, dados)
            for gerada in parcelas:
                acordo.parcelas.append(
                    Parcela(
                        tipo_parcela=gerada.tipo_parcela,
                        numero=gerada.numero,
                        valor=para_decimal(gerada.valor),
                        data_vencimento=gerada.data_vencimento,
                        status=gerada.status,
                        pagamentos=[],
                    )
                )

            processo.acordos.append(acordo)
            mudar_status(processo, StatusProcesso.EM_CUMPRIMENTO)
            registrar_historico(
                processo,
                TITULO_CRIACAO[tipo],
                f"Termo {acordo.numero_termo} assinado em {acordo.data_assinatura:%d/%m/%Y}",
                tipo="ACORDO",
                usuario_id=usuario_id,
            )

            try:
                await self._db.flush()
            except IntegrityError as exc:
                raise self._traduzir_integridade(exc, processo.id) from exc

        logger.info(
            "Acordo criado",
            acordo_id=str(acordo.id),
            numero_termo=acordo.numero_termo,
            processo_id=str(processo.id),
            tipo=tipo.value,
            parcelas=len(parcelas),
        )
        return acordo

    def _validar_elegibilidade(self, processo: Processo) -> None:
        if processo.status != StatusProcesso.JULGADO:
            raise ProcessoNaoElegivelError(
                f"Processo {processo.numero} não está julgado (status: {processo.status.value})"
            )
        decisao = processo.decisao_mais_recente
        if decisao is None or not decisao.favoravel:
            raise ProcessoNaoElegivelError(
                f"Processo {processo.numero} não tem decisão favorável"
            )

    def _montar_detalhe(self, acordo: Acordo, dados: AcordoCreate) -> list[ParcelaGerada]:
        """Preenche o detalhe do acordo e devolve o cronograma gerado."""
        match dados.detalhe:
            case TransacaoIn() as transacao_in:
                detalhe, transacao = _montar_transacao(acordo, transacao_in)
                valores = calcular_valores(acordo.tipo_processo, detalhe)
                parcelas = gerar_cronograma(
                    valor_final=valores.valor_final,
                    metodo_pagamento=transacao_in.metodo_pagamento,
                    quantidade_parcelas=transacao.quantidade_parcelas,
                    valor_entrada=transacao.valor_entrada,
                    valor_honorarios=transacao_in.honorarios_valor,
                    data_vencimento=dados.data_vencimento,
                )
                valor_parcela = valor_parcela_padrao(parcelas)
                transacao.valor_parcela = (
                    para_decimal(valor_parcela) if valor_parcela is not None else None
                )
                acordo.transacao = transacao
            case CompensacaoIn() as compensacao_in:
                detalhe, compensacao = _montar_compensacao(acordo, compensacao_in)
                calcular_valores(acordo.tipo_processo, detalhe)
                parcelas = gerar_parcela_honorarios(
                    compensacao_in.honorarios_valor, dados.data_vencimento
                )
                acordo.compensacao = compensacao
            case DacaoIn() as dacao_in:
                detalhe, dacao = _montar_dacao(acordo, dacao_in)
                calcular_valores(acordo.tipo_processo, detalhe)
                parcelas = gerar_parcela_honorarios(dacao_in.honorarios_valor, dados.data_vencimento)
                acordo.dacao = dacao
            case _:
                raise AgreementDetailNotConfiguredError(acordo.tipo_processo.value)
        return parcelas

    def _traduzir_integridade(self, exc: IntegrityError, processo_id: UUID) -> Exception:
        mensagem = str(exc.orig)
        if INDICE_ACORDO_ATIVO in mensagem or "acordos.processo_id" in mensagem:
            return DuplicateActiveAgreementError(processo_id)
        logger.warning("Conflito ao gravar acordo", erro=mensagem)
        return BusinessRuleError(
            "Número de termo já emitido por outra operação; tente novamente",
            rule="NUMERO_TERMO_DUPLICADO",
        )

    # === CONSULTA ===

    async def buscar_acordo(self, acordo_id: UUID) -> Acordo:
        """Busca acordo com processo carregado."""
        acordo = await self._acordo_repo.get_by_id_with_processo(acordo_id)
        if not acordo:
            raise ResourceNotFoundError("Acordo", acordo_id)
        return acordo

    async def listar_acordos(
        self,
        status: StatusAcordo | None = None,
        tipo_processo: TipoProcesso | None = None,
        processo_id: UUID | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[tuple[Acordo, float | None]], int]:
        """Lista acordos com o valor final de cada um (None sem detalhe)."""
        acordos, total = await self._acordo_repo.list_with_filters(
            status=status,
            tipo_processo=tipo_processo,
            processo_id=processo_id,
            skip=skip,
            limit=limit,
        )
        itens = []
        for acordo in acordos:
            try:
                valor_final = valores_do_acordo(acordo).valor_final
            except AgreementDetailNotConfiguredError:
                logger.warning("Acordo sem detalhe na listagem", acordo_id=str(acordo.id))
                valor_final = None
            itens.append((acordo, valor_final))
        return itens, total

    # === CICLO DE VIDA ===

    async def concluir_acordo(
        self,
        acordo_id: UUID,
        dados: AcordoConcluir,
        usuario_id: UUID | None = None,
    ) -> Acordo:
        """
        Conclusão manual de compensação ou dação.

        Transações só são cumpridas pelo pagamento das parcelas.
        """
        async with unidade_de_trabalho(self._db):
            acordo = await self.buscar_acordo(acordo_id)
            if acordo.tipo_processo == TipoProcesso.TRANSACAO_EXCEPCIONAL:
                raise BusinessRuleError(
                    "Transação excepcional é cumprida pelo pagamento das parcelas",
                    rule="CONCLUSAO_MANUAL_TRANSACAO",
                )
            if acordo.status != StatusAcordo.ATIVO:
                raise BusinessRuleError(
                    f"Apenas acordos ativos podem ser concluídos (status: {acordo.status.value})",
                    rule="ACORDO_NAO_ATIVO",
                )

            acordo.status = StatusAcordo.CUMPRIDO
            if dados.observacoes:
                acordo.observacoes = "\n".join(filter(None, [acordo.observacoes, dados.observacoes]))

            processo = acordo.processo
            if dados.concluir_processo:
                mudar_status(processo, StatusProcesso.CONCLUIDO)
            registrar_historico(
                processo,
                "Acordo Concluído",
                f"Termo {acordo.numero_termo} concluído",
                tipo="ACORDO",
                usuario_id=usuario_id,
            )
            await self._db.flush()

        logger.info(
            "Acordo concluído",
            acordo_id=str(acordo_id),
            concluir_processo=dados.concluir_processo,
        )
        return acordo

    async def cancelar_acordo(
        self,
        acordo_id: UUID,
        dados: AcordoCancelar,
        usuario_id: UUID | None = None,
    ) -> Acordo:
        """Cancela o acordo e as parcelas em aberto; o processo volta a JULGADO."""
        async with unidade_de_trabalho(self._db):
            acordo = await self.buscar_acordo(acordo_id)
            if acordo.status not in STATUS_EM_VIGOR:
                raise BusinessRuleError(
                    f"Acordo com status {acordo.status.value} não pode ser cancelado",
                    rule="ACORDO_NAO_CANCELAVEL",
                )

            canceladas = 0
            for parcela in acordo.parcelas:
                if parcela.status in (StatusParcela.PENDENTE, StatusParcela.ATRASADO):
                    parcela.status = StatusParcela.CANCELADO
                    canceladas += 1

            acordo.status = StatusAcordo.CANCELADO
            acordo.observacoes = "\n".join(
                filter(None, [acordo.observacoes, f"Cancelamento: {dados.motivo}"])
            )

            processo = acordo.processo
            if processo.status == StatusProcesso.EM_CUMPRIMENTO:
                mudar_status(processo, StatusProcesso.JULGADO)
            registrar_historico(
                processo,
                "Acordo Cancelado",
                f"Termo {acordo.numero_termo}: {dados.motivo}",
                tipo="ACORDO",
                usuario_id=usuario_id,
            )
            await self._db.flush()

        logger.info(
            "Acordo cancelado",
            acordo_id=str(acordo_id),
            parcelas_canceladas=canceladas,
        )
        return acordo

    async def excluir_acordo(self, acordo_id: UUID) -> None:
        """Exclui acordo sem pagamentos registrados."""
        async with unidade_de_trabalho(self._db):
            acordo = await self.buscar_acordo(acordo_id)
            if any(parcela.pagamentos for parcela in acordo.parcelas):
                raise BusinessRuleError(
                    "Acordo com pagamentos registrados não pode ser excluído",
                    rule="ACORDO_COM_PAGAMENTOS",
                )

            processo = acordo.processo
            if acordo.status in STATUS_EM_VIGOR and processo.status == StatusProcesso.EM_CUMPRIMENTO:
                mudar_status(processo, StatusProcesso.JULGADO)
            processo.acordos.remove(acordo)
            await self._acordo_repo.delete(acordo)

        logger.info("Acordo excluído", acordo_id=str(acordo_id))

    async def atualizar_custas(
        self,
        acordo_id: UUID,
        dados: CustasUpdate,
        usuario_id: UUID | None = None,
    ) -> Acordo:
        """
        Registra vencimento e pagamento das custas advocatícias.

        Com as custas pagas e as parcelas quitadas, o acordo é cumprido.
        """
        async with unidade_de_trabalho(self._db):
            acordo = await self.buscar_acordo(acordo_id)
            transacao = acordo.transacao
            if transacao is None:
                raise BusinessRuleError(
                    "Custas só são controladas em transação excepcional",
                    rule="CUSTAS_SEM_TRANSACAO",
                )
            if not transacao.custas_advocaticias or transacao.custas_advocaticias <= 0:
                raise BusinessRuleError("Acordo não possui custas", rule="ACORDO_SEM_CUSTAS")
            if acordo.status not in STATUS_EM_VIGOR:
                raise BusinessRuleError(
                    f"Acordo com status {acordo.status.value} não aceita alterações",
                    rule="ACORDO_ENCERRADO",
                )

            transacao.custas_data_vencimento = dados.custas_data_vencimento
            transacao.custas_data_pagamento = dados.custas_data_pagamento
            cumprido = concluir_se_quitado(acordo, usuario_id)
            await self._db.flush()

        logger.info(
            "Custas atualizadas",
            acordo_id=str(acordo_id),
            pagas=dados.custas_data_pagamento is not None,
            cumprido=cumprido,
        )
        return acordo
