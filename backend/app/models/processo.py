"""
Modelos relacionados a Processos fiscais.

Inclui Processo e HistoricoProcesso.
"""

import enum
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, Dinheiro, PgEnum


class TipoProcesso(str, enum.Enum):
    """Modalidades de processo de conciliação."""

    COMPENSACAO = "compensacao"  # Créditos do contribuinte contra débitos
    DACAO_PAGAMENTO = "dacao_pagamento"  # Imóvel oferecido em pagamento
    TRANSACAO_EXCEPCIONAL = "transacao_excepcional"  # Desconto e parcelamento


class StatusProcesso(str, enum.Enum):
    """Fases do processo."""

    RECEPCIONADO = "recepcionado"
    EM_ANALISE = "em_analise"
    EM_PAUTA = "em_pauta"
    SUSPENSO = "suspenso"
    PEDIDO_VISTA = "pedido_vista"
    PEDIDO_DILIGENCIA = "pedido_diligencia"
    EM_NEGOCIACAO = "em_negociacao"
    JULGADO = "julgado"
    EM_CUMPRIMENTO = "em_cumprimento"
    CONCLUIDO = "concluido"
    ARQUIVADO = "arquivado"


# Estados que devolvem o processo à pauta
STATUS_RETORNO_PAUTA = frozenset({
    StatusProcesso.SUSPENSO,
    StatusProcesso.PEDIDO_VISTA,
    StatusProcesso.PEDIDO_DILIGENCIA,
    StatusProcesso.EM_NEGOCIACAO,
})

TRANSICOES_PERMITIDAS: dict[StatusProcesso, frozenset[StatusProcesso]] = {
    StatusProcesso.RECEPCIONADO: frozenset({
        StatusProcesso.EM_ANALISE,
        StatusProcesso.ARQUIVADO,
    }),
    StatusProcesso.EM_ANALISE: frozenset({
        StatusProcesso.EM_PAUTA,
        StatusProcesso.ARQUIVADO,
    }),
    StatusProcesso.EM_PAUTA: STATUS_RETORNO_PAUTA | {StatusProcesso.JULGADO},
    StatusProcesso.SUSPENSO: frozenset({StatusProcesso.EM_PAUTA}),
    StatusProcesso.PEDIDO_VISTA: frozenset({StatusProcesso.EM_PAUTA}),
    StatusProcesso.PEDIDO_DILIGENCIA: frozenset({StatusProcesso.EM_PAUTA}),
    StatusProcesso.EM_NEGOCIACAO: frozenset({StatusProcesso.EM_PAUTA}),
    StatusProcesso.JULGADO: frozenset({
        StatusProcesso.EM_CUMPRIMENTO,
        StatusProcesso.CONCLUIDO,
        StatusProcesso.ARQUIVADO,
    }),
    # Cancelamento do acordo devolve o processo a JULGADO
    StatusProcesso.EM_CUMPRIMENTO: frozenset({
        StatusProcesso.CONCLUIDO,
        StatusProcesso.JULGADO,
    }),
    StatusProcesso.CONCLUIDO: frozenset({StatusProcesso.ARQUIVADO}),
    StatusProcesso.ARQUIVADO: frozenset(),
}


def pode_transicionar(atual: StatusProcesso, novo: StatusProcesso) -> bool:
    """Indica se o fluxo permite sair de `atual` para `novo`."""
    return novo in TRANSICOES_PERMITIDAS.get(atual, frozenset())


class Processo(Base):
    """
    Processo de conciliação fiscal.

    O tipo é definido no protocolo e não muda depois; o status percorre
    o fluxo de TRANSICOES_PERMITIDAS.
    """

    __tablename__ = "processos"

    numero: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    tipo: Mapped[TipoProcesso] = mapped_column(PgEnum(TipoProcesso), nullable=False)
    status: Mapped[StatusProcesso] = mapped_column(
        PgEnum(StatusProcesso),
        default=StatusProcesso.RECEPCIONADO,
        nullable=False,
        index=True,
    )

    # Valores
    valor_original: Mapped[Decimal] = mapped_column(Dinheiro(), default=Decimal("0"))
    valor_negociado: Mapped[Decimal | None] = mapped_column(Dinheiro())

    data_abertura: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)

    # Contribuinte
    contribuinte_nome: Mapped[str] = mapped_column(String(255), nullable=False)
    contribuinte_documento: Mapped[str | None] = mapped_column(
        String(18),
        index=True,
        comment="CPF ou CNPJ",
    )

    observacoes: Mapped[str | None] = mapped_column(Text)

    # Relacionamentos
    decisoes: Mapped[list["Decisao"]] = relationship(  # noqa: F821
        "Decisao",
        back_populates="processo",
        lazy="selectin",
        order_by="[Decisao.data_decisao, Decisao.created_at]",
    )

    pautas: Mapped[list["PautaProcesso"]] = relationship(  # noqa: F821
        "PautaProcesso",
        back_populates="processo",
        lazy="selectin",
    )

    acordos: Mapped[list["Acordo"]] = relationship(  # noqa: F821
        "Acordo",
        back_populates="processo",
        lazy="selectin",
    )

    historicos: Mapped[list["HistoricoProcesso"]] = relationship(
        "HistoricoProcesso",
        back_populates="processo",
        lazy="selectin",
        order_by="HistoricoProcesso.created_at",
    )

    @property
    def decisao_mais_recente(self) -> "Decisao | None":  # noqa: F821
        """Última decisão registrada; empates ficam com a registrada por último."""
        if not self.decisoes:
            return None
        return sorted(self.decisoes, key=lambda d: d.data_decisao)[-1]

    @property
    def possui_vinculos(self) -> bool:
        """Indica se o processo já tem registros que impedem a exclusão."""
        return bool(self.decisoes or self.pautas or self.acordos or self.historicos)

    def __repr__(self) -> str:
        return f"<Processo(id={self.id}, numero='{self.numero}', status={self.status.value})>"


class HistoricoProcesso(Base):
    """Entrada da linha do tempo do processo."""

    __tablename__ = "historicos_processo"

    processo_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("processos.id"),
        nullable=False,
        index=True,
    )
    usuario_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("usuarios.id"))

    titulo: Mapped[str] = mapped_column(String(255), nullable=False)
    descricao: Mapped[str] = mapped_column(Text, nullable=False)
    tipo: Mapped[str] = mapped_column(
        String(30),
        default="EVENTO",
        comment="EVENTO, STATUS, DECISAO, ACORDO",
    )

    processo: Mapped["Processo"] = relationship(
        "Processo",
        back_populates="historicos",
    )

    def __repr__(self) -> str:
        return f"<HistoricoProcesso(processo_id={self.processo_id}, titulo='{self.titulo}')>"
