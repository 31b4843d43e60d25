"""
Modelos do julgamento: Pauta, SessaoJulgamento e Decisao.

São entradas do fluxo de acordos: um processo só pode firmar acordo
depois de uma decisão favorável.
"""

import enum
import uuid
from datetime import date

from sqlalchemy import Date, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, PgEnum


class TipoResultado(str, enum.Enum):
    """Resultado do processo numa sessão de julgamento."""

    SUSPENSO = "suspenso"
    PEDIDO_VISTA = "pedido_vista"
    PEDIDO_DILIGENCIA = "pedido_diligencia"
    EM_NEGOCIACAO = "em_negociacao"
    JULGADO = "julgado"


class TipoDecisao(str, enum.Enum):
    """Mérito da decisão quando o processo é julgado."""

    DEFERIDO = "deferido"
    PARCIAL = "parcial"
    INDEFERIDO = "indeferido"


DECISOES_FAVORAVEIS = frozenset({TipoDecisao.DEFERIDO, TipoDecisao.PARCIAL})


class Pauta(Base):
    """Pauta de julgamento com os processos a apreciar."""

    __tablename__ = "pautas"

    numero: Mapped[str] = mapped_column(String(30), unique=True, nullable=False)
    data_pauta: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    observacoes: Mapped[str | None] = mapped_column(Text)

    processos: Mapped[list["PautaProcesso"]] = relationship(
        "PautaProcesso",
        back_populates="pauta",
        lazy="selectin",
        order_by="PautaProcesso.ordem",
    )

    def __repr__(self) -> str:
        return f"<Pauta(id={self.id}, numero='{self.numero}')>"


class PautaProcesso(Base):
    """Inclusão de um processo numa pauta."""

    __tablename__ = "pauta_processos"
    __table_args__ = (UniqueConstraint("pauta_id", "processo_id"),)

    pauta_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("pautas.id"), nullable=False)
    processo_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("processos.id"),
        nullable=False,
        index=True,
    )
    ordem: Mapped[int] = mapped_column(Integer, default=1)

    pauta: Mapped["Pauta"] = relationship("Pauta", back_populates="processos")
    processo: Mapped["Processo"] = relationship(  # noqa: F821
        "Processo",
        back_populates="pautas",
    )


class SessaoJulgamento(Base):
    """Sessão em que uma pauta é julgada."""

    __tablename__ = "sessoes_julgamento"

    pauta_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("pautas.id"))
    data_inicio: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    data_fim: Mapped[date | None] = mapped_column(Date)
    observacoes: Mapped[str | None] = mapped_column(Text)

    decisoes: Mapped[list["Decisao"]] = relationship(
        "Decisao",
        back_populates="sessao",
        lazy="selectin",
    )


class Decisao(Base):
    """Decisão registrada para um processo."""

    __tablename__ = "decisoes"

    processo_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("processos.id"),
        nullable=False,
        index=True,
    )
    sessao_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("sessoes_julgamento.id"))

    tipo_resultado: Mapped[TipoResultado] = mapped_column(
        PgEnum(TipoResultado),
        nullable=False,
    )
    tipo_decisao: Mapped[TipoDecisao | None] = mapped_column(
        PgEnum(TipoDecisao),
        comment="Preenchido apenas quando o resultado é JULGADO",
    )
    data_decisao: Mapped[date] = mapped_column(Date, default=date.today, nullable=False)
    observacoes: Mapped[str | None] = mapped_column(Text)

    processo: Mapped["Processo"] = relationship(  # noqa: F821
        "Processo",
        back_populates="decisoes",
    )
    sessao: Mapped["SessaoJulgamento | None"] = relationship(
        "SessaoJulgamento",
        back_populates="decisoes",
    )

    @property
    def favoravel(self) -> bool:
        return self.tipo_decisao in DECISOES_FAVORAVEIS

    def __repr__(self) -> str:
        return f"<Decisao(processo_id={self.processo_id}, resultado={self.tipo_resultado.value})>"
