"""
Modelos de Acordo.

Um acordo tem exatamente um detalhe conforme o tipo do processo
(AcordoCompensacao, AcordoDacao ou AcordoTransacao), além das
inscrições/débitos envolvidos e dos créditos ofertados.
"""

import enum
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, Dinheiro, PgEnum
from app.models.processo import TipoProcesso


class StatusAcordo(str, enum.Enum):
    """Status do acordo."""

    ATIVO = "ativo"
    CUMPRIDO = "cumprido"
    VENCIDO = "vencido"
    CANCELADO = "cancelado"
    RENEGOCIADO = "renegociado"


class MetodoPagamento(str, enum.Enum):
    """Modalidade de pagamento da transação."""

    A_VISTA = "avista"
    PARCELADO = "parcelado"


class TipoInscricao(str, enum.Enum):
    """Natureza da inscrição em dívida ativa."""

    IMOBILIARIA = "imobiliaria"
    ECONOMICA = "economica"


class FinalidadeInscricao(str, enum.Enum):
    """Papel da inscrição dentro do acordo."""

    INCLUIDA_ACORDO = "incluida_acordo"  # Débito quitado pelo acordo
    OFERECIDA_COMPENSACAO = "oferecida_compensacao"
    OFERECIDA_DACAO = "oferecida_dacao"  # Imóvel oferecido em pagamento


class Acordo(Base):
    """
    Termo de acordo firmado após julgamento favorável.

    No máximo um acordo ATIVO por processo (índice parcial).
    """

    __tablename__ = "acordos"
    __table_args__ = (
        Index(
            "uq_acordos_ativo_por_processo",
            "processo_id",
            unique=True,
            postgresql_where=text("status = 'ativo'"),
            sqlite_where=text("status = 'ativo'"),
        ),
    )

    numero_termo: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False,
        comment="Formato: NNNN/AAAA",
    )
    processo_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("processos.id"),
        nullable=False,
        index=True,
    )
    tipo_processo: Mapped[TipoProcesso] = mapped_column(PgEnum(TipoProcesso), nullable=False)

    data_assinatura: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    data_vencimento: Mapped[date] = mapped_column(Date, nullable=False)

    status: Mapped[StatusAcordo] = mapped_column(
        PgEnum(StatusAcordo),
        default=StatusAcordo.ATIVO,
        nullable=False,
        index=True,
    )
    observacoes: Mapped[str | None] = mapped_column(Text)

    # Relacionamentos
    processo: Mapped["Processo"] = relationship(  # noqa: F821
        "Processo",
        back_populates="acordos",
    )

    compensacao: Mapped["AcordoCompensacao | None"] = relationship(
        "AcordoCompensacao",
        back_populates="acordo",
        lazy="selectin",
        uselist=False,
        cascade="all, delete-orphan",
    )
    dacao: Mapped["AcordoDacao | None"] = relationship(
        "AcordoDacao",
        back_populates="acordo",
        lazy="selectin",
        uselist=False,
        cascade="all, delete-orphan",
    )
    transacao: Mapped["AcordoTransacao | None"] = relationship(
        "AcordoTransacao",
        back_populates="acordo",
        lazy="selectin",
        uselist=False,
        cascade="all, delete-orphan",
    )

    inscricoes: Mapped[list["AcordoInscricao"]] = relationship(
        "AcordoInscricao",
        back_populates="acordo",
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    creditos: Mapped[list["AcordoCredito"]] = relationship(
        "AcordoCredito",
        back_populates="acordo",
        lazy="selectin",
        cascade="all, delete-orphan",
    )
    parcelas: Mapped[list["Parcela"]] = relationship(  # noqa: F821
        "Parcela",
        back_populates="acordo",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="Parcela.numero",
    )

    @property
    def ativo(self) -> bool:
        return self.status == StatusAcordo.ATIVO

    def __repr__(self) -> str:
        return f"<Acordo(id={self.id}, termo='{self.numero_termo}', status={self.status.value})>"


class AcordoCompensacao(Base):
    """Detalhe de compensação: créditos do contribuinte contra débitos."""

    __tablename__ = "acordos_compensacao"

    acordo_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("acordos.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    valor_total_creditos: Mapped[Decimal] = mapped_column(Dinheiro(), nullable=False)
    valor_total_debitos: Mapped[Decimal] = mapped_column(Dinheiro(), nullable=False)
    valor_liquido: Mapped[Decimal] = mapped_column(
        Dinheiro(),
        nullable=False,
        comment="Créditos menos débitos",
    )
    custas_advocaticias: Mapped[Decimal | None] = mapped_column(Dinheiro())
    honorarios_valor: Mapped[Decimal | None] = mapped_column(Dinheiro())

    acordo: Mapped["Acordo"] = relationship("Acordo", back_populates="compensacao")


class AcordoDacao(Base):
    """Detalhe de dação em pagamento: imóveis oferecidos contra débitos."""

    __tablename__ = "acordos_dacao"

    acordo_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("acordos.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    valor_total_oferecido: Mapped[Decimal] = mapped_column(Dinheiro(), nullable=False)
    valor_total_compensar: Mapped[Decimal] = mapped_column(Dinheiro(), nullable=False)
    valor_liquido: Mapped[Decimal] = mapped_column(
        Dinheiro(),
        nullable=False,
        comment="Oferecido menos a compensar",
    )
    custas_advocaticias: Mapped[Decimal | None] = mapped_column(Dinheiro())
    honorarios_valor: Mapped[Decimal | None] = mapped_column(Dinheiro())

    acordo: Mapped["Acordo"] = relationship("Acordo", back_populates="dacao")


class AcordoTransacao(Base):
    """Detalhe de transação excepcional: proposta com desconto e parcelamento."""

    __tablename__ = "acordos_transacao"

    acordo_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("acordos.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    valor_total_proposto: Mapped[Decimal] = mapped_column(Dinheiro(), nullable=False)
    metodo_pagamento: Mapped[MetodoPagamento] = mapped_column(
        PgEnum(MetodoPagamento),
        nullable=False,
    )
    valor_entrada: Mapped[Decimal | None] = mapped_column(Dinheiro())
    quantidade_parcelas: Mapped[int] = mapped_column(Integer, default=1)
    valor_parcela: Mapped[Decimal | None] = mapped_column(Dinheiro())

    # Custas pagas à parte, fora do cronograma
    custas_advocaticias: Mapped[Decimal | None] = mapped_column(Dinheiro())
    custas_data_vencimento: Mapped[date | None] = mapped_column(Date)
    custas_data_pagamento: Mapped[date | None] = mapped_column(Date)

    honorarios_valor: Mapped[Decimal | None] = mapped_column(Dinheiro())

    acordo: Mapped["Acordo"] = relationship("Acordo", back_populates="transacao")

    @property
    def custas_quitadas(self) -> bool:
        """Sem custas, ou custas com data de pagamento."""
        if not self.custas_advocaticias or self.custas_advocaticias <= 0:
            return True
        return self.custas_data_pagamento is not None


class AcordoInscricao(Base):
    """Inscrição (débito ou bem) vinculada ao acordo."""

    __tablename__ = "acordos_inscricao"

    acordo_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("acordos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    numero_inscricao: Mapped[str] = mapped_column(String(50), nullable=False)
    tipo_inscricao: Mapped[TipoInscricao] = mapped_column(PgEnum(TipoInscricao), nullable=False)
    finalidade: Mapped[FinalidadeInscricao] = mapped_column(
        PgEnum(FinalidadeInscricao),
        nullable=False,
    )
    valor_total: Mapped[Decimal] = mapped_column(Dinheiro(), nullable=False)
    descricao: Mapped[str | None] = mapped_column(Text)
    data_vencimento: Mapped[date | None] = mapped_column(Date)

    acordo: Mapped["Acordo"] = relationship("Acordo", back_populates="inscricoes")
    debitos: Mapped[list["AcordoDebito"]] = relationship(
        "AcordoDebito",
        back_populates="inscricao",
        lazy="selectin",
        cascade="all, delete-orphan",
    )


class AcordoDebito(Base):
    """Lançamento de débito dentro de uma inscrição."""

    __tablename__ = "acordos_debito"

    inscricao_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("acordos_inscricao.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    descricao: Mapped[str] = mapped_column(String(255), nullable=False)
    valor_lancado: Mapped[Decimal] = mapped_column(Dinheiro(), nullable=False)
    data_vencimento: Mapped[date | None] = mapped_column(Date)

    inscricao: Mapped["AcordoInscricao"] = relationship(
        "AcordoInscricao",
        back_populates="debitos",
    )


class AcordoCredito(Base):
    """Crédito ofertado (precatório, crédito tributário, imóvel em dação...)."""

    __tablename__ = "acordos_credito"

    acordo_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("acordos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tipo_credito: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="PRECATORIO, CREDITO_TRIBUTARIO, ALVARA_JUDICIAL, DACAO_IMOVEL...",
    )
    numero_credito: Mapped[str] = mapped_column(String(50), nullable=False)
    valor: Mapped[Decimal] = mapped_column(Dinheiro(), nullable=False)
    descricao: Mapped[str | None] = mapped_column(Text)
    data_vencimento: Mapped[date | None] = mapped_column(Date)

    acordo: Mapped["Acordo"] = relationship("Acordo", back_populates="creditos")
