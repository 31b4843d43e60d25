"""
Modelos de Parcela e PagamentoParcela.
"""

import enum
import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, Dinheiro, PgEnum


class TipoParcela(str, enum.Enum):
    """Tipo da parcela no cronograma."""

    ENTRADA = "entrada"  # Sempre número 0
    PARCELA_ACORDO = "parcela_acordo"
    PARCELA_HONORARIOS = "parcela_honorarios"


class StatusParcela(str, enum.Enum):
    """Status da parcela."""

    PENDENTE = "pendente"
    PAGO = "pago"
    ATRASADO = "atrasado"
    CANCELADO = "cancelado"


class FormaPagamento(str, enum.Enum):
    """Formas de pagamento aceitas."""

    PIX = "pix"
    TED = "ted"
    DINHEIRO = "dinheiro"
    BOLETO = "boleto"
    CARTAO = "cartao"
    DACAO = "dacao"
    COMPENSACAO = "compensacao"


class Parcela(Base):
    """Parcela do cronograma de um acordo."""

    __tablename__ = "parcelas"
    __table_args__ = (UniqueConstraint("acordo_id", "tipo_parcela", "numero"),)

    acordo_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("acordos.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    tipo_parcela: Mapped[TipoParcela] = mapped_column(
        PgEnum(TipoParcela),
        default=TipoParcela.PARCELA_ACORDO,
        nullable=False,
    )
    numero: Mapped[int] = mapped_column(Integer, nullable=False)
    valor: Mapped[Decimal] = mapped_column(Dinheiro(), nullable=False)
    data_vencimento: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    data_pagamento: Mapped[date | None] = mapped_column(Date, index=True)
    status: Mapped[StatusParcela] = mapped_column(
        PgEnum(StatusParcela),
        default=StatusParcela.PENDENTE,
        nullable=False,
        index=True,
    )

    acordo: Mapped["Acordo"] = relationship(  # noqa: F821
        "Acordo",
        back_populates="parcelas",
    )
    pagamentos: Mapped[list["PagamentoParcela"]] = relationship(
        "PagamentoParcela",
        back_populates="parcela",
        lazy="selectin",
        order_by="PagamentoParcela.data_pagamento",
    )

    @property
    def honorarios(self) -> bool:
        return self.tipo_parcela == TipoParcela.PARCELA_HONORARIOS

    def __repr__(self) -> str:
        return f"<Parcela(id={self.id}, tipo={self.tipo_parcela.value}, numero={self.numero}, valor={self.valor})>"


class PagamentoParcela(Base):
    """Pagamento (total ou parcial) de uma parcela."""

    __tablename__ = "pagamentos_parcela"

    parcela_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("parcelas.id"),
        nullable=False,
        index=True,
    )
    valor_pago: Mapped[Decimal] = mapped_column(Dinheiro(), nullable=False)
    data_pagamento: Mapped[date] = mapped_column(Date, nullable=False)
    forma_pagamento: Mapped[FormaPagamento] = mapped_column(
        PgEnum(FormaPagamento),
        nullable=False,
    )
    numero_comprovante: Mapped[str | None] = mapped_column(String(100))
    observacoes: Mapped[str | None] = mapped_column(Text)

    registrado_por_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("usuarios.id"))

    parcela: Mapped["Parcela"] = relationship("Parcela", back_populates="pagamentos")
