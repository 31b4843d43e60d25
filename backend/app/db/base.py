"""
Base class para todos os modelos SQLAlchemy.

Define campos comuns e configurações padrão.
"""

import uuid
from datetime import datetime, timezone
from typing import Type

from sqlalchemy import DateTime, Enum as SQLEnum, Numeric, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column


def PgEnum(enum_class: Type) -> SQLEnum:
    """
    Cria um SQLAlchemy Enum que persiste os valores (values) em vez dos nomes.

    Exemplo:
        class StatusAcordo(str, enum.Enum):
            ATIVO = "ativo"  # Nome: ATIVO, Valor: ativo

        # Sem PgEnum: o banco recebe "ATIVO"
        # Com PgEnum: o banco recebe "ativo"
    """
    return SQLEnum(enum_class, values_callable=lambda x: [e.value for e in x])


def Dinheiro() -> Numeric:
    """Coluna monetária com duas casas decimais."""
    return Numeric(15, 2)


class Base(DeclarativeBase):
    """
    Classe base para todos os modelos.

    Inclui campos padrão: id, created_at, updated_at
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )

    @declared_attr.directive
    @classmethod
    def __tablename__(cls) -> str:
        """Gera nome da tabela automaticamente a partir do nome da classe."""
        # CamelCase -> snake_case
        name = cls.__name__
        return "".join(
            ["_" + c.lower() if c.isupper() else c for c in name]
        ).lstrip("_")
