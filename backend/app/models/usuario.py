"""
Modelo do Usuário do sistema.
"""

import enum

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, PgEnum


class UserRole(str, enum.Enum):
    """Papéis de usuário no sistema."""

    ADMIN = "admin"  # Administração completa, inclusive exclusões
    FUNCIONARIO = "funcionario"  # Cadastra e movimenta processos e acordos
    VISUALIZADOR = "visualizador"  # Apenas consulta


class Usuario(Base):
    """Usuário da Conciliação Fiscal."""

    __tablename__ = "usuarios"

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    nome: Mapped[str] = mapped_column(String(255), nullable=False)

    # Controle de acesso
    role: Mapped[UserRole] = mapped_column(
        PgEnum(UserRole),
        default=UserRole.VISUALIZADOR,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    def __repr__(self) -> str:
        return f"<Usuario(id={self.id}, email='{self.email}', role={self.role.value})>"
