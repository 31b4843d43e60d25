"""Repositories - Data Access Layer."""

from app.repositories.acordo_repository import (
    AcordoRepository,
    ParcelaRepository,
)
from app.repositories.base import BaseRepository
from app.repositories.julgamento_repository import (
    PautaRepository,
    SessaoJulgamentoRepository,
)
from app.repositories.processo_repository import (
    HistoricoProcessoRepository,
    ProcessoRepository,
)
from app.repositories.usuario_repository import UsuarioRepository

__all__ = [
    # Base
    "BaseRepository",
    # Entidades
    "UsuarioRepository",
    "ProcessoRepository",
    "HistoricoProcessoRepository",
    "PautaRepository",
    "SessaoJulgamentoRepository",
    "AcordoRepository",
    "ParcelaRepository",
]
