"""
Modelos SQLAlchemy da Conciliação Fiscal.

Importa todos os modelos para garantir que são registrados no metadata.
"""

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
    TipoInscricao,
)
from app.models.julgamento import (
    Decisao,
    Pauta,
    PautaProcesso,
    SessaoJulgamento,
    TipoDecisao,
    TipoResultado,
)
from app.models.parcela import (
    FormaPagamento,
    PagamentoParcela,
    Parcela,
    StatusParcela,
    TipoParcela,
)
from app.models.processo import (
    HistoricoProcesso,
    Processo,
    StatusProcesso,
    TipoProcesso,
    pode_transicionar,
)
from app.models.usuario import Usuario, UserRole

__all__ = [
    # Usuário
    "Usuario",
    "UserRole",
    # Processo
    "Processo",
    "HistoricoProcesso",
    "TipoProcesso",
    "StatusProcesso",
    "pode_transicionar",
    # Julgamento
    "Pauta",
    "PautaProcesso",
    "SessaoJulgamento",
    "Decisao",
    "TipoResultado",
    "TipoDecisao",
    # Acordo
    "Acordo",
    "AcordoCompensacao",
    "AcordoDacao",
    "AcordoTransacao",
    "AcordoInscricao",
    "AcordoDebito",
    "AcordoCredito",
    "StatusAcordo",
    "MetodoPagamento",
    "TipoInscricao",
    "FinalidadeInscricao",
    # Parcelas
    "Parcela",
    "PagamentoParcela",
    "TipoParcela",
    "StatusParcela",
    "FormaPagamento",
]
