"""
Services Layer.

Camada de lógica de negócio da Conciliação Fiscal.
"""

from app.services.acordo_service import AcordoService
from app.services.pagamento_service import PagamentoService
from app.services.processo_service import ProcessoService
from app.services.relatorio_service import RelatorioService

__all__ = [
    "AcordoService",
    "PagamentoService",
    "ProcessoService",
    "RelatorioService",
]
