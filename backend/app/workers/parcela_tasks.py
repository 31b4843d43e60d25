"""
Tasks de parcelas.

Rotina diária que marca parcelas atrasadas e acordos vencidos.
"""

import asyncio
from datetime import date

import structlog
from celery import shared_task

from app.db.session import async_session_maker
from app.services.pagamento_service import PagamentoService

logger = structlog.get_logger()


async def atualizar_parcelas_vencidas(hoje: date | None = None) -> dict[str, int]:
    """Executa a atualização numa sessão própria."""
    async with async_session_maker() as session:
        return await PagamentoService(session).atualizar_status_vencidas(hoje)


@shared_task(bind=True, max_retries=3)
def atualizar_parcelas_vencidas_task(self, referencia: str | None = None):
    """
    Marca como ATRASADO as parcelas pendentes vencidas e o acordo como VENCIDO.

    Executado diariamente pelo beat schedule. `referencia` (AAAA-MM-DD)
    permite reprocessar uma data específica.
    """
    hoje = date.fromisoformat(referencia) if referencia else date.today()
    try:
        return asyncio.run(atualizar_parcelas_vencidas(hoje))
    except Exception as exc:
        logger.error(
            "Erro ao atualizar parcelas vencidas",
            referencia=hoje.isoformat(),
            error=str(exc),
        )
        raise self.retry(exc=exc, countdown=60 * 5)
