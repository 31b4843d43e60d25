"""
Workers para processamento em background.

Módulos:
- celery_app: Configuração do Celery e beat schedule
- parcela_tasks: Atualização diária de parcelas vencidas
"""

from app.workers.celery_app import celery_app

__all__ = ["celery_app"]
