"""
Configuração do Celery.

Worker e beat para as rotinas periódicas da conciliação.
"""

from celery import Celery
from celery.schedules import crontab

from app.core.config import settings

celery_app = Celery(
    "conciliacao-fiscal",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=[
        "app.workers.parcela_tasks",
    ],
)

# Configurações do Celery
celery_app.conf.update(
    # Timezone
    timezone=settings.TIMEZONE,
    enable_utc=True,

    # Serialização
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    # Tarefas
    task_track_started=True,
    task_time_limit=30 * 60,  # 30 minutos max
    task_soft_time_limit=25 * 60,

    # Retries
    task_acks_late=True,
    task_reject_on_worker_lost=True,

    # Concorrência
    worker_prefetch_multiplier=1,

    # Resultados
    result_expires=60 * 60 * 24,  # 24 horas

    # Beat Schedule (tarefas agendadas)
    beat_schedule={
        # Marca parcelas atrasadas e acordos vencidos logo após a meia-noite
        "atualizar-parcelas-vencidas-diario": {
            "task": "app.workers.parcela_tasks.atualizar_parcelas_vencidas_task",
            "schedule": crontab(hour=0, minute=30),
        },
    },
)

# Para execução local: celery -A app.workers.celery_app worker --loglevel=info
# Para beat: celery -A app.workers.celery_app beat --loglevel=info
