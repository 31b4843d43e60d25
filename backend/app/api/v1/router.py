"""
Router principal da API v1.

Agrega todas as rotas organizadas por domínio.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    acordos,
    health,
    parcelas,
    processos,
    relatorios,
)

api_router = APIRouter()

# Health check
api_router.include_router(health.router, prefix="/health", tags=["Health"])

# Processos, decisões e histórico
api_router.include_router(processos.router)

# Acordos e parcelas
api_router.include_router(acordos.router)
api_router.include_router(parcelas.router)

# Relatórios
api_router.include_router(relatorios.router)
