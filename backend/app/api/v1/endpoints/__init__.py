"""
Endpoints da API v1.

Módulos disponíveis:
- acordos: Acordos e cronograma de parcelas
- health: Health check
- parcelas: Parcelas e pagamentos
- processos: Processos, decisões e histórico
- relatorios: Dashboard financeiro
"""
