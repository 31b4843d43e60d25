"""
Exceções customizadas da aplicação.

Define hierarquia de exceções para tratamento consistente de erros.
"""

from datetime import date
from typing import Any
from uuid import UUID


class ConciliacaoException(Exception):
    """Exceção base da Conciliação Fiscal."""

    def __init__(
        self,
        message: str,
        code: str = "CONCILIACAO_ERROR",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# === Exceções de Autenticação ===

class AuthenticationError(ConciliacaoException):
    """Erro de autenticação."""

    def __init__(self, message: str = "Credenciais inválidas"):
        super().__init__(message, code="AUTH_ERROR")


class InvalidTokenError(AuthenticationError):
    """Token JWT inválido."""

    def __init__(self):
        super().__init__("Token inválido")
        self.code = "INVALID_TOKEN"


# === Exceções de Autorização ===

class AuthorizationError(ConciliacaoException):
    """Erro de autorização/permissão."""

    def __init__(self, message: str = "Acesso negado"):
        super().__init__(message, code="AUTHORIZATION_ERROR")


class InsufficientPermissionsError(AuthorizationError):
    """Usuário não tem permissão para a ação."""

    def __init__(self, action: str):
        super().__init__(f"Permissão insuficiente para: {action}")
        self.code = "INSUFFICIENT_PERMISSIONS"


# === Exceções de Recursos ===

class ResourceNotFoundError(ConciliacaoException):
    """Recurso não encontrado."""

    def __init__(
        self,
        resource_type: str,
        resource_id: UUID | str | None = None,
    ):
        message = f"{resource_type} não encontrado"
        if resource_id:
            message = f"{resource_type} com ID {resource_id} não encontrado"
        super().__init__(message, code="NOT_FOUND")
        self.resource_type = resource_type
        self.resource_id = resource_id


class ResourceAlreadyExistsError(ConciliacaoException):
    """Recurso já existe (conflito)."""

    def __init__(
        self,
        resource_type: str,
        field: str,
        value: str,
    ):
        message = f"{resource_type} com {field}='{value}' já existe"
        super().__init__(message, code="ALREADY_EXISTS")
        self.resource_type = resource_type
        self.field = field
        self.value = value


# === Exceções de Validação ===

class ValidationError(ConciliacaoException):
    """Erro de validação de dados."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field
        self.errors = errors or []


class InvalidInstallmentCountError(ValidationError):
    """Quantidade de parcelas menor que 1."""

    def __init__(self, quantidade: int):
        super().__init__(
            f"Quantidade de parcelas inválida: {quantidade}",
            field="quantidade_parcelas",
        )
        self.code = "INVALID_INSTALLMENT_COUNT"


class InvalidAmountError(ValidationError):
    """Valor monetário fora do intervalo permitido."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message, field=field)
        self.code = "INVALID_AMOUNT"


class InvalidDateRangeError(ValidationError):
    """Período com data inicial posterior à final."""

    def __init__(self, inicio: date, fim: date):
        super().__init__(
            f"Período inválido: início {inicio.isoformat()} posterior ao fim {fim.isoformat()}",
            field="inicio",
        )
        self.code = "INVALID_DATE_RANGE"


# === Exceções de Negócio ===

class BusinessRuleError(ConciliacaoException):
    """Violação de regra de negócio."""

    def __init__(self, message: str, rule: str | None = None):
        super().__init__(message, code="BUSINESS_RULE_VIOLATION")
        self.rule = rule


class UnsupportedCaseTypeError(BusinessRuleError):
    """Tipo de processo desconhecido para cálculo de acordo."""

    def __init__(self, tipo: Any):
        super().__init__(
            f"Tipo de processo não suportado: {tipo}",
            rule="UNSUPPORTED_CASE_TYPE",
        )
        self.code = "UNSUPPORTED_CASE_TYPE"


class AgreementDetailNotConfiguredError(BusinessRuleError):
    """Acordo sem o registro específico do seu tipo."""

    def __init__(self, tipo: Any, acordo_id: UUID | None = None):
        alvo = f"Acordo {acordo_id}" if acordo_id else "Acordo"
        super().__init__(
            f"{alvo} sem dados de {tipo} configurados",
            rule="AGREEMENT_DETAIL_NOT_CONFIGURED",
        )
        self.code = "AGREEMENT_DETAIL_NOT_CONFIGURED"


class DuplicateActiveAgreementError(BusinessRuleError):
    """Processo já possui acordo ativo."""

    def __init__(self, processo_id: UUID):
        super().__init__(
            f"Processo {processo_id} já possui um acordo ativo",
            rule="DUPLICATE_ACTIVE_AGREEMENT",
        )
        self.code = "DUPLICATE_ACTIVE_AGREEMENT"


class ProcessoNaoElegivelError(BusinessRuleError):
    """Processo sem julgamento favorável não pode ter acordo."""

    def __init__(self, message: str):
        super().__init__(message, rule="PROCESSO_NAO_ELEGIVEL")
        self.code = "PROCESSO_NAO_ELEGIVEL"


class TransicaoStatusInvalidaError(BusinessRuleError):
    """Mudança de status não permitida no fluxo do processo."""

    def __init__(self, atual: str, novo: str):
        super().__init__(
            f"Transição de status não permitida: {atual} -> {novo}",
            rule="TRANSICAO_STATUS_INVALIDA",
        )
        self.code = "TRANSICAO_STATUS_INVALIDA"
