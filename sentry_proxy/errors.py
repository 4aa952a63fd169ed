class ProxyError(Exception):
    """Base de todos os erros do proxy."""


class ConfigError(ProxyError):
    """Configuração ausente ou inválida. Fatal no startup."""


class AlertValidationError(ProxyError):
    """Payload de entrada malformado (HTTP 400)."""


class ProjectExtractionError(AlertValidationError):
    """URL da API sem segmentos suficientes para extrair o projeto."""


class AuthenticationError(ProxyError):
    """Token/assinatura inválidos ou timestamp vencido (HTTP 401)."""


class DispatchError(ProxyError):
    """Falha ao entregar o payload ao Discord (HTTP 502)."""

    def __init__(self, message, status_code=None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
