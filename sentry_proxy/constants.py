# Cores (decimal) do embed por nível de severidade do Sentry
LEVEL_COLOURS = {
    "debug": 13620186,
    "info": 2590926,
    "warning": 15828224,
    "error": 16006944,
    "fatal": 13766442,
}
# #FFFFFF (branco) para qualquer nível fora da tabela
DEFAULT_COLOUR = 16777215

DEFAULT_ENVIRONMENT = "unknown"
DEFAULT_TIMEZONE = "Europe/Moscow"

# URL da API: scheme://host/api/0/projects/{org}/{project}/...
PROJECT_URL_SEGMENT = 7

REPLAY_WINDOW_SECONDS = 30
DEFAULT_DISPATCH_TIMEOUT_SECONDS = 10
DEFAULT_APP_PORT = 5001

SIGNATURE_HEADER = "Sentry-Hook-Signature"
TIMESTAMP_HEADER = "Sentry-Hook-Timestamp"
RESOURCE_HEADER = "Sentry-Hook-Resource"
REQUEST_ID_HEADER = "Request-ID"
AUTH_TOKEN_PARAM = "auth_token"

AUTH_MODE_TOKEN = "token"
AUTH_MODE_SIGNATURE = "signature"

SERVICE_NAME = "sentry-discord-proxy"
