import logging
from typing import Any, Dict

from .errors import AlertValidationError
from .models import SourceAlert

logger = logging.getLogger(__name__)

SCHEMA_ISSUE = "issue"
SCHEMA_ERROR = "error"


def _text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return ""
    return str(value)


def _section(data, key) -> Dict[str, Any]:
    value = data.get(key) if isinstance(data, dict) else None
    return value if isinstance(value, dict) else {}


def _timestamp(value) -> float:
    if value is None:
        return 0.0
    # bool é subclasse de int, mas não é um timestamp
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise AlertValidationError(f"timestamp inválido: {value!r}")
    try:
        return float(value)
    except OverflowError:
        raise AlertValidationError("timestamp fora do intervalo representável")


def parse_issue_alert(data: Dict[str, Any]) -> SourceAlert:
    """
    Webhook legado de issue (plugin de webhooks do Sentry).

    Campos no topo: id, title, message, url, culprit, level, project.
    Campos do evento: event.event_id, event.title, event.environment, event.timestamp.
    """
    event = _section(data, 'event')
    return SourceAlert(
        id=_text(data.get('id')),
        event_id=_text(event.get('event_id')),
        title=_text(data.get('title')),
        event_title=_text(event.get('title')),
        message=_text(data.get('message')),
        culprit=_text(data.get('culprit')),
        level=_text(data.get('level')),
        project=_text(data.get('project')),
        environment=_text(event.get('environment')),
        timestamp=_timestamp(event.get('timestamp')),
        web_url=_text(data.get('url')),
    )


def parse_error_alert(data: Dict[str, Any]) -> SourceAlert:
    """
    Recurso 'error' da integração do Sentry: tudo vem em data.error.
    'web_url' é o link para humanos; 'url' é o endpoint da API (usado para extrair o projeto).
    """
    error = _section(_section(data, 'data'), 'error')
    return SourceAlert(
        event_id=_text(error.get('event_id')),
        title=_text(error.get('title')),
        message=_text(error.get('message')),
        culprit=_text(error.get('culprit')),
        level=_text(error.get('level')),
        environment=_text(error.get('environment')),
        release=_text(error.get('release')),
        timestamp=_timestamp(error.get('timestamp')),
        web_url=_text(error.get('web_url')),
        api_url=_text(error.get('url')),
    )


PARSERS = {
    SCHEMA_ISSUE: parse_issue_alert,
    SCHEMA_ERROR: parse_error_alert,
}


def parse_source_alert(data, schema: str) -> SourceAlert:
    if not isinstance(data, dict):
        raise AlertValidationError("corpo JSON deve ser um objeto")
    parser = PARSERS.get(schema)
    if parser is None:
        raise AlertValidationError(f"schema desconhecido: {schema}")
    alert = parser(data)
    logger.debug(f"Alerta lido (schema={schema}): id={alert.id or alert.event_id} level={alert.level}")
    return alert
