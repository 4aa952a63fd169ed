import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

from .constants import (
    DEFAULT_COLOUR,
    DEFAULT_ENVIRONMENT,
    DEFAULT_TIMEZONE,
    LEVEL_COLOURS,
    PROJECT_URL_SEGMENT,
)
from .errors import AlertValidationError, ProjectExtractionError
from .models import Embed, Field, NotificationPayload, SourceAlert
from .parsing import SCHEMA_ERROR, SCHEMA_ISSUE

logger = logging.getLogger(__name__)

NANOS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True)
class FieldSpec:
    name: str
    inline: bool = False


@dataclass(frozen=True)
class FieldLayout:
    """
    Formato do embed para uma integração.

    schema: qual parser de webhook usar
    fields: campos na ordem em que aparecem no embed
    filter_blank: remove campos com valor vazio
    localize: converte o timestamp para o fuso de exibição (senão fica em UTC)
    echo_payload: responde 200 com o payload enviado (senão 204 sem corpo)
    """

    name: str
    schema: str
    fields: Tuple[FieldSpec, ...]
    filter_blank: bool = False
    localize: bool = False
    echo_payload: bool = True


LAYOUTS: Dict[str, FieldLayout] = {
    "issue": FieldLayout(
        name="issue",
        schema=SCHEMA_ISSUE,
        fields=(
            FieldSpec("Culprit"),
            FieldSpec("Project", inline=True),
            FieldSpec("Environment", inline=True),
            FieldSpec("Timestamp"),
        ),
    ),
    "issue-culprit-last": FieldLayout(
        name="issue-culprit-last",
        schema=SCHEMA_ISSUE,
        fields=(
            FieldSpec("Project", inline=True),
            FieldSpec("Environment", inline=True),
            FieldSpec("Timestamp"),
            FieldSpec("Culprit"),
        ),
    ),
    "error": FieldLayout(
        name="error",
        schema=SCHEMA_ERROR,
        fields=(
            FieldSpec("Project", inline=True),
            FieldSpec("Release", inline=True),
            FieldSpec("Environment", inline=True),
            FieldSpec("Level", inline=True),
            FieldSpec("Culprit"),
            FieldSpec("Timestamp"),
        ),
        filter_blank=True,
        localize=True,
        echo_payload=False,
    ),
}


def level_colour(level: Optional[str]) -> int:
    if not level:
        return DEFAULT_COLOUR
    return LEVEL_COLOURS.get(str(level).lower(), DEFAULT_COLOUR)


def split_timestamp(timestamp: float) -> Tuple[int, int]:
    """
    Separa o epoch em (segundos inteiros, nanossegundos).
    A fração é multiplicada por 1e9 e truncada: 1610000000.5 -> (1610000000, 500000000).
    """
    try:
        fraction, whole = math.modf(timestamp)
        seconds = int(whole)
        nanos = int(fraction * 1e9)
    except (TypeError, ValueError, OverflowError) as exc:
        raise AlertValidationError(f"timestamp inválido: {timestamp!r}") from exc
    if nanos < 0:
        seconds -= 1
        nanos += NANOS_PER_SECOND
    return seconds, nanos


def format_timestamp(timestamp: float, tz: Optional[tzinfo] = None) -> str:
    """
    Ex.: '2021-01-07 09:13:20.5 +0300 MSK'.
    A fração de segundo sai sem zeros à direita e é omitida quando zero.
    """
    seconds, nanos = split_timestamp(timestamp)
    try:
        moment = datetime.fromtimestamp(seconds, tz=timezone.utc).astimezone(tz or timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise AlertValidationError(f"timestamp fora do intervalo: {timestamp!r}") from exc

    text = moment.strftime('%Y-%m-%d %H:%M:%S')
    if nanos:
        text += '.' + f"{nanos:09d}".rstrip('0')
    return f"{text} {moment.strftime('%z %Z')}"


def resolve_title(alert: SourceAlert) -> str:
    for candidate in (alert.title, alert.event_title, alert.message):
        title = (candidate or '').strip()
        if title:
            return title
    return ''


def resolve_environment(alert: SourceAlert) -> str:
    return (alert.environment or '').strip() or DEFAULT_ENVIRONMENT


def extract_project(url: str) -> str:
    """
    Extrai o slug do projeto da URL da API do Sentry.

    Assume o formato fixo scheme://host/api/0/projects/{org}/{project}/...,
    ou seja, o 8º segmento (índice 7) após split em '/'.

    Exemplos:
        'https://sentry.io/api/0/projects/my-org/my-project/events/123/' -> 'my-project'
        'https://sentry.io/issues/1/' -> ProjectExtractionError
    """
    segments = (url or '').split('/')
    if len(segments) <= PROJECT_URL_SEGMENT:
        raise ProjectExtractionError(
            f"URL sem segmentos suficientes para extrair o projeto "
            f"({len(segments)} < {PROJECT_URL_SEGMENT + 1}): {url!r}"
        )
    return segments[PROJECT_URL_SEGMENT]


def resolve_project(alert: SourceAlert) -> str:
    if alert.project:
        return alert.project
    if not alert.api_url:
        return ''
    try:
        return extract_project(alert.api_url)
    except ProjectExtractionError as exc:
        logger.warning(f"Projeto não identificado para o evento '{alert.event_id or alert.id}': {exc}")
        return ''


def default_zone(layout: FieldLayout) -> tzinfo:
    return ZoneInfo(DEFAULT_TIMEZONE) if layout.localize else timezone.utc


def _field_value(name: str, alert: SourceAlert, tz: tzinfo) -> str:
    if name == "Project":
        return resolve_project(alert)
    if name == "Release":
        return alert.release
    if name == "Environment":
        return resolve_environment(alert)
    if name == "Level":
        return alert.level
    if name == "Culprit":
        return alert.culprit
    if name == "Timestamp":
        return format_timestamp(alert.timestamp, tz)
    raise ValueError(f"campo desconhecido no layout: {name}")


def build_fields(alert: SourceAlert, layout: FieldLayout, tz: tzinfo) -> List[Field]:
    fields = [
        Field(name=item.name, value=_field_value(item.name, alert, tz), inline=item.inline)
        for item in layout.fields
    ]
    if layout.filter_blank:
        fields = [f for f in fields if f.value != '']
    return fields


def transform(alert: SourceAlert, layout: FieldLayout, tz: Optional[tzinfo] = None) -> NotificationPayload:
    """
    Converte o alerta do Sentry no payload do webhook do Discord (um único embed).
    Função pura: o resultado depende só do alerta, do layout e do fuso.
    """
    zone = tz if tz is not None else default_zone(layout)
    embed = Embed(
        title=resolve_title(alert),
        url=alert.web_url,
        color=level_colour(alert.level),
        fields=build_fields(alert, layout, zone),
    )
    return NotificationPayload(embeds=[embed])
