import os
from dataclasses import dataclass, field
from datetime import timezone, tzinfo
from typing import FrozenSet, Mapping, Optional
from urllib.parse import urlparse
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .constants import (
    AUTH_MODE_SIGNATURE,
    AUTH_MODE_TOKEN,
    DEFAULT_APP_PORT,
    DEFAULT_DISPATCH_TIMEOUT_SECONDS,
    DEFAULT_TIMEZONE,
    REPLAY_WINDOW_SECONDS,
)
from .errors import ConfigError
from .parsing import SCHEMA_ERROR
from .transform import LAYOUTS, FieldLayout


@dataclass
class ProxyConfig:
    """
    Configuração do proxy, montada uma única vez no startup e passada para create_app.
    Nada aqui é relido durante uma requisição.
    """

    discord_webhook_url: str
    layout: FieldLayout
    auth_mode: str
    auth_token: Optional[str] = None
    client_secret: Optional[str] = None
    replay_window_seconds: int = REPLAY_WINDOW_SECONDS
    display_zone: tzinfo = timezone.utc
    dispatch_timeout_seconds: float = DEFAULT_DISPATCH_TIMEOUT_SECONDS
    respond_with_payload: bool = True
    allowed_hook_resources: FrozenSet[str] = field(default_factory=frozenset)
    app_port: int = DEFAULT_APP_PORT
    debug_mode: bool = False
    log_level: str = "INFO"


def _flag(environ, name, default):
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() == "true"


def _number(environ, name, default, cast=int):
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = cast(raw.strip())
    except ValueError:
        raise ConfigError(f"`{name}` deve ser numérico: {raw!r}")
    if value <= 0:
        raise ConfigError(f"`{name}` deve ser maior que zero: {raw!r}")
    return value


def validate_webhook_url(url: Optional[str]) -> str:
    if not url:
        raise ConfigError("`DISCORD_WEBHOOK_URL` não definido no ambiente")
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"`DISCORD_WEBHOOK_URL` não é uma URL válida: {url!r}")
    return url.strip()


def load_zone(name: str) -> tzinfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ConfigError(f"`DISPLAY_TIMEZONE` desconhecido: {name!r}") from exc


def load_config(environ: Mapping[str, str] = os.environ) -> ProxyConfig:
    """
    Lê e valida as variáveis de ambiente.

    Raises:
        ConfigError: variável obrigatória ausente ou valor inválido.
    """
    webhook_url = validate_webhook_url(environ.get("DISCORD_WEBHOOK_URL"))

    variant = (environ.get("ALERT_VARIANT") or "issue").strip().lower()
    layout = LAYOUTS.get(variant)
    if layout is None:
        raise ConfigError(f"`ALERT_VARIANT` desconhecido: {variant!r} (opções: {', '.join(sorted(LAYOUTS))})")

    default_mode = AUTH_MODE_SIGNATURE if layout.schema == SCHEMA_ERROR else AUTH_MODE_TOKEN
    auth_mode = (environ.get("AUTH_MODE") or default_mode).strip().lower()
    auth_token = environ.get("AUTH_TOKEN") or None
    client_secret = environ.get("CLIENT_SECRET") or None
    if auth_mode == AUTH_MODE_TOKEN:
        if not auth_token:
            raise ConfigError("`AUTH_TOKEN` não definido no ambiente")
    elif auth_mode == AUTH_MODE_SIGNATURE:
        if not client_secret:
            raise ConfigError("`CLIENT_SECRET` não definido no ambiente")
    else:
        raise ConfigError(f"`AUTH_MODE` desconhecido: {auth_mode!r} (opções: token, signature)")

    if layout.localize:
        display_zone = load_zone((environ.get("DISPLAY_TIMEZONE") or DEFAULT_TIMEZONE).strip())
    else:
        display_zone = timezone.utc

    resources_env = (environ.get("ALLOWED_HOOK_RESOURCES") or "").strip()
    allowed_resources = frozenset(s.strip() for s in resources_env.split(",") if s.strip())

    debug_mode = _flag(environ, "DEBUG_MODE", False)
    log_level = "DEBUG" if debug_mode else (environ.get("LOG_LEVEL") or "INFO").strip().upper()

    return ProxyConfig(
        discord_webhook_url=webhook_url,
        layout=layout,
        auth_mode=auth_mode,
        auth_token=auth_token,
        client_secret=client_secret,
        replay_window_seconds=_number(environ, "REPLAY_WINDOW_SECONDS", REPLAY_WINDOW_SECONDS),
        display_zone=display_zone,
        dispatch_timeout_seconds=_number(environ, "DISPATCH_TIMEOUT_SECONDS", DEFAULT_DISPATCH_TIMEOUT_SECONDS, cast=float),
        respond_with_payload=_flag(environ, "RESPOND_WITH_PAYLOAD", layout.echo_payload),
        allowed_hook_resources=allowed_resources,
        app_port=_number(environ, "APP_PORT", DEFAULT_APP_PORT),
        debug_mode=debug_mode,
        log_level=log_level,
    )
