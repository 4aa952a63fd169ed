import binascii
import hashlib
import hmac
import re
import time
from typing import Callable, Mapping, Optional

from .constants import (
    AUTH_MODE_SIGNATURE,
    AUTH_MODE_TOKEN,
    AUTH_TOKEN_PARAM,
    REPLAY_WINDOW_SECONDS,
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
)
from .errors import AuthenticationError, ConfigError

UNIX_SECONDS = re.compile(r"-?[0-9]+")


class Authenticator:
    """Valida se a requisição veio realmente do Sentry."""

    mode = None

    def authenticate(self, body: bytes, headers: Mapping[str, str], args: Mapping[str, str]) -> None:
        """Levanta AuthenticationError se a requisição não for confiável."""
        raise NotImplementedError


class TokenAuthenticator(Authenticator):
    """Token compartilhado passado na query string (?auth_token=...)."""

    mode = AUTH_MODE_TOKEN

    def __init__(self, token: str):
        if not token:
            raise ConfigError("token de autenticação vazio")
        self.token = token

    def authenticate(self, body, headers, args):
        received = args.get(AUTH_TOKEN_PARAM) or ''
        if not hmac.compare_digest(received.encode('utf-8'), self.token.encode('utf-8')):
            raise AuthenticationError("auth token inválido")


class SignatureAuthenticator(Authenticator):
    """
    HMAC-SHA256 do corpo bruto (header Sentry-Hook-Signature, em hex) +
    janela de replay sobre Sentry-Hook-Timestamp.

    Não há registro de nonces: uma assinatura capturada ainda é aceita
    se reenviada dentro da janela.
    """

    mode = AUTH_MODE_SIGNATURE

    def __init__(self, secret: str, replay_window: int = REPLAY_WINDOW_SECONDS,
                 clock: Callable[[], float] = time.time):
        if not secret:
            raise ConfigError("client secret vazio")
        self.secret = secret.encode('utf-8')
        self.replay_window = replay_window
        self.clock = clock

    def verify_signature(self, body: bytes, signature_hex: Optional[str]) -> bool:
        try:
            received = binascii.unhexlify((signature_hex or '').strip())
        except (binascii.Error, ValueError):
            received = b''
        calculated = hmac.new(self.secret, body, hashlib.sha256).digest()
        return hmac.compare_digest(calculated, received)

    def verify_timestamp(self, value: Optional[str]) -> int:
        raw = (value or '').strip()
        # só dígitos ASCII com sinal negativo opcional: sem "+", "_" ou dígitos unicode
        if not UNIX_SECONDS.fullmatch(raw):
            raise AuthenticationError(f"timestamp inválido: {value!r}")
        supplied = int(raw)
        age = int(self.clock()) - supplied
        if age > self.replay_window:
            raise AuthenticationError(f"timestamp expirado há {age}s (janela de {self.replay_window}s)")
        return supplied

    def authenticate(self, body, headers, args):
        if not self.verify_signature(body, headers.get(SIGNATURE_HEADER)):
            raise AuthenticationError("assinatura inválida")
        self.verify_timestamp(headers.get(TIMESTAMP_HEADER))


def build_authenticator(config) -> Authenticator:
    if config.auth_mode == AUTH_MODE_TOKEN:
        return TokenAuthenticator(config.auth_token)
    if config.auth_mode == AUTH_MODE_SIGNATURE:
        return SignatureAuthenticator(config.client_secret, replay_window=config.replay_window_seconds)
    raise ConfigError(f"AUTH_MODE desconhecido: {config.auth_mode}")
