import logging

import requests

from .constants import DEFAULT_DISPATCH_TIMEOUT_SECONDS
from .errors import DispatchError

logger = logging.getLogger(__name__)


def send_discord_payload(webhook_url, payload, timeout=DEFAULT_DISPATCH_TIMEOUT_SECONDS):
    """
    Envia o payload (dict já serializável) para o webhook do Discord.

    Raises:
        DispatchError: falha de rede/timeout ou status fora de 2xx.
    """
    try:
        resp = requests.post(webhook_url, json=payload, timeout=timeout)
    except requests.RequestException as exc:
        raise DispatchError(f"falha ao enviar para o Discord: {exc}") from exc

    logger.debug(f"Resposta do Discord: {resp.status_code}")
    if resp.status_code < 200 or resp.status_code >= 300:
        body = (resp.text or '')[:200]
        raise DispatchError(
            f"status inesperado do Discord: {resp.status_code}",
            status_code=resp.status_code,
            body=body,
        )
    return resp
