import json
import logging

from flask import Flask, jsonify, request

from .auth import build_authenticator
from .config import load_config
from .constants import REQUEST_ID_HEADER, RESOURCE_HEADER, SERVICE_NAME
from .errors import AlertValidationError, AuthenticationError, DispatchError
from .parsing import parse_source_alert
from .services import send_discord_payload
from .transform import transform

logger = logging.getLogger(__name__)

WEBHOOK_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE']


def create_app(config=None):
    """
    Cria o Flask app. Sem config explícita, lê do ambiente (ConfigError aborta o startup).
    """
    if config is None:
        config = load_config()

    app = Flask(__name__)
    authenticator = build_authenticator(config)
    layout = config.layout

    logger.info(
        f"Proxy configurado: layout={layout.name} auth={authenticator.mode} "
        f"timeout={config.dispatch_timeout_seconds}s"
    )

    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok', 'service': SERVICE_NAME}, 200

    def _audit_rejection(reason):
        logger.warning(
            f"Requisição rejeitada ({reason}): remote={request.remote_addr} "
            f"user_agent={request.headers.get('User-Agent', '')!r} "
            f"request_id={request.headers.get(REQUEST_ID_HEADER, '')!r} "
            f"resource={request.headers.get(RESOURCE_HEADER, '')!r}"
        )

    @app.route('/', methods=WEBHOOK_METHODS)
    @app.route('/webhook', methods=WEBHOOK_METHODS)
    def webhook():
        if request.method != 'POST' or request.mimetype != 'application/json':
            logger.info(f"Método / content-type inválido: {request.method} / {request.content_type}")
            return 'invalid request', 400

        if config.allowed_hook_resources:
            resource = request.headers.get(RESOURCE_HEADER, '')
            if resource not in config.allowed_hook_resources:
                logger.info(f"{RESOURCE_HEADER} não permitido: {resource!r}")
                return 'invalid request', 400

        body = request.get_data(cache=True)
        logger.debug(f"Dados brutos recebidos: {body[:2000]!r}")

        try:
            authenticator.authenticate(body, request.headers, request.args)
        except AuthenticationError as exc:
            _audit_rejection(exc)
            return 'unauthorized', 401

        try:
            data = json.loads(body)
        except ValueError as exc:
            logger.info(f"JSON inválido: {exc}")
            return 'invalid request', 400

        try:
            alert = parse_source_alert(data, layout.schema)
            payload = transform(alert, layout, config.display_zone).to_dict()
        except AlertValidationError as exc:
            logger.info(f"Alerta inválido: {exc}")
            return f'invalid request: {exc}', 400

        logger.debug(f"Payload gerado: {json.dumps(payload)}")

        try:
            send_discord_payload(config.discord_webhook_url, payload, timeout=config.dispatch_timeout_seconds)
        except DispatchError as exc:
            logger.error(f"Falha no envio ao Discord: {exc} (status={exc.status_code}, body={exc.body!r})")
            # corpo recebido fica no log para reenvio manual
            logger.error(f"Alerta não entregue (event_id={alert.event_id or alert.id}): {body.decode('utf-8', 'replace')}")
            return jsonify({'error': 'dispatch failed', 'detail': str(exc)}), 502

        logger.info(f"Alerta entregue ao Discord: event_id={alert.event_id or alert.id} level={alert.level}")

        if not config.respond_with_payload:
            return '', 204
        return jsonify(payload), 200

    return app
