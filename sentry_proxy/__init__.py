"""Pacote do proxy Sentry -> Discord.

Este pacote contém:
- constants: tabelas fixas (cores por nível, nomes de headers, defaults)
- errors: hierarquia de exceções do proxy
- config: leitura/validação das variáveis de ambiente no startup
- logs: configuração do logging
- models: tipos do alerta de origem e do payload do Discord
- parsing: leitura dos schemas de webhook do Sentry
- transform: conversão SourceAlert -> NotificationPayload
- auth: autenticação por token ou assinatura HMAC
- services: envio do payload para o Discord
- controller: criação do Flask app e endpoints
"""
