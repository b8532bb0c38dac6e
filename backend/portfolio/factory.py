"""Application factory wiring Flask extensions, services and blueprints."""

from __future__ import annotations

from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from portfolio.core.config import BaseConfig, get_config
from portfolio.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application."""

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"), app.config.get("LOG_FORMAT", "json"))

    # Trust one hop of X-Forwarded-* when running behind a reverse proxy
    if app.config.get("USE_PROXYFIX"):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore[method-assign]

    from portfolio.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from portfolio.core import cors

    cors.init_app(app)

    from portfolio.core import container

    container.init_app(app)

    from portfolio.api import init_app as init_api

    init_api(app)

    from portfolio.core import errors

    errors.init_app(app)

    from portfolio import cli as app_cli

    app_cli.init_app(app)

    return app
