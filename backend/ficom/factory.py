"""Application factory wiring Flask extensions and blueprints."""

from __future__ import annotations

from flask import Flask

from ficom.core.config import BaseConfig, get_config, validate_auth_settings
from ficom.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    :param config: Environment name (``"testing"``), config class/object, or
        ``None`` to select by ``APP_ENV``.
    :raises RuntimeError: If the JWT signing secret is missing or unsafe.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    if config is None or isinstance(config, str):
        app.config.from_object(get_config(config))
    else:
        app.config.from_object(config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Refuse to start without a usable signing secret
    validate_auth_settings(app.config)

    from ficom.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from ficom.core import cors

    cors.init_app(app)

    from ficom.api import init_app as init_api

    init_api(app)

    from ficom.core import errors

    errors.init_app(app)

    from ficom import cli as app_cli

    app_cli.init_app(app)

    return app
