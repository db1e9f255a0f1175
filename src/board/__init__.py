"""Flask application factory for the Kudos Board browser UI."""

import threading

from flask import Flask

from board import pages
from kudos.config import (
    get_api_base_url,
    get_api_timeout,
    get_giphy_api_key,
    get_giphy_api_url,
)
from kudos.gateway import Gateway
from kudos.giphy import GifProvider
from kudos.modes import ModeController
from kudos.router import MutationRouter


def create_app(
    *,
    test_config=None,
    gateway=None,
    gif_provider=None,
):
    """Create and configure the Flask application.

    :param test_config: Optional config dictionary applied after app creation.
    :type test_config: dict | None
    :param gateway: Optional Backend API client override.
    :type gateway: kudos.gateway.Gateway | None
    :param gif_provider: Optional GIF search client override.
    :type gif_provider: kudos.giphy.GifProvider | None
    :returns: Configured Flask app instance.
    :rtype: flask.Flask
    """
    app = Flask(__name__)
    app.config.from_mapping(
        KUDOS_API_URL=get_api_base_url(),
        KUDOS_API_TIMEOUT=get_api_timeout(),
        GIPHY_API_KEY=get_giphy_api_key(),
        GIPHY_API_URL=get_giphy_api_url(),
    )
    if test_config:
        app.config.update(test_config)

    if gateway is None:
        gateway = Gateway(app.config["KUDOS_API_URL"], timeout=app.config["KUDOS_API_TIMEOUT"])
    if gif_provider is None:
        gif_provider = GifProvider(app.config["GIPHY_API_KEY"], base_url=app.config["GIPHY_API_URL"])

    controller = ModeController(gateway)
    app.extensions["kudos"] = {
        "controller": controller,
        "router": MutationRouter(controller, gateway),
        "gifs": gif_provider,
        # Scopes are shared across requests; handlers take turns.
        "lock": threading.Lock(),
    }

    app.register_blueprint(pages.bp)
    return app
