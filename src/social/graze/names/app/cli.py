import json
import logging
import os
from logging.config import dictConfig

from aiohttp import web

from social.graze.names.app.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(debug: bool = False) -> None:
    """Configure logging from LOGGING_CONFIG_FILE when set, otherwise log to stderr.

    Without a config file the root level is DEBUG in debug mode and INFO otherwise.
    """
    logging_config_file = os.getenv("LOGGING_CONFIG_FILE")
    if logging_config_file:
        with open(logging_config_file) as fl:
            dictConfig(json.load(fl))
        return

    logging.basicConfig(
        format=LOG_FORMAT, level=logging.DEBUG if debug else logging.INFO
    )


def invoke():
    settings = Settings()  # type: ignore
    configure_logging(settings.debug)

    from social.graze.names.app.server import start_web_server

    web.run_app(
        start_web_server(settings), port=settings.http_port, print=None
    )


if __name__ == "__main__":
    invoke()
