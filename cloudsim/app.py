from __future__ import annotations

import logging

from flask import Flask

from cloudsim.api import register_routes
from cloudsim.config import Config


def create_app(config: type = Config) -> Flask:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__)
    app.config.from_object(config)
    register_routes(app)
    return app


if __name__ == "__main__":
    create_app().run(debug=True)
