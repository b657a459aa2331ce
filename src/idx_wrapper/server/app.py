"""
IDX Wrapper Creator - HTTP Server
Flask entry point exposing GET /wrapper?site=...&target=...
"""

import argparse
import logging
from typing import Optional

from flask import Flask

from idx_wrapper.controllers.wrap_controller import WrapController
from idx_wrapper.managers.config_manager import config_manager
from idx_wrapper.server.routers.wrap_router import wrap_router
from idx_wrapper.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)


def create_app(controller: Optional[WrapController] = None) -> Flask:
    """
    Application factory to initialize the Flask instance with the wrap controller.
    """
    flask_app = Flask(__name__)

    # Inject the controller into the app config for blueprint access
    flask_app.config['WRAP_CONTROLLER'] = controller or WrapController()

    flask_app.register_blueprint(wrap_router)

    return flask_app


def main():
    """
    Main execution block to parse arguments and start the server.
    """
    parser = argparse.ArgumentParser(description="IDX Wrapper Creator server")
    parser.add_argument(
        "--host",
        type=str,
        default=config_manager.get_nested("server.host", "0.0.0.0"),
        help="Host interface to bind to (use 0.0.0.0 for Docker/External access)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config_manager.get_nested("server.port", 5000),
        help="Port to bind the server to"
    )
    parser.add_argument("--debug", action="store_true", help="Run Flask in debug mode")
    args = parser.parse_args()

    configure_logger(
        config_manager.get_nested("debug.level", "INFO"),
        module_specific_levels=config_manager.get_nested("debug.module_levels"),
        silenced_loggers=config_manager.get_nested("debug.silenced_loggers")
    )

    app = create_app()
    logger.info("Serving wrappers on http://%s:%s/wrapper", args.host, args.port)

    # use_reloader=False prevents double-initialization of the controller
    app.run(
        debug=args.debug,
        host=args.host,
        port=args.port,
        use_reloader=False
    )


if __name__ == '__main__':
    main()
