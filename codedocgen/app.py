import logging
import os
import sys
from typing import Tuple

# Load environment variables FIRST, before any other imports
from dotenv import load_dotenv

load_dotenv()

from quart import Quart, Response, jsonify
from quart_rate_limiter import RateLimiter
from quart_schema import QuartSchema, hide

from codedocgen.routes import flows_bp, session_bp, views_bp
from codedocgen.routes.common.error_handlers import register_error_handlers
from codedocgen.services.service_factory import get_service_factory

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Log to stdout and a file; override the file with APP_LOG_FILE."""
    log_file = os.getenv("APP_LOG_FILE", "app-log.log")
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=logging.INFO,
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, mode="a"),
        ],
    )
    # httpx logs every request at INFO; the gateway client already does that
    logging.getLogger("httpx").setLevel(logging.WARNING)


def create_app() -> Quart:
    app = Quart(__name__)

    response_timeout = os.getenv("QUART_RESPONSE_TIMEOUT")
    app.config["RESPONSE_TIMEOUT"] = int(response_timeout) if response_timeout else 600

    RateLimiter(app)

    QuartSchema(
        app,
        info={"title": "CodeDocGen Dashboard API", "version": "1.0.0"},
        tags=[
            {"name": "Session", "description": "Repository submission and analysis workflow"},
            {"name": "Flows", "description": "Endpoint call-flow traces"},
            {"name": "Views", "description": "Entities, schema, diagrams, features and OpenAPI"},
        ],
    )

    register_error_handlers(app)

    app.register_blueprint(session_bp, url_prefix="/api/v1/session")
    app.register_blueprint(flows_bp, url_prefix="/api/v1/flows")
    app.register_blueprint(views_bp, url_prefix="/api/v1")

    @app.route("/favicon.ico")
    @hide
    def favicon() -> Tuple[str, int]:
        return "", 200

    @app.route("/health", methods=["GET"])
    async def health() -> Tuple[Response, int]:
        controller = get_service_factory().session_controller
        return jsonify({"status": "ok", "stage": controller.state.stage.value}), 200

    @app.after_serving
    async def shutdown() -> None:
        """Close the gateway connection pool."""
        logger.info("Shutting down application...")
        await get_service_factory().shutdown()
        logger.info("Application shutdown complete")

    @app.after_request
    async def apply_cors(response: Response) -> Response:
        response.headers["Access-Control-Allow-Origin"] = "*"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "*"
        return response

    @app.route("/<path:path>", methods=["OPTIONS"])
    async def handle_options(path: str) -> Tuple[Response, int]:
        """Handle CORS preflight OPTIONS requests."""
        return jsonify({"status": "ok"}), 200

    return app
