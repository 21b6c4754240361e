# cli.py
import logging
import sys

import click

from product_api.config.settings import get_settings

# Configure logging
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)


@click.group()
def cli():
    """CLI commands for the Product API"""
    pass


@cli.command()
def show_config():
    """Show current configuration (secrets masked)"""
    settings = get_settings()

    print("Current Configuration:")
    for key, value in settings.get_environment_dict().items():
        print(f"  {key}: {value}")


@cli.command()
@click.option("--host", default=None, help="Interface to bind (defaults to HOST)")
@click.option("--port", type=int, default=None, help="Port to listen on (defaults to PORT)")
def serve(host, port):
    """Connect to MongoDB and run the API with uvicorn"""
    import uvicorn

    from product_api.main import create_app

    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        app = create_app(settings)
    except Exception as e:
        logger.error(f"MONGODB connection FAILED: {e}")
        sys.exit(1)

    port = port or settings.port
    logger.info(f"Server is running at port: {port}")
    uvicorn.run(app, host=host or settings.host, port=port)


@cli.command()
def init_db():
    """Create the submission collection indexes"""
    from product_api.main import build_submission_service

    settings = get_settings()
    configure_logging(settings.log_level)

    try:
        service = build_submission_service(settings)
    except Exception as e:
        logger.error(f"MONGODB connection FAILED: {e}")
        sys.exit(1)

    service.adapter.close()
    print(f"✅ Indexes created on {settings.mongodb_database}.{settings.submissions_collection}")


if __name__ == "__main__":
    cli()
