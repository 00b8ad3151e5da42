"""
ASGI config for the Forklift Service Tracker.

Serves traditional ASGI servers (Uvicorn, Daphne) and, through Mangum,
AWS Lambda behind API Gateway.
"""
import os

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

from django.core.asgi import get_asgi_application

# Initialize at import time so Lambda pays the cost once per container
application = get_asgi_application()

_lambda_handler = None


def get_lambda_handler():
    """
    Returns a Mangum-wrapped handler for AWS Lambda.

    Mangum is only installed with the `lambda` extra, so it is imported here
    rather than at module load.
    """
    try:
        from mangum import Mangum
    except ImportError as exc:
        raise ImportError(
            "Mangum is required for Lambda deployment. "
            "Install with: pip install forklift-tracker[lambda]"
        ) from exc
    return Mangum(application, lifespan="off")


def lambda_handler(event, context):
    """AWS Lambda entry point for HTTP requests."""
    global _lambda_handler
    if _lambda_handler is None:
        _lambda_handler = get_lambda_handler()
    return _lambda_handler(event, context)
