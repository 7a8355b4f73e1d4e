"""
ASGI config for the Task Tracker project.

Runs under any ASGI server (Uvicorn, Daphne) and on AWS Lambda through Mangum.
"""
import os

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

from django.core.asgi import get_asgi_application

# Initialize Django at module load time (container startup, not request time)
application = get_asgi_application()


_lambda_handler = None


def lambda_handler(event, context):
    """
    AWS Lambda entry point for HTTP requests from API Gateway.

    The Mangum wrapper is created on the first invocation and reused.
    """
    global _lambda_handler
    if _lambda_handler is None:
        from mangum import Mangum
        _lambda_handler = Mangum(application, lifespan="off")
    return _lambda_handler(event, context)
