"""AWS Lambda entry point wrapping the FastAPI application with Mangum.

API Gateway events are translated into ASGI requests; the original event stays
available to the app as ``scope["aws.event"]``, which is where caller claims
are read from.
"""

from mangum import Mangum

from sitemanager.db.connection import get_client
from sitemanager.main import app

# Build the shared DynamoDB client during the Lambda init phase rather than on
# the first invocation.
get_client()

# ASGI lifespan events are not delivered per invocation in Lambda.
handler = Mangum(app, lifespan="off")
