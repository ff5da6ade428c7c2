"""
Serverless entry point for the Helpdesk API
"""
import os

os.environ.setdefault("ENVIRONMENT", "production")

from mangum import Mangum
from helpdesk.main import app

# Lambda handler for ASGI app; lifespan opens the database on cold start
handler = Mangum(app, lifespan="auto")
