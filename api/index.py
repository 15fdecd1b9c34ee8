"""
Serverless entry point for the Mitra API.

Wraps the FastAPI app in a Mangum adapter so one function serves every
route. Deployments set DATABASE_URL, which makes the document store use
PostgreSQL; the app's lifespan hooks are skipped since each invocation
opens its own connections.
"""

import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from mangum import Mangum

from backend.main import app

handler = Mangum(app, lifespan="off")
