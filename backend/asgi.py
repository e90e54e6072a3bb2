# ASGI entry point
# Serve with:  uvicorn asgi:application --host 0.0.0.0 --port 5000
# (run from backend/, or with --app-dir backend from the repo root)

import os
import sys

# Add project to path
project_path = os.path.dirname(os.path.abspath(__file__))
if project_path not in sys.path:
    sys.path.insert(0, project_path)

# Load environment variables from .env file if present
# (must happen before app.config builds its settings)
from dotenv import load_dotenv
env_path = os.path.join(project_path, '.env')
if os.path.exists(env_path):
    load_dotenv(env_path)

from app.main import app as application  # noqa: E402
