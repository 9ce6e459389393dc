"""
Configuration for the CodeDocGen dashboard backend.

Values are read once from the environment (optionally populated from a
.env file) and exposed as module-level constants.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Remote Analysis Gateway
GATEWAY_API_URL = os.getenv("GATEWAY_API_URL", "http://localhost:8000/api").rstrip("/")
GATEWAY_TIMEOUT_SECONDS = float(os.getenv("GATEWAY_TIMEOUT_SECONDS", "120"))
GATEWAY_CONNECT_TIMEOUT_SECONDS = float(os.getenv("GATEWAY_CONNECT_TIMEOUT_SECONDS", "10"))

# Call-flow traversal
FLOW_MAX_DEPTH = int(os.getenv("FLOW_MAX_DEPTH", "64"))

# Routes
SUBMIT_RATE_LIMIT_PER_MINUTE = int(os.getenv("SUBMIT_RATE_LIMIT_PER_MINUTE", "20"))
