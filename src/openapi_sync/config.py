import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

STORE_DIR = Path(os.getenv("OPENAPI_SYNC_HOME", str(Path.home() / ".openapi-sync")))
STORAGE_KEY = os.getenv("OPENAPI_SYNC_KEY", "yaml")
LOG_LEVEL = os.getenv("OPENAPI_SYNC_LOG_LEVEL", "WARNING")

# Text a new session starts from when nothing has been stored yet.
DEFAULT_TEXT = """openapi: 3.0.0
info:
  title: Sample API
  description: Optional multiline or single-line description
  version: 0.1.0
servers:
  - url: http://api.example.com/v1
    description: Production server
components:
  schemas:
    User:
      type: object
      properties:
        id:
          type: integer
          format: int64
        name:
          type: string
        email:
          type: string
          format: email
"""
