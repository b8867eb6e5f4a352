"""Preferred ASGI entrypoint.

Use with:
- `PYTHIA_SCOPE=./myproject uvicorn src.app:app --port 8080`

The `python -m server` launcher also points here.
"""

from server.app import PythiaServer

server = PythiaServer()
app = server.create_app()
