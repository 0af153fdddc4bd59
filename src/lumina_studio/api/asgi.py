"""ASGI entrypoint for the Lumina Studio API.

Run with ``uvicorn lumina_studio.api.asgi:app``; settings come from the
environment (``OPENAI_API_KEY`` is required).
"""

from lumina_studio.api.app import create_app
from lumina_studio.containers import build_container

app = create_app(build_container())
