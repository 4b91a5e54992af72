# ASGI target for uvicorn: `uvicorn wsecho.asgi:app`, configured from WSECHO_* env vars
from wsecho.server import create_app

app = create_app()
