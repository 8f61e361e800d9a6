"""Run FastAPI server."""

import uvicorn

from familytree.api.main import create_app
from familytree.config import configure_logging, settings

if __name__ == "__main__":
    configure_logging(settings.log_level)
    print(f"Starting FastAPI on http://localhost:{settings.api.port}")
    uvicorn.run(create_app(settings=settings), host=settings.api.host, port=settings.api.port)
