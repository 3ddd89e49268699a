"""
Entry point for the wordwise API service.

Run with:
    uvicorn main:app --reload --port 8100
    python main.py
"""
import uvicorn

from wordwise.api.main import create_app
from wordwise.config import get_settings

settings = get_settings()
app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
