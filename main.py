"""
Entry point: ``python main.py`` or ``uvicorn main:app``.
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

import uvicorn

from src.config import config
from src.main import app  # noqa: F401

if __name__ == "__main__":
    uvicorn.run("main:app", host=config.HOST, port=config.PORT, reload=config.DEBUG)
