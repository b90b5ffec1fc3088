"""Server Entry Point - Root Module.

Runs the CivicTrack API with uvicorn. Cloud Run sets PORT.
"""

import os

import uvicorn

from api.main import app

__all__ = [
    "app",
]


if __name__ == "__main__":
    uvicorn.run(
        app,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3000")),
    )
