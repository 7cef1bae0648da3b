from __future__ import annotations

from fastapi import FastAPI

from resourcetraversal.app.api import router as tools_router


def create_app() -> FastAPI:
    app = FastAPI(title="Resource Traversal", version="0.1.0")
    app.include_router(tools_router)
    return app


app = create_app()
