"""
FastAPI app entry point for the Widget API.
Run as `uvicorn webwidget.api:app` (or `python manage.py serve`).
"""
from __future__ import annotations


from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .routes import base as base_routes
from .routes import widgets as widget_routes


app = FastAPI(title=base_routes.APP_NAME, version=base_routes.APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(base_routes.router)
app.include_router(widget_routes.router)
