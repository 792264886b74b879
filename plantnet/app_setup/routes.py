"""
Routes simples (hors routers): message d'accueil utilisé comme sonde de vivacité.
"""
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

GREETING = "Hello from plantNet Server.."

def register_routes(app: FastAPI) -> None:
    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    def root():
        return GREETING
