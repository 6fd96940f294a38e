"""
Módulo API del servicio.
Contiene los modelos Pydantic y los routers FastAPI.

Los routers se importan directamente desde main.py (api.routes,
api.analytics_routes) para que los modelos puedan importarse sin
arrastrar la capa HTTP.
"""
