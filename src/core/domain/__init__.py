"""Dominio: experiencias, game-passes y errores.

Por qué separado:
- Los modelos (Pydantic v2) y la taxonomía de errores no conocen httpx ni FastAPI.
"""
