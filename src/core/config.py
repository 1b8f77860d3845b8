"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la API ni la CLI.
- Permite que adaptadores (HTTP/Roblox) lean config de forma consistente.
"""

from __future__ import annotations

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Se construye una vez al arrancar y se pasa explícitamente a la API,
    la CLI y los adaptadores. No hay estado global de proceso.
    """

    model_config = SettingsConfigDict(
        env_prefix="GAMEPASS_FETCHER_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    host: str = Field(
        default="0.0.0.0",
        min_length=1,
        description="Interfaz donde escucha el servidor HTTP.",
    )
    # `PORT` sin prefijo: lo inyectan las plataformas de hosting.
    port: int = Field(
        default=5000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "GAMEPASS_FETCHER_PORT"),
        description="Puerto del servidor HTTP.",
    )

    http_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Timeout por request upstream (segundos).",
    )
    user_agent: str = Field(
        default="roblox-gamepass-fetcher/1.0",
        min_length=1,
        description="User-Agent para peticiones a Roblox.",
    )

    users_api_base: str = Field(
        default="https://users.roblox.com",
        min_length=8,
        description="Base URL de la API de usuarios (username -> id).",
    )
    games_api_base: str = Field(
        default="https://games.roblox.com",
        min_length=8,
        description="Base URL de la API de juegos (experiencias de un usuario).",
    )
    apis_base: str = Field(
        default="https://apis.roblox.com",
        min_length=8,
        description="Base URL de la API de game-passes.",
    )

    experience_limit: int = Field(
        default=5,
        ge=1,
        le=10,
        description="Experiencias procesadas por usuario.",
    )
    experience_page_size: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Tamaño de página pedido a la API de juegos (siempre fijo).",
    )
    gamepass_page_size: int = Field(
        default=50,
        ge=1,
        le=100,
        description="Tamaño de página para la paginación de game-passes.",
    )
    max_gamepass_pages: int = Field(
        default=100,
        ge=1,
        description="Máximo de páginas leídas por universo antes de cortar el cursor.",
    )
    detail_max_concurrency: int = Field(
        default=20,
        ge=1,
        le=500,
        description="Concurrencia máxima para product-info dentro de una experiencia.",
    )

    log_level: str = Field(
        default="INFO",
        description="Nivel de logging (DEBUG, INFO, WARNING...).",
    )
