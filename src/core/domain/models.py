"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- Valida las respuestas de Roblox en el borde (aliases sobre los campos upstream)
  sin acoplar el Core a httpx.
- Serializa la respuesta final en camelCase, que es el contrato público de la API.

Nota:
- Todos los modelos viven lo que dura una request; nunca se mutan ni se persisten.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


def _lenient_int(value: Any) -> int | None:
    """Entero o `None`; nunca invalida el modelo entero por un campo raro."""

    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _text_or_empty(value: Any) -> Any:
    return "" if value is None else value


class RootPlace(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int | None = None

    @field_validator("id", mode="before")
    @classmethod
    def lenient_id(cls, value: Any) -> int | None:
        return _lenient_int(value)


class Experience(BaseModel):
    """Experiencia publicada (universo) tal como la devuelve la API de juegos."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    universe_id: int = Field(
        ...,
        alias="id",
        description="Id de universo; clave para todas las llamadas posteriores.",
    )
    name: str = Field(
        default="",
        description="Nombre público de la experiencia (null -> \"\").",
    )
    root_place: RootPlace | None = Field(
        default=None,
        alias="rootPlace",
        description="Place raíz del universo (puede faltar o venir vacío).",
    )

    @field_validator("name", mode="before")
    @classmethod
    def name_or_empty(cls, value: Any) -> Any:
        return _text_or_empty(value)

    @field_validator("root_place", mode="before")
    @classmethod
    def root_place_or_none(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None

    @property
    def place_id(self) -> int | None:
        return self.root_place.id if self.root_place else None


class GamepassSummary(BaseModel):
    """Game-pass listado por la paginación, sin precio ni imagen.

    Solo el `id` es obligatorio; un nombre null se conserva como "".
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int = Field(..., validation_alias=AliasChoices("id", "gamePassId"))
    name: str = Field(default="", validation_alias=AliasChoices("name", "displayName"))

    @field_validator("name", mode="before")
    @classmethod
    def name_or_empty(cls, value: Any) -> Any:
        return _text_or_empty(value)


class GamepassDetail(BaseModel):
    """Respuesta de product-info para un game-pass.

    Cada campo se valida por separado: un valor no entero queda en `None`
    sin descartar el resto.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    price_in_robux: int | None = Field(default=None, alias="PriceInRobux")
    icon_image_asset_id: int | None = Field(default=None, alias="IconImageAssetId")

    @field_validator("price_in_robux", "icon_image_asset_id", mode="before")
    @classmethod
    def lenient_ints(cls, value: Any) -> int | None:
        return _lenient_int(value)


class _ApiModel(BaseModel):
    """Base de los modelos de salida: camelCase al serializar."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class AggregatedGamepass(_ApiModel):
    id: int
    name: str
    price: int = Field(
        default=0,
        description="Precio en Robux; 0 si product-info falló o no lo trae.",
    )
    image_asset_id: int | None = Field(
        default=None,
        description="Asset id del icono; null si no está disponible.",
    )
    place_id: int | None = Field(
        default=None,
        description="Place raíz de la experiencia dueña del game-pass.",
    )

    @classmethod
    def join(
        cls,
        summary: GamepassSummary,
        detail: GamepassDetail | None,
        *,
        place_id: int | None,
    ) -> "AggregatedGamepass":
        """Une listado + detalle. Valores falsy (None/0) caen al default."""

        price = detail.price_in_robux if detail else None
        image = detail.icon_image_asset_id if detail else None
        return cls(
            id=summary.id,
            name=summary.name,
            price=price or 0,
            image_asset_id=image or None,
            place_id=place_id,
        )


class AggregateResult(_ApiModel):
    """Respuesta agregada de `/gamepasses/...`."""

    user_id: str
    total_experiences: int = 0
    total_gamepasses: int = 0
    gamepasses: list[AggregatedGamepass] = Field(default_factory=list)
    message: str | None = Field(
        default=None,
        description="Solo presente cuando el usuario no tiene experiencias.",
    )

    def to_payload(self) -> dict[str, Any]:
        exclude = {"message"} if self.message is None else None
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)


class GameSummary(_ApiModel):
    name: str
    universe_id: int
    place_id: int | None = None

    @classmethod
    def from_experience(cls, experience: Experience) -> "GameSummary":
        return cls(
            name=experience.name,
            universe_id=experience.universe_id,
            place_id=experience.place_id,
        )


class GamesResult(_ApiModel):
    """Respuesta de `/games/username/...`."""

    user_id: str
    total_games: int = 0
    games: list[GameSummary] = Field(default_factory=list)
