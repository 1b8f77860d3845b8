"""Taxonomía de errores del dominio.

Solo los fallos que abortan una request son excepciones. Los fallos de
paginación y de product-info se recuperan en el adaptador y nunca llegan aquí.
"""

from __future__ import annotations


class GamepassFetcherError(Exception):
    """Base de los errores que la API traduce a un status HTTP."""

    status_code: int = 500


class InvalidUserId(GamepassFetcherError):
    """El userId recibido no es un entero positivo."""

    status_code = 400

    def __init__(self, raw: str) -> None:
        super().__init__(f"Invalid userId: {raw!r}")
        self.raw = raw


class ResolutionFailure(GamepassFetcherError):
    """Username sin coincidencia o la API de usuarios falló."""

    status_code = 404

    def __init__(self, username: str) -> None:
        super().__init__(f"Could not resolve username {username!r}")
        self.username = username


class ListingFailure(GamepassFetcherError):
    """Falló el listado de experiencias; el mensaje upstream se expone tal cual."""

    status_code = 500

    def __init__(self, user_id: int, message: str) -> None:
        super().__init__(f"Failed to fetch user experiences: {message}")
        self.user_id = user_id
