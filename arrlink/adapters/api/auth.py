"""
Strategies d'authentification des backends.

L'authentification est une capacite du client : le RequestExecutor recoit
une AuthStrategy et fusionne ses en-tetes et parametres dans chaque requete.
"""

from abc import ABC, abstractmethod
from typing import Optional


class AuthStrategy(ABC):
    @abstractmethod
    def headers(self) -> dict[str, str]:
        ...

    @abstractmethod
    def params(self) -> dict[str, str]:
        ...


class ApiKeyHeaderAuth(AuthStrategy):
    """
    Cle API transmise dans un en-tete (Sonarr, Radarr).

    Example:
        auth = ApiKeyHeaderAuth("0123456789abcdef")
        auth.headers()  # {"X-Api-Key": "0123456789abcdef"}
    """

    def __init__(self, api_key: Optional[str], header_name: str = "X-Api-Key") -> None:
        self._api_key = api_key
        self._header_name = header_name

    def headers(self) -> dict[str, str]:
        if not self._api_key:
            return {}
        return {self._header_name: self._api_key}

    def params(self) -> dict[str, str]:
        return {}


class QueryParamAuth(AuthStrategy):
    """
    Identifiants transmis en parametres de requete (Emby : api_key, userId).

    Les valeurs None ou vides sont ignorees.
    """

    def __init__(self, **params: Optional[str]) -> None:
        self._params = {key: value for key, value in params.items() if value}

    def headers(self) -> dict[str, str]:
        return {}

    def params(self) -> dict[str, str]:
        return dict(self._params)
