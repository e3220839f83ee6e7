"""Credential providers — where the pipeline gets its bearer token from."""
from abc import ABC, abstractmethod

from src.config import Config


class CredentialProvider(ABC):
    @abstractmethod
    def api_key(self) -> str | None:
        """Return the provider API key, or None when none is configured."""
        ...


class EnvCredentialProvider(CredentialProvider):

    def __init__(self, config: Config) -> None:
        self._config = config

    def api_key(self) -> str | None:
        return self._config.openai_api_key


class StaticCredentialProvider(CredentialProvider):

    def __init__(self, key: str | None) -> None:
        self._key = key

    def api_key(self) -> str | None:
        return self._key
