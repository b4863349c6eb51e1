import os
from typing import Mapping, Optional

from dotenv import load_dotenv

SHORTEST_ENV_PREFIX = "SHORTEST_"


def get_shortest_env_name(key: str) -> str:
    return f"{SHORTEST_ENV_PREFIX}{key}"


class EnvResolver:
    """Read-only lookup over environment variables.

    Empty values count as unset, and `lookup` prefers the
    SHORTEST_-prefixed variable over the plain one.
    """

    def __init__(self, values: Optional[Mapping[str, str]] = None):
        self._values = dict(values or {})

    @classmethod
    def from_environ(cls, dotenv: bool = True) -> "EnvResolver":
        """Snapshot the process environment, loading a .env file first if present"""
        if dotenv:
            load_dotenv()
        return cls(os.environ)

    def get(self, key: str) -> Optional[str]:
        value = self._values.get(key)
        return value if value else None

    def lookup(self, key: str) -> Optional[str]:
        value = self.get(get_shortest_env_name(key))
        if value is None:
            value = self.get(key)
        return value
