from abc import ABC
from abc import abstractmethod
from collections.abc import Mapping
from typing import Any


class CredentialStorePort(ABC):
    """
    Durable key/value storage of opaque scalar values.

    Implementations must survive process restarts. A corrupted or missing
    backend must read as "no stored value", never raise on ``get``.
    """

    @abstractmethod
    def get(self, key: str) -> Any | None: ...

    @abstractmethod
    def set(self, key: str, value: Any | None) -> None: ...

    def set_many(self, values: Mapping[str, Any | None]) -> None:
        for key, value in values.items():
            self.set(key, value)
