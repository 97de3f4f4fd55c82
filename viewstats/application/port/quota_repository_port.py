from abc import ABC, abstractmethod


class QuotaRepositoryPort(ABC):
    @abstractmethod
    def load(self) -> dict | None:
        raise NotImplementedError

    @abstractmethod
    def save(self, quota: dict) -> None:
        raise NotImplementedError
