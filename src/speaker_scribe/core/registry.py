"""Keyed registry for pluggable model backends."""

from typing import TypeVar, Generic, Callable

from speaker_scribe.core.exceptions import RegistryError

T = TypeVar("T")


class Registry(Generic[T]):
    """
    Maps a backend key from configuration to the class implementing it.

    Usage:
        TranscriberRegistry = Registry[BaseTranscriber]("transcriber")

        @TranscriberRegistry.register("faster-whisper")
        class FasterWhisperTranscriber(BaseTranscriber):
            ...

        cls = TranscriberRegistry.get(config.transcription.backend)
        transcriber = cls.load(config.transcription, profile, progress)
    """

    def __init__(self, name: str):
        self.name = name
        self._backends: dict[str, type[T]] = {}

    def register(self, key: str) -> Callable[[type[T]], type[T]]:
        """Decorator registering a backend class under ``key``."""
        def decorator(cls: type[T]) -> type[T]:
            if key in self._backends:
                raise RegistryError(f"{self.name}: '{key}' already registered")
            self._backends[key] = cls
            return cls
        return decorator

    def get(self, key: str) -> type[T]:
        """Look up the backend class registered under ``key``."""
        if key not in self._backends:
            available = ", ".join(self._backends) or "none"
            raise RegistryError(f"{self.name}: '{key}' not found. Available: {available}")
        return self._backends[key]

    def list(self) -> list[str]:
        return list(self._backends)

    def __contains__(self, key: str) -> bool:
        return key in self._backends

    def __repr__(self) -> str:
        return f"Registry({self.name}, backends={self.list()})"
