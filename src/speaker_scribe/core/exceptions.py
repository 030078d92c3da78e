"""Custom exceptions for the speaker-scribe pipeline."""


class ScribeError(Exception):
    """Base exception for all speaker-scribe errors."""
    pass


class ConfigError(ScribeError):
    """Configuration loading or validation error."""
    pass


class RegistryError(ScribeError):
    """Component registry error."""
    pass


class UnsupportedDeviceError(ScribeError):
    """Device key has no profile."""

    def __init__(self, device: object, supported: tuple[str, ...] = ()):
        self.device = device
        self.supported = supported
        available = ", ".join(supported) or "none"
        super().__init__(f"Unsupported device '{device}'. Available: {available}")


class ModelLoadError(ScribeError):
    """Loading or initializing a model handle failed."""

    def __init__(self, handle: str, message: str):
        self.handle = handle
        super().__init__(f"Failed to load {handle}: {message}")


class InferenceError(ScribeError):
    """One of the two inference stages failed during transcription."""

    def __init__(self, stage: str, message: str):
        self.stage = stage
        super().__init__(f"{stage} failed: {message}")


class NotReadyError(ScribeError):
    """Models were requested before a successful acquisition."""
    pass


class InvalidAudioError(ScribeError):
    """Audio buffer is empty or not single-channel float data."""
    pass
