"""Process-wide cache of the three model handles.

Each handle is created at most once per process. A handle that is being
loaded is represented by an in-flight task; concurrent first callers await
that same task instead of starting another load. Failed loads are not
cached, so a later ``acquire`` retries only the handles still missing.
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Mapping

from speaker_scribe.asr import TranscriberRegistry
from speaker_scribe.segmentation import SegmentationModelRegistry, SegmentationProcessorRegistry
from speaker_scribe.config import ScribeConfig
from speaker_scribe.core import ModelLoadError, ModelSet, NotReadyError, ProgressSink
from speaker_scribe.devices import DeviceProfile, resolve_device
from speaker_scribe.utils import get_logger

logger = get_logger(__name__)

HANDLES = ("transcriber", "segmentation_processor", "segmentation_model")

Loader = Callable[[DeviceProfile, "ProgressSink | None"], Any]


def default_loaders(config: ScribeConfig) -> dict[str, Loader]:
    """Blocking loaders for each handle, resolved from the configured backends."""
    transcriber_cls = TranscriberRegistry.get(config.transcription.backend)
    processor_cls = SegmentationProcessorRegistry.get(config.segmentation.backend)
    model_cls = SegmentationModelRegistry.get(config.segmentation.backend)

    return {
        "transcriber": lambda profile, progress: transcriber_cls.load(
            config.transcription, profile, progress
        ),
        "segmentation_processor": lambda profile, progress: processor_cls.load(
            config.segmentation, progress
        ),
        "segmentation_model": lambda profile, progress: model_cls.load(
            config.segmentation, profile, progress
        ),
    }


class ModelRegistry:
    """Owns at most one live instance of each model handle."""

    def __init__(
        self,
        config: ScribeConfig | None = None,
        loaders: Mapping[str, Loader] | None = None,
    ):
        self.config = config or ScribeConfig()
        self._loaders = dict(loaders) if loaders is not None else default_loaders(self.config)
        missing = set(HANDLES) - set(self._loaders)
        if missing:
            raise ValueError(f"No loader for handles: {', '.join(sorted(missing))}")

        self._handles: dict[str, Any] = {}
        self._inflight: dict[str, asyncio.Task] = {}
        self.device: str | None = None

    @property
    def is_ready(self) -> bool:
        return all(name in self._handles for name in HANDLES)

    @property
    def loaded_handles(self) -> list[str]:
        return [name for name in HANDLES if name in self._handles]

    def get(self) -> ModelSet:
        """Return the cached handles.

        Raises:
            NotReadyError: If any handle has not been acquired yet
        """
        if not self.is_ready:
            missing = [name for name in HANDLES if name not in self._handles]
            raise NotReadyError(f"Models not loaded: {', '.join(missing)}")
        return ModelSet(*(self._handles[name] for name in HANDLES))

    async def acquire(self, progress: ProgressSink | None = None, device: str = "cuda") -> ModelSet:
        """Load every missing handle concurrently and return all three.

        Once cached, later calls return the same handles and ignore both
        ``device`` and ``progress``.

        Raises:
            UnsupportedDeviceError: If a load is needed and ``device`` has no profile
            ModelLoadError: If any handle failed to load
        """
        if self.is_ready:
            return self.get()

        profile = resolve_device(device)
        results = await asyncio.gather(
            *(self._ensure(name, profile, progress) for name in HANDLES),
            return_exceptions=True,
        )

        for result in results:
            if isinstance(result, BaseException):
                raise result

        if self.device is None:
            self.device = profile.device
        return ModelSet(*results)

    async def _ensure(self, name: str, profile: DeviceProfile, progress: ProgressSink | None) -> Any:
        if name in self._handles:
            return self._handles[name]

        task = self._inflight.get(name)
        if task is None:
            task = asyncio.create_task(self._load(name, profile, progress))
            task.add_done_callback(_consume_result)
            self._inflight[name] = task
        else:
            logger.debug(f"Joining in-flight load of {name}")
        # A cancelled caller stops waiting; the shared load keeps running
        return await asyncio.shield(task)

    async def _load(self, name: str, profile: DeviceProfile, progress: ProgressSink | None) -> Any:
        logger.info(f"Loading {name} ({profile.device})...")
        try:
            handle = await asyncio.to_thread(self._loaders[name], profile, progress)
            self._handles[name] = handle
        except ModelLoadError as e:
            logger.error(str(e))
            raise
        except Exception as e:
            logger.error(f"Failed to load {name}: {e}")
            raise ModelLoadError(name, str(e)) from e
        finally:
            self._inflight.pop(name, None)

        logger.info(f"{name} ready")
        return handle


def _consume_result(task: asyncio.Task) -> None:
    # Marks failures retrieved even when every caller was cancelled
    if not task.cancelled():
        task.exception()


_default_registry: ModelRegistry | None = None


def get_model_registry(config: ScribeConfig | None = None) -> ModelRegistry:
    """Process-wide registry; ``config`` only applies on the first call."""
    global _default_registry

    if _default_registry is None:
        _default_registry = ModelRegistry(config)
    elif config is not None and config != _default_registry.config:
        logger.warning(
            "Model registry already exists with a different configuration; "
            "keeping the loaders built from the first one"
        )
    return _default_registry
