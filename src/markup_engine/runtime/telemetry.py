"""Logging and profiling on top of telelog.

Engine modules go through four helpers only: ``configure`` selects the
active telelog configuration, ``get_logger`` hands out cached loggers,
``record_event`` logs a structured ``event::<name>`` line and ``span``
profiles a block of work (render, segmentation, block transforms).

Settings come from ``MARKUP_ENGINE_*`` environment variables unless a
named preset or an explicit ``telelog.Config`` is passed to ``configure``.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "MARKUP_ENGINE_"
ROOT_LOGGER = "markup_engine"

_TRUTHY = {"1", "true", "yes", "on"}


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


@dataclass(frozen=True, slots=True)
class TelemetrySettings:
    """Everything ``configure`` needs to build a ``telelog.Config``."""

    level: str = "WARNING"
    console: bool = True
    colored: bool = True
    json: bool = False
    log_file: str = ""
    buffered: bool = False
    buffer_size: int = 2048

    @classmethod
    def from_env(cls) -> "TelemetrySettings":
        return cls(
            level=(_env("LOG_LEVEL") or "WARNING").upper(),
            console=not _env_flag("DISABLE_CONSOLE", False),
            colored=not _env_flag("NO_COLOR", False),
            json=_env_flag("LOG_JSON", False),
            log_file=_env("LOG_FILE") or "",
            buffered=_env_flag("LOG_BUFFERED", False),
            buffer_size=int(_env("LOG_BUFFER_SIZE") or "2048"),
        )

    def to_config(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.colored)
        if self.json:
            config.with_json_format(True)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffered:
            config.with_buffering(True)
            config.with_buffer_size(self.buffer_size)
        # spans rely on logger.profile
        config.with_profiling(True)
        return config


PRESETS: Dict[str, TelemetrySettings] = {
    "development": TelemetrySettings(level="DEBUG"),
    "production": TelemetrySettings(
        console=False, log_file="markup_engine.log", buffered=True
    ),
    # render spans as machine-readable lines
    "performance": TelemetrySettings(
        level="DEBUG",
        console=False,
        json=True,
        log_file="markup_engine-perf.log",
        buffered=True,
    ),
}


def preset_settings(name: str) -> TelemetrySettings:
    try:
        settings = PRESETS[name.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown telemetry preset '{name}', expected one of {sorted(PRESETS)}"
        ) from None
    log_file = _env("LOG_FILE")
    return replace(settings, log_file=log_file) if log_file else settings


class _LoggerRegistry:
    """Active config plus the loggers created from it."""

    def __init__(self) -> None:
        self.config: Optional[Any] = None
        self.loggers: Dict[str, Any] = {}

    def activate(self, config: Any) -> None:
        self.config = config
        self.loggers.clear()

    def get(self, name: str) -> Any:
        if self.config is None:
            self.activate(TelemetrySettings.from_env().to_config())
        if name not in self.loggers:
            self.loggers[name] = tl.Logger.with_config(name, self.config)
        return self.loggers[name]


_registry = _LoggerRegistry()


def configure(
    *,
    config: Optional[Any] = None,
    preset: Optional[str] = None,
    settings: Optional[TelemetrySettings] = None,
) -> None:
    """Swap the active telelog configuration and drop cached loggers.

    At most one of ``config`` (a ready ``telelog.Config``), ``preset`` (a key
    of ``PRESETS``) or ``settings`` may be given; with none, the
    environment decides.
    """

    chosen = [option for option in (config, preset, settings) if option is not None]
    if len(chosen) > 1:
        raise ValueError("Pass only one of `config`, `preset` or `settings`.")

    if preset is not None:
        config = preset_settings(preset).to_config()
    elif settings is not None:
        config = settings.to_config()
    elif config is None:
        config = TelemetrySettings.from_env().to_config()
    else:
        config.with_profiling(True)
    _registry.activate(config)


def get_logger(name: Optional[str] = None) -> Any:
    """Cached ``telelog.Logger`` bound to the active configuration."""

    return _registry.get(name or _env("LOGGER") or ROOT_LOGGER)


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set, frozenset)):
        return repr(value)
    return str(value)


def _pairs(payload: Mapping[str, Any]) -> List[Tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in payload.items()]


def _emit(logger: Any, level: str, message: str, payload: Mapping[str, Any]) -> None:
    """Log ``message`` with ``payload``, preferring telelog's ``*_with`` methods."""

    name = str(level).lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, _pairs(payload))
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(payload)}")


def record_event(
    name: str,
    *,
    level: str = "debug",
    data: Optional[Mapping[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` with ``data`` attached as key/value pairs."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    """Yielded by ``span``; collects metadata reported on failure."""

    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.name, **self.metadata, "reason": reason}
        if self.component:
            payload["component"] = self.component
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def _transient_context(logger: Any, metadata: Mapping[str, str]) -> Iterator[None]:
    for key, value in metadata.items():
        logger.add_context(key, value)
    try:
        yield
    finally:
        for key in metadata:
            logger.remove_context(key)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the enclosed block with ``logger.profile(name)``.

    ``component=True`` also tracks the block as a telelog component named
    ``name``; a string names the component explicitly. ``metadata`` is
    attached as logger context while the block runs. Exceptions are logged
    as ``span::fail`` and re-raised.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else component or None
    context = {key: _stringify(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(
        logger=log, name=name, component=component_name, metadata=dict(context)
    )

    with ExitStack() as stack:
        stack.enter_context(_transient_context(log, context))
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


# MARKUP_ENGINE_PRESET picks a preset at import time
configure(preset=_env("PRESET") or None)
logger = get_logger()

__all__ = [
    "PRESETS",
    "SpanHandle",
    "TelemetrySettings",
    "configure",
    "get_logger",
    "logger",
    "preset_settings",
    "record_event",
    "span",
]
