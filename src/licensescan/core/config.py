# config.py
# SPDX-License-Identifier: MIT
"""Configuration models and loaders for license scans.

Settings are plain slotted dataclasses grouped by concern (matching,
scanning, logging) under :class:`LicenseScanConfig`. Configurations round-trip
through dictionaries and can be loaded from JSON or TOML files.
"""
from __future__ import annotations

import json
try:  # pragma: no cover - optional dependency
    import tomllib  # Python 3.11+
except ModuleNotFoundError:  # pragma: no cover
    try:
        import tomli as tomllib  # type: ignore[assignment]
    except Exception:  # pragma: no cover
        tomllib = None  # type: ignore[assignment]
from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Tuple, Type, TypeVar, Union, get_args, get_origin, get_type_hints

from .log import PACKAGE_LOGGER_NAME, configure_logging

__all__ = [
    "MatcherConfig",
    "ScanConfig",
    "LoggingConfig",
    "LicenseScanConfig",
    "load_config_from_path",
    "DEFAULT_COVERAGE_THRESHOLD",
]

# Coverage at or above this value marks a file as confidently licensed.
DEFAULT_COVERAGE_THRESHOLD = 90.0

DEFAULT_MAX_FILE_BYTES = 10 * 1024 * 1024


@dataclass(slots=True)
class MatcherConfig:
    """Tuning knobs for fuzzy alignment against the reference corpus.

    Attributes:
        match_threshold (float): Minimum share (0-100) of a reference text
            that must be found for the entry to count as a match.
        tie_tolerance (float): Overlapping candidates scoring within this
            many points of the best one are all reported.
        min_run (int): Aligned runs shorter than this many words are
            treated as noise.
        max_gap (int): Largest run of unmatched input words tolerated
            inside a single match span.
    """
    match_threshold: float = 75.0
    tie_tolerance: float = 2.0
    min_run: int = 3
    max_gap: int = 20

    def validate(self) -> None:
        if not 0.0 < self.match_threshold <= 100.0:
            raise ValueError("matcher.match_threshold must be in (0, 100].")
        if self.tie_tolerance < 0:
            raise ValueError("matcher.tie_tolerance must be >= 0.")
        if self.min_run < 1:
            raise ValueError("matcher.min_run must be >= 1.")
        if self.max_gap < 0:
            raise ValueError("matcher.max_gap must be >= 0.")


@dataclass(slots=True)
class ScanConfig:
    """Archive scanning options.

    Attributes:
        path_prefix (str): Prefix stripped from every reported file path,
            e.g. ``"rsc.io/quote@v1.4.1"``.
        coverage_threshold (float): Files whose coverage reaches this value
            get their match names recorded as license types.
        max_file_bytes (int): Candidate files larger than this abort the
            scan.
        max_workers (int): Worker count for matching; 1 runs inline.
        window (int): Maximum in-flight matching tasks; 0 means
            ``max_workers * 4``.
        executor_kind (str): ``"thread"`` or ``"process"``.
    """
    path_prefix: str = ""
    coverage_threshold: float = DEFAULT_COVERAGE_THRESHOLD
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES
    max_workers: int = 1
    window: int = 0
    executor_kind: Literal["thread", "process"] = "thread"

    def validate(self) -> None:
        if not 0.0 <= self.coverage_threshold <= 100.0:
            raise ValueError("scan.coverage_threshold must be in [0, 100].")
        if self.max_file_bytes < 1:
            raise ValueError("scan.max_file_bytes must be >= 1.")
        if self.max_workers < 1:
            raise ValueError("scan.max_workers must be >= 1.")
        if self.window < 0:
            raise ValueError("scan.window must be >= 0.")
        if self.executor_kind not in {"thread", "process"}:
            raise ValueError("scan.executor_kind must be 'thread' or 'process'.")

    def effective_window(self) -> int:
        return max(self.window or self.max_workers * 4, self.max_workers)


@dataclass(slots=True)
class LoggingConfig:
    """Controls the package logger; set propagate=True/logger_name to
    integrate with host apps.
    """
    level: int | str = "INFO"
    propagate: bool = False
    fmt: str | None = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    logger_name: str = PACKAGE_LOGGER_NAME

    def apply(self) -> None:
        """Apply this logging configuration to the package logger."""
        configure_logging(
            level=self.level,
            propagate=self.propagate,
            fmt=self.fmt,
            logger_name=self.logger_name or PACKAGE_LOGGER_NAME,
        )


T = TypeVar("T")


@dataclass(slots=True)
class LicenseScanConfig:
    """Top-level configuration for a license scan.

    TOML layout mirrors the dataclass::

        [matcher]
        match_threshold = 75.0

        [scan]
        path_prefix = "rsc.io/quote@v1.4.1"
        max_workers = 4

        [logging]
        level = "DEBUG"
    """
    matcher: MatcherConfig = field(default_factory=MatcherConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> None:
        self.matcher.validate()
        self.scan.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable representation of this configuration."""
        return _dataclass_to_dict(self)

    def to_json(self, path: Path | str, *, indent: int = 2) -> str:
        """Write the configuration as JSON and return the path written."""
        target = Path(path)
        target.write_text(json.dumps(self.to_dict(), indent=indent, sort_keys=True), encoding="utf-8")
        return str(target)

    @classmethod
    def from_dict(cls: Type[T], data: Mapping[str, Any]) -> T:
        """Build a configuration from a mapping, rejecting unknown keys.

        Raises:
            ValueError: If a section or option is not recognized.
        """
        return _dataclass_from_dict(cls, data)

    @classmethod
    def from_json(cls: Type[T], path: Path | str) -> T:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.from_dict(payload)  # type: ignore[attr-defined]

    @classmethod
    def from_toml(cls: Type[T], path: Path | str) -> T:
        if tomllib is None:
            raise RuntimeError(
                "TOML support requires Python 3.11+ (tomllib) or installing the 'tomli' package."
            )
        data = tomllib.loads(Path(path).read_bytes().decode("utf-8"))
        if not isinstance(data, Mapping):
            raise TypeError(f"Top-level TOML document must be a mapping; got {type(data).__name__}.")
        return cls.from_dict(data)  # type: ignore[attr-defined]


def load_config_from_path(path: str | Path) -> LicenseScanConfig:
    """Load and validate a LicenseScanConfig from a ``.toml`` or ``.json`` file.

    Raises:
        ValueError: If the extension is unsupported or a value is invalid.
    """
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix == ".toml":
        cfg = LicenseScanConfig.from_toml(p)
    elif suffix == ".json":
        cfg = LicenseScanConfig.from_json(p)
    else:
        raise ValueError(f"Unsupported config extension {p.suffix!r}; expected .toml or .json.")
    cfg.validate()
    return cfg


def _dataclass_to_dict(obj: Any) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if value is None:
            continue
        if is_dataclass(value):
            value = _dataclass_to_dict(value)
        result[f.name] = value
    return result


def _dataclass_from_dict(cls: Type[T], data: Mapping[str, Any] | None) -> T:
    """Instantiate dataclass ``cls`` from ``data``, recursing into nested sections."""
    if data is None:
        return cls()  # type: ignore[call-arg]
    if not isinstance(data, Mapping):
        raise ValueError(f"Expected a mapping for {cls.__name__}; got {type(data).__name__}.")
    known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
    unknown = sorted(k for k in data if k not in known)
    if unknown:
        raise ValueError(
            f"Unsupported options for {cls.__name__}: {', '.join(unknown)}. "
            f"Allowed keys: {', '.join(sorted(known))}"
        )
    type_hints = get_type_hints(cls)
    kwargs: Dict[str, Any] = {}
    for f in fields(cls):  # type: ignore[arg-type]
        if f.name not in data:
            continue
        kwargs[f.name] = _coerce_value(type_hints.get(f.name, f.type), data[f.name])
    return cls(**kwargs)


def _coerce_value(expected_type: Any, value: Any) -> Any:
    base_type, _ = _strip_optional(expected_type)
    if value is None:
        return None
    if isinstance(base_type, type) and is_dataclass(base_type):
        return _dataclass_from_dict(base_type, value)
    if base_type in {int, float}:
        return base_type(value)
    if base_type is str:
        return str(value)
    return value


def _strip_optional(typ: Any) -> Tuple[Any, bool]:
    origin = get_origin(typ)
    if origin is Union or (origin is not None and type(None) in get_args(typ)):
        args = [arg for arg in get_args(typ) if arg is not type(None)]
        if len(args) == 1:
            return args[0], True
    return typ, False
