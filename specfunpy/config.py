import json
import logging
import os
from pathlib import Path

import yaml

from specfunpy import env
from specfunpy.precision import Policy, Width, get_policy, resolve_width

_TUNABLE = ("max_iterations", "max_root_iterations", "asymptotic_threshold")


class Config:
    """Run-time settings for the precision policies and logging.

    Settings are read from an optional JSON or YAML file, for example::

        log_level: INFO
        precision:
          default: extended
          extended:
            max_iterations: 50000
          reduced:
            asymptotic_threshold: 12

    Environment variables (``SPECFUNPY_PRECISION``, ``SPECFUNPY_LOG_LEVEL``,
    ``SPECFUNPY_MAX_ITERATIONS``, ``SPECFUNPY_MAX_ROOT_ITERATIONS``) take
    precedence over the file, which takes precedence over the built-in
    defaults.
    """

    config: dict = {}
    path_config: str = ""

    def __init__(self, path_config: str | os.PathLike | None = None):
        self.log = logging.getLogger(self.__class__.__module__)
        self.config = {}
        self.file_type = ""
        if path_config is not None:
            self.path_config = str(path_config)
            self.__load(Path(path_config))
        self.__read()

    def __load(self, path: Path):
        self.file_type = path.suffix
        if not path.is_file():
            raise ValueError(f"Could not read config file {path}. Check if the file exists.")
        match self.file_type:
            case ".json":
                with open(path) as data:
                    try:
                        config = json.load(data)
                    except json.JSONDecodeError as exc:
                        raise ValueError(f"Malformed JSON in {path}: {exc}") from exc
            case ".yaml" | ".yml":
                with open(path) as data:
                    try:
                        config = yaml.safe_load(data)
                    except yaml.YAMLError as exc:
                        raise ValueError(f"Malformed YAML in {path}: {exc}") from exc
            case _:
                raise ValueError("The provided config file needs to be a json or yaml file!")
        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ValueError(f"The config file {path} must hold a mapping at the top level")
        self.config = config
        self.log.debug("Read configuration from %s", path)

    def __read(self):
        precision = self.config.get("precision", {}) or {}
        if not isinstance(precision, dict):
            raise ValueError("The 'precision' section must be a mapping")

        default = precision.get("default", Width.STANDARD.value)
        self.default_width = resolve_width(default)
        raw = os.environ.get(env.PRECISION, "")
        if raw.strip():
            name = env.normalize_width(raw, default="")
            if name:
                self.default_width = Width(name)
            else:
                self.log.warning("Ignoring unknown %s=%r", env.PRECISION, raw)

        self.log_level = str(self.config.get("log_level", "WARNING")).upper()
        raw_level = os.environ.get(env.LOG_LEVEL, "").strip()
        if raw_level:
            self.log_level = raw_level.upper()

        self.overrides = {width: {} for width in Width}
        for key, section in precision.items():
            if key == "default":
                continue
            width = resolve_width(key)
            if not isinstance(section, dict):
                raise ValueError(f"The precision section {key!r} must be a mapping")
            for name, value in section.items():
                if name not in _TUNABLE:
                    raise ValueError(
                        f"Unknown setting {name!r} for precision {key!r}; "
                        f"expected one of {', '.join(_TUNABLE)}"
                    )
                if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                    raise ValueError(
                        f"{key}.{name} must be a positive integer, got {value!r}"
                    )
                self.overrides[width][name] = value
            # Rejects thresholds below the built-in ones.
            get_policy(width, **self.overrides[width])

        iterations = env.parse_int_env(env.MAX_ITERATIONS, default=None)
        root_iterations = env.parse_int_env(env.MAX_ROOT_ITERATIONS, default=None)
        for width in Width:
            if iterations is not None:
                self.overrides[width]["max_iterations"] = iterations
            if root_iterations is not None:
                self.overrides[width]["max_root_iterations"] = root_iterations

    def policy(self, width: Width | str | None = None) -> Policy:
        """Return the tuned policy of ``width`` (the default width when omitted)."""

        width = self.default_width if width is None else resolve_width(width)
        return get_policy(width, **self.overrides[width])

    def as_dict(self) -> dict:
        return {
            "log_level": self.log_level,
            "precision": {
                "default": self.default_width.value,
                **{
                    width.value: dict(self.overrides[width])
                    for width in Width
                    if self.overrides[width]
                },
            },
        }
