"""Site configuration for Bramble.

The configuration is read once from ``_config.yml`` in the source root and is
never mutated afterwards. Values computed during the build (posts, build time,
tag and category indexes) are layered on with ``Config.merged``, which returns
a new Config.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .utils import DEFAULT_MARKDOWN_EXT

CONFIG_FILENAME = "_config.yml"

DEFAULT_CONFIG: dict[str, Any] = {
    "destination": "_site",
    "default_layout": "default",
    "baseurl": "",
    "markdown_ext": list(DEFAULT_MARKDOWN_EXT),
}


class Config(Mapping[str, Any]):
    """Read-only, ordered mapping of site settings.

    Templates see it as ``site``; ``site.title`` and ``site["title"]`` both
    work because Jinja2 falls back to item lookup.
    """

    def __init__(self, values: Mapping[str, Any] | None = None, source_path: Path | None = None):
        self._values: dict[str, Any] = dict(values or {})
        self.source_path = source_path

    @classmethod
    def load(cls, path: Path) -> Config:
        """Load configuration from a YAML file, applying defaults.

        Args:
            path: Path to the configuration file.

        Returns:
            Config with DEFAULT_CONFIG values under the loaded ones.

        Raises:
            ConfigError: If the file is missing, is not valid YAML, does not
                contain a mapping or names no usable ``destination``.
        """
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ConfigError(path, "configuration file not found", exc) from exc
        except OSError as exc:
            raise ConfigError(path, f"cannot read configuration: {exc}", exc) from exc
        try:
            loaded = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(path, f"invalid YAML: {exc}", exc) from exc
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(path, "configuration must be a mapping")
        values = dict(DEFAULT_CONFIG)
        values.update({str(key): value for key, value in loaded.items()})
        destination = values["destination"]
        if not isinstance(destination, str) or not destination.strip():
            raise ConfigError(path, "destination must be a non-empty path")
        return cls(values, source_path=path)

    def merged(self, **values: Any) -> Config:
        """Return a new Config with ``values`` layered on top."""
        combined = dict(self._values)
        combined.update(values)
        return Config(combined, source_path=self.source_path)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"Config({len(self._values)} keys)"


def markdown_extensions(config: Mapping[str, Any]) -> tuple[str, ...]:
    """Return the configured markdown extensions without leading dots.

    Accepts a YAML list or a Jekyll-style comma-separated string.

    Raises:
        ConfigError: If ``markdown_ext`` is any other kind of value.

    Examples:
        >>> markdown_extensions({"markdown_ext": "markdown,md"})
        ('markdown', 'md')
    """
    value = config.get("markdown_ext")
    if not value:
        return DEFAULT_MARKDOWN_EXT
    if isinstance(value, str):
        value = value.split(",")
    elif not isinstance(value, (list, tuple)):
        context = getattr(config, "source_path", None) or CONFIG_FILENAME
        raise ConfigError(context, "markdown_ext must be a list or a comma-separated string")
    return tuple(str(ext).strip().lstrip(".") for ext in value if str(ext).strip())
