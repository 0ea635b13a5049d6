# config.py

import json
import os


class Config:
    """Settings for the ``bucket-queue`` command line.

    Attributes
    ----------
    priority_slots:
        Number of priority levels used when ``--slots`` is not given.
    logging:
        Mapping with ``level`` (name understood by :mod:`logging`),
        ``format`` and an optional ``file``. When ``file`` is ``None`` log
        records go to standard error.
    """

    config_file: str | None = None

    priority_slots = 16

    logging = {
        "level": "WARNING",
        "format": "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        "file": None,
    }

    @classmethod
    def load_from_file(cls, path: str) -> None:
        """Load configuration values from a JSON or YAML file.

        Only keys that already exist as attributes on ``Config`` are
        assigned. Nested dictionaries are merged when the existing attribute
        is also a ``dict``. A relative ``logging.file`` is resolved against
        the directory containing ``path``.

        Parameters
        ----------
        path:
            Path ending in ``.json``, ``.yaml`` or ``.yml``.
        """

        data = _read(path)
        cls.config_file = os.path.abspath(path)
        base_dir = os.path.dirname(cls.config_file)

        for key, value in data.items():
            if key.startswith("_") or not hasattr(cls, key):
                continue
            current = getattr(cls, key)
            if callable(current):
                continue
            if isinstance(current, dict) and isinstance(value, dict):
                current.update(value)
            else:
                setattr(cls, key, value)

        log_file = cls.logging.get("file")
        if log_file and not os.path.isabs(log_file):
            cls.logging["file"] = os.path.join(base_dir, log_file)


def _read(path: str) -> dict:
    if not os.path.exists(path):
        raise FileNotFoundError(path)
    suffix = os.path.splitext(path)[1].lower()
    with open(path) as f:
        if suffix == ".json":
            data = json.load(f)
        elif suffix in (".yaml", ".yml"):
            import yaml

            data = yaml.safe_load(f)
        else:
            raise ValueError(f"unsupported config format: {path}")
    return data or {}


def load_config(path: str) -> dict:
    """Load configuration from ``path`` and return the data."""
    Config.load_from_file(path)
    return _read(path)
