from __future__ import annotations

import yaml
from pathlib import Path
from typing import Any, Dict, Optional

from .models import Settings

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_SETTINGS_PATH = PROJECT_ROOT / "config/settings.yml"


def load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def load_settings(settings_path: Optional[Path] = None, **overrides: Any) -> Settings:
    """Read settings from YAML and apply keyword overrides that are not ``None``.

    Without ``settings_path`` the bundled ``config/settings.yml`` is used when
    present, otherwise defaults. An explicit path must exist.
    """

    if settings_path is None:
        config = load_yaml(DEFAULT_SETTINGS_PATH) if DEFAULT_SETTINGS_PATH.exists() else {}
    else:
        path = Path(settings_path)
        if not path.is_absolute() and not path.exists():
            path = (PROJECT_ROOT / path).resolve()
        config = load_yaml(path)
    config.update({key: value for key, value in overrides.items() if value is not None})
    return Settings(**config)
