"""Settings module -- single entry point for application configuration.

:func:`get_typed_config` returns the merged configuration.  It loads
``config/default.yaml``, overlays the file named by ``LUNG_TNM_CONFIG``
when set, and finally applies any ``LTS_`` prefixed environment variable
overrides.

The staging core reads no configuration; only the command-line wrapper
does.
"""

from __future__ import annotations

import os
from pathlib import Path

from lung_tnm_staging.domain.models import AppConfig

# Project root is three levels up from ``src/lung_tnm_staging/config/``.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]

OVERLAY_ENV_VAR = "LUNG_TNM_CONFIG"
ENV_PREFIX = "LTS_"


def _overlay_path() -> Path | None:
    value = os.environ.get(OVERLAY_ENV_VAR)
    return Path(value) if value else None


def get_typed_config() -> AppConfig:
    """Return the :class:`AppConfig` wrapper for typed access.

    Returns
    -------
    AppConfig
        Frozen configuration object.
    """
    return AppConfig.load(
        default_path=_PROJECT_ROOT / "config" / "default.yaml",
        overlay_path=_overlay_path(),
        env_prefix=ENV_PREFIX,
    )
