"""Configuration sub-package.

Quick usage::

    from lung_tnm_staging.config import get_typed_config

    cfg = get_typed_config()
    print(cfg.get("output.language", "en"))
"""

from __future__ import annotations

from lung_tnm_staging.config.settings import get_typed_config

__all__ = [
    "get_typed_config",
]
