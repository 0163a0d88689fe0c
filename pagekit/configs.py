from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

import yaml

from pagekit.exceptions import SettingsFileError


@dataclass(frozen=True)
class ClientSettings:
    """Per-API client settings, usually loaded from a YAML file."""

    base_url: str
    timeout: int = 10
    print_log: bool = False
    strict_body: bool = True
    min_fetch_interval: float = 0.0
    headers: Dict[str, str] = field(default_factory=dict)


def load_client_settings(path: str, defaults: Optional[ClientSettings] = None) -> ClientSettings:
    """Load `ClientSettings` from a YAML file.

    The file must contain a mapping with at least `base_url` (unless
    `defaults` supplies one). Example:

        base_url: https://api.example.com/v1
        timeout: 5
        print_log: true
        min_fetch_interval: 1.5
        headers:
          Accept-Language: en
    """
    if not os.path.isfile(path):
        raise SettingsFileError(path, "not found")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsFileError(path, f"is not valid YAML: {e}") from e

    data = data or {}
    if not isinstance(data, dict):
        raise SettingsFileError(path, "must contain a mapping")

    base = defaults
    base_url = data.get("base_url") or (base.base_url if base else None)
    if not base_url:
        raise SettingsFileError(path, "is missing base_url")

    headers = data.get("headers") or {}
    if not isinstance(headers, dict):
        raise SettingsFileError(path, "headers must be a mapping")

    try:
        return ClientSettings(
            base_url=str(base_url),
            timeout=int(data.get("timeout", base.timeout if base else 10)),
            print_log=bool(data.get("print_log", base.print_log if base else False)),
            strict_body=bool(data.get("strict_body", base.strict_body if base else True)),
            min_fetch_interval=float(data.get("min_fetch_interval", base.min_fetch_interval if base else 0.0)),
            headers={**(base.headers if base else {}), **{str(k): str(v) for k, v in headers.items()}},
        )
    except (TypeError, ValueError) as e:
        raise SettingsFileError(path, f"has an invalid value: {e}") from e
