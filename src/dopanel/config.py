"""Panel settings, merged from defaults, environment, JSON file and CLI."""

import json
from dataclasses import dataclass, fields, replace
from os import getenv
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Text

MAX_PER_PAGE = 200


@dataclass(frozen=True)
class Settings:
    api_token: Text = ""
    title: Text = "DigitalOcean"
    refresh_seconds: int = 300
    per_page: int = 20
    timeout: float = 30.0


def load_user_config(path: Optional[Text]) -> Dict[Text, Any]:
    if not path:
        return {}

    config_path = Path(path)
    if not config_path.exists():
        raise ValueError(f"config path not found: {config_path}")

    try:
        data = json.loads(config_path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON config: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError(f"config must be a JSON object: {config_path}")

    return data


def _normalize(settings: Settings) -> Settings:
    return replace(
        settings,
        api_token=str(settings.api_token or "").strip(),
        refresh_seconds=max(1, int(settings.refresh_seconds)),
        per_page=max(1, min(MAX_PER_PAGE, int(settings.per_page))),
        timeout=float(settings.timeout),
    )


def resolve_settings(
    config_path: Optional[Text] = None,
    overrides: Optional[Mapping[Text, Any]] = None,
) -> Settings:
    """
    Builds the settings of the panel. Later sources win: defaults, then
    the DO_API_TOKEN environment variable, then the JSON config file and
    finally the overrides (typically from the command line) that are not
    None.

    Raises
    ------
    ValueError
        The config file can't be read or holds values of the wrong type
    """

    known = {f.name for f in fields(Settings)}
    values: Dict[Text, Any] = {}

    token = getenv("DO_API_TOKEN", "")
    if token:
        values["api_token"] = token

    for key, value in load_user_config(config_path).items():
        if key in known:
            values[key] = value

    for key, value in (overrides or {}).items():
        if key in known and value is not None:
            values[key] = value

    try:
        return _normalize(Settings(**values))
    except (TypeError, ValueError) as exc:
        raise ValueError(f"invalid settings: {exc}") from exc
