import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from engagement_telemetry.rules.models import TelemetryRules

API_URL_ENV = "TELEMETRY_API_URL"

_YAML_FENCE = re.compile(r"^\s*```ya?ml[^\n]*\n(.*?)^\s*```", re.DOTALL | re.MULTILINE)


def load_rules(path: Path | None = None) -> TelemetryRules:
    """
    Load and validate the telemetry rules file.
    Returns defaults when path is None.
    Raises FileNotFoundError if file missing.
    Raises ValueError if YAML or schema invalid.
    """
    if path is None:
        return TelemetryRules()

    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    text = path.read_text()
    fenced = _YAML_FENCE.search(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        return TelemetryRules.model_validate(data or {})
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e


def resolve_base_url(rules: TelemetryRules) -> str:
    """Collector base URL, with the environment taking precedence."""
    env_url = os.environ.get(API_URL_ENV)
    if env_url:
        return env_url.rstrip("/")
    return rules.transport.base_url.rstrip("/")
