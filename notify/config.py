from pathlib import Path
import json
import logging

from notify.services import SERVICE_TYPES

NOTIFY_CONFIG_PATH = Path("notify.json")

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """The notification config file is unreadable or invalid."""


class NotifyConfig:
    """Loads the notification services config and builds the services."""

    def __init__(self, config_path: Path = NOTIFY_CONFIG_PATH):
        self.config_path = Path(config_path)

    def create_template(self) -> None:
        if self.config_path.exists():
            return
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        template = {
            "services": [
                {"type": "log"},
            ]
        }
        with open(self.config_path, "w", encoding="utf-8") as f:
            json.dump(template, f, indent=2)
        logger.info("Created notification config template at %s", self.config_path)

    def load_entries(self) -> list:
        if not self.config_path.exists():
            self.create_template()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except OSError as e:
            raise ConfigError(f"unable to read {self.config_path} file: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"invalid JSON in {self.config_path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigError("Notification config must be a JSON object with a 'services' list.")
        services = raw.get("services", [])
        if not isinstance(services, list):
            raise ConfigError("'services' must be a list of service entries.")

        entries = []
        for index, item in enumerate(services):
            if not isinstance(item, dict):
                raise ConfigError(f"service #{index} must be a JSON object")
            service_type = item.get("type")
            if service_type not in SERVICE_TYPES:
                raise ConfigError(
                    f"service #{index} has unknown type {service_type!r}. Valid types are: {sorted(SERVICE_TYPES)}"
                )
            if service_type == "webhook" and not item.get("url"):
                raise ConfigError(f"service #{index} ({service_type}) requires a 'url'")
            _check_fields(index, item)
            entries.append(item)
        return entries

    def build_services(self, context) -> list:
        services = [SERVICE_TYPES[entry["type"]].from_config(entry, context) for entry in self.load_entries()]
        if not services:
            logger.warning("No notification services configured in %s.", self.config_path)
        return services


# Optional fields and the JSON types they must have when present.
FIELD_TYPES = {
    "name": (str, "a string"),
    "url": (str, "a string"),
    "players_separator": (str, "a string"),
    "headers": (dict, "an object"),
    "custom_data": (dict, "an object"),
    "empty_custom_data": (dict, "an object"),
}


def _check_fields(index: int, item: dict) -> None:
    for field, (expected, description) in FIELD_TYPES.items():
        if field in item and not isinstance(item[field], expected):
            raise ConfigError(f"service #{index} field '{field}' must be {description}")
    for key, value in item.get("headers", {}).items():
        if not isinstance(value, str):
            raise ConfigError(f"service #{index} header '{key}' must be a string")
