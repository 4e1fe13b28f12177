import json
from sq.common.logger import log
from sq.common.setup import PATHS
from sq.util import now_iso


_SCHEMA_VERSION = 1

#region === Helpers and Paths ===

SETTINGS_PATH = PATHS.current / "settings.json"
DATABASE_PATH = PATHS.database

# Default values for every user setting.
_SETTINGS_DEFAULTS = {
    "confirm_clear": True,
    "snapshot_before_clear": True,
    "always_on_top": False,
}
# Helper to return a truly fresh, default settings dict.
def build_default_settings():
    return {
        "meta": {
            "schema_version": _SCHEMA_VERSION,
            "saved_at": now_iso(),
        },
        "settings": dict(_SETTINGS_DEFAULTS),
    }

#endregion === Helpers and Paths ===

#region === Saving and Loading Settings ===

# Loads settings.json, filling in defaults for anything missing or of the wrong type.
def load_settings():
    try:
        if not SETTINGS_PATH.exists():
            log.info("No existing settings.json found in `current`, loading fresh settings dict.")
            return build_default_settings()

        with open(SETTINGS_PATH, "r", encoding="utf-8") as f:
            config = json.load(f)
        defaulted_values = set()

        if not isinstance(config, dict):
            log.warning(f"Settings file '{SETTINGS_PATH}' did not contain an object, loading fresh settings dict.")
            return build_default_settings()

        # Validate the meta dict
        if "meta" not in config or not isinstance(config["meta"], dict):
            defaulted_values.add("meta")
            config["meta"] = {}
        if "schema_version" not in config["meta"] or not isinstance(config["meta"]["schema_version"], int):
            defaulted_values.add("meta.schema_version")
            config["meta"]["schema_version"] = _SCHEMA_VERSION

        # Validate the settings dict, every setting here is a bool
        if "settings" not in config or not isinstance(config["settings"], dict):
            defaulted_values.add("settings")
            config["settings"] = dict(_SETTINGS_DEFAULTS)
        else:
            for key, default in _SETTINGS_DEFAULTS.items():
                if not isinstance(config["settings"].get(key), type(default)):
                    defaulted_values.add(f"settings.{key}")
                    config["settings"][key] = default

        if defaulted_values:
            log.warning(f"Successfully loaded settings from '{SETTINGS_PATH}', but with missing values that were defaulted: {', '.join(sorted(defaulted_values))}")
        else:
            log.info(f"Successfully loaded settings from '{SETTINGS_PATH}'.")
        return config
    # Fall back to fresh settings in case of error, but warn in log
    except (json.JSONDecodeError, OSError, TypeError):
        log.warning("Ran into an error while trying to load settings.json, falling back to fresh settings.", exc_info=True)
        return build_default_settings()

# Write the given settings dict to disk under PATHS.current / settings.json
def save_settings(config):
    config["meta"]["saved_at"] = now_iso()
    with open(SETTINGS_PATH, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)
    log.info(f"Successfully saved settings to '{SETTINGS_PATH}'")

#endregion === Saving and Loading Settings ===
