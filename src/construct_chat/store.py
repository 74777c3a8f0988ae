"""Persisted user settings: endpoint, credentials, sampling knobs and presets.

The store keeps an in-memory cache of a flat JSON document and writes the
whole document back on every change. It is injected into the gateway; nothing
else holds settings state.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from .llm.types import (
    ConnectionProfile,
    ContentFilters,
    ProviderKind,
    SamplingSettings,
)

logger = logging.getLogger(__name__)

DEFAULT_PROFILE_ID = "0000000000"


class SettingsStore:
    """Key/value settings with explicit load/save to a JSON file.

    Pass `path=None` for a purely in-memory store (tests, ephemeral sessions).
    """

    DEFAULTS: dict[str, Any] = {
        "endpoint": "",
        "endpointType": "",
        "password": "",
        "settings": None,
        "hordeModel": "",
        "stopBrackets": True,
        "openaiModel": "gpt-3.5-turbo-16k",
        "palmFilters": None,
        "palmModel": "models/text-bison-001",
        "connectionPresets": [],
        "currentConnectionPreset": "",
        "settingsPresets": [],
        "currentSettingsPreset": "",
        "doMultiLine": False,
        "selectedTokenizer": "LLaMA",
    }

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path) if path else None
        self._data: dict[str, Any] = {}

    def load(self) -> "SettingsStore":
        if self.path is None or not self.path.exists():
            logger.info("No settings file found, using defaults")
            return self
        with open(self.path, "r", encoding="utf-8") as f:
            raw = json.load(f)
        self._data = raw if isinstance(raw, dict) else {}
        logger.info("Loaded settings from %s", self.path)
        return self

    def save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(self._data, f, indent=2)

    def get(self, key: str) -> Any:
        if key in self._data:
            return self._data[key]
        return self.DEFAULTS.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.save()

    # --- Connection ---

    @property
    def endpoint(self) -> str:
        return self.get("endpoint") or ""

    @property
    def endpoint_type(self) -> ProviderKind:
        return ProviderKind.parse(self.get("endpointType"))

    @property
    def password(self) -> str:
        return self.get("password") or ""

    def set_connection_information(
        self,
        endpoint: str,
        endpoint_type: str,
        password: Optional[str] = None,
        horde_model: Optional[str] = None,
    ) -> None:
        self._data["endpoint"] = endpoint or ""
        self._data["endpointType"] = endpoint_type or ""
        if password:
            self._data["password"] = password
        if horde_model:
            self._data["hordeModel"] = horde_model
        self.save()

    def connection_information(self) -> dict:
        """Snapshot returned to the settings UI. Credentials are included, as the UI edits them."""
        return {
            "endpoint": self.endpoint,
            "endpointType": self.get("endpointType") or "",
            "password": self.password,
            "settings": self.sampling.to_dict(),
            "hordeModel": self.get("hordeModel"),
            "stopBrackets": self.stop_brackets,
        }

    # --- Sampling ---

    @property
    def sampling(self) -> SamplingSettings:
        return SamplingSettings.from_dict(self.get("settings"))

    @property
    def stop_brackets(self) -> bool:
        return bool(self.get("stopBrackets"))

    def set_sampling(self, new_settings: dict, stop_brackets: Optional[bool] = None) -> None:
        self._data["settings"] = SamplingSettings.from_dict(new_settings).to_dict()
        if stop_brackets is not None:
            self._data["stopBrackets"] = bool(stop_brackets)
        self.save()

    # --- Models and filters ---

    @property
    def horde_model(self) -> str:
        return self.get("hordeModel") or ""

    @property
    def openai_model(self) -> str:
        return self.get("openaiModel")

    @property
    def palm_model(self) -> str:
        return self.get("palmModel")

    @property
    def palm_filters(self) -> ContentFilters:
        return ContentFilters.from_dict(self.get("palmFilters"))

    def set_palm_filters(self, filters: dict) -> None:
        self.set("palmFilters", ContentFilters.from_dict(filters).to_dict())

    # --- Multi-line replies ---

    @property
    def do_multi_line(self) -> bool:
        return bool(self.get("doMultiLine"))

    # --- Token counting ---

    @property
    def selected_tokenizer(self) -> str:
        """Tokenizer family the UI counts context with: "LLaMA" or "GPT"."""
        return self.get("selectedTokenizer") or "LLaMA"

    # --- Presets ---

    @property
    def connection_presets(self) -> list[ConnectionProfile]:
        return [ConnectionProfile.from_dict(p) for p in self.get("connectionPresets") or []]

    def upsert_connection_preset(self, preset: dict) -> list[ConnectionProfile]:
        profile = ConnectionProfile.from_dict(preset)
        self.set("connectionPresets", _upsert_by_id(self.get("connectionPresets"), profile.to_dict()))
        return self.connection_presets

    def remove_connection_preset(self, preset_id: str) -> list[ConnectionProfile]:
        self.set("connectionPresets", _remove_by_id(self.get("connectionPresets"), preset_id))
        return self.connection_presets

    @property
    def current_connection_preset(self) -> str:
        return self.get("currentConnectionPreset") or ""

    @property
    def settings_presets(self) -> list[dict]:
        return list(self.get("settingsPresets") or [])

    def upsert_settings_preset(self, preset: dict) -> list[dict]:
        if not preset.get("_id"):
            raise ValueError("Settings preset requires an _id")
        self.set("settingsPresets", _upsert_by_id(self.get("settingsPresets"), dict(preset)))
        return self.settings_presets

    def remove_settings_preset(self, preset_id: str) -> list[dict]:
        self.set("settingsPresets", _remove_by_id(self.get("settingsPresets"), preset_id))
        return self.settings_presets

    @property
    def current_settings_preset(self) -> str:
        return self.get("currentSettingsPreset") or ""

    # --- Profile resolution ---

    def current_profile(self) -> ConnectionProfile:
        """The selected connection preset, or an ephemeral default built from loose settings."""
        current_id = self.current_connection_preset
        for profile in self.connection_presets:
            if current_id and profile.id == current_id:
                return profile
        return ConnectionProfile(
            id=DEFAULT_PROFILE_ID,
            name="Default",
            endpoint=self.endpoint,
            endpoint_type=self.endpoint_type,
            password=self.password,
            openai_model=self.openai_model,
            palm_model=self.palm_model,
            palm_filters=self.palm_filters,
            horde_model=self.horde_model,
        )


def _upsert_by_id(items: Optional[list[dict]], item: dict) -> list[dict]:
    result = list(items or [])
    for i, existing in enumerate(result):
        if existing.get("_id") == item.get("_id"):
            result[i] = item
            return result
    result.append(item)
    return result


def _remove_by_id(items: Optional[list[dict]], item_id: str) -> list[dict]:
    return [item for item in items or [] if item.get("_id") != item_id]
