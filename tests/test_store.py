import json

import pytest

from construct_chat.llm.types import ProviderKind, SamplingSettings
from construct_chat.store import DEFAULT_PROFILE_ID, SettingsStore


@pytest.fixture
def settings_file(tmp_path):
    return tmp_path / "llm-settings.json"


def test_missing_file_uses_defaults(settings_file):
    store = SettingsStore(str(settings_file)).load()

    assert store.endpoint == ""
    assert store.endpoint_type is ProviderKind.KOBOLD
    assert store.stop_brackets is True
    assert store.do_multi_line is False
    assert store.sampling == SamplingSettings()


def test_changes_are_saved_and_reloaded(settings_file):
    store = SettingsStore(str(settings_file)).load()
    store.set_connection_information("localhost:5000", "Ooba", password="pw")
    store.set_sampling({"temperature": 0.7, "unknown": 1}, stop_brackets=False)

    reloaded = SettingsStore(str(settings_file)).load()
    assert reloaded.endpoint == "localhost:5000"
    assert reloaded.endpoint_type is ProviderKind.OOBA
    assert reloaded.password == "pw"
    assert reloaded.sampling.temperature == 0.7
    assert reloaded.stop_brackets is False
    assert "unknown" not in json.loads(settings_file.read_text())["settings"]


def test_empty_password_keeps_previous(store):
    store.set_connection_information("localhost:5000", "Ooba", password="pw")
    store.set_connection_information("localhost:5001", "Kobold")
    assert store.password == "pw"
    assert store.connection_information()["endpointType"] == "Kobold"


def test_ephemeral_default_profile(store):
    store.set_connection_information("sk-key", "OAI")
    store.set("openaiModel", "gpt-4")

    profile = store.current_profile()
    assert profile.id == DEFAULT_PROFILE_ID
    assert profile.name == "Default"
    assert profile.endpoint == "sk-key"
    assert profile.endpoint_type is ProviderKind.OAI
    assert profile.openai_model == "gpt-4"


def test_connection_preset_upsert_and_selection(store):
    store.upsert_connection_preset({"_id": "p1", "name": "Local", "endpoint": "localhost:5001", "endpointType": "Kobold"})
    store.upsert_connection_preset({"_id": "p2", "name": "Proxy", "endpoint": "proxy.test", "endpointType": "P-Claude"})
    presets = store.upsert_connection_preset({"_id": "p1", "name": "Local 2", "endpoint": "localhost:5002"})

    assert [p.name for p in presets] == ["Local 2", "Proxy"]

    store.set("currentConnectionPreset", "p2")
    profile = store.current_profile()
    assert profile.id == "p2"
    assert profile.endpoint_type is ProviderKind.PROXY_CLAUDE

    store.remove_connection_preset("p2")
    assert store.current_profile().id == DEFAULT_PROFILE_ID


def test_settings_preset_requires_id(store):
    with pytest.raises(ValueError):
        store.upsert_settings_preset({"name": "No id"})

    store.upsert_settings_preset({"_id": "s1", "name": "Creative", "temperature": 1.2})
    presets = store.upsert_settings_preset({"_id": "s1", "name": "Calm", "temperature": 0.5})
    assert presets == [{"_id": "s1", "name": "Calm", "temperature": 0.5}]
    assert store.remove_settings_preset("s1") == []


def test_palm_filters_fall_back_to_block_none(store):
    store.set_palm_filters({"HARM_CATEGORY_TOXICITY": "BLOCK_LOW_AND_ABOVE", "HARM_CATEGORY_VIOLENCE": "bogus"})
    filters = store.palm_filters

    assert filters.threshold("HARM_CATEGORY_TOXICITY") == "BLOCK_LOW_AND_ABOVE"
    assert filters.threshold("HARM_CATEGORY_VIOLENCE") == "BLOCK_NONE"
    assert len(filters.safety_settings()) == 7
