from anystore.util import ensure_uri

from sitqueue.connectivity import ManualNetwork, ProbeNetwork
from sitqueue.core.settings import Settings
from sitqueue.factories import (
    get_queue,
    make_guard,
    make_network,
    make_payload_store,
    make_queue,
)
from sitqueue.storage.payloads import FilePayloadStore, InlinePayloadStore


def test_config_settings(monkeypatch):
    settings = Settings()
    assert settings.uri == "data"
    assert settings.payload_tier == "file"
    assert settings.add_attachment_allowance == 1
    assert settings.proximity_feet == 100

    monkeypatch.setenv("SITQUEUE_PAYLOAD_TIER", "inline")
    monkeypatch.setenv("SITQUEUE_PROBE_HOST", "example.org")
    settings = Settings()
    assert settings.payload_tier == "inline"
    assert isinstance(make_payload_store(settings), InlinePayloadStore)
    network = make_network(settings)
    assert isinstance(network, ProbeNetwork)
    assert network.host == "example.org"
    assert network.port == 443


def test_config_factories(tmp_path):
    settings = Settings(uri=str(tmp_path), payload_uri=str(tmp_path / "photos"))
    queue = make_queue(settings)
    assert queue.store.uri == str(tmp_path)
    assert isinstance(queue.payloads, FilePayloadStore)
    assert queue.payloads.uri == str(tmp_path / "photos")
    assert isinstance(queue.monitor.source, ManualNetwork)

    network = ManualNetwork(online=False)
    queue = make_queue(settings, network=network)
    assert queue.monitor.source is network


def test_config_get_queue(tmp_path, monkeypatch):
    queue = get_queue(tmp_path)
    assert get_queue(tmp_path) is queue
    assert get_queue(str(tmp_path)) is queue
    assert get_queue(ensure_uri(tmp_path)) is queue
    assert get_queue(tmp_path / "other") is not queue
    assert queue.store.uri == ensure_uri(tmp_path)

    # the configured location, however it is given
    monkeypatch.chdir(tmp_path)
    queue = get_queue()
    assert get_queue() is queue
    assert get_queue(Settings().uri) is queue
    assert get_queue(tmp_path / "data") is queue
    assert get_queue(tmp_path) is not queue


def test_config_guard(monkeypatch):
    guard = make_guard()
    assert guard.allowance == 1
    assert guard.proximity_feet == 100

    monkeypatch.setenv("SITQUEUE_ADD_ATTACHMENT_ALLOWANCE", "3")
    monkeypatch.setenv("SITQUEUE_PROXIMITY_FEET", "50")
    guard = make_guard()
    assert guard.allowance == 3
    assert guard.proximity_feet == 50
