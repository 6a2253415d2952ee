import pytest

from src.dental_center import dependencies


def test_get_store_requires_startup(monkeypatch):
    monkeypatch.setattr(dependencies, "_store", None)
    with pytest.raises(RuntimeError):
        dependencies.get_store()


def test_init_store_installs_the_store(monkeypatch, store):
    monkeypatch.setattr(dependencies, "_store", None)
    assert dependencies.init_store(store) is store
    assert dependencies.get_store() is store
