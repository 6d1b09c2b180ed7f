import pytest

from minircd.registry import (
    MAX_NICK_LENGTH,
    ClientInfo,
    ClientRegistry,
    ServerFullError,
)


def test_add_uses_first_free_slot():
    registry = ClientRegistry(3)
    assert registry.add("c0", "alice") == 0
    assert registry.add("c1", "bob") == 1
    assert len(registry) == 2


def test_removed_slot_is_reused():
    registry = ClientRegistry(3)
    registry.add("c0", "alice")
    registry.add("c1", "bob")
    removed = registry.remove(0)
    assert removed == ClientInfo("c0", "alice")
    assert registry.add("c2", "carol") == 0


def test_full_registry_raises():
    registry = ClientRegistry(1)
    registry.add("c0", "alice")
    with pytest.raises(ServerFullError):
        registry.add("c1", "bob")
    assert len(registry) == 1


def test_zero_capacity_is_always_full():
    with pytest.raises(ServerFullError):
        ClientRegistry(0).add("c0", "alice")


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        ClientRegistry(-1)


def test_nickname_taken_only_while_active():
    registry = ClientRegistry(2)
    index = registry.add("c0", "alice")
    assert registry.is_nickname_taken("alice")
    assert not registry.is_nickname_taken("bob")
    registry.remove(index)
    assert not registry.is_nickname_taken("alice")


def test_nickname_is_clipped():
    registry = ClientRegistry(1)
    registry.add("c0", "x" * 100)
    [(_, info)] = registry.active_clients()
    assert len(info.nickname) == MAX_NICK_LENGTH - 1


def test_remove_invalid_index():
    registry = ClientRegistry(2)
    with pytest.raises(IndexError):
        registry.remove(2)
    with pytest.raises(IndexError):
        registry.remove(-1)


def test_remove_inactive_slot_returns_none():
    registry = ClientRegistry(2)
    assert registry.remove(1) is None
    assert len(registry) == 0


def test_rename_updates_nickname():
    registry = ClientRegistry(2)
    index = registry.add("c0", "alice")
    assert registry.rename(index, "alicia") == "alicia"
    assert registry.is_nickname_taken("alicia")
    assert not registry.is_nickname_taken("alice")


def test_rename_inactive_slot_raises():
    registry = ClientRegistry(2)
    with pytest.raises(KeyError):
        registry.rename(0, "alice")
    with pytest.raises(IndexError):
        registry.rename(5, "alice")


def test_active_clients_snapshot():
    registry = ClientRegistry(3)
    registry.add("c0", "alice")
    registry.add("c1", "bob")
    registry.remove(0)
    snapshot = registry.active_clients()
    assert snapshot == [(1, ClientInfo("c1", "bob"))]
    snapshot[0][1].nickname = "changed"
    assert registry.is_nickname_taken("bob")