from __future__ import annotations

import copy
import logging

import pytest

from acedia.apps.gamemode.models import GameMode
from acedia.apps.voting.models import CheckpointStore, TravelCheckpoint
from acedia.apps.voting.schema import VotingTableRow
from acedia.apps.voting.service import VotingAdapter
from acedia.core.registry import ConfigRegistry

from conftest import FakeHost, FakeVotingHandler


def _critical(caplog: pytest.LogCaptureFixture) -> list[str]:
    return [r.getMessage() for r in caplog.records if r.levelno == logging.CRITICAL]


def _adapter(host: FakeHost, registry: ConfigRegistry, store: CheckpointStore) -> VotingAdapter:
    return VotingAdapter(host, registry, store)


def _vote(handler: FakeVotingHandler, index: int) -> None:
    handler.current_game_config = index
    handler.level_switch_pending = True


# ── Injection ─────────────────────────────────────────


def test_inject_builds_one_row_per_mode_in_order(host, handler, registry, store) -> None:
    modes = registry.get_named_instances(GameMode)
    adapter = _adapter(host, registry, store)

    assert adapter.inject(modes) is True

    assert adapter.is_injected
    assert [row.game_name for row in handler.game_config] == ["Alpha", "Bravo", "Charlie"]
    bravo = handler.game_config[1]
    assert bravo == VotingTableRow(
        game_class="KFMod.KFGameType",
        game_name="Bravo",
        prefix="KFB",
        acronym="bravo",
        mutators="ServerPerks.ServerPerksMut",
        options="GameLength=1?MaxPlayers=12",
    )
    assert handler.game_config[0].options == "GameLength=0"
    assert handler.game_config[2].prefix == "KF"


def test_inject_reports_bad_options(host, registry, store, caplog) -> None:
    caplog.set_level(logging.WARNING)
    _adapter(host, registry, store).inject(registry.get_named_instances(GameMode))
    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "bravo" in warnings[0] and "Bad?Key" in warnings[0]


def test_inject_twice_is_a_no_op(host, handler, registry, store) -> None:
    modes = registry.get_named_instances(GameMode)
    adapter = _adapter(host, registry, store)
    adapter.inject(modes)
    rows = list(handler.game_config)

    assert adapter.inject(modes[:1]) is True

    assert handler.game_config == rows
    assert len(host.lookups) == 1
    assert len(adapter.modes) == 3
    # the backup is still the host's own table
    adapter.restore_backup()
    assert handler.game_config == FakeVotingHandler().game_config


def test_inject_without_voting_handler_is_skipped(registry, store, caplog) -> None:
    host = FakeHost(handler=None)
    adapter = _adapter(host, registry, store)

    assert adapter.inject(registry.get_named_instances(GameMode)) is False

    assert not adapter.is_injected
    assert any("KFMapVoteHandler" in message for message in _critical(caplog))
    assert adapter.prepare_for_travel() is None
    adapter.restore_backup()


def test_restore_backup_puts_original_table_back(host, handler, registry, store) -> None:
    original = copy.deepcopy(handler.game_config)
    adapter = _adapter(host, registry, store)
    adapter.inject(registry.get_named_instances(GameMode))

    adapter.restore_backup()

    assert handler.game_config == original
    assert handler.default_game_config == original
    assert handler.save_count == 1
    assert not adapter.is_injected
    # nothing left to restore
    adapter.restore_backup()
    assert handler.save_count == 1


def test_inject_works_again_after_restore(host, handler, registry, store) -> None:
    modes = registry.get_named_instances(GameMode)
    adapter = _adapter(host, registry, store)
    adapter.inject(modes)
    adapter.restore_backup()

    adapter.inject(modes[1:])

    assert [row.game_name for row in handler.game_config] == ["Bravo", "Charlie"]


# ── Travel ────────────────────────────────────────────


def test_vote_carries_mode_over_restart(host, handler, registry, store) -> None:
    modes = registry.get_named_instances(GameMode)
    adapter = _adapter(host, registry, store)
    adapter.inject(modes)
    _vote(handler, 1)

    checkpoint = adapter.prepare_for_travel()
    adapter.restore_backup()

    assert checkpoint == TravelCheckpoint(target_mode_name="bravo", stored_difficulty=4.0)
    assert store.is_traveling
    # next map launches with the voted difficulty
    assert host.default_difficulty == 5

    fresh = _adapter(host, registry, store)
    mode = fresh.setup_after_travel()

    assert mode is modes[1]
    assert host.default_difficulty == 4.0
    assert not store.is_traveling
    # consumed
    assert fresh.setup_after_travel() is None


def test_out_of_range_index_aborts_travel(host, handler, registry, store, caplog) -> None:
    adapter = _adapter(host, registry, store)
    adapter.inject(registry.get_named_instances(GameMode))
    _vote(handler, 5)

    assert adapter.prepare_for_travel() is None

    assert not store.is_traveling
    assert host.default_difficulty == 4.0
    assert any("out of range" in message for message in _critical(caplog))
    assert _adapter(host, registry, store).setup_after_travel() is None


def test_negative_index_aborts_travel(host, handler, registry, store) -> None:
    adapter = _adapter(host, registry, store)
    adapter.inject(registry.get_named_instances(GameMode))
    _vote(handler, -1)

    assert adapter.prepare_for_travel() is None
    assert not store.is_traveling


def test_index_beyond_injected_modes_aborts_travel(host, handler, registry, store, caplog) -> None:
    adapter = _adapter(host, registry, store)
    adapter.inject(registry.get_named_instances(GameMode))
    # something else appended a row after injection
    handler.game_config.append({"game_name": "Foreign"})
    _vote(handler, 3)

    assert adapter.prepare_for_travel() is None

    assert not store.is_traveling
    messages = _critical(caplog)
    assert any("does not match any of the 3" in message for message in messages)
    assert not any("out of range" in message for message in messages)


def test_restart_not_caused_by_vote_is_ignored(host, handler, registry, store) -> None:
    adapter = _adapter(host, registry, store)
    adapter.inject(registry.get_named_instances(GameMode))
    handler.current_game_config = 2
    handler.level_switch_pending = False

    assert adapter.prepare_for_travel() is None
    assert not store.is_traveling
    assert host.default_difficulty == 4.0


def test_setup_without_checkpoint_returns_none(host, registry, store) -> None:
    assert _adapter(host, registry, store).setup_after_travel() is None
    assert host.default_difficulty == 4.0


def test_setup_with_unknown_mode_restores_difficulty(host, store, caplog) -> None:
    store.write(TravelCheckpoint(target_mode_name="gone", stored_difficulty=2.0))
    host.default_difficulty = 7

    mode = _adapter(host, ConfigRegistry(), store).setup_after_travel()

    assert mode is None
    assert host.default_difficulty == 2.0
    assert not store.is_traveling
    assert any("gone" in message for message in _critical(caplog))


def test_inject_without_modes_leaves_table_untouched(host, handler, registry, store, caplog) -> None:
    caplog.set_level(logging.WARNING)
    adapter = _adapter(host, registry, store)

    assert adapter.inject([]) is False

    assert not adapter.is_injected
    assert handler.game_config == FakeVotingHandler().game_config
    assert host.lookups == []
    assert any("No game modes" in r.getMessage() for r in caplog.records)
    # a later injection with modes still works
    assert adapter.inject(registry.get_named_instances(GameMode)) is True


# ── Checkpoint store ──────────────────────────────────


def test_checkpoint_store_peek_and_clear(store) -> None:
    assert store.peek() is None
    checkpoint = TravelCheckpoint(target_mode_name="bravo", stored_difficulty=4.0)
    store.write(checkpoint)

    assert store.peek() == checkpoint
    assert store.is_traveling

    store.clear()
    assert store.peek() is None
    assert store.consume() is None


def test_unconsumed_checkpoint_is_overwritten_with_warning(store, caplog) -> None:
    caplog.set_level(logging.WARNING)
    store.write(TravelCheckpoint(target_mode_name="alpha", stored_difficulty=1.0))
    store.write(TravelCheckpoint(target_mode_name="charlie", stored_difficulty=2.0))

    assert store.consume() == TravelCheckpoint(target_mode_name="charlie", stored_difficulty=2.0)
    assert any("Overwriting" in r.getMessage() for r in caplog.records)
