import threading

from wordboard.services.board.cards import BLUE, BOARD_SIZE, RED
from wordboard.services.board.merge import Snapshot
from wordboard.services.board.presence import PresenceTracker
from wordboard.services.board.reaper import IdleReaper
from wordboard.services.board.registry import SessionRegistry

from conftest import FIRST_BLUE, FIRST_RED

NOW = 1_000_000.0


def _clock():
    return NOW


# ---- registry ----

def test_create_if_absent_is_idempotent(board):
    registry = SessionRegistry(clock=_clock)
    first, created = registry.create_if_absent('ABC', board)
    again, created_again = registry.create_if_absent('ABC', board)
    assert created and not created_again
    assert first is again
    assert len(registry) == 1
    assert first.current_team == BLUE
    assert first.revealed == [False] * BOARD_SIZE
    assert first.last_activity == NOW


def test_existing_session_is_never_replaced(board):
    registry = SessionRegistry()
    session, _ = registry.create_if_absent('ABC', board)
    session.revealed[FIRST_BLUE] = True
    snapshot = Snapshot(tuple([False] * BOARD_SIZE), RED)
    same, created = registry.create_if_absent('ABC', board, snapshot)
    assert not created
    assert same.revealed[FIRST_BLUE]
    assert same.current_team == BLUE


def test_new_session_seeded_from_saved_state(board):
    registry = SessionRegistry()
    flags = [False] * BOARD_SIZE
    flags[FIRST_RED] = True
    session, created = registry.create_if_absent('ABC', board, Snapshot(tuple(flags), RED))
    assert created
    assert session.current_team == RED
    assert session.revealed[FIRST_RED]
    assert session.remaining_counts[RED] == 7


def test_concurrent_creates_yield_one_session(board):
    registry = SessionRegistry()
    results = []
    barrier = threading.Barrier(8)

    def _create():
        barrier.wait()
        results.append(registry.create_if_absent('RACE', board))

    threads = [threading.Thread(target=_create) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sum(1 for _, created in results if created) == 1
    assert len({id(session) for session, _ in results}) == 1


def test_remove(board):
    registry = SessionRegistry()
    registry.create_if_absent('ABC', board)
    assert registry.remove('ABC') is not None
    assert registry.get('ABC') is None
    assert registry.remove('ABC') is None


# ---- presence ----

def test_attach_moves_connection_between_sessions(board):
    registry = SessionRegistry()
    one, _ = registry.create_if_absent('ONE', board)
    two, _ = registry.create_if_absent('TWO', board)
    presence = PresenceTracker()

    presence.attach(one, 'sid-1')
    assert presence.session_key('sid-1') == 'ONE'
    previous = presence.attach(two, 'sid-1')
    assert previous is one
    assert 'sid-1' not in one.players
    assert two.players == {'sid-1'}
    assert len(presence) == 1


def test_empty_session_survives_detach(board):
    registry = SessionRegistry(clock=lambda: 10.0)
    session, _ = registry.create_if_absent('ONE', board)
    presence = PresenceTracker()
    presence.attach(session, 'a')
    presence.attach(session, 'b')

    presence.detach('a', now=20.0)
    assert session.last_activity == 10.0
    presence.detach('b', now=30.0)
    assert session.players == set()
    assert session.last_activity == 30.0
    assert registry.get('ONE') is session
    assert presence.detach('b') is None


# ---- reaper ----

def _reaper(registry, removed):
    return IdleReaper(registry, idle_timeout=3600, interval=3600,
                      on_removed=removed.append, clock=_clock)


def test_reaper_drops_stale_and_keeps_recent(board):
    registry = SessionRegistry()
    stale, _ = registry.create_if_absent('STALE', board)
    fresh, _ = registry.create_if_absent('FRESH', board)
    stale.last_activity = NOW - 61 * 60
    fresh.last_activity = NOW - 59 * 60
    removed = []

    assert _reaper(registry, removed).sweep() == ['STALE']
    assert removed == ['STALE']
    assert registry.get('STALE') is None
    assert registry.get('FRESH') is fresh


def test_reaper_ignores_occupancy(board):
    # Idle time alone decides; connected players do not keep a game alive
    registry = SessionRegistry()
    session, _ = registry.create_if_absent('BUSY', board)
    PresenceTracker().attach(session, 'sid-1')
    session.last_activity = NOW - 2 * 3600
    removed = []
    _reaper(registry, removed).sweep()
    assert removed == ['BUSY']


def test_reaper_skips_overlapping_sweep(board):
    registry = SessionRegistry()
    session, _ = registry.create_if_absent('OLD', board)
    session.last_activity = 0
    removed = []
    reaper = _reaper(registry, removed)
    reaper._sweep_lock.acquire()
    try:
        assert reaper.sweep() == []
    finally:
        reaper._sweep_lock.release()
    assert registry.get('OLD') is session


def test_reaper_start_and_stop():
    started = []
    reaper = IdleReaper(SessionRegistry(), interval=0.01)
    reaper.start(lambda fn: started.append(fn))
    reaper.start(lambda fn: started.append(fn))
    assert len(started) == 1
    reaper.stop()
    # Loop exits immediately once stopped
    started[0]()


def test_remove_if_idle_only_drops_the_same_record(board):
    registry = SessionRegistry()
    old, _ = registry.create_if_absent('ABC', board)
    registry.remove('ABC')
    current, _ = registry.create_if_absent('ABC', board)
    old.last_activity = current.last_activity = 0

    assert registry.remove_if_idle('ABC', old, cutoff=100) is False
    assert registry.get('ABC') is current
    assert registry.remove_if_idle('ABC', current, cutoff=100) is True
    assert registry.get('ABC') is None


def test_move_carries_connections_to_new_record(board):
    registry = SessionRegistry()
    old, _ = registry.create_if_absent('OLD', board)
    new, _ = registry.create_if_absent('NEW', board)
    presence = PresenceTracker()
    presence.attach(old, 'a')
    presence.attach(old, 'b')

    assert presence.move(old, new) == 2
    assert old.players == set()
    assert new.players == {'a', 'b'}
    assert presence.session_of('a') is new
