from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from wordboard import socketio
from wordboard.services.board.cards import InvalidBoard, parse_board
from wordboard.services.board.merge import Snapshot, merge_revealed, merge_snapshot, parse_snapshot
from wordboard.services.board.turns import reveal_card


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _game_key(data):
    key = data.get('gameKey')
    if isinstance(key, str) and key.strip():
        return key.strip()
    return None


class BoardGateway:
    """Translates Socket.IO traffic into session operations and broadcasts.

    Bad or stale commands are dropped with a log line; nothing is sent back
    to the caller. Every broadcast for a session is emitted while its lock is
    held so clients see states in the order they were produced.
    """

    def __init__(self, registry, presence, stats):
        self.registry = registry
        self.presence = presence
        self.stats = stats

    # ---- inbound events ----

    def on_connect(self, auth=None):
        current_app.logger.info(f"[connect] sid={_get_sid()}")

    def on_disconnect(self, *args):
        sid = _get_sid()
        session = self.presence.detach(sid)
        current_app.logger.info(
            f"[disconnect] sid={sid} game={session.key if session else None}"
        )

    def on_join_game(self, data):
        data = data if isinstance(data, dict) else {}
        key = _game_key(data)
        if key is None:
            current_app.logger.info("[join-skip] missing gameKey")
            return
        sid = _get_sid()
        self._leave_current(sid)

        snapshot = parse_snapshot(data.get('savedState', data.get('gameState')))
        session, created = self._lock_live_session(key, lambda: self._board_from(data), snapshot)
        if session is None:
            current_app.logger.info(f"[join-skip] game={key} not found and no board supplied")
            return
        try:
            if created:
                current_app.logger.info(f"[new-game] game={key} created on join sid={sid}")
            elif snapshot is not None:
                was_over = session.game_over
                if merge_snapshot(session, snapshot):
                    current_app.logger.info(
                        f"[merge] game={key} revealed={sum(session.revealed)} game_over={session.game_over}"
                    )
                if session.game_over and not was_over:
                    current_app.logger.info(f"[game-over] game={key} winner={session.winner} via rejoin")
                    self.stats.complete_game(key)
            self._attach(session, sid)
            current_app.logger.info(
                f"[join] game={key} sid={sid} players={len(session.players)} remaining={session.remaining_counts}"
            )
            emit('GAME_STATE', session.to_dict(), to=key)
            emit('PLAYER_JOINED', {'connectionId': sid, 'playerCount': len(session.players)},
                 to=key, include_self=False)
        finally:
            session.lock.release()

    def on_new_game(self, data):
        data = data if isinstance(data, dict) else {}
        key = _game_key(data)
        if key is None:
            current_app.logger.info("[new-game-skip] missing gameKey")
            return
        board = self._board_from(data)
        if board is None:
            current_app.logger.info(f"[new-game-skip] game={key} without a valid board")
            return
        sid = _get_sid()
        self._leave_current(sid)

        session, created = self._lock_live_session(key, lambda: board)
        try:
            if created:
                current_app.logger.info(f"[new-game] game={key} created sid={sid}")
            else:
                current_app.logger.info(f"[new-game] game={key} already live, joining it")
            self._attach(session, sid)
            emit('GAME_STATE', session.to_dict(), to=key)
        finally:
            session.lock.release()

    def on_reveal_card(self, data):
        data = data if isinstance(data, dict) else {}
        key = _game_key(data)
        sid = _get_sid()
        joined = self.presence.session_key(sid)
        if key is None or key != joined:
            current_app.logger.info(f"[reveal-skip] sid={sid} game={key} joined={joined}")
            return
        session = self.registry.get(key)
        if session is None:
            current_app.logger.info(f"[reveal-skip] game={key} no longer live")
            return

        with session.lock:
            if self.registry.get(key) is not session:
                current_app.logger.info(f"[reveal-skip] game={key} reaped before reveal")
                return
            index = data.get('cardIndex')
            result = reveal_card(session, index)
            if not result.applied:
                current_app.logger.info(f"[reveal-skip] game={key} {result.reason}")
                return
            current_app.logger.info(
                f"[reveal] game={key} card={index} color={session.board[index].color} "
                f"team={session.current_team} remaining={session.remaining_counts}"
            )
            if result.completed:
                current_app.logger.info(f"[game-over] game={key} winner={session.winner}")
                self.stats.complete_game(key)
            emit('GAME_STATE', session.to_dict(), to=key)

    # ---- helpers ----

    def _lock_live_session(self, key, make_board, snapshot=None):
        """Return ``(session, created)`` with ``session.lock`` held, or ``(None, False)``.

        The session is re-checked against the registry once locked. If the
        reaper removed it in between, a fresh session is created from the
        removed one's board and reveals and its players are carried over.
        """
        reaped = None
        while True:
            session = self.registry.get(key)
            created = False
            if session is None:
                if reaped is not None:
                    board = reaped.board
                    revealed = list(reaped.revealed)
                    if snapshot is not None:
                        revealed = merge_revealed(revealed, snapshot.revealed)
                    seed = Snapshot(tuple(revealed), reaped.current_team)
                else:
                    board, seed = make_board(), snapshot
                    if board is None:
                        return None, False
                session, created = self.registry.create_if_absent(key, board, seed)
                if created:
                    self.stats.add_game(key)
                    if reaped is not None:
                        self.presence.move(reaped, session)
                        current_app.logger.info(f"[revive] game={key} reaped during join, recreated")
            session.lock.acquire()
            if self.registry.get(key) is session:
                return session, created
            session.lock.release()
            reaped = session

    def _board_from(self, data):
        if data.get('board') is None and (data.get('words') is None or data.get('colors') is None):
            return None
        try:
            return parse_board(board=data.get('board'), words=data.get('words'), colors=data.get('colors'))
        except InvalidBoard as exc:
            current_app.logger.info(f"[board-invalid] game={data.get('gameKey')} {exc}")
            return None

    def _attach(self, session, sid):
        join_room(session.key)
        self.presence.attach(session, sid)
        session.touch()

    def _leave_current(self, sid):
        session = self.presence.detach(sid)
        if session is not None:
            leave_room(session.key)
        return session


def register_socketio_handlers(gateway: BoardGateway, namespace: str = '/') -> None:
    """Bind the gateway's handlers on the shared SocketIO instance."""
    socketio.on_event('connect', gateway.on_connect, namespace=namespace)
    socketio.on_event('disconnect', gateway.on_disconnect, namespace=namespace)
    socketio.on_event('JOIN_GAME', gateway.on_join_game, namespace=namespace)
    socketio.on_event('NEW_GAME', gateway.on_new_game, namespace=namespace)
    socketio.on_event('REVEAL_CARD', gateway.on_reveal_card, namespace=namespace)
