from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from tasklist.client import BoardSession, TaskListClient
from tasklist.errors import NotFoundError, ValidationError
from tasklist.store import TaskStore


@pytest.fixture()
def board(client: TestClient) -> BoardSession:
    session = BoardSession(TaskListClient(client))
    for title in ("C", "B", "A"):
        session.add(title)
    return session


def titles(session: BoardSession) -> list:
    return [t.title for t in session.tasks]


def test_drag_to_top_persists(board: BoardSession) -> None:
    assert titles(board) == ["A", "B", "C"]
    board.start_drag(2)
    assert board.hover(0, 0.1) == 0
    assert board.end_drag() is True

    assert titles(board) == ["C", "A", "B"]
    server = board.client.list_tasks()
    assert [(t.title, t.sortOrder) for t in server] == [("C", 0), ("A", 1), ("B", 2)]


def test_drop_in_place_sends_nothing(board: BoardSession) -> None:
    board.start_drag(1)
    board.hover(1, 0.9)
    assert board.end_drag() is False
    assert titles(board) == ["A", "B", "C"]


def test_cancelled_drag_sends_nothing(board: BoardSession) -> None:
    board.start_drag(0)
    board.hover_tail()
    board.cancel_drag()
    assert board.end_drag() is False
    assert titles(board) == ["A", "B", "C"]


def test_rejected_reorder_reloads_server_state(board: BoardSession, store: TaskStore) -> None:
    # Another tab deleted "C"; the local view still shows it.
    c = next(t for t in board.tasks if t.title == "C")
    store.delete(c.id)

    board.start_drag(2)
    board.hover(0, 0.1)
    with pytest.raises(NotFoundError):
        board.end_drag()
    assert titles(board) == ["A", "B"]


def test_client_maps_validation_errors(board: BoardSession) -> None:
    with pytest.raises(ValidationError) as ei:
        board.client.create_task("")
    assert ei.value.field == "title"
