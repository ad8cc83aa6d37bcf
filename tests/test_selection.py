from typing import List, Optional

from querypad.engine.selection import SelectionController, SelectionState


class Recorder:
    def __init__(self):
        self.events: List[Optional[str]] = []

    def __call__(self, item: Optional[str]) -> None:
        self.events.append(item)


def test_empty_list_is_empty_state() -> None:
    controller: SelectionController[str] = SelectionController()

    controller.set_items([])

    assert controller.state is SelectionState.EMPTY
    assert controller.highlighted_index is None
    assert controller.highlighted is None


def test_set_items_highlights_first() -> None:
    controller = SelectionController()

    controller.set_items(["a", "b", "c"])

    assert controller.state is SelectionState.ACTIVE
    assert controller.highlighted_index == 0
    assert controller.commit() == "a"


def test_move_clamps_without_wrapping() -> None:
    controller = SelectionController()
    controller.set_items(["a", "b", "c"])

    controller.move_by(1)
    controller.move_by(1)
    controller.move_by(1)

    assert controller.highlighted_index == 2
    assert controller.commit() == "c"

    controller.move_by(-10)
    assert controller.highlighted_index == 0
    controller.move_up()
    assert controller.highlighted_index == 0


def test_commit_does_not_change_state() -> None:
    controller = SelectionController()
    controller.set_items(["a", "b"])
    controller.move_down()

    assert controller.commit() == "b"
    assert controller.commit() == "b"
    assert controller.state is SelectionState.ACTIVE


def test_operations_on_empty_are_no_ops() -> None:
    recorder = Recorder()
    controller = SelectionController(recorder)

    controller.move_by(3)
    controller.select("x")

    assert controller.commit() is None
    assert controller.state is SelectionState.EMPTY
    assert recorder.events == []


def test_cancel_dismisses() -> None:
    recorder = Recorder()
    controller = SelectionController(recorder)
    controller.set_items(["a", "b"])

    controller.cancel()

    assert controller.state is SelectionState.DISMISSED
    assert controller.dismissed
    assert controller.commit() is None
    controller.move_down()
    assert controller.highlighted is None
    assert recorder.events == ["a", None]


def test_listener_fires_once_per_highlight_change() -> None:
    recorder = Recorder()
    controller = SelectionController(recorder)

    controller.set_items(["a", "b", "c"])
    controller.move_by(1)
    controller.move_by(5)
    controller.move_by(1)  # already at the end
    controller.move_by(0)
    controller.set_items([])

    assert recorder.events == ["a", "b", "c", None]


def test_set_items_with_same_first_item_does_not_notify() -> None:
    recorder = Recorder()
    controller = SelectionController(recorder)
    first = "a"
    controller.set_items([first, "b"])

    controller.set_items([first])

    assert recorder.events == ["a"]


def test_select_specific_item() -> None:
    recorder = Recorder()
    controller = SelectionController(recorder)
    controller.set_items(["a", "b", "c"])

    controller.select("c")
    controller.select("missing")

    assert controller.highlighted == "c"
    assert recorder.events == ["a", "c"]


def test_set_items_after_cancel_reactivates() -> None:
    controller = SelectionController()
    controller.set_items(["a"])
    controller.cancel()

    controller.set_items(["x", "y"])

    assert controller.state is SelectionState.ACTIVE
    assert controller.commit() == "x"
