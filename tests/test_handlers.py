import sys
from pathlib import Path

import pytest

from migration_hooks.errors import HandlerLoadError
from migration_hooks.handlers import NotAHandlerObject, load_step_handler
from migration_hooks.models import Direction, HookOperation, Timing


def _write(path: Path, body: str) -> Path:
    path.write_text(body)
    return path


def test_operation_table_from_instance(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "create_users_table.py",
        """
class Hook:
    def before_up(self):
        pass

    def after_down(self):
        pass


hook = Hook()
""",
    )
    handler = load_step_handler(path)
    assert handler.available == [HookOperation.BEFORE_UP, HookOperation.AFTER_DOWN]
    assert handler.get(HookOperation.AFTER_UP) is None


def test_class_is_instantiated_and_camel_case_names_accepted(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "legacy.py",
        """
class hook:
    def beforeUp(self):
        pass

    def afterDown(self):
        pass
""",
    )
    handler = load_step_handler(path)
    assert handler.available == [HookOperation.BEFORE_UP, HookOperation.AFTER_DOWN]


@pytest.mark.parametrize("body", ["", "hook = None\n", "hook = 'not an object'\n", "hook = [1, 2]\n"])
def test_non_object_hook_is_rejected(tmp_path: Path, body: str) -> None:
    path = _write(tmp_path / "broken.py", body)
    with pytest.raises(NotAHandlerObject):
        load_step_handler(path)


def test_syntax_error_is_load_error(tmp_path: Path) -> None:
    path = _write(tmp_path / "syntax.py", "def before_up(:\n")
    with pytest.raises(HandlerLoadError) as excinfo:
        load_step_handler(path)
    assert not isinstance(excinfo.value, NotAHandlerObject)
    assert isinstance(excinfo.value.__cause__, SyntaxError)


def test_handler_file_is_reloaded_on_every_call(tmp_path: Path) -> None:
    path = _write(tmp_path / "hot.py", "class Hook:\n    pass\n\nhook = Hook()\n")
    assert load_step_handler(path).available == []

    path.write_text("class Hook:\n    def after_up(self):\n        return 'edited'\n\nhook = Hook()\n")
    handler = load_step_handler(path)
    assert handler.get(HookOperation.AFTER_UP)() == "edited"


def test_operation_select_covers_all_slots() -> None:
    assert HookOperation.select(Timing.BEFORE, Direction.UP) is HookOperation.BEFORE_UP
    assert HookOperation.select(Timing.AFTER, Direction.DOWN) is HookOperation.AFTER_DOWN
    assert HookOperation.BEFORE_DOWN.legacy_name == "beforeDown"
    assert HookOperation.AFTER_UP.legacy_name == "afterUp"


def test_dataclass_handler_with_postponed_annotations(tmp_path: Path) -> None:
    path = _write(
        tmp_path / "dataclass_hook.py",
        """
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Hook:
    label: str = "backup"

    def before_up(self) -> str:
        return self.label


hook = Hook()
""",
    )
    handler = load_step_handler(path)
    assert handler.get(HookOperation.BEFORE_UP)() == "backup"


def test_loaded_handler_is_not_left_in_sys_modules(tmp_path: Path) -> None:
    path = _write(tmp_path / "transient.py", "class Hook:\n    pass\n\nhook = Hook()\n")
    before = set(sys.modules)
    load_step_handler(path)
    load_step_handler(path)
    assert {name for name in set(sys.modules) - before if name.startswith("migration_hooks_handler_")} == set()
    assert not (tmp_path / "__pycache__").exists()
