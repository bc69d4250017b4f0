"""Tests for new/rename/move/delete action handlers on real temp trees."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from notesview.actions import (
    CREATE_PARENTS_PROMPT,
    OVERWRITE_MOVE_PROMPT,
    OVERWRITE_RENAME_PROMPT,
    ActionPrompts,
    handle_delete,
    handle_move,
    handle_new,
    handle_rename,
)
from notesview.errors import (
    AlreadyExists,
    BoundaryViolation,
    InvalidInput,
    IOFailure,
    RootProtected,
    SelfReferentialMove,
)
from notesview.tree_model import FlatEntry


class _ScriptedPrompts:
    def __init__(self, answers: list[str | None] | None = None, confirms: list[bool] | None = None) -> None:
        self.answers = list(answers or [])
        self.confirms = list(confirms or [])
        self.asked: list[tuple[str, str]] = []
        self.confirmed: list[str] = []

    def ask(self, prompt: str, default: str) -> str | None:
        self.asked.append((prompt, default))
        return self.answers.pop(0)

    def confirm(self, prompt: str) -> bool:
        self.confirmed.append(prompt)
        return self.confirms.pop(0)

    def bundle(self) -> ActionPrompts:
        return ActionPrompts(ask=self.ask, confirm=self.confirm)


def _entry(path: Path) -> FlatEntry:
    return FlatEntry(path.name, path)


class _TempRootCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve() / "notes"
        self.root.mkdir()

    def tearDown(self) -> None:
        self._tmp.cleanup()


class NewActionTests(_TempRootCase):
    def test_creates_file_and_missing_parents(self) -> None:
        prompts = _ScriptedPrompts(["sub/new.md"])

        handle_new(_entry(self.root), self.root, prompts.bundle())

        self.assertTrue((self.root / "sub" / "new.md").is_file())
        self.assertEqual(prompts.asked, [("Enter new name: ", "")])

    def test_trailing_slash_creates_directory(self) -> None:
        handle_new(_entry(self.root), self.root, _ScriptedPrompts(["ideas/2024/"]).bundle())
        self.assertTrue((self.root / "ideas" / "2024").is_dir())

    def test_default_input_is_selected_directory(self) -> None:
        sub = self.root / "sub"
        sub.mkdir()
        prompts = _ScriptedPrompts([None])

        handle_new(_entry(sub), self.root, prompts.bundle())

        self.assertEqual(prompts.asked, [("Enter new name: ", "sub/")])
        self.assertEqual(list(sub.iterdir()), [])

    def test_empty_input_is_a_no_op(self) -> None:
        handle_new(_entry(self.root), self.root, _ScriptedPrompts([""]).bundle())
        self.assertEqual(list(self.root.iterdir()), [])

    def test_boundary_violation_touches_nothing(self) -> None:
        with self.assertRaises(BoundaryViolation):
            handle_new(_entry(self.root), self.root, _ScriptedPrompts(["../escape.md"]).bundle())
        self.assertFalse((self.root.parent / "escape.md").exists())

    def test_existing_target_is_rejected(self) -> None:
        (self.root / "a.md").write_text("keep me", encoding="utf-8")
        with self.assertRaises(AlreadyExists):
            handle_new(_entry(self.root), self.root, _ScriptedPrompts(["a.md"]).bundle())
        self.assertEqual((self.root / "a.md").read_text(encoding="utf-8"), "keep me")

    def test_file_selection_is_rejected(self) -> None:
        note = self.root / "a.md"
        note.write_text("", encoding="utf-8")
        prompts = _ScriptedPrompts()
        with self.assertRaises(InvalidInput):
            handle_new(_entry(note), self.root, prompts.bundle())
        self.assertEqual(prompts.asked, [])

    def test_os_failure_is_wrapped(self) -> None:
        with mock.patch("notesview.actions.open", side_effect=PermissionError("denied"), create=True):
            with self.assertRaises(IOFailure) as ctx:
                handle_new(_entry(self.root), self.root, _ScriptedPrompts(["x.md"]).bundle())
        self.assertIsInstance(ctx.exception.__cause__, PermissionError)


class RenameActionTests(_TempRootCase):
    def test_renames_in_place(self) -> None:
        note = self.root / "a.md"
        note.write_text("body", encoding="utf-8")
        prompts = _ScriptedPrompts(["b.md"])

        handle_rename(_entry(note), self.root, prompts.bundle())

        self.assertEqual(prompts.asked, [("Enter new name: ", "a.md")])
        self.assertFalse(note.exists())
        self.assertEqual((self.root / "b.md").read_text(encoding="utf-8"), "body")

    def test_unchanged_or_cancelled_is_a_no_op(self) -> None:
        note = self.root / "a.md"
        note.write_text("", encoding="utf-8")
        handle_rename(_entry(note), self.root, _ScriptedPrompts(["a.md"]).bundle())
        handle_rename(_entry(note), self.root, _ScriptedPrompts([None]).bundle())
        self.assertTrue(note.exists())

    def test_existing_target_asks_before_overwrite(self) -> None:
        note = self.root / "a.md"
        other = self.root / "b.md"
        note.write_text("new", encoding="utf-8")
        other.write_text("old", encoding="utf-8")

        declined = _ScriptedPrompts(["b.md"], [False])
        handle_rename(_entry(note), self.root, declined.bundle())
        self.assertEqual(declined.confirmed, [OVERWRITE_RENAME_PROMPT])
        self.assertEqual(other.read_text(encoding="utf-8"), "old")

        handle_rename(_entry(note), self.root, _ScriptedPrompts(["b.md"], [True]).bundle())
        self.assertEqual(other.read_text(encoding="utf-8"), "new")
        self.assertFalse(note.exists())

    def test_path_separators_are_rejected(self) -> None:
        note = self.root / "a.md"
        note.write_text("", encoding="utf-8")
        with self.assertRaises(InvalidInput):
            handle_rename(_entry(note), self.root, _ScriptedPrompts(["../a.md"]).bundle())
        self.assertTrue(note.exists())

    def test_root_cannot_be_renamed(self) -> None:
        with self.assertRaises(RootProtected):
            handle_rename(_entry(self.root), self.root, _ScriptedPrompts().bundle())


class MoveActionTests(_TempRootCase):
    def test_moves_into_existing_directory(self) -> None:
        note = self.root / "a.md"
        note.write_text("", encoding="utf-8")
        (self.root / "archive").mkdir()
        prompts = _ScriptedPrompts(["archive/a.md"])

        handle_move(_entry(note), self.root, prompts.bundle())

        self.assertEqual(prompts.asked, [("Enter new path: ", "a.md")])
        self.assertTrue((self.root / "archive" / "a.md").exists())
        self.assertFalse(note.exists())

    def test_missing_parent_requires_confirmation(self) -> None:
        note = self.root / "a.md"
        note.write_text("", encoding="utf-8")

        declined = _ScriptedPrompts(["x/y/a.md"], [False])
        handle_move(_entry(note), self.root, declined.bundle())
        self.assertEqual(declined.confirmed, [CREATE_PARENTS_PROMPT])
        self.assertFalse((self.root / "x").exists())
        self.assertTrue(note.exists())

        handle_move(_entry(note), self.root, _ScriptedPrompts(["x/y/a.md"], [True]).bundle())
        self.assertTrue((self.root / "x" / "y" / "a.md").exists())

    def test_existing_destination_asks_before_overwrite(self) -> None:
        note = self.root / "a.md"
        dest = self.root / "b.md"
        note.write_text("moved", encoding="utf-8")
        dest.write_text("old", encoding="utf-8")

        prompts = _ScriptedPrompts(["b.md"], [False])
        handle_move(_entry(note), self.root, prompts.bundle())

        self.assertEqual(prompts.confirmed, [OVERWRITE_MOVE_PROMPT])
        self.assertEqual(dest.read_text(encoding="utf-8"), "old")

    def test_moving_into_own_subtree_is_rejected(self) -> None:
        folder = self.root / "dir"
        (folder / "inner").mkdir(parents=True)
        with self.assertRaises(SelfReferentialMove):
            handle_move(_entry(folder), self.root, _ScriptedPrompts(["dir/inner"]).bundle())
        self.assertTrue((folder / "inner").is_dir())

    def test_sibling_with_shared_prefix_is_allowed(self) -> None:
        folder = self.root / "dir"
        folder.mkdir()
        handle_move(_entry(folder), self.root, _ScriptedPrompts(["dir2"]).bundle())
        self.assertTrue((self.root / "dir2").is_dir())

    def test_escape_is_rejected(self) -> None:
        note = self.root / "a.md"
        note.write_text("", encoding="utf-8")
        with self.assertRaises(BoundaryViolation):
            handle_move(_entry(note), self.root, _ScriptedPrompts(["../../a.md"]).bundle())
        self.assertTrue(note.exists())

    def test_root_cannot_be_moved(self) -> None:
        prompts = _ScriptedPrompts()
        with self.assertRaises(RootProtected):
            handle_move(_entry(self.root), self.root, prompts.bundle())
        self.assertEqual(prompts.asked, [])

    def test_same_destination_is_a_no_op(self) -> None:
        note = self.root / "a.md"
        note.write_text("", encoding="utf-8")
        prompts = _ScriptedPrompts(["./a.md"])
        handle_move(_entry(note), self.root, prompts.bundle())
        self.assertTrue(note.exists())
        self.assertEqual(prompts.confirmed, [])


class DeleteActionTests(_TempRootCase):
    def test_deletes_file_after_confirmation(self) -> None:
        note = self.root / "a.md"
        note.write_text("", encoding="utf-8")
        prompts = _ScriptedPrompts(confirms=[True])

        handle_delete(_entry(note), self.root, prompts.bundle())

        self.assertFalse(note.exists())
        self.assertEqual(prompts.confirmed, [f"Are you sure you want to delete {note}? (y/N): "])

    def test_declined_confirmation_keeps_entry(self) -> None:
        note = self.root / "a.md"
        note.write_text("", encoding="utf-8")
        handle_delete(_entry(note), self.root, _ScriptedPrompts(confirms=[False]).bundle())
        self.assertTrue(note.exists())

    def test_deletes_directories_recursively(self) -> None:
        folder = self.root / "dir"
        (folder / "deep").mkdir(parents=True)
        (folder / "deep" / "n.md").write_text("", encoding="utf-8")
        handle_delete(_entry(folder), self.root, _ScriptedPrompts(confirms=[True]).bundle())
        self.assertFalse(folder.exists())

    def test_root_cannot_be_deleted(self) -> None:
        with self.assertRaises(RootProtected):
            handle_delete(_entry(self.root), self.root, _ScriptedPrompts().bundle())
        self.assertTrue(self.root.is_dir())


if __name__ == "__main__":
    unittest.main()
