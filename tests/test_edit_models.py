"""Tests for edit and result models."""

import pytest
from pydantic import ValidationError

from docs_edit_bot.models import ChangeRequestResult, EditPlan, FileEdit, FileWriteResult


class TestFileEdit:
    def test_accepts_camel_case_commit_message(self):
        edit = FileEdit.model_validate(
            {"path": "docs/a.md", "content": "X", "commitMessage": "add a"}
        )
        assert edit.commit_message == "add a"

    def test_accepts_field_name(self):
        edit = FileEdit(path="docs/a.md", content="X", commit_message="add a")
        assert edit.commit_message == "add a"

    def test_commit_message_optional(self):
        edit = FileEdit.model_validate({"path": "docs/a.md", "content": ""})
        assert edit.commit_message is None
        assert edit.content == ""

    def test_missing_content_rejected(self):
        with pytest.raises(ValidationError):
            FileEdit.model_validate({"path": "docs/a.md"})

    def test_empty_path_rejected(self):
        with pytest.raises(ValidationError):
            FileEdit.model_validate({"path": "", "content": "X"})


class TestEditPlan:
    def test_empty_plan_is_not_actionable(self):
        assert EditPlan().is_actionable is False

    def test_plan_with_file_is_actionable(self):
        plan = EditPlan(files=[FileEdit(path="docs/a.md", content="X")])
        assert plan.is_actionable is True

    def test_to_wire_uses_client_keys(self):
        plan = EditPlan.model_validate(
            {
                "files": [{"path": "docs/a.md", "content": "X", "commitMessage": "add a"}],
                "prTitle": "T",
                "prBody": "B",
            }
        )
        assert plan.to_wire() == {
            "files": [{"path": "docs/a.md", "content": "X", "commitMessage": "add a"}],
            "prTitle": "T",
            "prBody": "B",
        }

    def test_order_preserved(self):
        paths = ["docs/c.md", "docs/a.md", "docs/b.md"]
        plan = EditPlan(files=[FileEdit(path=p, content=p) for p in paths])
        assert [f.path for f in plan.files] == paths


class TestChangeRequestResult:
    def test_defaults(self):
        result = ChangeRequestResult(branch="ai-edit-1", base_branch="main")
        assert result.writes == []
        assert result.pull_request == {}
        assert result.number is None

    def test_holds_writes(self):
        result = ChangeRequestResult(
            branch="ai-edit-1",
            base_branch="main",
            writes=[FileWriteResult(path="docs/a.md", content_sha="b1", commit_sha="c1")],
            number=7,
            url="https://github.com/acme/cafe-docs/pull/7",
        )
        assert result.writes[0].created is True
        assert result.number == 7
