"""Tests for the operation-specific Rich renderers."""

from notereap.output.renderers import render_candidates, render_result
from notereap.services.result import ErrorCode, ServiceResult

_ITEMS = [
    {"path": "Projects/Launch.md", "name": "Launch.md", "kind": "text", "extension": "md"},
    {"path": "assets/rocket.png", "name": "rocket.png", "kind": "attachment", "extension": "png"},
]


class TestRenderCandidates:
    def test_header_and_paths(self) -> None:
        output = render_candidates(_ITEMS, width=80)
        lines = output.splitlines()
        assert lines[0] == "Files to be deleted: 2"
        assert lines[1].strip() == "Projects › Launch.md"

    def test_attachment_tag(self) -> None:
        output = render_candidates(_ITEMS, width=80)
        assert output.splitlines()[2].strip() == "assets › rocket.png   PNG"

    def test_empty(self) -> None:
        assert render_candidates([]) == "Files to be deleted: 0"


class TestRenderPlan:
    def test_empty_plan_shows_message(self) -> None:
        result = ServiceResult(
            ok=True,
            op="plan",
            data={
                "root": "Root.md",
                "scope": "text-only",
                "recursive": True,
                "items": [],
                "count": 0,
                "message": "No linked notes found to delete.",
            },
        )
        output = render_result(result)
        assert "No linked notes found to delete." in output
        assert "Files to be deleted" not in output


class TestRenderDelete:
    def test_summary(self) -> None:
        result = ServiceResult(
            ok=True,
            op="delete",
            data={
                "deleted": ["a.md", "b.png"],
                "deleted_count": 2,
                "failures": [],
                "backed_up": ["a.md", "b.png"],
                "rewritten": ["Index.md"],
                "message": "Linked notes and attachments deleted.",
            },
        )
        output = render_result(result, verbose=True)
        assert "Linked notes and attachments deleted." in output
        assert "deleted: 2" in output
        assert "backed up: 2" in output
        assert "references cleaned in: 1" in output
        assert "Index.md" in output


class TestRenderBacklinks:
    def test_table(self) -> None:
        result = ServiceResult(
            ok=True,
            op="backlinks",
            data={
                "target": "Crew.md",
                "items": [{"path": "Index.md", "lines": [2, 5], "kinds": ["link"]}],
                "count": 1,
            },
        )
        output = render_result(result)
        assert "Referrer" in output
        assert "2, 5" in output

    def test_none(self) -> None:
        result = ServiceResult(
            ok=True, op="backlinks", data={"target": "Crew.md", "items": [], "count": 0}
        )
        assert "No backlinks." in render_result(result)


class TestRenderError:
    def test_error_lists_failures(self) -> None:
        result = ServiceResult.failure(
            "delete",
            ErrorCode.DELETE_FAILED,
            "1 of 2 documents were not deleted",
            data={"failures": [{"path": "notes/b.md", "op": "delete", "error": "busy"}]},
        )
        output = render_result(result)
        assert output.startswith("ERROR  delete")
        assert "code: DELETE_FAILED" in output
        assert "delete failed: notes › b.md" in output
