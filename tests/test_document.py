"""
tests/test_document.py

Marker splicing and recovery of a missing README.
"""

import subprocess

import pytest

from activity_readme import document
from activity_readme.document import (
    END_MARKER,
    PLACEHOLDER,
    START_MARKER,
    ensure_document,
    recovery_refs,
    splice_section,
    update_document,
)
from activity_readme.errors import DocumentAccessError


def test_splice_keeps_text_outside_markers():
    doc = f"# Me\n\nintro\n{START_MARKER}old{END_MARKER}\ntrailer\n"

    updated, changed = splice_section(doc, START_MARKER, END_MARKER, "NEW")

    assert changed
    assert updated == f"# Me\n\nintro\n{START_MARKER}\nNEW\n{END_MARKER}\ntrailer\n"
    assert updated.count("NEW") == 1


def test_splice_is_idempotent():
    doc = f"head\n{START_MARKER}old{END_MARKER}\ntail"

    once, _ = splice_section(doc, START_MARKER, END_MARKER, "block")
    twice, changed = splice_section(once, START_MARKER, END_MARKER, "block")

    assert twice == once
    assert not changed


def test_splice_only_replaces_first_region():
    doc = f"{START_MARKER}a{END_MARKER} {START_MARKER}b{END_MARKER}"

    updated, _ = splice_section(doc, START_MARKER, END_MARKER, "x")

    assert updated == f"{START_MARKER}\nx\n{END_MARKER} {START_MARKER}b{END_MARKER}"


@pytest.mark.parametrize("doc", ["no markers here", f"{START_MARKER} unterminated", f"{END_MARKER} before {START_MARKER}"])
def test_splice_without_region_leaves_document(doc):
    assert splice_section(doc, START_MARKER, END_MARKER, "x") == (doc, False)


def test_update_document(tmp_path):
    readme = tmp_path / "README.md"
    readme.write_text(f"top\n{START_MARKER}\nold\n{END_MARKER}\n", encoding="utf-8")

    assert update_document(str(readme), "fresh") is True
    assert readme.read_text(encoding="utf-8") == f"top\n{START_MARKER}\nfresh\n{END_MARKER}\n"
    assert update_document(str(readme), "fresh") is False


def test_update_document_missing_file(tmp_path):
    with pytest.raises(DocumentAccessError):
        update_document(str(tmp_path / "missing.md"), "fresh")


def test_recovery_refs():
    assert recovery_refs(None) == ["HEAD", "origin/main", "origin/master"]
    assert recovery_refs("dev") == ["HEAD", "origin/dev", "origin/main", "origin/master"]
    assert recovery_refs("main") == ["HEAD", "origin/main", "origin/master"]


def test_ensure_document_keeps_existing_file(tmp_path, monkeypatch):
    readme = tmp_path / "README.md"
    readme.write_text("mine", encoding="utf-8")
    monkeypatch.setattr(document, "git_show", lambda ref, path: pytest.fail("git should not be called"))

    assert ensure_document(str(readme)) == "working tree"
    assert readme.read_text(encoding="utf-8") == "mine"


def test_ensure_document_restores_from_first_ref_with_content(tmp_path, monkeypatch):
    readme = tmp_path / "README.md"
    tried = []

    def fake_show(ref, path):
        tried.append(ref)
        return "from main\n" if ref == "origin/main" else None

    monkeypatch.setattr(document, "git_show", fake_show)

    assert ensure_document(str(readme), branch="feature") == "origin/main"
    assert tried == ["HEAD", "origin/feature", "origin/main"]
    assert readme.read_text(encoding="utf-8") == "from main\n"


def test_ensure_document_writes_placeholder(tmp_path, monkeypatch):
    readme = tmp_path / "README.md"
    monkeypatch.setattr(document, "git_show", lambda ref, path: None)

    assert ensure_document(str(readme)) == "placeholder"
    content = readme.read_text(encoding="utf-8")
    assert content == PLACEHOLDER
    assert START_MARKER in content and END_MARKER in content


def test_git_show_runs_git_in_document_directory(tmp_path, monkeypatch):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append((cmd, kwargs["cwd"]))
        return subprocess.CompletedProcess(cmd, 0, stdout=b"content", stderr=b"")

    monkeypatch.setattr(document.subprocess, "run", fake_run)

    assert document.git_show("HEAD", str(tmp_path / "README.md")) == "content"
    assert calls == [(["git", "show", "HEAD:./README.md"], str(tmp_path))]


def test_git_show_failure_returns_none(tmp_path, monkeypatch):
    monkeypatch.setattr(
        document.subprocess, "run",
        lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 128, stdout=b"", stderr=b"fatal: invalid object name"),
    )

    assert document.git_show("origin/master", str(tmp_path / "README.md")) is None


def test_git_show_without_git_binary(tmp_path, monkeypatch):
    def missing(cmd, **kwargs):
        raise FileNotFoundError("git")

    monkeypatch.setattr(document.subprocess, "run", missing)

    assert document.git_show("HEAD", str(tmp_path / "README.md")) is None


def test_update_document_keeps_crlf_outside_markers(tmp_path):
    readme = tmp_path / "README.md"
    readme.write_bytes(f"# Me\r\nintro\r\n{START_MARKER}old{END_MARKER}\r\ntrailer\r\n".encode("utf-8"))

    assert update_document(str(readme), "NEW") is True

    expected = f"# Me\r\nintro\r\n{START_MARKER}\nNEW\n{END_MARKER}\r\ntrailer\r\n".encode("utf-8")
    assert readme.read_bytes() == expected


def test_update_document_rejects_non_utf8_file(tmp_path):
    readme = tmp_path / "README.md"
    readme.write_bytes(b"\xff\xfe# Me\n")

    with pytest.raises(DocumentAccessError):
        update_document(str(readme), "NEW")


def test_git_show_non_utf8_content_returns_none(tmp_path, monkeypatch):
    monkeypatch.setattr(
        document.subprocess, "run",
        lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 0, stdout=b"\xff\xfe# Me", stderr=b""),
    )

    assert document.git_show("HEAD", str(tmp_path / "README.md")) is None


def test_git_show_keeps_crlf(tmp_path, monkeypatch):
    monkeypatch.setattr(
        document.subprocess, "run",
        lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 0, stdout=b"a\r\nb\r\n", stderr=b""),
    )

    assert document.git_show("HEAD", str(tmp_path / "README.md")) == "a\r\nb\r\n"
