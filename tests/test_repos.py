"""Tests for repository list loading and validation."""

import pytest

from mrmm.errors import InvalidRepositoryError, RepositoryListError
from mrmm.models import RepositoryTarget
from mrmm.repos import load_targets, parse_targets, read_repository_list


def test_well_formed_list_keeps_order():
    targets = parse_targets(["rabbitmq/rabbitmq-server", "rabbitmq/rabbitmq-cli", "other/tool"])

    assert targets == [
        RepositoryTarget("rabbitmq", "rabbitmq-server"),
        RepositoryTarget("rabbitmq", "rabbitmq-cli"),
        RepositoryTarget("other", "tool"),
    ]


@pytest.mark.parametrize("bad", ["no-slash", "a/b/c", "/repo", "org/", "/", " / "])
def test_any_malformed_entry_rejects_whole_list(bad):
    with pytest.raises(InvalidRepositoryError) as excinfo:
        parse_targets(["org/good", bad, "org/also-good"])

    assert excinfo.value.entry == bad
    assert "org/repo format" in str(excinfo.value)


def test_first_offending_entry_is_reported():
    with pytest.raises(InvalidRepositoryError) as excinfo:
        parse_targets(["org/good", "first-bad", "second/bad/entry"])

    assert excinfo.value.entry == "first-bad"


def test_read_keeps_every_line(tmp_path):
    path = tmp_path / "repos.txt"
    path.write_text("org1/repoA\n\n# note\norg2/repoB\n", encoding="utf-8")

    assert read_repository_list(path) == ["org1/repoA", "", "# note", "org2/repoB"]


def test_blank_line_rejects_whole_list(tmp_path):
    path = tmp_path / "repos.txt"
    path.write_text("org1/repoA\n\n# note\norg2/repoB\n", encoding="utf-8")

    with pytest.raises(InvalidRepositoryError) as excinfo:
        load_targets(path)

    assert excinfo.value.entry == ""


def test_comment_line_rejects_whole_list(tmp_path):
    path = tmp_path / "repos.txt"
    path.write_text("org1/repoA\n# note\n", encoding="utf-8")

    with pytest.raises(InvalidRepositoryError, match="# note"):
        load_targets(path)


def test_load_targets(tmp_path):
    path = tmp_path / "repos.txt"
    path.write_text("org1/repoA\norg2/repoB\n", encoding="utf-8")

    assert [str(t) for t in load_targets(path)] == ["org1/repoA", "org2/repoB"]


def test_load_targets_rejects_malformed_file(tmp_path):
    path = tmp_path / "repos.txt"
    path.write_text("org1/repoA\nrepoB\n", encoding="utf-8")

    with pytest.raises(InvalidRepositoryError):
        load_targets(path)


def test_unreadable_file(tmp_path):
    with pytest.raises(RepositoryListError, match="Couldn't open"):
        read_repository_list(tmp_path / "missing.txt")
