"""Tests for the explicit environment model and path-list helpers."""

from environment import (
    Environment,
    dedupe_path_string,
    dedupe_paths,
    render_assignment,
    split_path,
)


class TestPathLists:
    """Tests for path-list helpers."""

    def test_dedupe_first_occurrence_wins(self):
        assert dedupe_path_string("/a:/b:/a:/c") == "/a:/b:/c"

    def test_dedupe_list(self):
        assert dedupe_paths(["/x", "/y", "/x", "/x"]) == ["/x", "/y"]

    def test_split_drops_empty(self):
        assert split_path("/a::/b:") == ["/a", "/b"]
        assert split_path(None) == []

    def test_dedupe_empty(self):
        assert dedupe_path_string("") == ""


class TestEnvironment:
    """Tests for Environment editing and change tracking."""

    def test_append_and_prepend(self):
        env = Environment({"PRODUCTS": "/b"})
        env.append_path("PRODUCTS", "/c")
        env.prepend_path("PRODUCTS", "/a")
        assert env.get("PRODUCTS") == "/a:/b:/c"

    def test_append_to_unset_variable(self):
        env = Environment({})
        env.append_path("FHICL_FILE_PATH", "/x")
        assert env.get("FHICL_FILE_PATH") == "/x"

    def test_dedupe_path(self):
        env = Environment({"PRODUCTS": "/a:/b:/a:/c"})
        env.dedupe_path("PRODUCTS")
        assert env.get("PRODUCTS") == "/a:/b:/c"

    def test_dedupe_missing_variable_is_noop(self):
        env = Environment({})
        env.dedupe_path("PRODUCTS")
        assert "PRODUCTS" not in env

    def test_changes(self):
        env = Environment({"KEEP": "1", "CHANGE": "old", "DROP": "x"})
        env.set("CHANGE", "new")
        env.set("ADD", "a")
        env.unset("DROP")
        assert env.changes() == {"CHANGE": "new", "ADD": "a", "DROP": None}

    def test_replace_tracks_changes(self):
        env = Environment({"A": "1", "B": "2"})
        env.replace({"A": "1", "C": "3"})
        assert env.changes() == {"C": "3", "B": None}

    def test_to_shell_bash(self):
        env = Environment({"OLD": "x"})
        env.set("PRODUCTS", "/a b:/c")
        env.unset("OLD")
        assert env.to_shell("bash") == "unset OLD\nexport PRODUCTS='/a b:/c'\n"

    def test_to_shell_csh(self):
        env = Environment({"OLD": "x"})
        env.set("MRB_TOP", "/work")
        env.unset("OLD")
        assert env.to_shell("tcsh") == "setenv MRB_TOP /work\nunsetenv OLD\n"

    def test_to_shell_no_changes(self):
        assert Environment({"A": "1"}).to_shell() == ""

    def test_to_shell_skips_names_shells_cannot_assign(self):
        env = Environment({})
        env.set("BASH_FUNC_mymod%%", "() {  echo hi\n}")
        env.set("MRB_TOP", "/work")
        assert env.to_shell("bash") == "export MRB_TOP=/work\n"


class TestRenderAssignment:
    """Tests for render_assignment()."""

    def test_quotes_values(self):
        assert render_assignment("X", "it's", "bash") == "export X='it'\"'\"'s'"
