"""Unit tests for the dynaprop command-line interface."""

import json

from dynaprop.cli import main


class TestMembers:
    def test_lists_named_member(self, capsys):
        assert main(["members", "builtins.str", "--name", "substring"]) == 0
        out = capsys.readouterr().out
        assert out.splitlines()[0] == "substring"
        assert "[function] substring(int) -> str" in out
        assert "[function] substring(int, int) -> str" in out

    def test_lists_all_members(self, capsys):
        assert main(["members", "builtins.int"]) == 0
        out = capsys.readouterr().out
        assert "add" in out
        assert "to_sorted_list" in out

    def test_no_members(self, capsys):
        assert main(["members", "builtins.str", "--name", "_no_such"]) == 1
        assert "no members found" in capsys.readouterr().err

    def test_unknown_type(self, capsys):
        assert main(["members", "nosuchmodule.Thing"]) == 1
        assert "error:" in capsys.readouterr().err

    def test_not_a_class(self, capsys):
        assert main(["members", "textwrap:dedent"]) == 1
        assert "is not a class" in capsys.readouterr().err

    def test_with_config(self, capsys, tmp_path):
        f = tmp_path / "r.json"
        f.write_text(json.dumps({"defaults": False, "functions": {"builtins.str": ["textwrap"]}}))
        assert main(["members", "builtins.str", "--name", "indent", "--config", str(f)]) == 0
        out = capsys.readouterr().out
        assert "indent(object) -> object" in out


class TestEval:
    def test_number(self, capsys):
        assert main(["eval", "123", "add", "1"]) == 0
        assert capsys.readouterr().out.strip() == "124"

    def test_string_literal(self, capsys):
        assert main(["eval", "'ABC'", "substring", "1", "2"]) == 0
        assert capsys.readouterr().out.strip() == "'B'"

    def test_bare_word_is_text(self, capsys):
        assert main(["eval", "hello", "upper"]) == 0
        assert capsys.readouterr().out.strip() == "'HELLO'"

    def test_list_literal(self, capsys):
        assert main(["eval", "['2', '1', '3']", "toSortedList"]) == 0
        assert capsys.readouterr().out.strip() == "['1', '2', '3']"

    def test_error_exit_code(self, capsys):
        assert main(["eval", "42", "nope"]) == 1
        assert "no such property" in capsys.readouterr().err

    def test_bad_config(self, capsys, tmp_path):
        f = tmp_path / "r.json"
        f.write_text(json.dumps({"plugins": {}}))
        assert main(["eval", "1", "inc", "--config", str(f)]) == 1
        assert "Unknown config keys" in capsys.readouterr().err


class TestNoCommand:
    def test_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out
