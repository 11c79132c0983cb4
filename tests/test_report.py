from ll1lab.pipeline import compile_grammar
from ll1lab.report import format_sets, format_table, format_trace, main
from ll1lab.samples import get_sample


def test_format_trace():
	trace = compile_grammar("S->a").parse("a")
	assert format_trace(trace).splitlines() == [
		"STACK | INPUT | ACTION",
		"$a    |    a$ | S -> a",
		"$     |     $ | ",
		"      |       | ",
		"ACCEPTED",
	]


def test_format_trace_shows_errors():
	trace = compile_grammar("S->a").parse("b")
	text = format_trace(trace)
	assert "Error: unexpected symbol" in text
	assert text.endswith("REJECTED")


def test_format_sets_and_table():
	artifacts = compile_grammar(get_sample("lists"))
	assert "S: {(, a}" in format_sets(artifacts.grammar, artifacts.first).splitlines()
	assert "M[L', )] = L' -> &" in format_table(artifacts).splitlines()


def test_main_with_sample(capsys):
	assert main(["--sample", "lists", "--input", "(a,a)"]) == 0
	out = capsys.readouterr().out
	assert "=== FIRST ===" in out
	assert "ACCEPTED" in out


def test_main_with_grammar_file(tmp_path, capsys):
	path = tmp_path / "calls.txt"
	path.write_text(get_sample("calls"), encoding="utf-8")
	assert main([str(path), "--input", "id,id(id)", "--input", "id,(id)"]) == 1
	out = capsys.readouterr().out
	assert "ACCEPTED" in out
	assert "REJECTED" in out


def test_main_reports_conflicts(capsys):
	assert main(["--sample", "indirect"]) == 2
	out = capsys.readouterr().out
	assert "not LL(1)" in out
	assert "M[C', b]" in out


def test_main_reports_grammar_errors(tmp_path, capsys):
	path = tmp_path / "bad.txt"
	path.write_text("S->a\nab->c", encoding="utf-8")
	assert main([str(path)]) == 2
	assert "InvalidLeftHandSide" in capsys.readouterr().out


def test_main_exports(tmp_path):
	assert main(["--sample", "arithmetic", "--export", str(tmp_path / "csv"), "--xlsx", str(tmp_path / "ll1.xlsx")]) == 0
	assert (tmp_path / "csv" / "LL1_ParseTable.csv").exists()
	assert (tmp_path / "ll1.xlsx").exists()


def test_main_does_not_parse_with_conflicts(tmp_path, capsys):
	path = tmp_path / "growing.txt"
	path.write_text("A->CAa\nA->Bb\nB->C\nC->CaC\nC->CC\nC->&&", encoding="utf-8")
	assert main([str(path), "--allow-conflicts", "--input", "ab"]) == 1
	out = capsys.readouterr().out
	assert "=== Conflicts ===" in out
	assert "Inputs not parsed" in out
	assert "=== Parse: ab ===" not in out


def test_main_reports_missing_grammar_file(tmp_path, capsys):
	assert main([str(tmp_path / "missing.txt")]) == 2
	assert "cannot read grammar" in capsys.readouterr().out


def test_main_reports_empty_grammar_file(tmp_path, capsys):
	path = tmp_path / "empty.txt"
	path.write_text("\n\n", encoding="utf-8")
	assert main([str(path)]) == 2
	assert "EmptyGrammar" in capsys.readouterr().out
