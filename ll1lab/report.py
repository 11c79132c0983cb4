"""
Print the transformed grammar, FIRST/FOLLOW sets, the LL(1) table and parse
traces for a grammar file or a built-in sample.

Usage:
  ll1lab --sample lists --input "(a,a)"
  ll1lab grammar.txt --input "id+id*id" --export out/ --xlsx out/ll1.xlsx
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional, Sequence

from ll1lab.errors import GrammarError, TableConflict
from ll1lab.export import export_csv, export_xlsx, table_columns
from ll1lab.grammar import Grammar, Symbol
from ll1lab.parser import ParseTrace
from ll1lab.pipeline import GrammarArtifacts, GrammarCompiler, PipelineConfig
from ll1lab.samples import SAMPLE_GRAMMARS, get_sample


def format_grammar(grammar: Grammar) -> str:
	return str(grammar)


def format_sets(grammar: Grammar, sets: Dict[Symbol, FrozenSet[Symbol]]) -> str:
	return "\n".join(
		f"{nt}: {{{', '.join(sorted(s.text for s in sets.get(nt, ())))}}}" for nt in grammar.order
	)


def format_table(artifacts: GrammarArtifacts) -> str:
	lines: List[str] = []
	for nt in artifacts.grammar.order:
		row = artifacts.table.get(nt, {})
		for t in table_columns(artifacts):
			if t in row:
				lines.append(f"M[{nt}, {t}] = {row[t]}")
	return "\n".join(lines)


def format_trace(trace: ParseTrace) -> str:
	stack_w = max([len("STACK")] + [len(r.stack_text) for r in trace.rows])
	input_w = max([len("INPUT")] + [len(r.input_text) for r in trace.rows])
	lines = [f"{'STACK'.ljust(stack_w)} | {'INPUT'.rjust(input_w)} | ACTION"]
	for r in trace.rows:
		action = f"Error: {r.error}" if r.error is not None else r.action
		lines.append(f"{r.stack_text.ljust(stack_w)} | {r.input_text.rjust(input_w)} | {action}")
	lines.append(trace.status.name)
	return "\n".join(lines)


def build_arg_parser() -> argparse.ArgumentParser:
	parser = argparse.ArgumentParser(prog="ll1lab", description="Build an LL(1) parser from a grammar and trace inputs.")
	source = parser.add_mutually_exclusive_group(required=True)
	source.add_argument("grammar", nargs="?", type=Path, help="grammar file in LHS->RHS notation")
	source.add_argument("--sample", choices=sorted(SAMPLE_GRAMMARS), help="use a built-in sample grammar")
	parser.add_argument("--input", action="append", default=[], help="input string to parse (repeatable)")
	parser.add_argument("--export", type=Path, help="directory for CSV artifacts")
	parser.add_argument("--xlsx", type=Path, help="path of an XLSX workbook with all artifacts")
	parser.add_argument("--allow-conflicts", action="store_true", help="report conflicts instead of failing")
	parser.add_argument("--max-steps", type=int, default=PipelineConfig.max_parse_steps)
	parser.add_argument("--max-stack", type=int, default=PipelineConfig.max_parse_stack)
	parser.add_argument("-v", "--verbose", action="store_true")
	return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
	args = build_arg_parser().parse_args(argv)
	logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

	if args.sample:
		source = get_sample(args.sample)
	else:
		try:
			source = args.grammar.read_text(encoding="utf-8")
		except OSError as exc:
			print(f"cannot read grammar: {exc}")
			return 2
	config = PipelineConfig(
		max_parse_steps=args.max_steps,
		max_parse_stack=args.max_stack,
		allow_conflicts=args.allow_conflicts,
	)

	try:
		artifacts = GrammarCompiler(config).compile(source)
	except TableConflict as exc:
		print("Grammar is not LL(1):")
		for conflict in exc.conflicts:
			print(f"  {conflict}")
		return 2
	except GrammarError as exc:
		print(f"{exc.kind}: {exc}")
		return 2

	print("=== GRAMMAR ===")
	print(format_grammar(artifacts.grammar))
	print("\n=== FIRST ===")
	print(format_sets(artifacts.grammar, artifacts.first))
	print("\n=== FOLLOW ===")
	print(format_sets(artifacts.grammar, artifacts.follow))
	print("\n=== LL(1) TABLE (non-empty cells) ===")
	print(format_table(artifacts))
	if artifacts.conflicts:
		print("\n=== Conflicts ===")
		for conflict in artifacts.conflicts:
			print(conflict)

	if args.export:
		written = export_csv(artifacts, args.export)
		print("\nWrote:", ", ".join(p.name for p in written))
	if args.xlsx:
		print("Wrote:", export_xlsx(artifacts, args.xlsx))

	if args.input and not artifacts.is_ll1:
		print("\nInputs not parsed: the grammar is not LL(1).")
		return 1

	status = 0
	for text in args.input:
		print(f"\n=== Parse: {text} ===")
		try:
			trace = artifacts.parse(text)
		except GrammarError as exc:
			print(f"{exc.kind}: {exc}")
			status = 1
			continue
		print(format_trace(trace))
		if not trace.accepted:
			status = 1
	return status


if __name__ == "__main__":
	sys.exit(main())
