"""
Export LL(1) lab artifacts (grammar, FIRST, FOLLOW, parse table) into Excel-friendly files.

CSV outputs:
  - LL1_Grammar.csv
  - LL1_FIRST.csv
  - LL1_FOLLOW.csv
  - LL1_ParseTable.csv

XLSX output is a single workbook with one sheet per artifact.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Dict, FrozenSet, List

import openpyxl
from openpyxl.utils import get_column_letter

from ll1lab.grammar import EOF, Symbol, rhs_text
from ll1lab.pipeline import GrammarArtifacts


def _grammar_rows(artifacts: GrammarArtifacts) -> List[List[str]]:
	rows: List[List[str]] = [["Section", "Production"]]
	for nt in artifacts.original.order:
		for rhs in artifacts.original.alternatives(nt):
			rows.append(["Original", f"{nt} -> {rhs_text(rhs)}"])
	rows.append([])
	for p in artifacts.grammar.productions():
		rows.append(["LL(1) equivalent", str(p)])
	return rows


def _set_rows(title: str, artifacts: GrammarArtifacts, sets: Dict[Symbol, FrozenSet[Symbol]]) -> List[List[str]]:
	rows: List[List[str]] = [[title, "Symbols (sorted)"]]
	for nt in artifacts.grammar.order:
		rows.append([nt.text, " ".join(sorted(s.text for s in sets.get(nt, ())))])
	return rows


def table_columns(artifacts: GrammarArtifacts) -> List[Symbol]:
	return sorted(artifacts.grammar.terminals, key=str) + [EOF]


def _table_rows(artifacts: GrammarArtifacts) -> List[List[str]]:
	terms = table_columns(artifacts)
	rows: List[List[str]] = [["NonTerminal"] + [t.text for t in terms]]
	for nt in artifacts.grammar.order:
		row: List[str] = [nt.text]
		for t in terms:
			p = artifacts.table.get(nt, {}).get(t)
			row.append(str(p) if p is not None else "")
		rows.append(row)
	return rows


def _sheets(artifacts: GrammarArtifacts) -> Dict[str, List[List[str]]]:
	return {
		"Grammar": _grammar_rows(artifacts),
		"FIRST": _set_rows("FIRST", artifacts, artifacts.first),
		"FOLLOW": _set_rows("FOLLOW", artifacts, artifacts.follow),
		"ParseTable": _table_rows(artifacts),
	}


CSV_NAMES = {
	"Grammar": "LL1_Grammar.csv",
	"FIRST": "LL1_FIRST.csv",
	"FOLLOW": "LL1_FOLLOW.csv",
	"ParseTable": "LL1_ParseTable.csv",
}


def export_csv(artifacts: GrammarArtifacts, out_dir: Path) -> List[Path]:
	out_dir = Path(out_dir)
	out_dir.mkdir(parents=True, exist_ok=True)
	written: List[Path] = []
	for sheet, rows in _sheets(artifacts).items():
		out_path = out_dir / CSV_NAMES[sheet]
		with out_path.open("w", newline="", encoding="utf-8") as f:
			w = csv.writer(f)
			w.writerows(rows)
		written.append(out_path)
	return written


def export_xlsx(artifacts: GrammarArtifacts, path: Path) -> Path:
	wb = openpyxl.Workbook()
	wb.remove(wb.active)

	for name, rows in _sheets(artifacts).items():
		ws = wb.create_sheet(name)
		for row in rows:
			ws.append(row)

	# Basic column sizing
	for sheet in wb.worksheets:
		for col in range(1, sheet.max_column + 1):
			letter = get_column_letter(col)
			sheet.column_dimensions[letter].width = 22 if col == 1 else 18

	path = Path(path)
	path.parent.mkdir(parents=True, exist_ok=True)
	wb.save(path)
	return path
