from __future__ import annotations

import logging
from typing import Any, Dict, FrozenSet, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from ll1lab import __version__
from ll1lab.errors import GrammarError
from ll1lab.export import table_columns
from ll1lab.grammar import Grammar, Symbol, rhs_text
from ll1lab.parser import ParseTrace
from ll1lab.pipeline import GrammarArtifacts, GrammarCompiler, PipelineConfig
from ll1lab.samples import DEFAULT_SAMPLE, SAMPLE_GRAMMARS, get_sample

logger = logging.getLogger(__name__)

app = FastAPI(title="LL(1) Lab", version=__version__)

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)


class LL1Request(BaseModel):
	# Example: "i=n+i;"
	input: str = ""
	# Grammar text in LHS->RHS notation; takes precedence over `sample`.
	grammar: str | None = None
	sample: str | None = None
	# Include FIRST/FOLLOW iteration logs ("show working")
	include_working: bool = False
	max_parse_steps: int = 100_000


def _grammar_json(grammar: Grammar) -> Dict[str, Any]:
	return {
		"start": grammar.start.text,
		"order": [nt.text for nt in grammar.order],
		"nonterminals": sorted(nt.text for nt in grammar.nonterminals),
		"terminals": sorted(t.text for t in grammar.terminals),
		"productions": [str(p) for p in grammar.productions()],
		"rules": {nt.text: [rhs_text(rhs) for rhs in grammar.alternatives(nt)] for nt in grammar.order},
	}


def _sets_json(sets: Dict[Symbol, FrozenSet[Symbol]]) -> Dict[str, List[str]]:
	return {k.text: sorted(s.text for s in v) for k, v in sets.items()}


def _table_json(artifacts: GrammarArtifacts) -> Dict[str, Dict[str, str]]:
	# Serialize table as strings for the frontend / JSON output
	columns = table_columns(artifacts)
	table_out: Dict[str, Dict[str, str]] = {}
	for nt in artifacts.grammar.order:
		row = artifacts.table.get(nt, {})
		table_out[nt.text] = {t.text: str(row[t]) if t in row else "" for t in columns}
	return table_out


def _trace_json(trace: ParseTrace) -> Dict[str, Any]:
	return {
		"accepted": trace.accepted,
		"status": trace.status.name,
		"error": trace.error,
		"steps": [
			{
				"stack": row.stack_text,
				"remaining_input": row.input_text,
				"action": row.action,
				"error": row.error,
			}
			for row in trace.rows
		],
	}


def _error_detail(exc: GrammarError) -> Dict[str, Any]:
	return {"error": exc.kind, "message": str(exc), "line": exc.line}


@app.get("/health")
def health() -> Dict[str, str]:
	return {"status": "ok"}


@app.get("/api/samples")
def samples() -> Dict[str, Any]:
	return {"default": DEFAULT_SAMPLE, "samples": SAMPLE_GRAMMARS}


@app.post("/api/ll1")
def ll1_lab(req: LL1Request) -> Dict[str, Any]:
	"""
	Grammar transformation, FIRST/FOLLOW, LL(1) table and table-driven parse with trace.

	Conflicts are reported in the response; the input is only parsed when the
	grammar is LL(1).
	"""
	if req.grammar:
		source = req.grammar
	else:
		try:
			source = get_sample(req.sample or DEFAULT_SAMPLE)
		except KeyError as exc:
			raise HTTPException(status_code=404, detail={"error": "UnknownSample", "message": exc.args[0]})

	config = PipelineConfig(max_parse_steps=req.max_parse_steps, allow_conflicts=True)
	try:
		artifacts = GrammarCompiler(config).compile(source)
	except GrammarError as exc:
		logger.info("rejected grammar: %s", exc)
		raise HTTPException(status_code=400, detail=_error_detail(exc))

	result = None
	if artifacts.is_ll1:
		try:
			result = _trace_json(artifacts.parse(req.input))
		except GrammarError as exc:
			raise HTTPException(status_code=400, detail=_error_detail(exc))

	return {
		"original": _grammar_json(artifacts.original),
		"grammar": _grammar_json(artifacts.grammar),
		"first": _sets_json(artifacts.first),
		"follow": _sets_json(artifacts.follow),
		"working": {
			"first_passes": artifacts.first_passes,
			"follow_passes": artifacts.follow_passes,
		}
		if req.include_working
		else None,
		"table": _table_json(artifacts),
		"conflicts": [
			{
				"nonterminal": c.nonterminal.text,
				"lookahead": c.lookahead.text,
				"existing": str(c.existing),
				"incoming": str(c.incoming),
			}
			for c in artifacts.conflicts
		],
		"ll1": artifacts.is_ll1,
		"duration_ms": artifacts.duration_ms,
		"input": req.input,
		"result": result,
	}
