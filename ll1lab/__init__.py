"""Left-recursion elimination, left factoring and table-driven LL(1) parsing."""

from __future__ import annotations

__version__ = "1.0.0"

from ll1lab.analysis import (
	Conflict,
	build_ll1_table,
	compute_first_sets,
	compute_follow_sets,
	first_of,
	first_of_sequence,
)
from ll1lab.errors import (
	EmptyGrammar,
	GrammarError,
	InvalidLeftHandSide,
	IterationLimitExceeded,
	MalformedRule,
	ReservedSymbolMisuse,
	TableConflict,
)
from ll1lab.factoring import left_factor
from ll1lab.grammar import EOF, EPS, Grammar, Production, Symbol, SymbolKind, parse_grammar
from ll1lab.parser import ParseStatus, ParseTrace, PredictiveParser, TraceRow
from ll1lab.pipeline import GrammarArtifacts, GrammarCompiler, PipelineConfig, compile_grammar
from ll1lab.recursion import eliminate_left_recursion

__all__ = [
	"Conflict",
	"EOF",
	"EPS",
	"EmptyGrammar",
	"Grammar",
	"GrammarArtifacts",
	"GrammarCompiler",
	"GrammarError",
	"InvalidLeftHandSide",
	"IterationLimitExceeded",
	"MalformedRule",
	"ParseStatus",
	"ParseTrace",
	"PipelineConfig",
	"PredictiveParser",
	"Production",
	"ReservedSymbolMisuse",
	"Symbol",
	"SymbolKind",
	"TableConflict",
	"TraceRow",
	"build_ll1_table",
	"compile_grammar",
	"compute_first_sets",
	"compute_follow_sets",
	"eliminate_left_recursion",
	"first_of",
	"first_of_sequence",
	"left_factor",
	"parse_grammar",
]
