from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional

from ll1lab.analysis import (
	Conflict,
	FirstSets,
	FollowSets,
	ParseTable,
	Passes,
	build_ll1_table,
	compute_first_sets_with_trace,
	compute_follow_sets_with_trace,
)
from ll1lab.errors import TableConflict
from ll1lab.factoring import left_factor
from ll1lab.grammar import Grammar, parse_grammar
from ll1lab.parser import ParseTrace, PredictiveParser
from ll1lab.recursion import eliminate_left_recursion

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineConfig:
	max_iterations: int = 10_000
	max_parse_steps: int = 100_000
	max_parse_stack: int = 10_000
	allow_conflicts: bool = False


@dataclass
class GrammarArtifacts:
	source: str
	original: Grammar
	grammar: Grammar
	first: FirstSets
	follow: FollowSets
	table: ParseTable
	conflicts: List[Conflict]
	duration_ms: float
	first_passes: Passes = field(default_factory=list)
	follow_passes: Passes = field(default_factory=list)
	config: PipelineConfig = field(default_factory=PipelineConfig)

	@property
	def is_ll1(self) -> bool:
		return not self.conflicts

	def parser(self) -> PredictiveParser:
		return PredictiveParser(
			self.grammar.start,
			self.table,
			max_steps=self.config.max_parse_steps,
			max_stack=self.config.max_parse_stack,
		)

	def parse(self, text: str) -> ParseTrace:
		return self.parser().parse(text)


class GrammarCompiler:
	def __init__(self, config: Optional[PipelineConfig] = None) -> None:
		self.config = config or PipelineConfig()

	def compile(self, source: str) -> GrammarArtifacts:
		cap = self.config.max_iterations
		start = time.perf_counter()

		original = parse_grammar(source)
		grammar = eliminate_left_recursion(original, max_iterations=cap)
		grammar = left_factor(grammar, max_iterations=cap)
		first, first_passes = compute_first_sets_with_trace(grammar, max_iterations=cap)
		follow, follow_passes = compute_follow_sets_with_trace(grammar, first, max_iterations=cap)
		table, conflicts = build_ll1_table(grammar, first, follow)

		duration_ms = (time.perf_counter() - start) * 1000
		artifacts = GrammarArtifacts(
			source=source,
			original=original,
			grammar=grammar,
			first=first,
			follow=follow,
			table=table,
			conflicts=conflicts,
			duration_ms=duration_ms,
			first_passes=first_passes,
			follow_passes=follow_passes,
			config=self.config,
		)
		logger.debug(
			"compiled grammar: %d nonterminals, %d conflicts, %.2f ms",
			len(grammar.order),
			len(conflicts),
			duration_ms,
		)
		if conflicts and not self.config.allow_conflicts:
			raise TableConflict(conflicts, artifacts)
		return artifacts


def compile_grammar(source: str, config: Optional[PipelineConfig] = None) -> GrammarArtifacts:
	return GrammarCompiler(config).compile(source)
