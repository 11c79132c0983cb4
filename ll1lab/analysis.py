from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Sequence, Set, Tuple

from ll1lab.errors import IterationLimitExceeded
from ll1lab.grammar import EOF, EPS, Grammar, Production, Symbol

logger = logging.getLogger(__name__)

FirstSets = Dict[Symbol, FrozenSet[Symbol]]
FollowSets = Dict[Symbol, FrozenSet[Symbol]]
ParseTable = Dict[Symbol, Dict[Symbol, Production]]
Passes = List[Dict[str, List[str]]]


def first_of(symbol: Symbol, first: Dict[Symbol, Set[Symbol]] | FirstSets) -> FrozenSet[Symbol]:
	if symbol.is_nonterminal:
		return frozenset(first.get(symbol, ()))
	if symbol == EPS:
		return frozenset({EPS})
	# Terminal or EOF
	return frozenset({symbol})


def first_of_sequence(seq: Sequence[Symbol], first: Dict[Symbol, Set[Symbol]] | FirstSets) -> Set[Symbol]:
	"""
	FIRST(seq) computed left-to-right.
	Returns terminals plus EPS (if the entire sequence can derive epsilon).
	"""
	out: Set[Symbol] = set()
	for sym in seq:
		f = first_of(sym, first)
		out |= f - {EPS}
		if EPS not in f:
			return out
	out.add(EPS)
	return out


def _sorted_texts(symbols: Set[Symbol]) -> List[str]:
	return sorted(s.text for s in symbols)


def compute_first_sets_with_trace(grammar: Grammar, *, max_iterations: int = 10_000) -> Tuple[FirstSets, Passes]:
	"""
	Compute FIRST sets and also return an iteration log.
	The log is a list of passes; each pass maps Nonterminal -> list of newly-added symbols.
	"""
	first: Dict[Symbol, Set[Symbol]] = {nt: set() for nt in grammar.nonterminals}
	passes: Passes = []

	changed = True
	while changed:
		if len(passes) >= max_iterations:
			raise IterationLimitExceeded("FIRST computation", max_iterations)
		changed = False
		pass_changes: Dict[str, List[str]] = {}
		for p in grammar.productions():
			before = set(first[p.lhs])
			first[p.lhs] |= first_of_sequence(p.rhs, first)

			added = _sorted_texts(first[p.lhs] - before)
			if added:
				pass_changes.setdefault(p.lhs.text, []).extend(added)
				changed = True

		if pass_changes:
			passes.append(pass_changes)

	logger.debug("FIRST sets converged after %d passes", len(passes))
	return {nt: frozenset(s) for nt, s in first.items()}, passes


def compute_first_sets(grammar: Grammar, *, max_iterations: int = 10_000) -> FirstSets:
	first, _ = compute_first_sets_with_trace(grammar, max_iterations=max_iterations)
	return first


def compute_follow_sets_with_trace(
	grammar: Grammar, first: FirstSets, *, max_iterations: int = 10_000
) -> Tuple[FollowSets, Passes]:
	"""
	Compute FOLLOW sets and also return an iteration log.
	The log is a list of passes; each pass maps Nonterminal -> list of newly-added symbols.
	"""
	follow: Dict[Symbol, Set[Symbol]] = {nt: set() for nt in grammar.nonterminals}
	follow[grammar.start].add(EOF)
	passes: Passes = [{grammar.start.text: [EOF.text]}]

	changed = True
	while changed:
		if len(passes) > max_iterations:
			raise IterationLimitExceeded("FOLLOW computation", max_iterations)
		changed = False
		pass_changes: Dict[str, List[str]] = {}
		for p in grammar.productions():
			rhs = p.rhs
			for i, sym in enumerate(rhs):
				if not sym.is_nonterminal:
					continue

				before = set(follow[sym])
				first_beta = first_of_sequence(rhs[i + 1 :], first)

				follow[sym] |= first_beta - {EPS}
				if EPS in first_beta:
					follow[sym] |= follow[p.lhs]

				added = _sorted_texts(follow[sym] - before)
				if added:
					pass_changes.setdefault(sym.text, []).extend(added)
					changed = True

		if pass_changes:
			passes.append(pass_changes)

	logger.debug("FOLLOW sets converged after %d passes", len(passes))
	return {nt: frozenset(s) for nt, s in follow.items()}, passes


def compute_follow_sets(grammar: Grammar, first: FirstSets, *, max_iterations: int = 10_000) -> FollowSets:
	follow, _ = compute_follow_sets_with_trace(grammar, first, max_iterations=max_iterations)
	return follow


@dataclass(frozen=True)
class Conflict:
	nonterminal: Symbol
	lookahead: Symbol
	existing: Production
	incoming: Production

	def __str__(self) -> str:
		return f"Conflict at M[{self.nonterminal}, {self.lookahead}]: {self.existing} vs {self.incoming}"


def build_ll1_table(grammar: Grammar, first: FirstSets, follow: FollowSets) -> Tuple[ParseTable, List[Conflict]]:
	"""
	Returns (table, conflicts).

	Table is a nested dict:
	  table[NonTerminal][TerminalOr$] = Production

	A cell keeps the first production written to it; every later, different
	production for the same cell is reported as a conflict.
	"""
	table: ParseTable = {nt: {} for nt in grammar.order}
	conflicts: List[Conflict] = []

	def put(p: Production, a: Symbol) -> None:
		existing = table[p.lhs].get(a)
		if existing is None:
			table[p.lhs][a] = p
		elif existing != p:
			conflict = Conflict(p.lhs, a, existing, p)
			logger.warning("%s", conflict)
			conflicts.append(conflict)

	for p in grammar.productions():
		first_rhs = first_of_sequence(p.rhs, first)

		for a in sorted(first_rhs - {EPS}, key=str):
			put(p, a)

		if EPS in first_rhs:
			for b in sorted(follow[p.lhs], key=str):
				put(p, b)

	return table, conflicts
