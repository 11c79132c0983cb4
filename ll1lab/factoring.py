from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

from ll1lab.errors import IterationLimitExceeded
from ll1lab.grammar import Grammar, Rhs, Symbol, rhs_text

logger = logging.getLogger(__name__)


def _common_prefix(a: Rhs, b: Rhs) -> Rhs:
	n = 0
	for x, y in zip(a, b):
		if x != y:
			break
		n += 1
	return a[:n]


def _prefix_key(prefix: Rhs) -> Tuple[int, Tuple[str, ...]]:
	return (-len(prefix), tuple(s.text for s in prefix))


def longest_common_prefix(alternatives: Sequence[Rhs]) -> Rhs:
	"""
	Longest symbol prefix shared by at least two alternatives.

	Equal-length candidates are broken by the lexicographically smallest
	symbol text, so the result does not depend on alternative order.
	"""
	best: Rhs = ()
	for i in range(len(alternatives)):
		for j in range(i + 1, len(alternatives)):
			prefix = _common_prefix(alternatives[i], alternatives[j])
			if prefix and (not best or _prefix_key(prefix) < _prefix_key(best)):
				best = prefix
	return best


def left_factor(grammar: Grammar, *, max_iterations: int = 10_000) -> Grammar:
	"""Returns a new grammar where no two alternatives of a nonterminal share a prefix."""
	g = grammar.copy()
	i = 0
	# `order` grows while we walk it; generated nonterminals are visited too.
	while i < len(g.order):
		_factor_nonterminal(g, g.order[i], max_iterations)
		i += 1
	return g


def _factor_nonterminal(g: Grammar, nt: Symbol, max_iterations: int) -> None:
	rounds = 0
	while True:
		prefix = longest_common_prefix(g.alternatives(nt))
		if not prefix:
			return
		rounds += 1
		if rounds > max_iterations:
			raise IterationLimitExceeded(f"left factoring of {nt}", max_iterations)

		fresh = g.fresh_nonterminal(nt)
		n = len(prefix)
		kept: List[Rhs] = []
		placed = False
		for rhs in g.alternatives(nt):
			if rhs[:n] != prefix:
				kept.append(rhs)
				continue
			g.add_alternative(fresh, rhs[n:])
			if not placed:
				kept.append(prefix + (fresh,))
				placed = True
		g.set_alternatives(nt, kept)
		logger.debug("factored prefix %s out of %s into %s", rhs_text(prefix), nt, fresh)
