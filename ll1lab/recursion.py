from __future__ import annotations

import logging
from typing import List

from ll1lab.errors import IterationLimitExceeded
from ll1lab.grammar import Grammar, Rhs, Symbol

logger = logging.getLogger(__name__)


def eliminate_left_recursion(grammar: Grammar, *, max_iterations: int = 10_000) -> Grammar:
	"""
	Paull's algorithm. Returns a new grammar; the input is left untouched.

	Nonterminals are processed in rank order. For each `A`, alternatives
	starting with a lower-ranked nonterminal are expanded first, then direct
	left recursion `A -> A a | b` is rewritten to `A -> b A'`, `A' -> a A' | &`.
	Generated nonterminals are not processed again.
	"""
	g = grammar.copy()
	for nt in list(g.order):
		_substitute_lower_ranks(g, nt, max_iterations)
		if _is_left_recursive(g, nt):
			_remove_direct_left_recursion(g, nt)
	return g


def _is_left_recursive(g: Grammar, nt: Symbol) -> bool:
	return any(rhs and rhs[0] == nt for rhs in g.alternatives(nt))


def _substitute_lower_ranks(g: Grammar, nt: Symbol, max_iterations: int) -> None:
	rank = g.rank(nt)
	pending: List[Rhs] = list(g.alternatives(nt))
	result: List[Rhs] = []
	substitutions = 0

	while pending:
		rhs = pending.pop(0)
		lead = rhs[0] if rhs else None
		if lead is None or not lead.is_nonterminal or g.rank(lead) >= rank:
			result.append(rhs)
			continue

		substitutions += 1
		if substitutions > max_iterations:
			raise IterationLimitExceeded(f"left-recursion substitution for {nt}", max_iterations)
		tail = rhs[1:]
		logger.debug("substituting %s into %s -> %s", lead, nt, "".join(s.text for s in rhs))
		for derivation in g.alternatives(lead):
			pending.append(derivation + tail)

	if substitutions:
		g.set_alternatives(nt, result)


def _remove_direct_left_recursion(g: Grammar, nt: Symbol) -> None:
	fresh = g.fresh_nonterminal(nt)
	rules: List[Rhs] = []

	for rhs in g.alternatives(nt):
		if rhs and rhs[0] == nt:
			alpha = rhs[1:]
			if not alpha:
				logger.warning("dropping cyclic production %s -> %s", nt, nt)
				continue
			g.add_alternative(fresh, alpha + (fresh,))
		else:
			rules.append(rhs + (fresh,))

	g.add_alternative(fresh, ())
	if not rules:
		logger.warning("%s has no non-recursive alternative and derives no string", nt)
	g.set_alternatives(nt, rules)
	logger.debug("removed direct left recursion from %s via %s", nt, fresh)
