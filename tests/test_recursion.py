import pytest

from ll1lab.errors import IterationLimitExceeded
from ll1lab.grammar import nonterminal, parse_grammar, rhs_text
from ll1lab.recursion import eliminate_left_recursion
from ll1lab.samples import SAMPLE_GRAMMARS


def alts(g, name):
	return {rhs_text(rhs) for rhs in g.alternatives(nonterminal(name))}


def left_corner_cycle(g):
	"""Return a nonterminal that reaches itself through leading symbols, if any."""
	for nt in g.order:
		seen = set()
		todo = [rhs[0] for rhs in g.alternatives(nt) if rhs and rhs[0].is_nonterminal]
		while todo:
			sym = todo.pop()
			if sym == nt:
				return nt
			if sym in seen:
				continue
			seen.add(sym)
			todo.extend(rhs[0] for rhs in g.alternatives(sym) if rhs and rhs[0].is_nonterminal)
	return None


def test_direct_left_recursion():
	g = eliminate_left_recursion(parse_grammar("E->E+T\nE->T\nT->T*F\nT->F\nF->(E)\nF->id"))
	assert [nt.text for nt in g.order] == ["E", "E'", "T", "T'", "F"]
	assert alts(g, "E") == {"TE'"}
	assert alts(g, "E'") == {"+TE'", "&"}
	assert alts(g, "T") == {"FT'"}
	assert alts(g, "T'") == {"*FT'", "&"}
	assert alts(g, "F") == {"(E)", "id"}


def test_substitution_of_lower_ranked_nonterminal():
	g = eliminate_left_recursion(parse_grammar("S->(L)\nS->a\nL->L,S\nL->S"))
	assert alts(g, "S") == {"(L)", "a"}
	assert alts(g, "L") == {"(L)L'", "aL'"}
	assert alts(g, "L'") == {",SL'", "&"}


def test_indirect_left_recursion():
	g = eliminate_left_recursion(parse_grammar("A->Ba\nB->Cb\nC->Ac\nC->d"))
	assert alts(g, "A") == {"Ba"}
	assert alts(g, "B") == {"Cb"}
	assert alts(g, "C") == {"dC'"}
	assert alts(g, "C'") == {"bacC'", "&"}
	assert left_corner_cycle(g) is None


def test_input_grammar_is_not_modified():
	original = parse_grammar("E->E+T\nE->T\nT->a")
	eliminate_left_recursion(original)
	assert alts(original, "E") == {"E+T", "T"}
	assert [nt.text for nt in original.order] == ["E", "T"]


def test_grammar_without_recursion_is_unchanged():
	original = parse_grammar("S->aB\nB->b\nB->c")
	g = eliminate_left_recursion(original)
	assert g.rules == original.rules
	assert g.order == original.order


def test_cyclic_production_is_dropped():
	g = eliminate_left_recursion(parse_grammar("A->A\nA->b"))
	assert alts(g, "A") == {"bA'"}
	assert alts(g, "A'") == {"&"}


def test_substitution_limit():
	with pytest.raises(IterationLimitExceeded) as excinfo:
		eliminate_left_recursion(parse_grammar("A->Ba\nB->Cb\nC->Ac\nC->d"), max_iterations=1)
	assert excinfo.value.limit == 1


@pytest.mark.parametrize("name", sorted(SAMPLE_GRAMMARS))
def test_samples_are_left_recursion_free(name):
	g = eliminate_left_recursion(parse_grammar(SAMPLE_GRAMMARS[name]))
	for nt in g.order:
		assert all(not rhs or rhs[0] != nt for rhs in g.alternatives(nt))
	assert left_corner_cycle(g) is None
