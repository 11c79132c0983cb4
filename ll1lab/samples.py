"""Named sample grammars in the `LHS->RHS` notation."""

from __future__ import annotations

from typing import Dict

SAMPLE_GRAMMARS: Dict[str, str] = {
	# Parenthesised lists: (a,(a,a))
	"lists": "S->(L)\nS->a\nL->L,S\nL->S",
	"arithmetic": "E->E+T\nE->E-T\nE->T\nT->T*F\nT->T/F\nT->F\nF->(E)\nF->id",
	# Indirect left recursion through A -> B -> C -> A. Not LL(1) once rewritten.
	"indirect": "A->Ba\nB->Cb\nC->Ac\nC->d",
	"nested": "S->Sa\nS->aAc\nS->c\nA->Ab\nA->ba",
	"mixed": "S->Ab\nS->B\nA->Aa\nA->c\nA->d\nB->a\nB->aB",
	"calls": "S->S,T\nS->T\nT->id\nT->id(S)",
	"prefixes": "P->abc\nP->abcd\nP->ab",
	# Assignments `i=n+i;` with i = identifier and n = number.
	"assignment": "S->i=E;\nE->E+T\nE->T\nT->T*F\nT->F\nF->(E)\nF->i\nF->n",
}

DEFAULT_SAMPLE = "assignment"


def get_sample(name: str) -> str:
	try:
		return SAMPLE_GRAMMARS[name]
	except KeyError:
		known = ", ".join(sorted(SAMPLE_GRAMMARS))
		raise KeyError(f"unknown sample grammar '{name}' (known: {known})") from None
