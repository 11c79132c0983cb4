"""
Grammar model for the compact single-character notation:

  E->E+T
  E->T
  T->(E)
  T->id

Each line is `LHS->RHS`. A nonterminal is one uppercase letter followed by
zero or more apostrophes (apostrophes mark generated symbols). Every other
character is a terminal on its own. `&` is epsilon and `$` is the end marker,
which may not be written in rules.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from ll1lab.errors import EmptyGrammar, InvalidLeftHandSide, MalformedRule, ReservedSymbolMisuse

logger = logging.getLogger(__name__)

EPS_TEXT = "&"
EOF_TEXT = "$"

_NONTERMINAL_RE = re.compile(r"^[A-Z]'*$")
_SYMBOL_RE = re.compile(r"[A-Z]'*|.", re.DOTALL)


class SymbolKind(Enum):
	TERMINAL = auto()
	NONTERMINAL = auto()
	EPSILON = auto()
	END_MARKER = auto()


@dataclass(frozen=True)
class Symbol:
	text: str
	kind: SymbolKind

	def __str__(self) -> str:
		return self.text

	@property
	def is_terminal(self) -> bool:
		return self.kind is SymbolKind.TERMINAL

	@property
	def is_nonterminal(self) -> bool:
		return self.kind is SymbolKind.NONTERMINAL


EPS = Symbol(EPS_TEXT, SymbolKind.EPSILON)
EOF = Symbol(EOF_TEXT, SymbolKind.END_MARKER)

Rhs = Tuple[Symbol, ...]


def terminal(ch: str) -> Symbol:
	return Symbol(ch, SymbolKind.TERMINAL)


def nonterminal(name: str) -> Symbol:
	if not is_nonterminal(name):
		raise ValueError(f"'{name}' is not a nonterminal name")
	return Symbol(name, SymbolKind.NONTERMINAL)


def is_nonterminal(token: str) -> bool:
	return bool(_NONTERMINAL_RE.match(token))


def split_symbols(rule: str) -> List[str]:
	"""Tokenize a right-hand side: `[A-Z]'*` runs and single characters."""
	return _SYMBOL_RE.findall(rule)


def classify(token: str) -> Symbol:
	if token == EPS_TEXT:
		return EPS
	if token == EOF_TEXT:
		return EOF
	if is_nonterminal(token):
		return Symbol(token, SymbolKind.NONTERMINAL)
	return terminal(token)


def to_symbols(rule: str) -> Rhs:
	"""Right-hand side text to a symbol sequence. Epsilon is the empty tuple."""
	return tuple(s for s in (classify(t) for t in split_symbols(rule)) if s != EPS)


def rhs_text(rhs: Sequence[Symbol]) -> str:
	if len(rhs) == 0:
		return EPS_TEXT
	return "".join(s.text for s in rhs)


@dataclass(frozen=True)
class Production:
	lhs: Symbol
	rhs: Rhs

	@property
	def is_epsilon(self) -> bool:
		return len(self.rhs) == 0

	def __str__(self) -> str:
		return f"{self.lhs} -> {rhs_text(self.rhs)}"


@dataclass
class Grammar:
	"""
	Mutable grammar builder.

	`order` records definition order; `ranks` maps every nonterminal to its
	index in `order` and is the processing rank used by left-recursion
	elimination. Both change only through `declare` and `fresh_nonterminal`.
	"""

	nonterminals: Set[Symbol] = field(default_factory=set)
	terminals: Set[Symbol] = field(default_factory=set)
	rules: Dict[Symbol, List[Rhs]] = field(default_factory=dict)
	order: List[Symbol] = field(default_factory=list)
	ranks: Dict[Symbol, int] = field(default_factory=dict)

	@property
	def start(self) -> Symbol:
		if not self.order:
			raise ValueError("grammar has no nonterminals")
		return self.order[0]

	def rank(self, nt: Symbol) -> int:
		return self.ranks[nt]

	def declare(self, nt: Symbol) -> None:
		if nt in self.ranks:
			return
		self.nonterminals.add(nt)
		self.rules.setdefault(nt, [])
		self.ranks[nt] = len(self.order)
		self.order.append(nt)

	def fresh_nonterminal(self, base: Symbol) -> Symbol:
		name = base.text + "'"
		while Symbol(name, SymbolKind.NONTERMINAL) in self.nonterminals:
			name += "'"
		fresh = Symbol(name, SymbolKind.NONTERMINAL)

		self.nonterminals.add(fresh)
		self.rules[fresh] = []
		self.order.insert(self.ranks[base] + 1, fresh)
		self._renumber()
		logger.debug("generated nonterminal %s after %s", fresh, base)
		return fresh

	def _renumber(self) -> None:
		self.ranks = {nt: i for i, nt in enumerate(self.order)}

	def alternatives(self, nt: Symbol) -> Tuple[Rhs, ...]:
		return tuple(self.rules.get(nt, ()))

	def add_alternative(self, nt: Symbol, rhs: Iterable[Symbol]) -> None:
		alts = self.rules.setdefault(nt, [])
		seq = tuple(rhs)
		if seq not in alts:
			alts.append(seq)

	def set_alternatives(self, nt: Symbol, alternatives: Iterable[Rhs]) -> None:
		self.rules[nt] = []
		for rhs in alternatives:
			self.add_alternative(nt, rhs)

	def productions(self) -> List[Production]:
		return [Production(nt, rhs) for nt in self.order for rhs in self.rules.get(nt, [])]

	def copy(self) -> "Grammar":
		return Grammar(
			nonterminals=set(self.nonterminals),
			terminals=set(self.terminals),
			rules={nt: list(alts) for nt, alts in self.rules.items()},
			order=list(self.order),
			ranks=dict(self.ranks),
		)

	def to_text(self) -> str:
		"""Render back into the `LHS->RHS` notation accepted by `parse_grammar`."""
		return "\n".join(f"{p.lhs}->{rhs_text(p.rhs)}" for p in self.productions())

	def __str__(self) -> str:
		lines = []
		for nt in self.order:
			alts = " | ".join(rhs_text(rhs) for rhs in self.rules.get(nt, []))
			lines.append(f"{nt} -> {alts}")
		return "\n".join(lines)


def parse_grammar(text: str) -> Grammar:
	grammar = Grammar()
	referenced: List[Symbol] = []

	for lineno, raw_line in enumerate(text.split("\n"), start=1):
		line = raw_line.rstrip("\r")
		if not line:
			continue
		if "->" not in line:
			raise MalformedRule(line, lineno)
		lhs_text, rule = line.split("->", 1)

		col = line.find(EOF_TEXT)
		if col >= 0:
			raise ReservedSymbolMisuse(EOF_TEXT, col, lineno)
		if not is_nonterminal(lhs_text):
			raise InvalidLeftHandSide(lhs_text, lineno)

		lhs = Symbol(lhs_text, SymbolKind.NONTERMINAL)
		grammar.declare(lhs)

		rhs = to_symbols(rule)
		for sym in rhs:
			if sym.is_nonterminal:
				grammar.nonterminals.add(sym)
				referenced.append(sym)
			else:
				grammar.terminals.add(sym)
		grammar.add_alternative(lhs, rhs)

	# Referenced but never defined: rank them after every defined nonterminal.
	for sym in referenced:
		if sym not in grammar.ranks:
			logger.warning("nonterminal %s is referenced but has no productions", sym)
			grammar.declare(sym)

	if not grammar.order:
		raise EmptyGrammar()
	return grammar
