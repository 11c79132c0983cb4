from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
	from ll1lab.analysis import Conflict


class GrammarError(Exception):
	"""Base class for every error that aborts building a parser for a grammar."""

	kind = "GrammarError"

	def __init__(self, message: str, line: Optional[int] = None) -> None:
		super().__init__(message)
		self.message = message
		self.line = line

	def __str__(self) -> str:
		if self.line is None:
			return self.message
		return f"line {self.line}: {self.message}"


class MalformedRule(GrammarError):
	kind = "MalformedRule"

	def __init__(self, text: str, line: Optional[int] = None) -> None:
		super().__init__(f"Invalid production (missing '->'): {text!r}", line)
		self.text = text


class EmptyGrammar(GrammarError):
	kind = "EmptyGrammar"

	def __init__(self) -> None:
		super().__init__("grammar has no productions")


class InvalidLeftHandSide(GrammarError):
	kind = "InvalidLeftHandSide"

	def __init__(self, lhs: str, line: Optional[int] = None) -> None:
		super().__init__(f"'{lhs}' is not a valid nonterminal", line)
		self.lhs = lhs


class ReservedSymbolMisuse(GrammarError):
	kind = "ReservedSymbolMisuse"

	def __init__(self, symbol: str, position: int, line: Optional[int] = None) -> None:
		where = "grammar" if line is not None else "input"
		super().__init__(f"reserved symbol '{symbol}' used in {where} at column {position + 1}", line)
		self.symbol = symbol
		self.position = position


class TableConflict(GrammarError):
	kind = "TableConflict"

	def __init__(self, conflicts: List["Conflict"], artifacts: Any = None) -> None:
		lines = "; ".join(str(c) for c in conflicts)
		super().__init__(f"grammar is not LL(1): {len(conflicts)} conflict(s): {lines}")
		self.conflicts = list(conflicts)
		self.artifacts = artifacts


class IterationLimitExceeded(GrammarError):
	kind = "IterationLimitExceeded"

	def __init__(self, stage: str, limit: int) -> None:
		super().__init__(f"{stage} did not converge within {limit} iterations")
		self.stage = stage
		self.limit = limit
