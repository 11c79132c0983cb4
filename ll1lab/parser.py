from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Sequence, Tuple

from ll1lab.analysis import ParseTable
from ll1lab.errors import ReservedSymbolMisuse
from ll1lab.grammar import EOF, EOF_TEXT, Symbol, terminal

logger = logging.getLogger(__name__)

MISMATCH = "mismatch"
UNEXPECTED_SYMBOL = "unexpected symbol"
STEP_LIMIT = "step limit exceeded"
STACK_LIMIT = "stack limit exceeded"


class ParseStatus(Enum):
	ACCEPTED = auto()
	REJECTED = auto()


@dataclass(frozen=True)
class TraceRow:
	# Stack is bottom-to-top: EOF first, current top last.
	stack: Tuple[Symbol, ...]
	remaining: Tuple[Symbol, ...]
	action: str
	error: Optional[str] = None

	@property
	def stack_text(self) -> str:
		return "".join(s.text for s in self.stack)

	@property
	def input_text(self) -> str:
		return "".join(s.text for s in self.remaining)


@dataclass
class ParseTrace:
	rows: List[TraceRow] = field(default_factory=list)
	status: ParseStatus = ParseStatus.REJECTED

	@property
	def accepted(self) -> bool:
		return self.status is ParseStatus.ACCEPTED

	@property
	def error(self) -> Optional[str]:
		if self.rows and self.rows[-1].error is not None:
			return self.rows[-1].error
		return None


def tokenize_input(text: str) -> List[Symbol]:
	for i, ch in enumerate(text):
		if ch == EOF_TEXT:
			raise ReservedSymbolMisuse(EOF_TEXT, i)
	return [terminal(ch) for ch in text]


class PredictiveParser:
	"""
	Table-driven LL(1) parsing with a stack.

	Rejection is reported through the returned trace, never raised.
	"""

	def __init__(
		self,
		start: Symbol,
		table: ParseTable,
		*,
		max_steps: int = 100_000,
		max_stack: int = 10_000,
	) -> None:
		self.start = start
		self.table = table
		self.max_steps = max_steps
		# Every trace row holds a copy of the stack.
		self.max_stack = max_stack

	def parse(self, text: str) -> ParseTrace:
		return self.parse_symbols(tokenize_input(text))

	def parse_symbols(self, symbols: Sequence[Symbol]) -> ParseTrace:
		inp: List[Symbol] = list(symbols) + [EOF]
		stack: List[Symbol] = [EOF, self.start]
		trace = ParseTrace()
		i = 0

		def record(action: str, error: Optional[str] = None) -> None:
			trace.rows.append(TraceRow(stack=tuple(stack), remaining=tuple(inp[i:]), action=action, error=error))

		while stack:
			if len(trace.rows) >= self.max_steps:
				logger.warning("parse stopped after %d steps", self.max_steps)
				record("", STEP_LIMIT)
				return trace

			top = stack[-1]
			cur = inp[i] if i < len(inp) else EOF

			# Terminal or EOF
			if not top.is_nonterminal:
				if top != cur:
					record("", MISMATCH)
					logger.debug("rejected: expected %s, found %s", top, cur)
					return trace
				stack.pop()
				i += 1
				record("")
				continue

			prod = self.table.get(top, {}).get(cur)
			if prod is None:
				record("", UNEXPECTED_SYMBOL)
				logger.debug("rejected: no entry for M[%s, %s]", top, cur)
				return trace

			stack.pop()
			stack.extend(reversed(prod.rhs))
			if len(stack) > self.max_stack:
				logger.warning("parse stopped: stack exceeded %d symbols", self.max_stack)
				record(str(prod), STACK_LIMIT)
				return trace
			record(str(prod))

		trace.status = ParseStatus.ACCEPTED
		logger.debug("accepted after %d steps", len(trace.rows))
		return trace
