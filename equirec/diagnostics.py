"""
Everything about things going wrong.

Two quite different kinds of wrong live here:

* TypeCheckError and its subclasses are the checker's verdict on a bad
  program. They carry the offending phrase so a report can point at it.
  The checker raises the first one it finds and gives up.

* InvariantViolation is the checker's verdict on itself. It means some
  precondition got broken upstream (a free type variable, say) and there
  is no sensible diagnostic to give. Nothing ought to catch it.
"""
import sys
from pathlib import Path
from typing import Any, Optional
from boozetools.support.failureprone import illustration

from .location import Span, describe
from .ontology import Phrase

class InvariantViolation(AssertionError):
	pass

class TypeCheckError(Exception):
	term: Phrase
	message: str
	def __init__(self, term:Phrase, message:str):
		assert isinstance(term, Phrase), term
		super().__init__(message)
		self.term, self.message = term, message
	@property
	def kind(self) -> str: return type(self).__name__
	@property
	def loc(self) -> Optional[Span]: return self.term.loc

class ConditionNotBoolean(TypeCheckError): pass
class BranchTypeMismatch(TypeCheckError): pass
class OperandNotNumber(TypeCheckError): pass
class UnknownVariable(TypeCheckError): pass
class NotAFunction(TypeCheckError): pass
class ArgumentCountMismatch(TypeCheckError): pass
class ArgumentTypeMismatch(TypeCheckError): pass
class NotAnObject(TypeCheckError): pass
class UnknownField(TypeCheckError): pass
class ReturnTypeMismatch(TypeCheckError): pass


class Report:
	""" Collects issues and eventually shows them to a human. """
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0, source:Optional[str]=None, path:Optional[Path]=None):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._lines = source.splitlines() if source is not None else None
		self._path = path

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)

	def issue(self, it:Any):
		self._issues.append(it)

	def reset(self):
		self._issues.clear()

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def type_error(self, ex:TypeCheckError):
		intro = "%s: %s"%(ex.kind, ex.message)
		self.issue(Pic(intro, [self.annotate(ex.term, ex.kind)]))

	def malformed(self, path:Path, why:str):
		self.issue(Pic("Could not make sense of the syntax tree in %s"%path, [], [why]))

	def annotate(self, node:Phrase, caption:str="") -> "Annotation":
		return Annotation(node, caption, self._lines)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		if self._path is not None and self._issues:
			print(str(self._path), file=sys.stderr)
		for i in self._issues:
			print(i.as_text(), file=sys.stderr)
		sys.stderr.flush()

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(message)

class Annotation:
	loc: Optional[Span]
	caption: str
	def __init__(self, node:Phrase, caption:str="", lines:Optional[list[str]]=None):
		self.loc = node.loc
		self.caption = caption
		self._lines = lines

	def illustrate(self) -> str:
		loc = self.loc
		if loc is None or self._lines is None or not (0 < loc.start.line <= len(self._lines)):
			return "  at %s %s"%(describe(loc), self.caption)
		row = loc.start.line
		single_line = self._lines[row-1]
		return illustration(single_line, loc.start.column, loc.width_on_first_line(), prefix='% 6d |' % row, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self._intro, self._anns, self._footer = intro, anns, footer
	def as_text(self):
		lines = [self._intro]
		lines.extend(ann.illustrate() for ann in self._anns)
		lines.extend(self._footer)
		return '\n'.join(lines)
