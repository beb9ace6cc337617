"""
Position tags, as the front end attaches them to syntax nodes.

The checker never looks inside one of these. It only carries the tag along
so that whatever prints an error message can say where the trouble is.
Lines count from one; columns count from zero, same as the front end.
"""
from typing import NamedTuple, Optional

class Position(NamedTuple):
	line: int
	column: int
	def __str__(self): return "%d:%d"%(self.line, self.column)

class Span(NamedTuple):
	""" Aimed at whatever prints error messages """
	start: Position
	end: Position
	
	def __str__(self): return "%s-%s"%(self.start, self.end)
	
	def width_on_first_line(self) -> int:
		if self.start.line == self.end.line:
			return max(self.end.column - self.start.column, 1)
		else:
			return 1

def span(line:int, column:int, end_line:int, end_column:int) -> Span:
	return Span(Position(line, column), Position(end_line, end_column))

def describe(loc:Optional[Span]) -> str:
	return "(unknown position)" if loc is None else str(loc)
