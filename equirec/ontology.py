"""
These most-fundamental classes in the syntax class hierarchy
are separate from the rest to avoid circular-import scenarios:
the diagnostics module needs to know what a phrase is,
but not what any particular phrase means.
"""
from typing import Optional
from .location import Span

class Phrase:
	"""
	Anything the front end can point at.
	The position tag is opaque payload: nothing but error reporting looks at it.
	"""
	loc: Optional[Span]
	def __init__(self, loc:Optional[Span]=None):
		assert loc is None or isinstance(loc, Span), type(loc)
		self.loc = loc

class ValueExpression(Phrase): pass
