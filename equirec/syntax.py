"""
The set of term nodes in simple form.

The front end builds these bottom-up, already resolved into concrete types
wherever a type annotation appears. Nothing in here knows how to parse text;
see the reader module for decoding a tree the front end has serialized.
"""
from typing import NamedTuple, Optional, Sequence, Union
from .calculus import StructuralType, Param
from .location import Span
from .ontology import ValueExpression

class Literal(ValueExpression):
	""" true, false, or a number. The Python type of the value says which. """
	def __init__(self, value:Union[bool, int, float], *, loc:Optional[Span]=None):
		assert isinstance(value, (bool, int, float)), type(value)
		super().__init__(loc)
		self.value = value
	def __repr__(self): return "<lit:%r>"%self.value

class Cond(ValueExpression):
	def __init__(self, if_part:ValueExpression, then_part:ValueExpression, else_part:ValueExpression, *, loc:Optional[Span]=None):
		super().__init__(loc)
		self.if_part, self.then_part, self.else_part = if_part, then_part, else_part

class Add(ValueExpression):
	def __init__(self, lhs:ValueExpression, rhs:ValueExpression, *, loc:Optional[Span]=None):
		super().__init__(loc)
		self.lhs, self.rhs = lhs, rhs

class Lookup(ValueExpression):
	def __init__(self, name:str, *, loc:Optional[Span]=None):
		super().__init__(loc)
		self.name = name
	def __repr__(self): return "<ref:%s>"%self.name

class LambdaForm(ValueExpression):
	params: tuple[Param, ...]
	def __init__(self, params:Sequence[Param], body:ValueExpression, *, loc:Optional[Span]=None):
		super().__init__(loc)
		self.params = tuple(Param(*p) for p in params)
		assert all(isinstance(p.type, StructuralType) for p in self.params)
		self.body = body

class Call(ValueExpression):
	def __init__(self, fn_exp:ValueExpression, args:Sequence[ValueExpression], *, loc:Optional[Span]=None):
		super().__init__(loc)
		self.fn_exp = fn_exp
		self.args = tuple(args)

class Seq(ValueExpression):
	""" Evaluate body for effect, then rest for value. """
	def __init__(self, body:ValueExpression, rest:ValueExpression, *, loc:Optional[Span]=None):
		super().__init__(loc)
		self.body, self.rest = body, rest

class Const(ValueExpression):
	""" const name = init; rest """
	def __init__(self, name:str, init:ValueExpression, rest:ValueExpression, *, loc:Optional[Span]=None):
		super().__init__(loc)
		self.name, self.init, self.rest = name, init, rest

class FieldInit(NamedTuple):
	name: str
	expr: ValueExpression

class RecordLiteral(ValueExpression):
	fields: tuple[FieldInit, ...]
	def __init__(self, fields:Sequence[FieldInit], *, loc:Optional[Span]=None):
		super().__init__(loc)
		self.fields = tuple(FieldInit(*f) for f in fields)

class FieldReference(ValueExpression):
	def __init__(self, lhs:ValueExpression, field_name:str, *, loc:Optional[Span]=None):
		super().__init__(loc)
		self.lhs, self.field_name = lhs, field_name
	def __repr__(self): return "<%r.%s>"%(self.lhs, self.field_name)

class LetRec(ValueExpression):
	"""
	A named function which may call itself, followed by the
	rest of the program in which that name is in scope.
	The result type is declared, never inferred.
	"""
	params: tuple[Param, ...]
	def __init__(self, name:str, params:Sequence[Param], result_type:StructuralType, body:ValueExpression, rest:ValueExpression, *, loc:Optional[Span]=None):
		super().__init__(loc)
		self.name = name
		self.params = tuple(Param(*p) for p in params)
		assert all(isinstance(p.type, StructuralType) for p in self.params)
		assert isinstance(result_type, StructuralType), result_type
		self.result_type = result_type
		self.body, self.rest = body, rest
	def __repr__(self): return "<function %s/%d>"%(self.name, len(self.params))
