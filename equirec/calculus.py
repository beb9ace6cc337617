"""
The data over which the type-checker operates.

Types here are plain trees. A recursive type is a named binder (RecType)
whose body may mention that name (TypeVar) to mean "the whole thing again".
So the cycle is conceptual: there is never a back-reference in the data,
and every engine that cares about cycles must detect them by itself.

Equality of these objects (the dunder kind) is textual structural identity.
The interesting equality, the one that sees through recursive binders,
lives in the equivalence module.
"""
from abc import ABC, abstractmethod
from typing import Iterable, NamedTuple, Optional

class StructuralType:
	"""Value objects, so they can go in sets and dictionaries."""
	def visit(self, visitor:"TypeVisitor"): raise NotImplementedError(type(self))

	def __init__(self, *key):
		self._key = key
		self._hash = hash(key)
	def __hash__(self): return self._hash
	def __eq__(self, other): return type(self) is type(other) and self._key == other._key
	def __repr__(self) -> str:
		it = self.visit(Render())
		assert isinstance(it, str), (it, type(self))
		return it

class Param(NamedTuple):
	""" Parameter names are documentation. Only the types participate in comparisons. """
	name: str
	type: StructuralType

class Field(NamedTuple):
	name: str
	type: StructuralType

class BooleanType(StructuralType):
	def visit(self, visitor:"TypeVisitor"): return visitor.on_boolean(self)

class NumberType(StructuralType):
	def visit(self, visitor:"TypeVisitor"): return visitor.on_number(self)

class FuncType(StructuralType):
	params: tuple[Param, ...]
	result: StructuralType
	def __init__(self, params:Iterable[Param], result:StructuralType):
		self.params = tuple(Param(*p) for p in params)
		assert all(isinstance(p.type, StructuralType) for p in self.params), self.params
		assert isinstance(result, StructuralType), result
		self.result = result
		super().__init__(tuple(p.type for p in self.params), result)
	def visit(self, visitor:"TypeVisitor"): return visitor.on_func(self)
	def arity(self) -> int: return len(self.params)
	def param_types(self) -> tuple[StructuralType, ...]:
		return tuple(p.type for p in self.params)

class ObjectType(StructuralType):
	fields: tuple[Field, ...]
	def __init__(self, fields:Iterable[Field]):
		self.fields = tuple(Field(*f) for f in fields)
		self._by_name = {f.name: f.type for f in self.fields}
		assert len(self._by_name) == len(self.fields), "Duplicate field name in %r"%(self.fields,)
		super().__init__(self.fields)
	def visit(self, visitor:"TypeVisitor"): return visitor.on_object(self)
	def field(self, name:str) -> Optional[StructuralType]:
		return self._by_name.get(name)

class RecType(StructuralType):
	def __init__(self, name:str, body:StructuralType):
		assert isinstance(body, StructuralType), body
		self.name, self.body = name, body
		super().__init__(name, body)
	def visit(self, visitor:"TypeVisitor"): return visitor.on_rec(self)

class TypeVar(StructuralType):
	def __init__(self, name:str):
		self.name = name
		super().__init__(name)
	def visit(self, visitor:"TypeVisitor"): return visitor.on_type_var(self)

BOOLEAN = BooleanType()
NUMBER = NumberType()

###################
#

class TypeVisitor(ABC):
	"""
	One method per kind of type. They are all abstract,
	so a visitor that forgets a case refuses to be instantiated.
	"""
	@abstractmethod
	def on_boolean(self, b:BooleanType): pass
	@abstractmethod
	def on_number(self, n:NumberType): pass
	@abstractmethod
	def on_func(self, f:FuncType): pass
	@abstractmethod
	def on_object(self, o:ObjectType): pass
	@abstractmethod
	def on_rec(self, r:RecType): pass
	@abstractmethod
	def on_type_var(self, v:TypeVar): pass


class Render(TypeVisitor):
	""" Return a string representation of the type, roughly in the front end's notation. """
	def on_boolean(self, b: BooleanType): return "boolean"
	def on_number(self, n: NumberType): return "number"
	def on_func(self, f: FuncType):
		args = ", ".join("%s: %s"%(p.name, p.type.visit(self)) for p in f.params)
		return "(%s) => %s"%(args, f.result.visit(self))
	def on_object(self, o: ObjectType):
		if o.fields:
			return "{ %s }"%("; ".join("%s: %s"%(f.name, f.type.visit(self)) for f in o.fields))
		else:
			return "{}"
	def on_rec(self, r: RecType):
		return "mu %s. %s"%(r.name, r.body.visit(self))
	def on_type_var(self, v: TypeVar):
		return v.name
