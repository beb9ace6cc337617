"""
Unfolding recursive types.

To unfold "mu X. body" is to substitute the whole recursive type for X
inside its own body. The result describes one concrete level of the
otherwise-infinite structure, and still mentions the original binder
wherever X occurred, so it can always be unfolded again.
"""
from .calculus import (
	StructuralType, TypeVisitor,
	BooleanType, NumberType, FuncType, ObjectType, RecType, TypeVar, Param, Field,
)
from .diagnostics import InvariantViolation

class Substitution(TypeVisitor):
	"""
	Replace every free occurrence of one type variable.

	Capture is not a concern here: the replacement is always a closed RecType,
	so no binder inside the host can capture anything in it. Shadowing is a
	concern, though: a nested binder of the same name hides the outer one.
	"""
	def __init__(self, name:str, replacement:StructuralType):
		self._name = name
		self._replacement = replacement
	def on_boolean(self, b: BooleanType): return b
	def on_number(self, n: NumberType): return n
	def on_func(self, f: FuncType):
		params = [Param(p.name, p.type.visit(self)) for p in f.params]
		return FuncType(params, f.result.visit(self))
	def on_object(self, o: ObjectType):
		return ObjectType(Field(f.name, f.type.visit(self)) for f in o.fields)
	def on_rec(self, r: RecType):
		if r.name == self._name: return r
		return RecType(r.name, r.body.visit(self))
	def on_type_var(self, v: TypeVar):
		return self._replacement if v.name == self._name else v

def substitute(host:StructuralType, name:str, replacement:StructuralType) -> StructuralType:
	return host.visit(Substitution(name, replacement))

def unfold_once(rec:RecType) -> StructuralType:
	assert isinstance(rec, RecType), rec
	return substitute(rec.body, rec.name, rec)

def simplify(typ:StructuralType) -> StructuralType:
	"""
	Unfold until the head is something other than a recursive binder.

	Only a non-contractive type (like mu X. X) can fail to get there.
	Such a type comes back around to a head it has already had,
	which is a defect upstream rather than something to report.
	"""
	# Imported here because the equivalence module itself depends on unfolding.
	from .equivalence import same_shape
	heads = []
	while isinstance(typ, RecType):
		if any(same_shape(h, typ) for h in heads):
			raise InvariantViolation("Non-contractive recursive type: %r"%heads[0])
		heads.append(typ)
		typ = unfold_once(typ)
	return typ
