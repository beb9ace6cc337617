"""
Structural type equality, in the presence of equi-recursive types.

Two types are equal if their infinite unfoldings are identical. The infinite
part is handled coinductively: while comparing, keep a record of pairs already
assumed equal. If the comparison comes back around to one of those pairs
without having found a contradiction along the way, the cycle closes and the
assumption stands.

The record of assumptions is a tuple, extended by concatenation, so each
branch of the comparison sees exactly the assumptions on its own path.

There are two relations in here:

* same_shape is a cheap, finite structural comparison which matches
  recursive binders up to renaming. It answers "have I been here before?"
  and nothing else.
* type_equals is the real thing, which unfolds recursive types as needed.
"""
from .calculus import (
	StructuralType, TypeVisitor,
	BooleanType, NumberType, FuncType, ObjectType, RecType, TypeVar,
)
from .diagnostics import InvariantViolation
from .unfolding import unfold_once

SEEN = tuple[tuple[StructuralType, StructuralType], ...]

class SameShape(TypeVisitor):
	"""
	Dispatch on the right-hand type; self._this is the left-hand type.
	The renaming maps each left-hand binder to its right-hand partner.
	"""
	def __init__(self, this:StructuralType, renaming:dict[str, str]):
		self._this = this
		self._renaming = renaming

	def on_boolean(self, b: BooleanType): return isinstance(self._this, BooleanType)
	def on_number(self, n: NumberType): return isinstance(self._this, NumberType)

	def on_func(self, f: FuncType):
		this = self._this
		if not isinstance(this, FuncType) or this.arity() != f.arity(): return False
		pairs = zip(this.param_types(), f.param_types())
		return all(same_shape(a, b, self._renaming) for a, b in pairs) and same_shape(this.result, f.result, self._renaming)

	def on_object(self, o: ObjectType):
		this = self._this
		if not isinstance(this, ObjectType) or len(this.fields) != len(o.fields): return False
		for name, typ in this.fields:
			other = o.field(name)
			if other is None or not same_shape(typ, other, self._renaming): return False
		return True

	def on_rec(self, r: RecType):
		this = self._this
		if not isinstance(this, RecType): return False
		renaming = dict(self._renaming)
		renaming[this.name] = r.name
		return same_shape(this.body, r.body, renaming)

	def on_type_var(self, v: TypeVar):
		this = self._this
		if not isinstance(this, TypeVar): return False
		# A variable bound nowhere along the way matches nothing.
		return self._renaming.get(this.name) == v.name

def same_shape(a:StructuralType, b:StructuralType, renaming:dict[str, str]=None) -> bool:
	return b.visit(SameShape(a, renaming or {}))

def already_seen(a:StructuralType, b:StructuralType, seen:SEEN) -> bool:
	return any(same_shape(x, a) and same_shape(y, b) for x, y in seen)

def check_closed(typ:StructuralType):
	if isinstance(typ, TypeVar):
		raise InvariantViolation("Type variable %s escaped its binder"%typ.name)


class Equality(TypeVisitor):
	"""
	One step of the full comparison, driven by the right-hand type.
	Recursive types never get here: type_equals unfolds them first.
	"""
	def __init__(self, this:StructuralType, seen:SEEN):
		check_closed(this)
		self._this = this
		self._seen = seen

	def on_boolean(self, b: BooleanType): return isinstance(self._this, BooleanType)
	def on_number(self, n: NumberType): return isinstance(self._this, NumberType)

	def on_func(self, f: FuncType):
		this = self._this
		if not isinstance(this, FuncType) or this.arity() != f.arity(): return False
		pairs = zip(this.param_types(), f.param_types())
		return (
			all(_equals(a, b, self._seen) for a, b in pairs)
			and _equals(this.result, f.result, self._seen)
		)

	def on_object(self, o: ObjectType):
		this = self._this
		if not isinstance(this, ObjectType) or len(this.fields) != len(o.fields): return False
		for name, typ in o.fields:
			mine = this.field(name)
			if mine is None or not _equals(mine, typ, self._seen): return False
		return True

	def on_rec(self, r: RecType):
		raise InvariantViolation("Recursive type %r reached a leaf comparison"%r)

	def on_type_var(self, v: TypeVar):
		raise InvariantViolation("Type variable %s escaped its binder"%v.name)

def _equals(a:StructuralType, b:StructuralType, seen:SEEN) -> bool:
	if already_seen(a, b, seen): return True
	if isinstance(a, RecType): return _equals(unfold_once(a), b, seen + ((a, b),))
	if isinstance(b, RecType): return _equals(a, unfold_once(b), seen + ((a, b),))
	return b.visit(Equality(a, seen))

def type_equals(a:StructuralType, b:StructuralType) -> bool:
	""" Do these types denote the same (possibly infinite) tree? """
	return _equals(a, b, ())
