"""
Subtyping: when may a value of one type stand in for another?

* Function arrows are contravariant in their parameters and covariant in
  their results: a function is safe to use in place of another if it accepts
  at least what the other accepts and returns no more than the other returns.
* Records have width subtyping: a record with extra fields can stand in for
  a narrower expected shape.
* Primitive types are related only to themselves. There is no widening.

Recursive types get the same cycle-guard as in the equivalence module,
for the same reason: without it, comparing a self-referential record
type against itself would unfold forever.
"""
from .calculus import (
	StructuralType, TypeVisitor,
	BooleanType, NumberType, FuncType, ObjectType, RecType, TypeVar,
)
from .diagnostics import InvariantViolation
from .equivalence import SEEN, already_seen, check_closed
from .unfolding import unfold_once

class Subsumption(TypeVisitor):
	""" Dispatch on the expected (super) type; self._sub is the candidate. """
	def __init__(self, sub:StructuralType, seen:SEEN):
		check_closed(sub)
		self._sub = sub
		self._seen = seen

	def on_boolean(self, b: BooleanType): return isinstance(self._sub, BooleanType)
	def on_number(self, n: NumberType): return isinstance(self._sub, NumberType)

	def on_func(self, sup: FuncType):
		sub = self._sub
		if not isinstance(sub, FuncType) or sub.arity() != sup.arity(): return False
		# Note the parameters go the other way around:
		for need, give in zip(sup.param_types(), sub.param_types()):
			if not _subtype(need, give, self._seen): return False
		return _subtype(sub.result, sup.result, self._seen)

	def on_object(self, sup: ObjectType):
		sub = self._sub
		if not isinstance(sub, ObjectType): return False
		for name, need in sup.fields:
			have = sub.field(name)
			if have is None or not _subtype(have, need, self._seen): return False
		return True

	def on_rec(self, r: RecType):
		raise InvariantViolation("Recursive type %r reached a leaf comparison"%r)

	def on_type_var(self, v: TypeVar):
		raise InvariantViolation("Type variable %s escaped its binder"%v.name)

def _subtype(sub:StructuralType, sup:StructuralType, seen:SEEN) -> bool:
	if already_seen(sub, sup, seen): return True
	if isinstance(sub, RecType): return _subtype(unfold_once(sub), sup, seen + ((sub, sup),))
	if isinstance(sup, RecType): return _subtype(sub, unfold_once(sup), seen + ((sub, sup),))
	return sup.visit(Subsumption(sub, seen))

def is_subtype(sub:StructuralType, sup:StructuralType) -> bool:
	""" May a value of type `sub` be used wherever a `sup` is expected? """
	return _subtype(sub, sup, ())
