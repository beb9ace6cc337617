"""
The type-checking driver.

A straightforward recursive descent: each kind of term has a visit method
that works out its type from the types of its parts, in an environment
that only ever grows by making new layers. The first rule a program breaks
raises the corresponding TypeCheckError; there is no attempt to recover.

Wherever the rules need to know what sort of type something has
(is this a function? an object?) the type gets simplified first,
which unfolds a recursive type just far enough to expose its head.

Recursive functions carry a declared result type, and the body must agree
with it. That is what lets a call to the function inside its own body
have a type before the body has been checked, with no fixpoint in sight.
"""
from typing import Callable, Optional
from boozetools.support.foundation import Visitor

from . import syntax
from .calculus import StructuralType, BOOLEAN, NUMBER, BooleanType, NumberType, FuncType, ObjectType, Field
from .diagnostics import (
	ConditionNotBoolean, BranchTypeMismatch, OperandNotNumber, UnknownVariable,
	NotAFunction, ArgumentCountMismatch, ArgumentTypeMismatch, NotAnObject,
	UnknownField, ReturnTypeMismatch,
)
from .environment import Environment, Unbound, null_env
from .equivalence import type_equals
from .subtyping import is_subtype
from .unfolding import simplify

_literal_type_map : dict[type, StructuralType] = {
	bool: BOOLEAN,
	int: NUMBER,
	float: NUMBER,
}

class TypeChecker(Visitor):
	"""
	By default, an argument may have any subtype of its parameter's type.
	With exact_calls, the argument's type must equal the parameter's type,
	which is how the language worked before it had subtyping.
	"""
	_compatible: Callable[[StructuralType, StructuralType], bool]

	def __init__(self, *, exact_calls:bool=False):
		self._compatible = type_equals if exact_calls else is_subtype

	def check(self, term:syntax.ValueExpression, env:Optional[Environment]=None) -> StructuralType:
		typ = self.visit(term, null_env if env is None else env)
		assert isinstance(typ, StructuralType), (term, typ)
		return typ

	@staticmethod
	def visit_Literal(expr:syntax.Literal, _env:Environment) -> StructuralType:
		return _literal_type_map[type(expr.value)]

	def visit_Cond(self, cond:syntax.Cond, env:Environment) -> StructuralType:
		if_part_type = self.check(cond.if_part, env)
		if not isinstance(simplify(if_part_type), BooleanType):
			raise ConditionNotBoolean(cond.if_part, "There is no implicit Boolean conversion; got %r."%if_part_type)
		then_type = self.check(cond.then_part, env)
		else_type = self.check(cond.else_part, env)
		if not type_equals(then_type, else_type):
			raise BranchTypeMismatch(cond, "The branches have different types: %r versus %r."%(then_type, else_type))
		return then_type

	def visit_Add(self, expr:syntax.Add, env:Environment) -> StructuralType:
		for operand in expr.lhs, expr.rhs:
			typ = self.check(operand, env)
			if not isinstance(simplify(typ), NumberType):
				raise OperandNotNumber(operand, "Only numbers can be added; this is %r."%typ)
		return NUMBER

	@staticmethod
	def visit_Lookup(ref:syntax.Lookup, env:Environment) -> StructuralType:
		try: return env.resolve(ref.name)
		except Unbound: raise UnknownVariable(ref, "I don't see what '%s' refers to."%ref.name) from None

	def visit_LambdaForm(self, lf:syntax.LambdaForm, env:Environment) -> StructuralType:
		inner = env.extend(lf.params)
		return FuncType(lf.params, self.check(lf.body, inner))

	def visit_Call(self, site:syntax.Call, env:Environment) -> StructuralType:
		fn_type = simplify(self.check(site.fn_exp, env))
		if not isinstance(fn_type, FuncType):
			raise NotAFunction(site.fn_exp, "Dunno how to call %r as a function."%fn_type)
		if fn_type.arity() != len(site.args):
			pattern = "This takes %d argument(s), but got %d instead."
			raise ArgumentCountMismatch(site, pattern%(fn_type.arity(), len(site.args)))
		for arg, param in zip(site.args, fn_type.params):
			arg_type = self.check(arg, env)
			if not self._compatible(arg_type, param.type):
				pattern = "Parameter '%s' needs %r, but this is %r."
				raise ArgumentTypeMismatch(arg, pattern%(param.name, param.type, arg_type))
		return fn_type.result

	def visit_Seq(self, seq:syntax.Seq, env:Environment) -> StructuralType:
		self.check(seq.body, env)
		return self.check(seq.rest, env)

	def visit_Const(self, const:syntax.Const, env:Environment) -> StructuralType:
		init_type = self.check(const.init, env)
		return self.check(const.rest, env.bind(const.name, init_type))

	def visit_RecordLiteral(self, rl:syntax.RecordLiteral, env:Environment) -> StructuralType:
		return ObjectType(Field(f.name, self.check(f.expr, env)) for f in rl.fields)

	def visit_FieldReference(self, fr:syntax.FieldReference, env:Environment) -> StructuralType:
		lhs_type = simplify(self.check(fr.lhs, env))
		if not isinstance(lhs_type, ObjectType):
			raise NotAnObject(fr.lhs, "%r has no fields; in particular not '%s'."%(lhs_type, fr.field_name))
		field_type = lhs_type.field(fr.field_name)
		if field_type is None:
			raise UnknownField(fr, "Type '%r' has fields, but not one called '%s'."%(lhs_type, fr.field_name))
		return field_type

	def visit_LetRec(self, lr:syntax.LetRec, env:Environment) -> StructuralType:
		signature = FuncType(lr.params, lr.result_type)
		inner = env.extend(lr.params).bind(lr.name, signature)
		body_type = self.check(lr.body, inner)
		if not type_equals(lr.result_type, body_type):
			pattern = "'%s' is declared to return %r but produces %r."
			raise ReturnTypeMismatch(lr, pattern%(lr.name, lr.result_type, body_type))
		return self.check(lr.rest, env.bind(lr.name, signature))

def typecheck(term:syntax.ValueExpression, env:Optional[Environment]=None, *, exact_calls:bool=False) -> StructuralType:
	""" The type of the whole program, or else the first TypeCheckError it commits. """
	return TypeChecker(exact_calls=exact_calls).check(term, env)
