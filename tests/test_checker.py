import unittest

from equirec import diagnostics
from equirec.calculus import BOOLEAN, NUMBER, FuncType, ObjectType, RecType, TypeVar, Param, Field
from equirec.checker import TypeChecker, typecheck
from equirec.environment import Unbound, null_env
from equirec.equivalence import type_equals
from equirec.location import span
from equirec.syntax import (
	Literal, Cond, Add, Lookup, LambdaForm, Call, Seq, Const,
	RecordLiteral, FieldInit, FieldReference, LetRec,
)

def obj(**fields):
	return ObjectType(Field(name, typ) for name, typ in fields.items())

def record(**fields):
	return RecordLiteral([FieldInit(name, expr) for name, expr in fields.items()])

NUM_STREAM = RecType("NumStream", obj(num=NUMBER, rest=FuncType([], TypeVar("NumStream"))))

def numbers_program(tail):
	"""
	function numbers(n: number): NumStream {
	  return { num: n, rest: () => numbers(n + 1) };
	}
	...followed by tail
	"""
	n = Lookup("n")
	body = record(
		num=n,
		rest=LambdaForm([], Call(Lookup("numbers"), [Add(n, Literal(1))])),
	)
	return LetRec("numbers", [Param("n", NUMBER)], NUM_STREAM, body, tail)

class ScenarioTests(unittest.TestCase):
	""" Small whole programs, from literal input to verdict. """

	def assertFails(self, kind, term, **kwargs) -> diagnostics.TypeCheckError:
		with self.assertRaises(kind) as cm:
			typecheck(term, **kwargs)
		return cm.exception

	def test_01_addition(self):
		self.assertEqual(NUMBER, typecheck(Add(Literal(1), Literal(2))))

	def test_02_condition_must_be_boolean(self):
		cond = Literal(1)
		ex = self.assertFails(diagnostics.ConditionNotBoolean, Cond(cond, Literal(2), Literal(3)))
		self.assertIs(cond, ex.term)
		self.assertEqual("ConditionNotBoolean", ex.kind)

	def test_03_branches_must_agree(self):
		term = Cond(Literal(True), Literal(1), Literal(True))
		ex = self.assertFails(diagnostics.BranchTypeMismatch, term)
		self.assertIs(term, ex.term)

	def test_04_argument_type(self):
		arg = Literal(True)
		term = Call(LambdaForm([Param("x", NUMBER)], Lookup("x")), [arg])
		for exact in False, True:
			with self.subTest(exact_calls=exact):
				ex = self.assertFails(diagnostics.ArgumentTypeMismatch, term, exact_calls=exact)
				self.assertIs(arg, ex.term)

	def test_05_width_subtyping_at_call(self):
		param_type = obj(foo=NUMBER)
		term = Const(
			"f", LambdaForm([Param("x", param_type)], FieldReference(Lookup("x"), "foo")),
			Call(Lookup("f"), [record(foo=Literal(1), bar=Literal(True))]),
		)
		self.assertEqual(NUMBER, typecheck(term))
		self.assertFails(diagnostics.ArgumentTypeMismatch, term, exact_calls=True)

	def test_06_number_stream(self):
		def rest_of(expr): return Call(FieldReference(expr, "rest"), [])
		program = numbers_program(FieldReference(rest_of(rest_of(Call(Lookup("numbers"), [Literal(1)]))), "num"))
		self.assertEqual(NUMBER, typecheck(program))

	def test_06_number_stream_by_steps(self):
		program = numbers_program(
			Const("ns1", Call(Lookup("numbers"), [Literal(1)]),
			Const("ns2", Call(FieldReference(Lookup("ns1"), "rest"), []),
			Const("ns3", Call(FieldReference(Lookup("ns2"), "rest"), []),
			Lookup("ns3"),
		))))
		result = typecheck(program)
		self.assertTrue(type_equals(NUM_STREAM, result))

class RuleTests(unittest.TestCase):

	def test_literals(self):
		self.assertEqual(BOOLEAN, typecheck(Literal(True)))
		self.assertEqual(BOOLEAN, typecheck(Literal(False)))
		self.assertEqual(NUMBER, typecheck(Literal(2.5)))

	def test_conditional_result(self):
		term = Cond(Literal(False), record(a=Literal(1)), record(a=Literal(2)))
		self.assertEqual(obj(a=NUMBER), typecheck(term))

	def test_operands(self):
		rhs = Literal(True)
		with self.assertRaises(diagnostics.OperandNotNumber) as cm:
			typecheck(Add(Literal(1), rhs))
		self.assertIs(rhs, cm.exception.term)
		lhs = record()
		with self.assertRaises(diagnostics.OperandNotNumber) as cm:
			typecheck(Add(lhs, Literal(True)))
		self.assertIs(lhs, cm.exception.term)

	def test_unknown_variable(self):
		ref = Lookup("y")
		with self.assertRaises(diagnostics.UnknownVariable) as cm:
			typecheck(ref)
		self.assertIs(ref, cm.exception.term)

	def test_given_environment(self):
		env = null_env.bind("x", BOOLEAN)
		self.assertEqual(BOOLEAN, typecheck(Lookup("x"), env))

	def test_lambda(self):
		term = LambdaForm([Param("a", NUMBER), Param("b", BOOLEAN)], Lookup("a"))
		self.assertEqual(FuncType([Param("a", NUMBER), Param("b", BOOLEAN)], NUMBER), typecheck(term))

	def test_not_a_function(self):
		callee = Literal(1)
		with self.assertRaises(diagnostics.NotAFunction) as cm:
			typecheck(Call(callee, []))
		self.assertIs(callee, cm.exception.term)

	def test_argument_count(self):
		site = Call(LambdaForm([Param("x", NUMBER)], Lookup("x")), [])
		with self.assertRaises(diagnostics.ArgumentCountMismatch) as cm:
			typecheck(site)
		self.assertIs(site, cm.exception.term)

	def test_contravariant_argument(self):
		# g expects a function of the wider record; a function of the narrower one will do.
		wide = obj(foo=NUMBER, bar=BOOLEAN)
		g = LambdaForm(
			[Param("h", FuncType([Param("r", wide)], NUMBER))],
			Call(Lookup("h"), [record(foo=Literal(1), bar=Literal(True))]),
		)
		narrow_fn = LambdaForm([Param("r", obj(foo=NUMBER))], FieldReference(Lookup("r"), "foo"))
		self.assertEqual(NUMBER, typecheck(Call(g, [narrow_fn])))
		with self.assertRaises(diagnostics.ArgumentTypeMismatch):
			typecheck(Call(g, [narrow_fn]), exact_calls=True)

	def test_sequence(self):
		self.assertEqual(NUMBER, typecheck(Seq(Literal(True), Literal(1))))
		with self.assertRaises(diagnostics.UnknownVariable):
			typecheck(Seq(Lookup("nope"), Literal(1)))

	def test_const(self):
		term = Const("x", Literal(True), Cond(Lookup("x"), Literal(1), Literal(2)))
		self.assertEqual(NUMBER, typecheck(term))

	def test_record_fields_in_order(self):
		result = typecheck(record(b=Literal(1), a=Literal(True)))
		self.assertEqual(("b", "a"), tuple(f.name for f in result.fields))

	def test_record_fields_do_not_share_scope(self):
		term = record(a=Const("x", Literal(1), Lookup("x")), b=Lookup("x"))
		with self.assertRaises(diagnostics.UnknownVariable):
			typecheck(term)

	def test_not_an_object(self):
		lhs = Literal(1)
		with self.assertRaises(diagnostics.NotAnObject) as cm:
			typecheck(FieldReference(lhs, "foo"))
		self.assertIs(lhs, cm.exception.term)

	def test_unknown_field(self):
		fr = FieldReference(record(a=Literal(1)), "b")
		with self.assertRaises(diagnostics.UnknownField) as cm:
			typecheck(fr)
		self.assertIs(fr, cm.exception.term)

	def test_sibling_scopes_stay_apart(self):
		term = Seq(Call(LambdaForm([Param("x", NUMBER)], Lookup("x")), [Literal(1)]), Lookup("x"))
		with self.assertRaises(diagnostics.UnknownVariable):
			typecheck(term)

class RecursiveFunctionTests(unittest.TestCase):

	def test_self_call_checks_against_declaration(self):
		x = Lookup("x")
		term = LetRec("f", [Param("x", NUMBER)], NUMBER, Call(Lookup("f"), [x]), Lookup("f"))
		result = typecheck(term)
		self.assertIsInstance(result, FuncType)
		self.assertEqual(NUMBER, result.result)
		self.assertEqual((NUMBER,), result.param_types())

	def test_wrong_return_type(self):
		term = LetRec("f", [Param("x", NUMBER)], NUMBER, Literal(True), Lookup("f"))
		with self.assertRaises(diagnostics.ReturnTypeMismatch) as cm:
			typecheck(term)
		self.assertIs(term, cm.exception.term)

	def test_parameters_are_not_in_scope_afterward(self):
		term = LetRec("f", [Param("x", NUMBER)], NUMBER, Lookup("x"), Lookup("x"))
		with self.assertRaises(diagnostics.UnknownVariable):
			typecheck(term)

	def test_name_shadows_parameter_in_body(self):
		term = LetRec("f", [Param("f", BOOLEAN)], NUMBER, Call(Lookup("f"), [Literal(1)]), Literal(0))
		with self.assertRaises(diagnostics.ArgumentTypeMismatch):
			typecheck(term)

	def test_recursive_condition(self):
		# A condition whose type is recursive still has to boil down to boolean.
		flag_stream = RecType("F", obj(now=BOOLEAN, later=FuncType([], TypeVar("F"))))
		term = LetRec(
			"flags", [], flag_stream, record(now=Literal(True), later=Lookup("flags")),
			Cond(FieldReference(Call(Lookup("flags"), []), "now"), Literal(1), Literal(2)),
		)
		self.assertEqual(NUMBER, typecheck(term))
		bad = LetRec(
			"flags", [], flag_stream, record(now=Literal(True), later=Lookup("flags")),
			Cond(Call(Lookup("flags"), []), Literal(1), Literal(2)),
		)
		with self.assertRaises(diagnostics.ConditionNotBoolean):
			typecheck(bad)

class PlumbingTests(unittest.TestCase):

	def test_errors_carry_position(self):
		where = span(3, 4, 3, 9)
		ref = Lookup("ghost", loc=where)
		with self.assertRaises(diagnostics.UnknownVariable) as cm:
			typecheck(Add(Literal(1), ref))
		self.assertEqual(where, cm.exception.loc)

	def test_environments_are_persistent(self):
		outer = null_env.bind("a", NUMBER)
		inner = outer.bind("b", BOOLEAN)
		self.assertEqual(BOOLEAN, inner.resolve("b"))
		self.assertEqual(NUMBER, inner.resolve("a"))
		with self.assertRaises(Unbound):
			outer.resolve("b")

	def test_checker_is_reusable(self):
		checker = TypeChecker()
		self.assertEqual(NUMBER, checker.check(Literal(1)))
		with self.assertRaises(diagnostics.UnknownVariable):
			checker.check(Lookup("x"))
		self.assertEqual(BOOLEAN, checker.check(Literal(True)))

	def test_invariant_violation_is_not_a_diagnostic(self):
		self.assertFalse(issubclass(diagnostics.InvariantViolation, diagnostics.TypeCheckError))
		then_part = LambdaForm([Param("x", NUMBER)], Literal(1))
		else_part = LambdaForm([Param("x", TypeVar("Q"))], Literal(1))
		term = Cond(Literal(True), then_part, else_part)
		with self.assertRaises(diagnostics.InvariantViolation):
			typecheck(term)


if __name__ == '__main__':
	unittest.main()
