"""
Decode a syntax tree that the front end has already built and serialized.

The front end emits JSON in which every node is an object with a "tag" member
naming its kind, plus whatever members that kind needs, plus (usually) a "loc"
member giving its position. Type annotations arrive already resolved into
type trees, recursive type aliases included, so there is no name resolution
to do here. Nothing in this module looks at source text.
"""
import json
from pathlib import Path
from typing import Any, Callable, Optional

from . import syntax
from .calculus import BOOLEAN, NUMBER, StructuralType, FuncType, ObjectType, RecType, TypeVar, Param, Field
from .location import Position, Span

class MalformedTree(ValueError):
	pass

def _member(node:dict, key:str) -> Any:
	try: return node[key]
	except KeyError: raise MalformedTree("%r node lacks %r"%(node.get("tag"), key)) from None
	except TypeError: raise MalformedTree("Expected a node, got %r"%(node,)) from None

def _text(node:dict, key:str) -> str:
	it = _member(node, key)
	if not isinstance(it, str): raise MalformedTree("%r of %r node must be a string"%(key, node.get("tag")))
	return it

def _list(node:dict, key:str) -> list:
	it = _member(node, key)
	if not isinstance(it, list): raise MalformedTree("%r of %r node must be a list"%(key, node.get("tag")))
	return it

def read_loc(node:dict) -> Optional[Span]:
	loc = node.get("loc")
	if loc is None: return None
	try:
		start, end = loc["start"], loc["end"]
		return Span(Position(start["line"], start["column"]), Position(end["line"], end["column"]))
	except (KeyError, TypeError):
		raise MalformedTree("Bogus position tag %r"%(loc,)) from None

def _dispatch(table:dict[str, Callable], node:Any, what:str):
	tag = _member(node, "tag")
	try: build = table[tag]
	except (KeyError, TypeError): raise MalformedTree("Unknown %s tag %r"%(what, tag)) from None
	return build(node)

###############################################################################

def read_type(node:Any) -> StructuralType:
	return _dispatch(_TYPES, node, "type")

def _params(node:dict) -> list[Param]:
	return [Param(_text(p, "name"), read_type(_member(p, "type"))) for p in _list(node, "params")]

_TYPES = {
	"Boolean": lambda node: BOOLEAN,
	"Number": lambda node: NUMBER,
	"Func": lambda node: FuncType(_params(node), read_type(_member(node, "retType"))),
	"Object": lambda node: _object_type(node),
	"Rec": lambda node: RecType(_text(node, "name"), read_type(_member(node, "type"))),
	"TypeVar": lambda node: TypeVar(_text(node, "name")),
}

def _object_type(node:dict) -> ObjectType:
	fields = [Field(_text(p, "name"), read_type(_member(p, "type"))) for p in _list(node, "props")]
	if len({f.name for f in fields}) != len(fields):
		raise MalformedTree("Object type repeats a field name")
	return ObjectType(fields)

###############################################################################

def read_term(node:Any) -> syntax.ValueExpression:
	return _dispatch(_TERMS, node, "term")

def _number(node:dict) -> syntax.Literal:
	n = _member(node, "n")
	if isinstance(n, bool) or not isinstance(n, (int, float)):
		raise MalformedTree("number node holds %r"%(n,))
	return syntax.Literal(n, loc=read_loc(node))

def _sub(node:dict, key:str) -> syntax.ValueExpression:
	return read_term(_member(node, key))

def _record_literal(node:dict) -> syntax.RecordLiteral:
	fields = [syntax.FieldInit(_text(p, "name"), _sub(p, "term")) for p in _list(node, "props")]
	if len({f.name for f in fields}) != len(fields):
		raise MalformedTree("Record literal repeats a field name")
	return syntax.RecordLiteral(fields, loc=read_loc(node))

_TERMS = {
	"true": lambda node: syntax.Literal(True, loc=read_loc(node)),
	"false": lambda node: syntax.Literal(False, loc=read_loc(node)),
	"number": _number,
	"if": lambda node: syntax.Cond(_sub(node, "cond"), _sub(node, "thn"), _sub(node, "els"), loc=read_loc(node)),
	"add": lambda node: syntax.Add(_sub(node, "left"), _sub(node, "right"), loc=read_loc(node)),
	"var": lambda node: syntax.Lookup(_text(node, "name"), loc=read_loc(node)),
	"func": lambda node: syntax.LambdaForm(_params(node), _sub(node, "body"), loc=read_loc(node)),
	"call": lambda node: syntax.Call(_sub(node, "func"), [read_term(a) for a in _list(node, "args")], loc=read_loc(node)),
	"seq": lambda node: syntax.Seq(_sub(node, "body"), _sub(node, "rest"), loc=read_loc(node)),
	"const": lambda node: syntax.Const(_text(node, "name"), _sub(node, "init"), _sub(node, "rest"), loc=read_loc(node)),
	"objectNew": _record_literal,
	"objectGet": lambda node: syntax.FieldReference(_sub(node, "obj"), _text(node, "propName"), loc=read_loc(node)),
	"recFunc": lambda node: syntax.LetRec(
		_text(node, "funcName"), _params(node), read_type(_member(node, "retType")),
		_sub(node, "body"), _sub(node, "rest"),
		loc=read_loc(node),
	),
}

def load_term(path:Path) -> syntax.ValueExpression:
	""" Read a whole serialized program from a file. """
	with open(path, "r", encoding="utf-8") as fh:
		try: tree = json.load(fh)
		except json.JSONDecodeError as ex: raise MalformedTree("Not JSON: %s"%ex) from None
	return read_term(tree)
