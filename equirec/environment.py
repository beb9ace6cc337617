"""
Simplest possible environment concept.

This is the canonical list-structured search. Extending an environment makes
a new layer atop the old one and leaves the old one alone, so sibling scopes
never see each other's bindings.
"""
from typing import Iterable
import abc

from .calculus import StructuralType

class Unbound(KeyError):
	pass

class Environment(abc.ABC):
	@abc.abstractmethod
	def resolve(self, name:str) -> StructuralType:
		pass

	def extend(self, pairs:Iterable[tuple[str, StructuralType]]) -> "InnerEnv":
		# Later pairs win, as in a sequence of assignments.
		return InnerEnv(dict(pairs), self)

	def bind(self, name:str, typ:StructuralType) -> "InnerEnv":
		return self.extend([(name, typ)])

class NullEnv(Environment):
	""" Effectively the built-in scope, but with nothing built in. """
	def resolve(self, name:str) -> StructuralType:
		raise Unbound(name)
null_env = NullEnv()

class InnerEnv(Environment):
	def __init__(self, bindings:dict[str, StructuralType], static_link:Environment):
		assert all(isinstance(t, StructuralType) for t in bindings.values()), bindings
		self._bindings = bindings
		self._static_link = static_link

	def resolve(self, name:str) -> StructuralType:
		try: return self._bindings[name]
		except KeyError: return self._static_link.resolve(name)
