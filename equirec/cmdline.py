"""
This is a structural type checker for a small expression language.

{0}

For example:

    equirec program.json

will print the type of the program in program.json if it has one,
or else try to explain why not. The file holds the syntax tree exactly
as the front end serialized it.

    equirec program.json -s program.ts

does the same, but quotes the offending line of program.ts in any complaint.

    equirec -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

parser = argparse.ArgumentParser(
	prog="equirec",
	description="Type checker for a small language of functions, records, and recursive types.",
)
parser.add_argument("tree", help="a JSON file holding the syntax tree of the program.")
parser.add_argument('-s', "--source", help="the source text the tree came from, for quoting in complaints.")
parser.add_argument('-v', "--verbose", action="count", help="Say what's going on along the way.")
parser.add_argument("--exact-calls", action="store_true", help="Require argument types to equal parameter types, rather than merely be subtypes.")

def run(args):
	from .diagnostics import Report, TypeCheckError
	from .reader import load_term, MalformedTree
	from .checker import TypeChecker
	tree_path = Path.cwd() / args.tree
	source = None
	if args.source:
		try: source = (Path.cwd() / args.source).read_text(encoding="utf-8")
		except OSError as ex:
			print("Could not read the source text: %s"%ex, file=sys.stderr)
			return 1
	report = Report(verbose=args.verbose, source=source, path=Path(args.source or args.tree))
	report.info("Reading", tree_path)
	try: program = load_term(tree_path)
	except (OSError, MalformedTree) as ex:
		report.malformed(tree_path, str(ex))
		report.complain_to_console()
		return 1
	report.info("Type-Check", tree_path)
	try: typ = TypeChecker(exact_calls=args.exact_calls).check(program)
	except TypeCheckError as ex:
		report.type_error(ex)
		report.complain_to_console()
		return 1
	print(typ)
	report.info("Looks plausible to me.")
	return 0

def main():
	if len(sys.argv) > 1:
		exit(run(parser.parse_args()))
	else:
		print(__doc__.strip().format(parser.format_usage()))
