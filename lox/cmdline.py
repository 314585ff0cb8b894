"""
This is an interpreter for the Lox programming language.

For example:

    lox program.lox

will run program.lox if possible, or else try to explain why not.

    lox

with no program starts an interactive prompt. Each line you type runs
right away, and definitions carry over from one line to the next.

    lox -h

will explain all the arguments.
"""
import sys, argparse, threading
from pathlib import Path
from typing import Optional

from .diagnostics import Report, TooManyIssues
from .resolution import RoadMap, Yuck

EXIT_USAGE = 64
EXIT_STATIC = 65
EXIT_RUNTIME = 70

# Each Lox call costs the tree-walker about a dozen Python frames.
RECURSION_LIMIT = 100_000
STACK_SIZE = 512 * 1024 * 1024

parser = argparse.ArgumentParser(
	prog="lox",
	description="Tree-walking interpreter for the Lox programming language.",
)
parser.add_argument("program", nargs="?", help="Script to run. Leave it off for an interactive prompt.")
parser.add_argument('-c', "--check", action="store_true", help="Check the program but do not actually execute it.")
parser.add_argument('-p', "--print-ast", action="store_true", help="Print the syntax tree of each statement instead of running.")
parser.add_argument('-v', "--verbose", action="count", help="Say more about what's going on. Repeatable.")
parser.add_argument("--max-issues", type=int, default=50, help="Give up after this many problems. Default %(default)s.")

class Session:
	"""
	Pushes units of source text through the pipeline.
	The interpreter survives from one unit to the next, and so do the globals.
	"""
	def __init__(self, args):
		self.args = args
		self.report = Report(verbose=args.verbose, max_issues=args.max_issues)
		self.interpreter = None

	def run_text(self, text:str, path:Optional[Path]=None) -> int:
		""" Returns the exit status this text deserves. """
		report = self.report
		try:
			try: roadmap = RoadMap(text, report, path)
			except Yuck as ex:
				assert report.sick()
				report.info("Stopped after the %s phase." % ex.args[0])
				report.complain_to_console()
				return EXIT_STATIC
		except TooManyIssues:
			report.complain_to_console()
			print("Giving up after %d issues." % len(report.issues), file=sys.stderr)
			return EXIT_STATIC
		if self.args.print_ast:
			from .pretty import render
			for stmt in roadmap.statements: print(render(stmt))
			return 0
		if self.args.check:
			print("Looks plausible to me.", file=sys.stderr)
			return 0
		from .tree_walker.executive import run_program
		self.interpreter = run_program(roadmap, report, self.interpreter)
		if report.crashed():
			report.complain_to_console()
			return EXIT_RUNTIME
		return 0

	def prompt(self) -> int:
		while True:
			try: line = input("> ")
			except EOFError:
				print()
				return 0
			self.run_text(line)
			self.report.reset()

def run(args) -> int:
	session = Session(args)
	if args.program is None:
		return session.prompt()
	path = Path(args.program)
	try: text = path.read_text(encoding="utf-8")
	except OSError as ex:
		print("Could not read %s: %s" % (path, ex.strerror), file=sys.stderr)
		return EXIT_USAGE
	return session.run_text(text, path)

def run_with_deep_stack(args) -> int:
	"""
	Only a fresh thread can have a bigger stack than the default,
	so the work goes to one while the main thread waits.
	"""
	old_limit = sys.getrecursionlimit()
	old_size = threading.stack_size(STACK_SIZE)
	sys.setrecursionlimit(max(old_limit, RECURSION_LIMIT))
	status = []
	try:
		worker = threading.Thread(target=lambda: status.append(run(args)), name="lox", daemon=True)
		worker.start()
		worker.join()
	finally:
		threading.stack_size(old_size)
		sys.setrecursionlimit(old_limit)
	# An empty status means the worker died; its traceback is already on stderr.
	return status[0] if status else EXIT_RUNTIME

def main():
	exit(run_with_deep_stack(parser.parse_args()))
