# python
"""
Commands module behavioral tests.

Scope
- Validate command routing (explicit key, default command, nested dispatchers,
  nested parsers inside command handlers).
- Validate CommandError for missing/unknown keys and the error policies.
- Validate declaration checks (duplicate names, second default, empty names)
  and the "Commands:" help block.

Conventions
- Test method names follow CamelCase per project convention.
- argv lists start with the program path, as sys.argv does.
"""

from __future__ import annotations

import contextlib
import io
import unittest
from unittest import TestCase

from clinch import CommandError, ConfigurationError, Dispatcher, ErrorPolicy, Parser, Slot

RETHROW = ErrorPolicy.RETHROW


def fail(argv):
    raise AssertionError(f"unexpected call with {argv!r}")


class TestDispatch(TestCase):
    """Behavioral tests for Dispatcher.parse routing."""

    def testSimple(self):
        dispatcher = Dispatcher("./path-to-program").title("Test command parser")
        dispatcher.command("init").description("Initialize empty repository").handle(fail)
        dispatcher.command("commit").description("Commit files").handle(lambda argv: 123)

        self.assertEqual(dispatcher.parse(["./program", "commit"], RETHROW), 123)

    def testDefaultHandler(self):
        dispatcher = Dispatcher("./path-to-program").title("Test command parser")
        dispatcher.command("init").description("Initialize empty repository").handle(fail)
        dispatcher.default_command("commit").description("Commit files").handle(lambda argv: 282)

        self.assertEqual(dispatcher.parse(["./program"], RETHROW), 282)

    def testDefaultCommandByName(self):
        received = []
        dispatcher = Dispatcher("prog")
        dispatcher.default_command("status").handle(received.append)

        self.assertEqual(dispatcher.parse(["./program", "status", "-s"], RETHROW), 0)
        self.assertEqual(dispatcher.parse(["./program"], RETHROW), 0)
        self.assertEqual(received, [["status", "-s"], []])

    def testHandlerReceivesRemainingSlice(self):
        received = []
        dispatcher = Dispatcher("prog")
        dispatcher.command("run").handle(received.append)

        dispatcher.parse(["./program", "run", "--fast", "target"], RETHROW)
        self.assertEqual(received, [["run", "--fast", "target"]])

    def testNestedCommands(self):
        def test(argv):
            commands = Dispatcher("./path-to-program test")
            commands.command("run").description("Run tests").handle(fail)
            commands.command("add").description("Add test").handle(lambda argv: 1337)
            return commands.parse(argv, RETHROW)

        dispatcher = Dispatcher("./path-to-program").title("Test command parser")
        dispatcher.command("test").description("Manage tests").handle(test)
        dispatcher.default_command("commit").description("Commit files").handle(fail)

        self.assertEqual(dispatcher.parse(["./program", "test", "add"], RETHROW), 1337)

    def testNestedParsers(self):
        seen = {}

        def test(argv):
            args = Parser("./path-to-program test")
            i, s = Slot(0), Slot("")
            args.add("-i", "--int").default_value(123).store(i)
            args.add("--string").default_value("qwe").store(s)
            args.parse(argv, RETHROW)
            seen.update(i=i.value, s=s.value)

        dispatcher = Dispatcher("./path-to-program").title("Test command parser")
        dispatcher.command("test").description("Manage tests").handle(test)
        dispatcher.default_command("commit").description("Commit files").handle(fail)

        self.assertEqual(dispatcher.parse(["./program", "test", "--int", "228"], RETHROW), 0)
        self.assertEqual(seen, {"i": 228, "s": "qwe"})

    def testPromptString(self):
        dispatcher = Dispatcher("prog")
        dispatcher.command("echo").handle(lambda argv: len(argv))
        self.assertEqual(dispatcher.parse("echo a 'b c'", RETHROW), 3)

    def testMissingCommandWithoutDefault(self):
        dispatcher = Dispatcher("prog")
        dispatcher.command("init").handle(fail)
        with self.assertRaises(CommandError):
            dispatcher.parse(["./program"], RETHROW)

    def testUnknownCommandSuggestsCloseMatch(self):
        dispatcher = Dispatcher("prog")
        dispatcher.command("commit").handle(fail)
        dispatcher.default_command("status").handle(fail)
        with self.assertRaises(CommandError) as context:
            dispatcher.parse(["./program", "comit"], RETHROW)
        self.assertEqual(context.exception.options["hint"], "did you mean 'commit'?")
        self.assertIn("comit", str(context.exception))

    def testExitPolicy(self):
        dispatcher = Dispatcher("prog").title("prog -- commands")
        dispatcher.command("init").description("create").handle(fail)
        stream = io.StringIO()
        with contextlib.redirect_stderr(stream), self.assertRaises(SystemExit) as context:
            dispatcher.parse(["./program", "nope"])
        self.assertEqual(context.exception.code, 1)
        self.assertTrue(stream.getvalue().startswith("unknown command nope"))
        self.assertIn("Commands:\n  init    create\n", stream.getvalue())

    def testMissingHandler(self):
        dispatcher = Dispatcher("prog")
        dispatcher.command("init")
        with self.assertRaises(ConfigurationError):
            dispatcher.parse(["./program", "init"], RETHROW)


class TestDeclaration(TestCase):
    """Behavioral tests for Dispatcher declarations and help."""

    def testDuplicateCommandRejected(self):
        dispatcher = Dispatcher("prog")
        dispatcher.command("init")
        with self.assertRaises(ConfigurationError):
            dispatcher.command("init")
        with self.assertRaises(ConfigurationError):
            dispatcher.default_command("init")

    def testSecondDefaultRejected(self):
        dispatcher = Dispatcher("prog")
        dispatcher.default_command("status")
        with self.assertRaises(ConfigurationError):
            dispatcher.default_command("log")

    def testEmptyNameRejected(self):
        with self.assertRaises(ConfigurationError):
            Dispatcher("prog").command("")

    def testHandlerMustBeCallable(self):
        with self.assertRaises(ConfigurationError):
            Dispatcher("prog").command("init").handle(None)

    def testProperties(self):
        dispatcher = Dispatcher("prog")
        init = dispatcher.command("init").description("create")
        status = dispatcher.default_command("status")
        self.assertEqual(dispatcher.commands, [init, status])
        self.assertIs(dispatcher.default, status)
        self.assertEqual((init.name, init.descr, init.is_default), ("init", "create", False))
        self.assertTrue(status.is_default)

    def testHelpMessage(self):
        dispatcher = Dispatcher("git").title("git -- the stupid content tracker")
        dispatcher.command("init").description("Create an empty repository")
        dispatcher.default_command("status").description("Show the working tree status")
        self.assertEqual(
            dispatcher.help_message(),
            "git -- the stupid content tracker\n"
            "\n"
            "Usage:\n"
            "  git [<command>] [<args>...]\n"
            "\n"
            "Commands:\n"
            "  init      Create an empty repository\n"
            "  status    Show the working tree status (default)\n",
        )

    def testHelpMessageWithoutDefault(self):
        dispatcher = Dispatcher("git").title("t")
        self.assertEqual(dispatcher.help_message("oops"), "oops\n\nUsage:\n  git <command> [<args>...]\n")


if __name__ == "__main__":
    unittest.main()
