"""
Help rendering tests (layout, wrapping, column alignment).

Scope
- Validate the main help and the sub-command help against their exact text.
- Validate optional sections (name, version, description, options, commands).
- Validate wrapping of long descriptions and the tab-column alignment.

Conventions
- Test method names follow CamelCase per project convention.
- Expected outputs are written with explicit tab characters.
"""

from __future__ import annotations

import contextlib
import io
import sys
import unittest
from unittest import TestCase

from pennant import *
from pennant.helper import Columns


def render(app, tokens):
    output = io.StringIO()
    app.printhelp(tokens, output)
    return output.getvalue()


class TestHelpLayout(TestCase):
    """Behavioral tests for the help text."""

    def testMainHelp(self):
        app = Application("AppName", "Application description.", version="1.0.0")
        app.addcommands(Command("cmd", "This is the description"))
        app.addoptions(boolean("bool", "b", "Bool value"))

        self.assertEqual(render(app, ["./app"]), (
            "AppName version 1.0.0\n"
            "\n"
            "Application description.\n"
            "\n"
            "Available options.\n"
            "\n"
            "--bool\t\t-b\t\tBool value (default value: \"false\")\n"
            "\n"
            "Available commands.\n"
            "Use --help {command} {subcommand} for details.\n"
            "\n"
            "- cmd\t\tThis is the description\n"
        ))

    def testSubCommandHelp(self):
        app = Application("AppName", "Application description.", version="1.0.0")
        root = Command("cmd-1", "This is the description of cmd-1")
        sub = Command("cmd-2", "This is the description of cmd-2")
        sub.addcommands(Command("cmd-3", "This is the description of cmd-3"))
        sub.addoptions(string("str", "s", "String option example", "default"))
        sub.addoptions(boolean("bool", "b", "Bool option example"))
        root.addcommands(sub)
        app.addcommands(root)
        app.addoptions(boolean("bool", "b", "Bool value"))

        self.assertEqual(render(app, ["./app", "cmd-1", "cmd-2"]), (
            "AppName version 1.0.0\n"
            "\n"
            "Application description.\n"
            "\n"
            "Details for command: cmd-1 cmd-2\n"
            "\n"
            "This is the description of cmd-2\n"
            "\n"
            "Available options.\n"
            "\n"
            "--str\t\t-s\t\tString option example (default value: \"default\")\n"
            "--bool\t\t-b\t\tBool option example (default value: \"false\")\n"
            "\n"
            "Available commands.\n"
            "Use --help {command} {subcommand} for details.\n"
            "\n"
            "- cmd-3\t\tThis is the description of cmd-3\n"
        ))

    def testOptionsAndUnknownTokensAreSkipped(self):
        app = Application("AppName")
        app.addcommands(Command("cmd", "Command"))
        self.assertIn("Details for command: cmd\n", render(app, ["./app", "--verbose", "nope", "cmd"]))

    def testProgramTokenIsSkipped(self):
        app = Application("AppName").addcommands(Command("cmd"))
        self.assertNotIn("Details for command", render(app, ["./app"]))

    def testEveryTokenIsWalked(self):
        app = Application("AppName").addcommands(Command("cmd", "Command"))
        self.assertIn("Details for command: cmd\n", render(app, ["cmd"]))
        self.assertIn("Details for command: cmd\n", render(app, ["./app", "cmd"]))

    def testHelpOptionWithoutProgramName(self):
        command = Command("cmd", "Command", options=(boolean("verbose", "v", "Verbose"), helpoption()))
        app = Application("AppName", options=(helpoption(),), children=(command,))
        argv = sys.argv
        sys.argv = []
        try:
            with contextlib.redirect_stdout(io.StringIO()) as stdout:
                session = app.parseargs(["cmd", "--help"])
        finally:
            sys.argv = argv
        self.assertTrue(session.helped)
        self.assertIn("Details for command: cmd\n", stdout.getvalue())
        self.assertIn("--verbose", stdout.getvalue())
        self.assertNotIn("- cmd", stdout.getvalue())

    def testEmptyApplication(self):
        self.assertEqual(render(Application(), ["./app"]), "")

    def testNameWithoutVersion(self):
        self.assertEqual(render(Application("AppName"), []), "AppName\n\n")

    def testEmptyDefaultHasNoSuffix(self):
        app = Application().addoptions(string("name", "n", "Your name"))
        self.assertEqual(render(app, []), (
            "\n"
            "Available options.\n"
            "\n"
            "--name\t\t-n\t\tYour name\n"
        ))

    def testMissingNamesKeepColumns(self):
        app = Application()
        app.addoptions(
            boolean("debug", "d", "Enable debug session"),
            boolean("very-very-long-option"),
            boolean(short="z", descr="Z factor"),
        )
        self.assertEqual(render(app, []), (
            "\n"
            "Available options.\n"
            "\n"
            "--debug\t\t\t\t-d\t\tEnable debug session (default value: \"false\")\n"
            "--very-very-long-option\t\t\t\t(default value: \"false\")\n"
            "\t\t\t\t-z\t\tZ factor (default value: \"false\")\n"
        ))

    def testLongDescriptionsAreWrapped(self):
        app = Application()
        app.addcommands(
            Command(
                "build",
                "Lorem ipsum dolor sit amet, consectetur adipiscing elit, "
                "sed do eiusmod tempor incididunt ut labore et dolore magna aliqua.",
            ),
            Command("test", "Do test stuff"),
        )
        self.assertEqual(render(app, []), (
            "\n"
            "Available commands.\n"
            "Use --help {command} {subcommand} for details.\n"
            "\n"
            "- build\t\tLorem ipsum dolor sit amet, consectetur adipiscing elit, sed do\n"
            "\t\teiusmod tempor incididunt ut labore et dolore magna aliqua.\n"
            "- test\t\tDo test stuff\n"
        ))

    def testDefaultsResolvedAtCallTime(self):
        app = Application("AppName").addcommands(Command("cmd", "Command"))
        argv = sys.argv
        sys.argv = ["./app", "cmd"]
        try:
            with contextlib.redirect_stdout(io.StringIO()) as stdout:
                app.printhelp()
        finally:
            sys.argv = argv
        self.assertIn("Details for command: cmd\n", stdout.getvalue())


class TestColumns(TestCase):
    """Behavioral tests for the tab-column writer."""

    def testBlockWidthFromWidestCell(self):
        output = io.StringIO()
        Columns(output).write("a\tb\n").write("abcdefghij\tc\n").flush()
        self.assertEqual(output.getvalue(), "a\t\t\tb\nabcdefghij\t\tc\n")

    def testLineWithoutCellsSplitsBlocks(self):
        output = io.StringIO()
        Columns(output).write("abcdefghij\tb\n").write("plain\n").write("a\tb\n").flush()
        self.assertEqual(output.getvalue(), "abcdefghij\t\tb\nplain\na\t\tb\n")

    def testPartialLineIsWrittenWithoutNewline(self):
        output = io.StringIO()
        Columns(output).write("a\tb\nrest").flush()
        self.assertEqual(output.getvalue(), "a\t\tb\nrest")

    def testCustomWidths(self):
        output = io.StringIO()
        Columns(output, minwidth=0, tabwidth=4, padding=1).write("ab\tc\n").flush()
        self.assertEqual(output.getvalue(), "ab\tc\n")

    def testInvalidWidths(self):
        with self.assertRaises(ValueError):
            Columns(io.StringIO(), tabwidth=0)
        with self.assertRaises(TypeError):
            Columns(io.StringIO(), padding="7")


if __name__ == '__main__':
    unittest.main()
