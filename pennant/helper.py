"""
Pennant help rendering.

Layout
- "<name> version <version>" header (version part omitted when empty), then
  the application description wrapped at 76 columns.
- "Details for command: <chain>" and the command description when the tokens
  name a command chain.
- "Available options." rows: long, short and description cells; the default
  is appended to the description as (default value: "<default>").
- "Available commands." rows: "- <name>" and description cells.

Descriptions in rows are wrapped at 64 columns; continuation lines start with
empty cells so they stay aligned under the description column.

Cells are aligned by Columns, an elastic tab-stop writer: consecutive lines
sharing a column form a block whose width is the widest cell plus padding,
rounded up to the tab width, and cells are padded with tab characters.
"""
from .parser import isoption
from .utils import *


class Columns:
    """
    Elastic tab-stop writer.

    Text is buffered until flush(). Every line is split on tab characters into
    cells; a tab terminates a cell and the trailing text of a line is not part
    of any column. A column block is a run of adjacent lines that all have a
    terminated cell at that column; its width is

        max(minwidth, widest cell + padding)

    rounded up to a multiple of tabwidth. Cells are padded with as many tab
    characters as needed to reach the block width.
    """

    def __init__(self, output, /, *, minwidth=7, tabwidth=8, padding=7):
        if not isinstance(minwidth, int) or not isinstance(tabwidth, int) or not isinstance(padding, int):
            raise TypeError("columns widths must be integers")
        if tabwidth < 1 or minwidth < 0 or padding < 0:
            raise ValueError("columns widths must be positive")
        self._output = output
        self._minwidth = minwidth
        self._tabwidth = tabwidth
        self._padding = padding
        self._buffer = []

    def write(self, text, /):
        self._buffer.append(text)
        return self

    def flush(self):
        """
        Align and write out everything buffered so far.
        """
        lines = [line.split("\t") for line in "".join(self._buffer).split("\n")]
        self._buffer.clear()
        # the text after the last newline is an unterminated line
        partial = lines.pop()
        if partial != [""]:
            lines.append(partial)
            self._format(lines, 0, len(lines), [], terminated=len(lines) - 1)
        else:
            self._format(lines, 0, len(lines), [], terminated=len(lines))

    def _pad(self, textwidth, cellwidth):
        cellwidth = -(-cellwidth // self._tabwidth) * self._tabwidth
        return "\t" * -(-(cellwidth - textwidth) // self._tabwidth)

    def _emit(self, lines, start, stop, widths, terminated):
        for index in range(start, stop):
            for column, cell in enumerate(lines[index]):
                self._output.write(cell)
                if column < len(widths) and column < len(lines[index]) - 1:
                    self._output.write(self._pad(len(cell), widths[column]))
            if index < terminated:
                self._output.write("\n")

    def _format(self, lines, start, stop, widths, /, *, terminated):
        column = len(widths)
        first = start
        this = start
        while this < stop:
            if column >= len(lines[this]) - 1:
                this += 1
                continue

            # lines before the block are complete at this depth
            self._emit(lines, first, this, widths, terminated)
            first = this

            width = self._minwidth
            while this < stop and column < len(lines[this]) - 1:
                width = max(width, len(lines[this][column]) + self._padding)
                this += 1

            self._format(lines, first, this, [*widths, width], terminated=terminated)
            first = this

        self._emit(lines, first, stop, widths, terminated)


def _chain(application, tokens):
    """
    Follow the non-option tokens down the command tree.

    Returns the matched commands, outermost first. Tokens that do not name a
    child of the current scope are skipped.
    """
    chain = []
    scope = application
    for token in tokens:
        if isoption(token):
            continue
        if (command := scope.find(token)) is not None:
            chain.append(command)
            scope = command
    return chain


def render(application, tokens, output, /):
    """
    Write the help of `application` to `output` (any object with write()).

    `tokens` is an argument vector, usually with the program name first. Every
    token is walked; the program name is skipped like any token that does not
    name a command. The chain found selects which options and commands are
    listed.
    """
    chain = _chain(application, tokens)
    scope = chain[-1] if chain else application
    write = output.write

    if application.name:
        write(application.name)
        if application.version:
            write(" version %s" % application.version)
        write("\n\n")

    if application.descr:
        for line in textsplit(application.descr, 76):
            write(line + "\n")

    if chain:
        write("\n")
        write("Details for command: %s\n" % " ".join(command.name for command in chain))
        write("\n")
        write("\n".join(textsplit(scope.descr, 76)) + "\n")

    columns = Columns(output)

    if options := scope._options:
        write("\n")
        write("Available options.\n")
        write("\n")
        for option in options:
            descr = option.descr
            if default := option.value.renderdefault():
                descr = '%s (default value: "%s")' % (descr, default)
            columns.write(
                ("--" + option.long if option.long is not None else "")
                + ("\t-" + option.short if option.short is not None else "\t")
                + "\t" + "\n\t\t".join(textsplit(descr, 64)) + "\n"
            )
        columns.flush()

    if commands := scope._children:
        write("\n")
        write("Available commands.\n")
        write("Use --help {command} {subcommand} for details.\n")
        write("\n")
        for command in commands:
            columns.write("- %s\t%s\n" % (command.name, "\n\t".join(textsplit(command.descr, 64))))
        columns.flush()


__all__ = (
    "Columns",
    "render",
)
