from rich.pretty import pprint

from pennant import *

app = Application(
    "AppName",
    "This is a description long enough to let it go on a new line: "
    "this tests the capability of managing columns automatically.",
    version="0.0.1",
)

build = Command(
    "build",
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit, "
    "sed do eiusmod tempor incididunt ut labore et dolore magna aliqua.",
    options=(
        boolean("verbose", "v", "Enable verbose output"),
        boolean("dry", "d", "Test the build environment, but do not compile"),
    ),
)

debug = boolean("debug", "d", "Enable debug session")
# an option may have no short name...
longest = boolean("very-very-long-option")
# ...or no long name
zfactor = boolean(short="z", descr="Z factor")

app.addoptions(debug, longest, zfactor, helpoption())
app.addcommands(build, Command("test", "Do test stuff"))


if __name__ == '__main__':
    session = app.parse()

    if valueof(debug, Bool):
        print("Debug mode on")
        pprint(session)

    if valueof(zfactor, Bool):
        print("Z factor. Party hard.")
