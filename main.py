import sys

from rich.pretty import pprint

from clinch import *


def run(argv):
    parser = Parser("./program", "run")
    parser.title("run an executable")
    parser.add("-e", "--executable").required().value_type("FILE").description("executable to run").handle(
        lambda executable: print("executable:", executable)
    )
    parser.add_help("-h", "--help")
    return parser.parse(argv)


def example(argv):
    parser = Parser("./program", "example")
    parser.title("clinch-example -- example usage of clinch.")

    string, number, integers, files = Slot("", type=str), Slot(0), [], []
    parser.add("-q", "--qwe").store(string).default_value("str").value_type("STRING").description("some string")
    parser.positional("positional").store(number).required().value_type("INTEGER").description("positional integer")
    parser.add("-i", "--int").repeatable().append(integers, type=int).value_type("INTEGER").description("some integers")
    parser.add_help("-h", "--help")
    parser.free_arguments("files").unlimited().store(files)
    parser.parse(argv)

    print("integers sum =", sum(integers))
    pprint(parser)
    parser.print_help()


if __name__ == '__main__':
    dispatcher = Dispatcher("./program", colorful=True)
    dispatcher.title("clinch example commands")
    dispatcher.command("run").description("run executable").handle(run)
    dispatcher.default_command("example").description("show the option parser").handle(example)
    sys.exit(dispatcher.parse(sys.argv))
