from rich.pretty import pprint

from verbum import *
from verbum.converters import to_int

parser = Parser(prog="notes", descr="keep short notes")


@parser.verb("add", "a", descr="add a note")
class Add:
    title = Value("TITLE", descr="title of the note")
    priority = Option("p", "priority", converter=to_int, default=3, descr="1 (urgent) to 5")
    pinned = Switch("P", "pinned", descr="keep the note on top")


@parser.verb("remove", "rm", descr="remove notes")
class Remove:
    ids = MultiValue("ID", converter=to_int, required=True, descr="identifiers of the notes")
    force = Switch("f", "force", descr="do not ask for confirmation")


if __name__ == '__main__':
    match result := parser.parse():
        case ParseSuccess(object):
            pprint({"verb": result.verb.name, **vars(object)})
        case _:
            parser.handle(result)
