"""Run map data model and JSON documents."""

from runmap.parser.document import (
    MapDocument,
    dump_document,
    load_document,
    parse_document,
)

__all__ = ["MapDocument", "dump_document", "load_document", "parse_document"]
