"""An XML document model: a parser, node tree, typed accessors, visitors and a printer."""

__version__ = "0.1.0"
__all__ = ["util", "nodes", "element", "printer", "document"]