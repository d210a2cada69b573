"""Source parsers producing the ``goast`` input the lifter reads."""

from gotir.parser.go_parser import GoParser, GoSyntaxError, parse_file, parse_source

__all__ = ["GoParser", "GoSyntaxError", "parse_file", "parse_source"]
