from src.parsing.cursor import Cursor
from src.parsing.parser import Parser, parse

__all__ = ["Cursor", "Parser", "parse"]
