from src.filters.config import FilterConfig
from src.filters.transfer_function import Term, TermKind, extract_terms, parse_terms
from src.filters.response import ResponseSample, frequency_response

__all__ = [
    "FilterConfig", "Term", "TermKind", "extract_terms", "parse_terms",
    "ResponseSample", "frequency_response",
]
