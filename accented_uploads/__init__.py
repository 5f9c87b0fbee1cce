"""Remove accents from uploaded filenames and find files whose names were
mangled by earlier encoding errors."""
from .candidates import CandidateGenerator, candidates_for
from .filename import Filename
from .mojibake import BUILTIN_RULES, DEFAULT_TABLE, MojibakeRule, MojibakeTable, load_rule_file
from .normalizer import (
    DEFAULT_NORMALIZER,
    NormalizationForm,
    UnicodeNormalizer,
    UnsupportedNormalization,
    UnsupportedNormalizer,
)
from .recovery import NotFound, Succeeded, recover
from .stripper import sanitize_file_name, sanitize_upload_name, strip_accents

__version__ = '1.0.0'
