"""Known UTF-8 -> Latin-1/CP1252 double encoding errors.

When UTF-8 bytes of a filename get decoded as CP1252 and encoded back to
UTF-8, every accented letter turns into two or three characters, eg.
'ä' (C3 A4) becomes 'Ã¤'. The table below lists those sequences so a file
can be found under the name it was corrupted into (corrupt()) and so a
corrupted name can be turned back into the intended one (repair()).

Rules are kept longest sequence first so that a short rule never matches
inside a longer corrupted sequence.

Source of the list: http://www.i18nqa.com/debug/utf8-debug.html
"""
from dataclasses import dataclass
from pathlib import Path
import logging
import re

from .normalizer import DEFAULT_NORMALIZER, NormalizationForm

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MojibakeRule:
    corrupted: str
    correct: str

    @property
    def byte_length(self) -> int:
        return len(self.corrupted.encode('utf-8'))


# 3 char errors: windows-1252 punctuation (E2 xx xx)
THREE_CHAR_ERRORS = [
    ('â€š', '‚'),
    ('â€ž', '„'),
    ('â€¦', '…'),
    ('â€\xa0', '†'),
    ('â€¡', '‡'),
    ('â€°', '‰'),
    ('â€¹', '‹'),
    ('â€˜', '‘'),
    ('â€™', '’'),
    ('â€œ', '“'),
    ('â€\x9d', '”'),
    ('â€¢', '•'),
    ('â€“', '–'),
    ('â€”', '—'),
    ('â„¢', '™'),
    ('â€º', '›'),
    ('â‚¬', '€'),
]

# 2 char errors: latin-1 supplement (C2 xx / C3 xx) and the cp1252 letters
TWO_CHAR_ERRORS = [
    ('Ã‚', 'Â'),
    ('Æ’', 'ƒ'),
    ('Ãƒ', 'Ã'),
    ('Ã„', 'Ä'),
    ('Ã…', 'Å'),
    ('Ã†', 'Æ'),
    ('Ã‡', 'Ç'),
    ('Ë†', 'ˆ'),
    ('Ãˆ', 'È'),
    ('Ã‰', 'É'),
    ('ÃŠ', 'Ê'),
    ('Ã‹', 'Ë'),
    ('Å’', 'Œ'),
    ('ÃŒ', 'Ì'),
    ('Å½', 'Ž'),
    ('ÃŽ', 'Î'),
    ('Ã‘', 'Ñ'),
    ('Ã’', 'Ò'),
    ('Ã“', 'Ó'),
    ('Ã”', 'Ô'),
    ('Ã•', 'Õ'),
    ('Ã–', 'Ö'),
    ('Ã—', '×'),
    ('Ëœ', '˜'),
    ('Ã˜', 'Ø'),
    ('Ã™', 'Ù'),
    ('Å¡', 'š'),
    ('Ãš', 'Ú'),
    ('Ã›', 'Û'),
    ('Å“', 'œ'),
    ('Ãœ', 'Ü'),
    ('Å¾', 'ž'),
    ('Ãž', 'Þ'),
    ('Å¸', 'Ÿ'),
    ('ÃŸ', 'ß'),
    ('Â¡', '¡'),
    ('Ã¡', 'á'),
    ('Â¢', '¢'),
    ('Ã¢', 'â'),
    ('Â£', '£'),
    ('Ã£', 'ã'),
    ('Â¤', '¤'),
    ('Ã¤', 'ä'),
    ('Â¥', '¥'),
    ('Ã¥', 'å'),
    ('Â¦', '¦'),
    ('Ã¦', 'æ'),
    ('Â§', '§'),
    ('Ã§', 'ç'),
    ('Â¨', '¨'),
    ('Ã¨', 'è'),
    ('Â©', '©'),
    ('Ã©', 'é'),
    ('Âª', 'ª'),
    ('Ãª', 'ê'),
    ('Â«', '«'),
    ('Ã«', 'ë'),
    ('Â¬', '¬'),
    ('Ã¬', 'ì'),
    ('Â®', '®'),
    ('Ã®', 'î'),
    ('Â¯', '¯'),
    ('Ã¯', 'ï'),
    ('Â°', '°'),
    ('Ã°', 'ð'),
    ('Â±', '±'),
    ('Ã±', 'ñ'),
    ('Â²', '²'),
    ('Ã²', 'ò'),
    ('Â³', '³'),
    ('Ã³', 'ó'),
    ('Â´', '´'),
    ('Ã´', 'ô'),
    ('Âµ', 'µ'),
    ('Ãµ', 'õ'),
    ('Â¶', '¶'),
    ('Ã¶', 'ö'),
    ('Â·', '·'),
    ('Ã·', '÷'),
    ('Â¸', '¸'),
    ('Ã¸', 'ø'),
    ('Â¹', '¹'),
    ('Ã¹', 'ù'),
    ('Âº', 'º'),
    ('Ãº', 'ú'),
    ('Â»', '»'),
    ('Ã»', 'û'),
    ('Â¼', '¼'),
    ('Ã¼', 'ü'),
    ('Â½', '½'),
    ('Ã½', 'ý'),
    ('Â¾', '¾'),
    ('Ã¾', 'þ'),
    ('Â¿', '¿'),
    ('Ã¿', 'ÿ'),
    ('Ã€', 'À'),
]

# second byte is invisible once decoded (C1 control, nbsp, soft hyphen)
INVISIBLE_BYTE_ERRORS = [
    ('Ã\x81', 'Á'),
    ('Å\xa0', 'Š'),
    ('Ã\x8d', 'Í'),
    ('Ã\x8f', 'Ï'),
    ('Ã\x90', 'Ð'),
    ('Ã\x9d', 'Ý'),
    ('Ã\xa0', 'à'),
    ('Ã\xad', 'í'),
]

BUILTIN_RULES = tuple(
    MojibakeRule(corrupted, correct)
    for corrupted, correct in THREE_CHAR_ERRORS + TWO_CHAR_ERRORS + INVISIBLE_BYTE_ERRORS
)


def _alternation(keys) -> re.Pattern:
    return re.compile('|'.join(re.escape(k) for k in keys))


class MojibakeTable:
    """Immutable, ordered set of MojibakeRules.

    Build it once (optionally extend() it with your own fixes) before
    handing it to the candidate generator; it is never changed afterwards,
    so a single instance can be shared between threads.
    """

    def __init__(self, rules=()):
        rules = [r if isinstance(r, MojibakeRule) else MojibakeRule(*r) for r in rules]
        # stable: keeps the given order among rules of the same byte length
        rules.sort(key=lambda r: r.byte_length, reverse=True)
        self._rules = tuple(rules)

        self._to_correct = {}
        self._to_corrupted = {}
        for rule in self._rules:
            self._to_correct.setdefault(rule.corrupted, rule.correct)
            self._to_corrupted.setdefault(rule.correct, rule.corrupted)

        self._repair_re = _alternation(self._to_correct) if self._rules else None
        corrupt_keys = sorted(self._to_corrupted, key=len, reverse=True)
        self._corrupt_re = _alternation(corrupt_keys) if self._rules else None

    def rules(self):
        return self._rules

    def __len__(self):
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)

    def __repr__(self):
        return f'MojibakeTable({len(self._rules)} rules)'

    def extend(self, additional) -> 'MojibakeTable':
        """Return a new table with *additional* rules taking precedence."""
        additional = [r if isinstance(r, MojibakeRule) else MojibakeRule(*r) for r in additional]
        overridden = {r.corrupted for r in additional}
        kept = [r for r in self._rules if r.corrupted not in overridden]
        return MojibakeTable(additional + kept)

    def normalized(self, form: NormalizationForm, normalizer=DEFAULT_NORMALIZER) -> 'MojibakeTable':
        """Return the table with both halves of every rule in *form*.

        Errors happen in both nfc and nfd names, so the rules have to be in
        the same form as the name they are applied to.
        """
        seen = set()
        rules = []
        for rule in self._rules:
            corrupted = normalizer.normalize(rule.corrupted, form)
            correct = normalizer.normalize(rule.correct, form)
            if corrupted in seen:
                continue
            seen.add(corrupted)
            rules.append(MojibakeRule(corrupted, correct))
        return MojibakeTable(rules)

    def corrupt(self, text: str) -> str:
        """Replace every accented character with its encoding error."""
        if self._corrupt_re is None:
            return text
        return self._corrupt_re.sub(lambda m: self._to_corrupted[m.group(0)], text)

    def repair(self, text: str) -> str:
        """Replace every known encoding error with the intended character."""
        if self._repair_re is None:
            return text
        return self._repair_re.sub(lambda m: self._to_correct[m.group(0)], text)


DEFAULT_TABLE = MojibakeTable(BUILTIN_RULES)

ESCAPE_RE = re.compile(r'\\x([0-9a-fA-F]{2})|\\u([0-9a-fA-F]{4})')


def _unescape(value: str) -> str:
    return ESCAPE_RE.sub(lambda m: chr(int(m.group(1) or m.group(2), 16)), value)


def load_rule_file(path) -> list:
    """Read extra fixes from a tab separated `corrupted<TAB>correct` file.

    Blank lines and lines starting with '#' are ignored. \\xNN and \\uNNNN
    escapes are expanded so invisible bytes can be written down.
    """
    path = Path(path)
    rules = []
    with path.open('r', encoding='utf-8') as f:
        for lineno, line in enumerate(f, 1):
            line = line.rstrip('\r\n')
            if not line.strip() or line.startswith('#'):
                continue
            parts = line.split('\t')
            if len(parts) < 2 or not parts[0] or not parts[1]:
                raise ValueError(f'{path}:{lineno}: expected "corrupted<TAB>correct"')
            rules.append(MojibakeRule(_unescape(parts[0]), _unescape(parts[1])))
    log.debug('loaded %d encoding fixes from %s', len(rules), path)
    return rules
