"""Strip accents from filenames so they are safe to serve from a url.

strip_accents() works on the basename only, in this order:
  1. compose the name (NFC) so every accented letter is a single code point
  2. transliterate letters from TRANSLITERATION to plain ascii
  3. drop the accents of any other latin letter (ò, ã, ì) by decomposing it
  4. optionally sanitize special characters (sanitize_file_name)
  5. drop whatever is left outside printable ascii (0x20-0x7E), eg. ™ or ¼
  6. put the directory back in front, untouched

Steps 1 and 3 are skipped when the normalizer is not available.

The result keeps its case. sanitize_upload_name() is the upload-time hook and
lowercases on top of that.
"""
import os
import re

from .filename import Filename
from .normalizer import DEFAULT_NORMALIZER, NormalizationForm


def _with_uppercase(table: dict) -> dict:
    out = dict(table)
    for lower, ascii_ in table.items():
        upper = lower.upper()
        # skip letters whose capital is several code points (ß, ΐ)
        if len(upper) == 1 and upper != lower and upper not in out:
            out[upper] = ascii_.capitalize()
    return out


CYRILLIC = _with_uppercase({
    'а': 'a', 'б': 'b', 'в': 'v', 'г': 'g', 'д': 'd', 'е': 'e', 'ё': 'e',
    'ж': 'zh', 'з': 'z', 'и': 'i', 'й': 'y', 'к': 'k', 'л': 'l', 'м': 'm',
    'н': 'n', 'о': 'o', 'п': 'p', 'р': 'r', 'с': 's', 'т': 't', 'у': 'u',
    'ф': 'f', 'х': 'kh', 'ц': 'ts', 'ч': 'ch', 'ш': 'sh', 'щ': 'shch',
    'ъ': '', 'ы': 'y', 'ь': '', 'э': 'e', 'ю': 'yu', 'я': 'ya',
    # ukrainian
    'і': 'i', 'ї': 'yi', 'є': 'ye', 'ґ': 'g',
})

GERMAN = _with_uppercase({
    'ä': 'a', 'ö': 'o', 'ü': 'u', 'ß': 'ss',
})
GERMAN['ẞ'] = 'SS'

FRENCH = _with_uppercase({
    'à': 'a', 'â': 'a', 'æ': 'ae', 'ç': 'c', 'é': 'e', 'è': 'e', 'ê': 'e',
    'ë': 'e', 'î': 'i', 'ï': 'i', 'ô': 'o', 'œ': 'oe', 'ù': 'u', 'û': 'u',
    'ÿ': 'y',
})

POLISH = _with_uppercase({
    'ą': 'a', 'ć': 'c', 'ę': 'e', 'ł': 'l', 'ń': 'n', 'ó': 'o', 'ś': 's',
    'ź': 'z', 'ż': 'z',
})

SPANISH = _with_uppercase({
    'á': 'a', 'é': 'e', 'í': 'i', 'ó': 'o', 'ú': 'u', 'ñ': 'n', 'ü': 'u',
})

HUNGARIAN = _with_uppercase({
    'á': 'a', 'é': 'e', 'í': 'i', 'ó': 'o', 'ö': 'o', 'ő': 'o', 'ú': 'u',
    'ü': 'u', 'ű': 'u',
})

CZECH = _with_uppercase({
    'á': 'a', 'č': 'c', 'ď': 'd', 'é': 'e', 'ě': 'e', 'í': 'i', 'ň': 'n',
    'ó': 'o', 'ř': 'r', 'š': 's', 'ť': 't', 'ú': 'u', 'ů': 'u', 'ý': 'y',
    'ž': 'z',
})

GREEK = _with_uppercase({
    'α': 'a', 'β': 'b', 'γ': 'g', 'δ': 'd', 'ε': 'e', 'ζ': 'z', 'η': 'i',
    'θ': 'th', 'ι': 'i', 'κ': 'k', 'λ': 'l', 'μ': 'm', 'ν': 'n', 'ξ': 'x',
    'ο': 'o', 'π': 'p', 'ρ': 'r', 'σ': 's', 'ς': 's', 'τ': 't', 'υ': 'y',
    'φ': 'f', 'χ': 'ch', 'ψ': 'ps', 'ω': 'o',
    'ά': 'a', 'έ': 'e', 'ή': 'i', 'ί': 'i', 'ό': 'o', 'ύ': 'y', 'ώ': 'o',
    'ϊ': 'i', 'ϋ': 'y', 'ΐ': 'i', 'ΰ': 'y',
})

SWEDISH = _with_uppercase({
    'å': 'a', 'ä': 'a', 'ö': 'o',
})

# latin letters without a canonical decomposition
LATIN = _with_uppercase({
    'ø': 'o', 'đ': 'd', 'ð': 'd', 'þ': 'th', 'ħ': 'h', 'ŧ': 't',
    'ŋ': 'n',
})

TRANSLITERATION = {}
for _script in (CYRILLIC, GERMAN, FRENCH, POLISH, SPANISH, HUNGARIAN, CZECH, GREEK, SWEDISH, LATIN):
    TRANSLITERATION.update(_script)

_TRANSLATE = str.maketrans(TRANSLITERATION)

NON_PRINTABLE_ASCII_RE = re.compile(r'[^\x20-\x7E]+')
WHITESPACE_RE = re.compile(r'\s+')
NOT_PORTABLE_RE = re.compile(r'[^A-Za-z0-9._-]+')
SEPARATOR_RUN_RE = re.compile(r'[-_]{2,}')
UNNAMED = 'unnamed-file'


def transliterate(text: str) -> str:
    return text.translate(_TRANSLATE)


def remove_non_ascii_characters(text: str) -> str:
    return NON_PRINTABLE_ASCII_RE.sub('', text)


def _clean_part(part: str) -> str:
    part = WHITESPACE_RE.sub('-', part)
    part = NOT_PORTABLE_RE.sub('', part)
    part = SEPARATOR_RUN_RE.sub('-', part)
    return part.strip('.-_')


def sanitize_file_name(basename: str) -> str:
    """Reduce *basename* to the portable filename set [A-Za-z0-9._-].

    Whitespace becomes a dash, anything else outside the set is removed and
    the stem and extension are trimmed of separators on both ends.
    """
    stem, ext = os.path.splitext(basename)
    stem = _clean_part(stem)
    ext = _clean_part(ext)
    if stem == '':
        stem = UNNAMED
    return stem + ('.' + ext if ext else '')


def strip_accents(filename: str, sanitize_special_chars: bool = True,
                  normalizer=DEFAULT_NORMALIZER) -> str:
    name = Filename.parse(filename)
    basename = name.basename

    if normalizer.available:
        basename = normalizer.normalize(basename, NormalizationForm.COMPOSED)

    basename = transliterate(basename)

    if normalizer.available:
        basename = normalizer.strip_marks(basename)

    if sanitize_special_chars:
        basename = sanitize_file_name(basename)

    basename = remove_non_ascii_characters(basename)
    return name.with_basename(basename).path


def sanitize_upload_name(filename: str, normalizer=DEFAULT_NORMALIZER) -> str:
    """Name to store a freshly uploaded file under.

    Special characters are left to the host, which sanitizes them itself.
    """
    return strip_accents(filename, sanitize_special_chars=False, normalizer=normalizer).lower()
