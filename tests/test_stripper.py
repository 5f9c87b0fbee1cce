import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from accented_uploads.filename import Filename
from accented_uploads.normalizer import UnsupportedNormalizer
from accented_uploads.stripper import (
    TRANSLITERATION,
    sanitize_file_name,
    sanitize_upload_name,
    strip_accents,
)

SAMPLES = [
    'Café™.jpg',
    'ääkkönen.png',
    'Mein Bild (1).JPG',
    'Žluťoučký kůň.pdf',
    'Zażółć gęślą jaźń.txt',
    'Árvíztűrő tükörfúrógép.doc',
    'Москва 2024.png',
    'Ελληνικά.gif',
    'Straße ¼ größer.png',
    '™.png',
    'a\tb\n.png',
    '.htaccess',
    'uploads/2019/Smörgåsbord.jpg',
    'São Paulo.jpg',
    'Ørsted ðþ.png',
]


@pytest.mark.parametrize('letter, expected', [
    ('ä', 'a'), ('ö', 'o'), ('ü', 'u'), ('ß', 'ss'), ('Ä', 'A'),
    ('å', 'a'), ('Å', 'A'),
    ('é', 'e'), ('ç', 'c'), ('œ', 'oe'),
    ('ñ', 'n'), ('á', 'a'),
    ('ł', 'l'), ('Ł', 'L'), ('ż', 'z'),
    ('ő', 'o'), ('ű', 'u'),
    ('ě', 'e'), ('ř', 'r'), ('ů', 'u'),
    ('ж', 'zh'), ('Ж', 'Zh'), ('щ', 'shch'), ('ь', ''),
    ('λ', 'l'), ('Ω', 'O'), ('ώ', 'o'),
])
def test_documented_transliteration(letter, expected):
    assert TRANSLITERATION[letter] == expected
    assert strip_accents(letter, sanitize_special_chars=False) == expected


def test_cafe_upload_name():
    assert strip_accents('Café™.jpg', sanitize_special_chars=False) == 'Cafe.jpg'
    assert sanitize_upload_name('Café™.jpg') == 'cafe.jpg'


def test_strip_accents_keeps_case():
    assert strip_accents('Ärger.PNG', sanitize_special_chars=False) == 'Arger.PNG'


@pytest.mark.parametrize('name, expected', [
    ('però.jpg', 'pero.jpg'),
    ('São Paulo.jpg', 'Sao-Paulo.jpg'),
    ('Camões.pdf', 'Camoes.pdf'),
    ('Ìsola.png', 'Isola.png'),
    ('Øresund.png', 'Oresund.png'),
    ('Þór.png', 'Thor.png'),
])
def test_other_latin_letters_lose_their_accents(name, expected):
    assert strip_accents(name) == expected


def test_without_normalization_unmapped_letters_are_dropped():
    # no decomposition available: the letter goes in the final ascii pass
    assert strip_accents('però.jpg', normalizer=UnsupportedNormalizer()) == 'per.jpg'


def test_decomposed_input_is_composed_first():
    assert strip_accents('Cafe\u0301.jpg') == 'Cafe.jpg'
    assert strip_accents('a\u0308a\u0308kko\u0308nen.png') == 'aakkonen.png'


def test_directory_is_left_alone():
    assert strip_accents('wp-content/Ü/Ärger.png') == 'wp-content/Ü/Arger.png'
    assert strip_accents('/srv/Mein Ordner/Bild 1.png') == '/srv/Mein Ordner/Bild-1.png'


def test_current_directory_is_dropped():
    assert strip_accents('./Ärger.png') == 'Arger.png'
    assert strip_accents('Ärger.png') == 'Arger.png'


def test_trailing_separator_names_the_directory_itself():
    assert strip_accents('Ärger/') == 'Arger'
    assert strip_accents('uploads/Mein Ordner//') == 'uploads/Mein-Ordner'
    assert Filename.parse('dir/') == Filename('', 'dir')
    assert Filename.parse('/') == Filename('/', '')


def test_sanitize_special_chars():
    assert strip_accents('Mein Bild (1).JPG') == 'Mein-Bild-1.JPG'
    assert strip_accents('a - b.png') == 'a-b.png'
    assert strip_accents('  spaced  .png') == 'spaced.png'
    assert strip_accents('™.png') == 'unnamed-file.png'


def test_without_sanitize_only_non_ascii_goes():
    assert strip_accents('Mein Bild (1).JPG', sanitize_special_chars=False) == 'Mein Bild (1).JPG'
    assert strip_accents('a\tb\n.png', sanitize_special_chars=False) == 'ab.png'
    assert strip_accents('¼ pie.png', sanitize_special_chars=False) == ' pie.png'


def test_sanitize_file_name_keeps_inner_dots():
    assert sanitize_file_name('archive.tar.gz') == 'archive.tar.gz'
    assert sanitize_file_name('notes.') == 'notes'


@pytest.mark.parametrize('sanitize', [True, False])
@pytest.mark.parametrize('name', SAMPLES)
def test_idempotent(name, sanitize):
    once = strip_accents(name, sanitize_special_chars=sanitize)
    assert strip_accents(once, sanitize_special_chars=sanitize) == once


@pytest.mark.parametrize('sanitize', [True, False])
@pytest.mark.parametrize('name', SAMPLES)
def test_output_is_printable_ascii(name, sanitize):
    basename = Path(strip_accents(name, sanitize_special_chars=sanitize)).name
    assert all(0x20 <= ord(c) <= 0x7E for c in basename)


def test_works_without_normalization():
    normalizer = UnsupportedNormalizer()
    assert strip_accents('Cafe\u0301\u2122.jpg', normalizer=normalizer) == 'Cafe.jpg'
    assert strip_accents('Ärger.png', normalizer=normalizer) == 'Arger.png'
    assert sanitize_upload_name('Café™.jpg', normalizer=normalizer) == 'cafe.jpg'
