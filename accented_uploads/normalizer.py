"""Unicode canonical composition / decomposition.

Filenames written on macOS usually arrive decomposed (NFD) while everything
else stores them composed (NFC). Callers ask for a form explicitly; hosts
without normalization support get an `UnsupportedNormalizer` and must skip
the steps that depend on it.
"""
from enum import Enum
import unicodedata


class UnsupportedNormalization(Exception):
    """Raised when the host cannot normalize unicode."""


class NormalizationForm(Enum):
    COMPOSED = 'NFC'
    DECOMPOSED = 'NFD'
    UNSPECIFIED = None


class UnicodeNormalizer:
    available = True

    def normalize(self, text: str, form: NormalizationForm) -> str:
        if form is NormalizationForm.UNSPECIFIED:
            raise UnsupportedNormalization('no normalization form given')
        return unicodedata.normalize(form.value, text)

    def is_normalized(self, text: str, form: NormalizationForm) -> bool:
        if form is NormalizationForm.UNSPECIFIED:
            raise UnsupportedNormalization('no normalization form given')
        return unicodedata.is_normalized(form.value, text)

    def detect_form(self, text: str) -> NormalizationForm:
        """Best-effort guess of the form *text* is stored in.

        Decomposed wins for plain ASCII, which is in both forms. Text that is
        in neither canonical form (or any text when normalization is
        unavailable) reports UNSPECIFIED.
        """
        try:
            if self.is_normalized(text, NormalizationForm.DECOMPOSED):
                return NormalizationForm.DECOMPOSED
            if self.is_normalized(text, NormalizationForm.COMPOSED):
                return NormalizationForm.COMPOSED
        except UnsupportedNormalization:
            pass
        return NormalizationForm.UNSPECIFIED

    def strip_marks(self, text: str) -> str:
        """Decompose every non-ascii letter and drop its combining marks.

        Canonical decomposition only: symbols such as ™ or ¼ come back as
        they went in instead of being spelled out.
        """
        out = []
        for ch in text:
            if ch.isascii():
                out.append(ch)
                continue
            out.extend(c for c in unicodedata.normalize('NFD', ch) if not unicodedata.combining(c))
        return ''.join(out)


class UnsupportedNormalizer(UnicodeNormalizer):
    available = False

    def normalize(self, text, form):
        raise UnsupportedNormalization('unicode normalization is not available')

    def is_normalized(self, text, form):
        raise UnsupportedNormalization('unicode normalization is not available')

    def strip_marks(self, text):
        raise UnsupportedNormalization('unicode normalization is not available')


DEFAULT_NORMALIZER = UnicodeNormalizer()
