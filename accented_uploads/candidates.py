"""Guess the names a file may have been stored under.

For a name that *should* exist on disk, candidates_for() returns, in order:

  - the other canonical form of the name (nfd <-> nfc); macOS stores files
    decomposed, everything else composed
  - the name with encoding errors put in on purpose, ie. what it looks like
    if an earlier migration double encoded it

The form is picked by a best-effort test on the name. A name in neither
canonical form only gets the encoding error candidate.
"""
import logging

from .mojibake import DEFAULT_TABLE
from .normalizer import DEFAULT_NORMALIZER, NormalizationForm, UnsupportedNormalization

log = logging.getLogger(__name__)


def candidates_for(target: str, table=DEFAULT_TABLE, normalizer=DEFAULT_NORMALIZER) -> list:
    candidates = []
    form = normalizer.detect_form(target)

    try:
        if form is NormalizationForm.DECOMPOSED:
            candidates.append(normalizer.normalize(target, NormalizationForm.COMPOSED))
        elif form is NormalizationForm.COMPOSED:
            candidates.append(normalizer.normalize(target, NormalizationForm.DECOMPOSED))
        rules = table.normalized(form, normalizer) if form is not NormalizationForm.UNSPECIFIED else table
    except UnsupportedNormalization:
        rules = table

    candidates.append(rules.corrupt(target))
    log.debug('candidates for %r (%s): %r', target, form.name, candidates)
    return candidates


class CandidateGenerator:
    """candidates_for() bound to one table and normalizer."""

    def __init__(self, table=DEFAULT_TABLE, normalizer=DEFAULT_NORMALIZER):
        self.table = table
        self.normalizer = normalizer

    def __call__(self, target: str) -> list:
        return candidates_for(target, self.table, self.normalizer)
