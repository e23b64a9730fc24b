"""
Description tokenizer used for whole-word membership tests.
"""
import re

SPLIT_RE = re.compile(r"[\s.,/]+")
EDGE_RE = re.compile(r"^\W+|\W+$", re.ASCII)


def normalize_term(term):
    return (term or "").lower().strip()


def tokenize(text):
    """Lower-case, split on whitespace/period/comma/slash, trim symbols from both sides."""
    if not text:
        return []
    tokens = []
    for fragment in SPLIT_RE.split(text.lower()):
        word = EDGE_RE.sub("", fragment)
        if word:
            tokens.append(word)
    return tokens


def contains_word(text, term):
    """True if `term` equals one of the description's tokens ("mobile" does not match "mobility")."""
    term = normalize_term(term)
    if not term:
        return False
    return term in tokenize(text)
