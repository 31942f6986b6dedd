"""
Candidate generation: splice wordlist entries between the labels of a domain.

For ``api.prod.evil.com`` and the word ``auth`` the candidates are
``auth.api.prod.evil.com`` and ``api.auth.prod.evil.com``. The word never goes
in front of the two rightmost labels (registrable name + TLD).
"""
from ..config import SHORT_DOMAIN_SKIP, SHORT_DOMAIN_PREPEND
from ..models import Candidate

# Registrable name + TLD, never split
APEX_LABELS = 2


def split_labels(domain):
    """Lower-cases a domain and returns its non-empty labels."""
    return [label for label in domain.strip().lower().rstrip('.').split('.') if label]


def generate_candidates(domain, word, short_domain_policy=SHORT_DOMAIN_SKIP):
    """Returns the ordered list of candidates for one (domain, word) pair."""
    labels = split_labels(domain)
    word = word.strip().lower()
    if not word or not labels:
        return []

    source = '.'.join(labels)
    n = len(labels)
    if n <= APEX_LABELS:
        if short_domain_policy == SHORT_DOMAIN_PREPEND:
            return [Candidate(hostname=f"{word}.{source}", domain=source, word=word, position=0)]
        return []

    candidates = []
    for i in range(n - APEX_LABELS):
        hostname = '.'.join(labels[:i] + [word] + labels[i:])
        candidates.append(Candidate(hostname=hostname, domain=source, word=word, position=i))
    return candidates


def count_candidates(domains, words, short_domain_policy=SHORT_DOMAIN_SKIP):
    """Total number of candidates ``expand`` would produce, without building them."""
    usable_words = sum(1 for w in words if w.strip())
    total = 0
    for domain in domains:
        n = len(split_labels(domain))
        if n > APEX_LABELS:
            total += usable_words * (n - APEX_LABELS)
        elif n and short_domain_policy == SHORT_DOMAIN_PREPEND:
            total += usable_words
    return total


def expand(domains, words, short_domain_policy=SHORT_DOMAIN_SKIP):
    """Yields every candidate, domain by domain and word by word."""
    for domain in domains:
        for word in words:
            yield from generate_candidates(domain, word, short_domain_policy)
