import re

_SCHEME = re.compile(r'^[a-z][a-z0-9+.-]*://', re.IGNORECASE)


def read_lines(path):
    """Reads a line-delimited file, skipping blank lines and '#' comments. Order and duplicates are kept."""
    lines = []
    with open(path, 'r', encoding='utf-8', errors='ignore') as f:
        for line in f:
            value = line.strip()
            if value and not value.startswith('#'):
                lines.append(value)
    return lines


def normalize_domain(value):
    """Strips scheme prefixes, paths, trailing slashes and dots: 'https://A.Example.com/' -> 'a.example.com'."""
    value = _SCHEME.sub('', value.strip())
    value = value.split('/', 1)[0]
    return value.rstrip('.').lower()


def load_domains(domain=None, domains_file=None):
    """Collects target domains from a single value and/or a file (one per line)."""
    raw = []
    if domains_file:
        raw.extend(read_lines(domains_file))
    if domain:
        raw.append(domain)
    return [d for d in (normalize_domain(r) for r in raw) if d]
