import os


def write_results(path, hostnames):
    """Writes one hostname per line, creating the parent directory if needed."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        for hostname in hostnames:
            f.write(f"{hostname}\n")
