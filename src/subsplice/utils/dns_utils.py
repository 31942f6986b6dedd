import dns.resolver

from ..config import DNS_TIMEOUT


def build_resolver(timeout=DNS_TIMEOUT, nameservers=None, logger=None):
    """
    Builds the resolver shared by every worker. Answers are never cached so each
    lookup hits the network, and both the per-server timeout and the total
    lifetime are capped.
    """
    resolver = dns.resolver.Resolver(configure=not nameservers)
    resolver.timeout = timeout
    resolver.lifetime = timeout
    resolver.cache = None
    if nameservers:
        resolver.nameservers = list(nameservers)
    if logger:
        logger.debug(f" [.] DNS resolver ready: nameservers={resolver.nameservers}, timeout={timeout}s")
    return resolver
