import logging
import random

import dns.exception
import dns.resolver
import requests

from ..config import ALIVE_ANY_RESPONSE, ALIVE_BELOW_400, DEFAULT_TIMEOUT, USER_AGENTS
from ..models import ProbeOutcome

SCHEMES = ('https', 'http')

# Bodies up to this size are read off so the connection goes back to the pool
DRAIN_LIMIT = 64 * 1024


class DNSGate:
    """Passes only candidates that resolve to at least one A or AAAA record."""

    def __init__(self, resolver, logger=None):
        self.resolver = resolver
        self.logger = logger or logging.getLogger(__name__)

    def check(self, hostname):
        for rtype in ('A', 'AAAA'):
            try:
                answers = self.resolver.resolve(hostname, rtype)
                if len(answers):
                    return True
            except (dns.resolver.NXDOMAIN, dns.resolver.NoNameservers):
                # Name does not exist at all, AAAA will not help
                break
            except dns.resolver.NoAnswer:
                continue
            except (dns.exception.DNSException, OSError) as e:
                self.logger.debug(f" [.] DNS {rtype} lookup error for {hostname}: {type(e).__name__} - {e}")
                break
        self.logger.debug(f" [.] DNS failed for {hostname}")
        return False


class LivenessProbe:
    """
    Probes https:// then http:// for a host and reports the first scheme that
    answers. Certificates are not validated and redirects are not followed.
    """

    def __init__(self, session, timeout=DEFAULT_TIMEOUT, alive_policy=ALIVE_ANY_RESPONSE, logger=None):
        self.session = session
        self.timeout = timeout
        self.alive_policy = alive_policy
        self.logger = logger or logging.getLogger(__name__)

    def accepts(self, status_code):
        if self.alive_policy == ALIVE_BELOW_400:
            return status_code < 400
        return True

    def release(self, response):
        length = response.headers.get('Content-Length', '')
        if length.isdigit() and int(length) <= DRAIN_LIMIT:
            response.raw.drain_conn()
            response.raw.release_conn()
        else:
            response.close()

    def probe(self, hostname):
        """Returns (scheme, status_code) for the first accepted response, or None."""
        for scheme in SCHEMES:
            url = f"{scheme}://{hostname}/"
            headers = {'User-Agent': random.choice(USER_AGENTS)}
            try:
                response = self.session.get(url, headers=headers, timeout=(self.timeout, self.timeout),
                                            allow_redirects=False, verify=False, stream=True)
            except requests.exceptions.RequestException as e:
                self.logger.debug(f" [.] {scheme.upper()} probe failed for {hostname}: {type(e).__name__} - {e}")
                continue

            status_code = response.status_code
            self.release(response)
            if self.accepts(status_code):
                return scheme, status_code
            self.logger.debug(f" [.] {scheme.upper()} response for {hostname} rejected (Status: {status_code})")
        return None


def check_candidate(candidate, dns_gate, liveness_probe):
    """Runs one candidate through the DNS gate and, if it resolves, the liveness probe."""
    if not dns_gate.check(candidate.hostname):
        return ProbeOutcome(candidate=candidate)

    result = liveness_probe.probe(candidate.hostname)
    if result is None:
        return ProbeOutcome(candidate=candidate, resolved=True)

    scheme, status_code = result
    return ProbeOutcome(candidate=candidate, alive=True, resolved=True, scheme=scheme, status_code=status_code)
