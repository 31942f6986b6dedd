import requests
import urllib3
from requests.adapters import HTTPAdapter
from urllib3.exceptions import InsecureRequestWarning

from ..config import POOL_CONNECTIONS, POOL_MAXSIZE

# Certificates are never validated while probing
urllib3.disable_warnings(InsecureRequestWarning)


def build_session(pool_connections=POOL_CONNECTIONS, pool_maxsize=POOL_MAXSIZE):
    """
    Builds the HTTP session shared by every worker for the whole run.
    Idle connections are kept per host so repeated probes reuse TCP/TLS setup.
    """
    session = requests.Session()
    session.verify = False
    session.headers.update({'Accept': '*/*'})
    adapter = HTTPAdapter(pool_connections=pool_connections, pool_maxsize=pool_maxsize, max_retries=0)
    session.mount('http://', adapter)
    session.mount('https://', adapter)
    return session
