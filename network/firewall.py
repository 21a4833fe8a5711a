"""
pfSense firewall client.

Blocking a device adds its MAC address to a firewall alias referenced by a
block rule on the appliance; unblocking removes it again. Calls go through
the pfSense REST API with basic auth over HTTPS. Appliances ship with
self-signed certificates, so verification is off.

Failures are never masked: an unreachable appliance raises
``FirewallUnavailable`` and an error response raises ``FirewallRejected``,
so callers can leave local state untouched.
"""
from dataclasses import dataclass
import logging

from django.conf import settings
import requests
import urllib3

from .exceptions import FirewallRejected, FirewallUnavailable

logger = logging.getLogger(__name__)

urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

ALIAS_ENTRY_PATH = '/api/v1/firewall/alias/entry'


@dataclass
class FirewallResult:
    success: bool
    message: str
    skipped: bool = False


class PfSenseClient:
    """
    Thin wrapper over the pfSense alias-entry endpoint.
    """

    def __init__(self, host=None, port=None, username=None, password=None,
                 alias=None, timeout=None, disabled=None, session=None):
        conf = settings.PFSENSE_SETTINGS
        self.host = host if host is not None else conf['HOST']
        self.port = port if port is not None else conf['PORT']
        self.username = username if username is not None else conf['USERNAME']
        self.password = password if password is not None else conf['PASSWORD']
        self.alias = alias or conf['BLOCK_ALIAS']
        self.timeout = timeout or conf['TIMEOUT']
        self.disabled = conf['DISABLED'] if disabled is None else disabled
        self.session = session or requests.Session()

    @property
    def enabled(self):
        return bool(self.host) and not self.disabled

    @property
    def base_url(self):
        return f"https://{self.host}:{self.port}"

    def block_device(self, mac_address, description=''):
        """Add ``mac_address`` to the block alias."""
        if not self.enabled:
            logger.info(f"Firewall integration disabled; skipping block of {mac_address}")
            return FirewallResult(True, 'Firewall integration disabled; block recorded locally', skipped=True)

        payload = {
            'name': self.alias,
            'address': [mac_address],
            'detail': [description or f'Blocked {mac_address}'],
            'apply': True,
        }
        self._request('POST', payload)
        logger.info(f"Blocked {mac_address} on firewall alias {self.alias}")
        return FirewallResult(True, f'Blocked {mac_address} on the firewall')

    def unblock_device(self, mac_address):
        """Remove ``mac_address`` from the block alias."""
        if not self.enabled:
            logger.info(f"Firewall integration disabled; skipping unblock of {mac_address}")
            return FirewallResult(True, 'Firewall integration disabled; unblock recorded locally', skipped=True)

        payload = {
            'name': self.alias,
            'address': mac_address,
            'apply': True,
        }
        self._request('DELETE', payload)
        logger.info(f"Unblocked {mac_address} on firewall alias {self.alias}")
        return FirewallResult(True, f'Unblocked {mac_address} on the firewall')

    def _request(self, method, payload):
        url = f"{self.base_url}{ALIAS_ENTRY_PATH}"
        try:
            response = self.session.request(
                method,
                url,
                json=payload,
                auth=(self.username, self.password),
                verify=False,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Firewall {method} {url} failed: {e}")
            raise FirewallUnavailable(f'Firewall appliance is unreachable: {e}')

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400 or (isinstance(body, dict) and body.get('status') == 'error'):
            message = body.get('message') if isinstance(body, dict) else None
            message = message or f'HTTP {response.status_code}'
            logger.error(f"Firewall {method} {url} rejected: {message}")
            raise FirewallRejected(f'Firewall rejected the request: {message}')

        return body


def get_firewall_client():
    return PfSenseClient()
