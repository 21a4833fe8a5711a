"""
API exceptions raised by the network app.
"""
from rest_framework import status
from rest_framework.exceptions import APIException


class AlertStateError(APIException):
    """An alert in a terminal state was asked to transition again."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Alert is not active'
    default_code = 'alert_state'


class FirewallError(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Firewall request failed'
    default_code = 'firewall_error'


class FirewallUnavailable(FirewallError):
    """The firewall appliance could not be reached."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'Firewall appliance is unreachable'
    default_code = 'firewall_unavailable'


class FirewallRejected(FirewallError):
    """The firewall appliance answered with an error."""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Firewall appliance rejected the request'
    default_code = 'firewall_rejected'
