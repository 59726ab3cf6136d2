"""
Builds and sends the three WANIPConnection actions used for port
mapping. Success is judged by the HTTP status alone: the response body
is never parsed, so a fault wrapped in a 200 counts as success and a
query that is accepted counts as "mapped".
"""

import logging
from xml.sax.saxutils import escape

import requests

from .errors import SoapHttpError, SoapTransportError, UPnPError
from .lib import is_loopback, is_valid_port
from .parse import WAN_IP_SERVICE

log = logging.getLogger(__name__)

ADD_PORT_MAPPING = u"AddPortMapping"
DELETE_PORT_MAPPING = u"DeletePortMapping"
GET_PORT_MAPPING = u"GetSpecificPortMappingEntry"

ACTIONS = (ADD_PORT_MAPPING, DELETE_PORT_MAPPING, GET_PORT_MAPPING)
PROTOCOLS = (u"TCP", u"UDP")

DEFAULT_DESCRIPTION = u"PyIGD"


class MappingRequest:
    def __init__(self, port, proto, action, description=None):
        proto = str(proto).upper()
        if proto not in PROTOCOLS:
            raise ValueError("Invalid protocol for forwarding.")

        if not is_valid_port(port):
            raise ValueError("Invalid port for forwarding.")

        if action not in ACTIONS:
            raise ValueError("Unknown port mapping action: " + str(action))

        if description is not None and not isinstance(description, str):
            raise ValueError("Mapping description must be text.")

        self.external_port = int(port)
        self.internal_port = self.external_port
        self.proto = proto
        self.action = action
        self.description = description

    def __repr__(self):
        return "MappingRequest(%s %s/%d)" % (self.action, self.proto,
                                            self.external_port)


def build_soap_body(request, lan_ip=None, service=WAN_IP_SERVICE,
                    default_description=DEFAULT_DESCRIPTION):
    action = request.action
    msg = u'<?xml version="1.0"?>'
    msg += u'<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/"'
    msg += u' s:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">'
    msg += u'<s:Body>'
    msg += u'<u:%s xmlns:u="%s">' % (action, service)
    msg += u'<NewRemoteHost></NewRemoteHost>'
    msg += u'<NewExternalPort>%d</NewExternalPort>' % request.external_port
    msg += u'<NewProtocol>%s</NewProtocol>' % request.proto

    if action == ADD_PORT_MAPPING:
        # Gateways reject mappings that point back at loopback.
        if lan_ip is None or is_loopback(lan_ip):
            raise ValueError("AddPortMapping needs a LAN IP"
                             " (%s passed.)" % str(lan_ip))

        description = request.description
        if description is None:
            description = default_description

        msg += u'<NewInternalPort>%d</NewInternalPort>' % \
            request.internal_port
        msg += u'<NewInternalClient>%s</NewInternalClient>' % lan_ip
        msg += u'<NewEnabled>1</NewEnabled>'
        msg += u'<NewPortMappingDescription>%s</NewPortMappingDescription>' \
            % escape(description)
        msg += u'<NewLeaseDuration>0</NewLeaseDuration>'

    msg += u'</u:%s>' % action
    msg += u'</s:Body>'
    msg += u'</s:Envelope>'

    return msg


class SoapClient:
    def __init__(self, timeout=3, service=WAN_IP_SERVICE,
                 description=DEFAULT_DESCRIPTION, debug=0):
        # Connect timeout in seconds. Reads are not bounded.
        self.timeout = timeout

        # Service the actions are addressed to.
        self.service = service

        # Mapping description used when the caller gives none.
        self.description = description

        self.debug = debug

    def debug_print(self, msg):
        if self.debug:
            log.debug(str(msg))

    def build_headers(self, action):
        return {
            "Content-Type": "text/xml",
            "SOAPAction": "%s#%s" % (self.service, action)
        }

    def call(self, control_url, request, lan_ip=None):
        """
        Posts the action to the control URL. Returns the response on
        HTTP 200, otherwise raises SoapTransportError or SoapHttpError.
        """

        body = build_soap_body(request, lan_ip, self.service,
                               self.description)
        self.debug_print("Transmitting: " + body)

        try:
            res = requests.post(
                control_url,
                data=body.encode("utf-8"),
                headers=self.build_headers(request.action),
                timeout=(self.timeout, None)
            )
        except requests.exceptions.RequestException as e:
            raise SoapTransportError("%s to %s failed: %s"
                                     % (request.action, control_url, str(e)))

        self.debug_print("Response: " + str(res.status_code))
        self.debug_print("Response data: " + res.text)

        if res.status_code != 200:
            raise SoapHttpError(res.status_code)

        return res

    def invoke(self, control_url, request, lan_ip=None):
        try:
            self.call(control_url, request, lan_ip)
            return True
        except SoapHttpError as e:
            self.debug_print("%r rejected: %s" % (request, str(e)))
        except UPnPError as e:
            log.warning(str(e))
        except ValueError as e:
            log.warning("Bad port mapping request: " + str(e))

        return False
