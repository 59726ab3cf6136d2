"""
Port forwarding through a UPnP Internet Gateway Device.

A UPnP object is a session: the first mapping call finds the local
address, multicasts for the gateway, reads its device description and
remembers the control URL. Every later call goes straight to the
control URL. If any step of that first pass fails the session stays
unestablished and the next call starts over.

All public operations return True or False and never raise.

    from pyigd.upnp import UPnP

    upnp = UPnP()
    if upnp.open_port(50500, "TCP", "my server"):
        ...
    upnp.close_port(50500, "TCP")
"""

import logging
from threading import Lock

from .description import DescriptionFetcher
from .errors import NoLocalAddress, UPnPError
from .lib import AddressResolver, parse_exception
from .soap import (ADD_PORT_MAPPING, DELETE_PORT_MAPPING, GET_PORT_MAPPING,
                   MappingRequest, SoapClient)
from .ssdp import SSDP

log = logging.getLogger(__name__)


class UPnP:
    def __init__(self, resolver=None, discoverer=None, fetcher=None,
                 soap=None, invalidate_on_failure=0, debug=0):
        # Picks the local IPv4 address.
        self.resolver = resolver or AddressResolver()

        # Multicasts for the gateway.
        self.discoverer = discoverer or SSDP(debug=debug)

        # Turns a description URL into a control URL.
        self.fetcher = fetcher or DescriptionFetcher(debug=debug)

        # Sends the port mapping actions.
        self.soap = soap or SoapClient(debug=debug)

        # Forget the gateway after a failed action.
        self.invalidate_on_failure = invalidate_on_failure

        self.debug = debug

        # (location URL, control URL) once established.
        self.gateway = None
        self.lan_ip = None
        self.mutex = Lock()

    def debug_print(self, msg):
        if self.debug:
            log.debug(str(msg))

    @property
    def is_established(self):
        return self.gateway is not None

    @property
    def location_url(self):
        gateway = self.gateway
        return gateway[0] if gateway is not None else None

    @property
    def control_url(self):
        gateway = self.gateway
        return gateway[1] if gateway is not None else None

    @property
    def local_address(self):
        return self.lan_ip

    def find_gateway(self):
        lan_ip = self.resolver.resolve()
        if lan_ip is None:
            raise NoLocalAddress("Could not determine local IPv4 address.")

        location_url = self.discoverer.discover(lan_ip)
        control_url = self.fetcher.resolve_control_url(location_url)

        return lan_ip, location_url, control_url

    def establish(self):
        """
        Runs discovery unless a gateway is already known. Concurrent
        callers share a single discovery run. Returns True when the
        session is established.
        """

        if self.gateway is not None:
            return True

        with self.mutex:
            if self.gateway is not None:
                return True

            try:
                lan_ip, location_url, control_url = self.find_gateway()
            except UPnPError as e:
                log.warning("Unable to find UPnP compatible gateway: " +
                            str(e))
                return False
            except Exception as e:
                log.warning("Gateway discovery failed: " + str(e))
                self.debug_print(parse_exception(e))
                return False

            self.lan_ip = lan_ip
            self.gateway = (location_url, control_url)

        return True

    def reset(self):
        with self.mutex:
            self.gateway = None

    def execute(self, port, proto, action, description=None):
        try:
            request = MappingRequest(port, proto, action, description)
        except ValueError as e:
            log.warning(str(e))
            return False

        if not self.establish():
            return False

        gateway = self.gateway
        if gateway is None:
            return False

        try:
            ret = self.soap.invoke(gateway[1], request, self.lan_ip)
        except Exception as e:
            log.warning("%r failed: %s" % (request, str(e)))
            self.debug_print(parse_exception(e))
            ret = False

        if not ret and self.invalidate_on_failure:
            self.debug_print("Forgetting gateway at " + gateway[0])
            with self.mutex:
                if self.gateway is gateway:
                    self.gateway = None

        return ret

    def open_port(self, port, proto, description=None):
        return self.execute(port, proto, ADD_PORT_MAPPING, description)

    def close_port(self, port, proto):
        return self.execute(port, proto, DELETE_PORT_MAPPING)

    def is_port_mapped(self, port, proto):
        return self.execute(port, proto, GET_PORT_MAPPING)

    def open_port_tcp(self, port, description=None):
        return self.open_port(port, "TCP", description)

    def open_port_udp(self, port, description=None):
        return self.open_port(port, "UDP", description)

    def close_port_tcp(self, port):
        return self.close_port(port, "TCP")

    def close_port_udp(self, port):
        return self.close_port(port, "UDP")

    def is_mapped_tcp(self, port):
        return self.is_port_mapped(port, "TCP")

    def is_mapped_udp(self, port):
        return self.is_port_mapped(port, "UDP")


# Shared session for the module level shortcuts.
default_session = None
default_session_mutex = Lock()


def get_default_session():
    global default_session
    with default_session_mutex:
        if default_session is None:
            default_session = UPnP()

    return default_session


def open_port(port, proto, description=None):
    return get_default_session().open_port(port, proto, description)


def close_port(port, proto):
    return get_default_session().close_port(port, proto)


def is_port_mapped(port, proto):
    return get_default_session().is_port_mapped(port, proto)


def open_port_tcp(port, description=None):
    return open_port(port, "TCP", description)


def open_port_udp(port, description=None):
    return open_port(port, "UDP", description)


def close_port_tcp(port):
    return close_port(port, "TCP")


def close_port_udp(port):
    return close_port(port, "UDP")


def is_mapped_tcp(port):
    return is_port_mapped(port, "TCP")


def is_mapped_udp(port):
    return is_port_mapped(port, "UDP")
