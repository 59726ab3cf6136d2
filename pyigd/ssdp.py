"""
Finds the gateway by multicasting an SSDP M-SEARCH for the WAN IP
connection service and waiting for the first reply that carries a
Location header.
"""

import logging
import select
import socket
import time

from .errors import DiscoveryIOError, DiscoveryTimeout
from .parse import WAN_IP_SERVICE, parse_location, response_matches_service

log = logging.getLogger(__name__)


def build_search_msg(multicast=u"239.255.255.250", upnp_port=1900, mx=2,
                     service=WAN_IP_SERVICE):
    search_msg = u"M-SEARCH * HTTP/1.1\r\n"
    search_msg += u"HOST: %s:%d\r\n" % (multicast, upnp_port)
    search_msg += u"MAN: \"ssdp:discover\"\r\n"
    search_msg += u"MX: %d\r\n" % mx
    search_msg += u"ST: %s\r\n" % service
    search_msg += u"\r\n"

    return search_msg.encode("utf-8")


class SSDP:
    def __init__(self, multicast=u"239.255.255.250", upnp_port=1900,
                 reply_wait=3, mx=2, service=WAN_IP_SERVICE, strict=0,
                 debug=0):
        # Address used for IPv4 multicasts.
        self.multicast = multicast

        # Port that UPnP configured hosts listen on.
        self.upnp_port = upnp_port

        # Number of seconds to wait for a usable reply.
        self.reply_wait = reply_wait

        # Max seconds a device may delay its reply.
        self.mx = mx

        # Service type searched for.
        self.service = service

        # Only accept replies that name the searched service.
        self.strict = strict

        # Largest datagram read per reply.
        self.buf_size = 2048

        self.debug = debug

    def debug_print(self, msg):
        if self.debug:
            log.debug(str(msg))

    def build_socket(self, bind_addr):
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            s.bind((bind_addr, 0))
            s.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, 2)
            s.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF,
                         socket.inet_aton(bind_addr))
        except socket.error:
            s.close()
            raise

        return s

    def accept_reply(self, response):
        location = parse_location(response)
        if location is None:
            return None

        if self.strict and not response_matches_service(response,
                                                         self.service):
            self.debug_print("Ignoring reply for another service: " +
                             location)
            return None

        return location

    def discover(self, bind_addr, timeout=None):
        """
        Sends one M-SEARCH from bind_addr and returns the location URL
        of the first acceptable reply. Raises DiscoveryTimeout when
        nothing usable arrives before the deadline and DiscoveryIOError
        for any other socket failure.
        """

        if timeout is None:
            timeout = self.reply_wait
        deadline = time.time() + timeout

        try:
            s = self.build_socket(bind_addr)
        except socket.error as e:
            raise DiscoveryIOError("Unable to bind %s: %s" % (bind_addr,
                                                              str(e)))

        try:
            search_msg = build_search_msg(self.multicast, self.upnp_port,
                                          self.mx, self.service)
            self.debug_print("Scanning for gateway from " + bind_addr)
            s.sendto(search_msg, (self.multicast, self.upnp_port))

            while 1:
                remaining = deadline - time.time()
                if remaining <= 0:
                    break

                res = select.select([s], [], [], remaining)
                if not len(res[0]):
                    break

                (response, addr) = s.recvfrom(self.buf_size)
                location = self.accept_reply(response)
                if location is not None:
                    self.debug_print("Found gateway at " + location)
                    return location
        except (socket.error, ValueError) as e:
            raise DiscoveryIOError(str(e))
        finally:
            s.close()

        raise DiscoveryTimeout("No UPnP gateway replied within %s seconds."
                               % str(timeout))
