import time
from unittest import TestCase

from pyigd.errors import DiscoveryIOError, DiscoveryTimeout
from pyigd.ssdp import SSDP, build_search_msg

from .fake_gateway import SSDPResponder

SEARCH_MSG = b"M-SEARCH * HTTP/1.1\r\n" \
             b"HOST: 239.255.255.250:1900\r\n" \
             b"MAN: \"ssdp:discover\"\r\n" \
             b"MX: 2\r\n" \
             b"ST: urn:schemas-upnp-org:service:WANIPConnection:1\r\n" \
             b"\r\n"

IGD_REPLY = "HTTP/1.1 200 OK\r\n" \
            "CACHE-CONTROL: max-age=120\r\n" \
            "ST: urn:schemas-upnp-org:service:WANIPConnection:1\r\n" \
            "Location:  http://10.0.0.1:1234/desc.xml \r\n" \
            "\r\n"

OTHER_REPLY = "HTTP/1.1 200 OK\r\n" \
              "ST: upnp:rootdevice\r\n" \
              "USN: uuid:printer::upnp:rootdevice\r\n" \
              "LOCATION: http://10.0.0.7:80/printer.xml\r\n" \
              "\r\n"

NO_LOCATION_REPLY = "HTTP/1.1 200 OK\r\nST: upnp:rootdevice\r\n\r\n"


class TestSSDP(TestCase):
    def setUp(self):
        self.responder = None

    def tearDown(self):
        if self.responder is not None:
            self.responder.stop()

    def start_responder(self, replies):
        self.responder = SSDPResponder(replies).start()
        return self.responder

    def build_ssdp(self, **kwargs):
        return SSDP(multicast="127.0.0.1", upnp_port=self.responder.port,
                    debug=1, **kwargs)

    def test_build_search_msg(self):
        assert(build_search_msg() == SEARCH_MSG)

    def test_discover(self):
        self.start_responder([IGD_REPLY])
        location = self.build_ssdp().discover("127.0.0.1")
        assert(location == "http://10.0.0.1:1234/desc.xml")

        # One M-SEARCH per attempt.
        assert(len(self.responder.received) == 1)
        assert(b"MX: 2\r\n" in self.responder.received[0])
        assert(b"ST: urn:schemas-upnp-org:service:WANIPConnection:1\r\n"
               in self.responder.received[0])

    def test_discover_skips_replies_without_location(self):
        self.start_responder([NO_LOCATION_REPLY, IGD_REPLY])
        location = self.build_ssdp().discover("127.0.0.1")
        assert(location == "http://10.0.0.1:1234/desc.xml")

    def test_discover_accepts_first_location(self):
        self.start_responder([OTHER_REPLY, IGD_REPLY])
        location = self.build_ssdp().discover("127.0.0.1")
        assert(location == "http://10.0.0.7:80/printer.xml")

    def test_discover_strict(self):
        self.start_responder([OTHER_REPLY, IGD_REPLY])
        location = self.build_ssdp(strict=1).discover("127.0.0.1")
        assert(location == "http://10.0.0.1:1234/desc.xml")

    def test_discover_timeout(self):
        self.start_responder([NO_LOCATION_REPLY])
        ssdp = self.build_ssdp(reply_wait=0.5)
        start = time.time()
        self.assertRaises(DiscoveryTimeout, ssdp.discover, "127.0.0.1")
        assert(time.time() - start < 3)

    def test_discover_explicit_deadline(self):
        self.start_responder([])
        ssdp = self.build_ssdp()
        start = time.time()
        self.assertRaises(DiscoveryTimeout, ssdp.discover, "127.0.0.1",
                          timeout=0.3)
        assert(time.time() - start < 2)

    def test_discover_bad_bind_address(self):
        self.start_responder([IGD_REPLY])
        ssdp = self.build_ssdp(reply_wait=0.5)
        self.assertRaises(DiscoveryIOError, ssdp.discover, "203.0.113.77")
