import socket
from collections import namedtuple
from unittest import TestCase, mock

from pyigd.lib import *

snicaddr = namedtuple("snicaddr", "family address netmask broadcast ptp")
snicstats = namedtuple("snicstats", "isup duplex speed mtu flags")


def ipv4(addr):
    return snicaddr(socket.AF_INET, addr, "255.255.255.0", None, None)


def ipv6(addr):
    return snicaddr(socket.AF_INET6, addr, None, None, None)


def stats(isup=True, flags="up,broadcast,running,multicast"):
    return snicstats(isup, 2, 1000, 1500, flags)


class TestLib(TestCase):
    def test_parse_exception(self):
        try:
            self.this_doesnt_exist()
        except Exception as e:
            assert("AttributeError" in parse_exception(e))

    def test_is_valid_port(self):
        assert(is_valid_port("1"))
        assert(is_valid_port(65535))
        assert(is_valid_port("0") != 1)
        assert(is_valid_port("-500") != 1)
        assert(is_valid_port(65536) != 1)
        assert(is_valid_port("test") != 1)
        assert(is_valid_port(None) != 1)
        assert(is_valid_port(True) != 1)
        assert(is_valid_port(40001.9) != 1)
        assert(is_valid_port(40001.0))

    def test_is_loopback(self):
        assert(is_loopback("127.0.0.1"))
        assert(is_loopback("127.4.0.1"))
        self.assertFalse(is_loopback("192.168.0.10"))
        self.assertFalse(is_loopback("garbage"))

    def test_get_lan_ip_skips_unusable_interfaces(self):
        if_addrs = {
            "lo": [ipv4("127.0.0.1")],
            "eth0": [ipv4("10.9.9.9")],
            "eth1:0": [ipv4("10.8.8.8")],
            "wlan0": [ipv6("fe80::1"), ipv4("127.0.1.1"),
                      ipv4("192.168.1.50"), ipv4("192.168.1.51")],
            "eth2": [ipv4("172.16.0.2")],
        }
        if_stats = {
            "lo": stats(flags="up,loopback,running"),
            "eth0": stats(isup=False, flags="broadcast,multicast"),
            "eth1:0": stats(),
            "wlan0": stats(),
            "eth2": stats(),
        }
        assert(get_lan_ip(if_addrs, if_stats) == "192.168.1.50")

    def test_get_lan_ip_none(self):
        if_addrs = {
            "lo": [ipv4("127.0.0.1")],
            "eth0": [ipv6("fe80::2")],
        }
        if_stats = {
            "lo": stats(flags="up,loopback,running"),
            "eth0": stats(),
        }
        assert(get_lan_ip(if_addrs, if_stats) is None)
        assert(get_lan_ip({}, {}) is None)

    def test_get_lan_ip_without_stats(self):
        assert(get_lan_ip({"eth0": [ipv4("192.168.1.2")]}, {}) is None)

    def test_address_resolver_caches(self):
        if_addrs = {"eth0": [ipv4("192.168.1.2")]}
        if_stats = {"eth0": stats()}
        with mock.patch("psutil.net_if_addrs", return_value=if_addrs) as a, \
                mock.patch("psutil.net_if_stats", return_value=if_stats):
            resolver = AddressResolver()
            assert(resolver.resolve() == "192.168.1.2")
            assert(resolver.resolve() == "192.168.1.2")
            assert(a.call_count == 1)

    def test_address_resolver_retries_after_none(self):
        with mock.patch("psutil.net_if_addrs", return_value={}) as a, \
                mock.patch("psutil.net_if_stats", return_value={}):
            resolver = AddressResolver()
            assert(resolver.resolve() is None)
            assert(resolver.resolve() is None)
            assert(a.call_count == 2)
