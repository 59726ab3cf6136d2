import ipaddress
import os
import socket
import sys
import traceback

import psutil


def parse_exception(e, output=0):
    tb = traceback.format_exc()
    exc_type, exc_obj, exc_tb = sys.exc_info()
    if exc_tb is not None:
        fname = os.path.split(exc_tb.tb_frame.f_code.co_filename)[1]
        lineno = exc_tb.tb_lineno
    else:
        fname = lineno = None
    error = "%s %s %s %s %s" % (str(tb), str(exc_type), str(fname),
                                str(lineno), str(e))

    if output:
        print(error)

    return str(error)


def is_valid_port(port):
    if isinstance(port, bool):
        return 0
    if isinstance(port, float) and not port.is_integer():
        return 0
    try:
        port = int(port)
    except (TypeError, ValueError):
        return 0
    if port < 1 or port > 65535:
        return 0
    else:
        return 1


def is_loopback(ip_addr):
    try:
        return ipaddress.ip_address(ip_addr).is_loopback
    except ValueError:
        return False


def is_virtual_interface(name):
    # Aliases such as eth0:1 hang off a parent interface.
    return ":" in name


def is_interface_up(name, stats):
    info = stats.get(name)
    if info is None:
        return False

    return bool(info.isup)


def is_loopback_interface(name, stats):
    info = stats.get(name)
    flags = getattr(info, "flags", "") or ""
    if "loopback" in flags.split(","):
        return True

    return name == "lo" or name.startswith("Loopback")


def get_lan_ip(if_addrs=None, if_stats=None):
    """
    Returns the IPv4 address of the first interface that is up and is
    neither a loopback nor a virtual interface. Interfaces are walked in
    the order the OS reports them and the first usable address wins.
    Returns None if nothing qualifies.
    """

    if if_addrs is None:
        if_addrs = psutil.net_if_addrs()
    if if_stats is None:
        if_stats = psutil.net_if_stats()

    for name, addrs in if_addrs.items():
        if not is_interface_up(name, if_stats):
            continue
        if is_loopback_interface(name, if_stats):
            continue
        if is_virtual_interface(name):
            continue

        for addr in addrs:
            if addr.family != socket.AF_INET:
                continue
            if is_loopback(addr.address):
                continue

            return addr.address

    return None


class AddressResolver:
    """Picks the local address once and remembers it."""

    def __init__(self):
        self.lan_ip = None

    def resolve(self):
        if self.lan_ip is None:
            self.lan_ip = get_lan_ip()

        return self.lan_ip


if __name__ == "__main__":
    print(get_lan_ip())
