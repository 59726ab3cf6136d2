"""
Diagnostic tool: checks a port is free on the gateway, maps it, verifies
the mapping and removes it again.
"""

import logging
import sys

from .args import parse_args
from .upnp import UPnP


def run(upnp, port, proto, description, out=sys.stdout, err=sys.stderr):
    def say(msg):
        out.write(msg + "\n")

    def warn(msg):
        err.write(msg + "\n")

    say("=== pyigd diagnostic tool ===")
    say("Target port: %d/%s" % (port, proto))

    say("[1/4] Checking status of port %d..." % port)
    if upnp.is_port_mapped(port, proto):
        warn("Port %d is already mapped. Pick another port or remove the"
             " mapping on the router." % port)
        return 1
    say("      Port is not mapped.")

    say("[2/4] Mapping port %d (gateway discovery may take a few"
        " seconds)..." % port)
    if not upnp.open_port(port, proto, description):
        warn("      Could not open port. Check that UPnP is enabled on"
             " the router.")
        return 1
    say("      Gateway accepted the mapping.")

    ok = 1
    say("[3/4] Verifying with router...")
    if upnp.is_port_mapped(port, proto):
        say("      Router confirmed the mapping.")
    else:
        warn("      Router does not report the mapping.")
        ok = 0

    say("[4/4] Closing port...")
    if upnp.close_port(port, proto):
        say("      Port closed.")
    else:
        warn("      Could not close port. Remove it on the router.")
        ok = 0

    return 0 if ok else 1


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.debug else
                        logging.WARNING)

    proto = "UDP" if args.udp else "TCP"
    upnp = UPnP(debug=int(args.debug))
    return run(upnp, args.port, proto, args.description)


if __name__ == "__main__":
    sys.exit(main())
