from .upnp import (UPnP, open_port, close_port, is_port_mapped,
                   open_port_tcp, open_port_udp, close_port_tcp,
                   close_port_udp, is_mapped_tcp, is_mapped_udp)
from .errors import UPnPError
