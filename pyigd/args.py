import argparse


def build_parser():
    # Setup parser.
    parser = argparse.ArgumentParser(
        prog='pyigd',
        description='Checks that a UPnP gateway can open, verify and close'
                    ' a port mapping.'
    )

    # Option: port to map.
    parser.add_argument('-p', '--port', action="store", dest="port",
                        type=int, default=12392, help="port to map")

    # Option: map UDP instead of TCP.
    parser.add_argument('-u', '--udp', action="store_true", dest="udp",
                        default=False, help="map a UDP port")

    # Option: mapping description.
    parser.add_argument('-d', '--description', action="store",
                        dest="description", default="PyIGD-TestTool",
                        help="description stored on the gateway")

    # Option: debug output.
    parser.add_argument('-v', '--debug', action="store_true", dest="debug",
                        default=False, help="log requests and responses")

    return parser


def parse_args(argv=None):
    return build_parser().parse_args(argv)
