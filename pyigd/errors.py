"""
Failures raised inside the discovery / control pipeline. None of these
leave the public UPnP operations, which report them as False.
"""


class UPnPError(Exception):
    pass


class NoLocalAddress(UPnPError):
    pass


class DiscoveryTimeout(UPnPError):
    pass


class DiscoveryIOError(UPnPError):
    pass


class DescriptionFetchError(UPnPError):
    pass


class DescriptionParseError(UPnPError):
    pass


class SoapTransportError(UPnPError):
    pass


class SoapHttpError(UPnPError):
    def __init__(self, status_code, msg=None):
        self.status_code = status_code
        if msg is None:
            msg = "Gateway replied with HTTP %s" % str(status_code)
        super(SoapHttpError, self).__init__(msg)
