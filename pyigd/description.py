"""
Downloads a gateway's device description and works out where its WAN IP
connection service accepts SOAP requests.
"""

import logging

import requests

from .errors import DescriptionFetchError, DescriptionParseError
from .parse import WAN_IP_SERVICE, extract_control_path, resolve_control_url

log = logging.getLogger(__name__)


class DescriptionFetcher:
    def __init__(self, timeout=3, service=WAN_IP_SERVICE, debug=0):
        # Connect timeout in seconds. Reads are not bounded.
        self.timeout = timeout

        # Service whose control URL is wanted.
        self.service = service

        self.debug = debug

    def debug_print(self, msg):
        if self.debug:
            log.debug(str(msg))

    def fetch(self, location_url):
        try:
            res = requests.get(location_url, timeout=(self.timeout, None))
        except requests.exceptions.RequestException as e:
            raise DescriptionFetchError("Unable to fetch %s: %s"
                                        % (location_url, str(e)))

        if res.status_code != 200:
            raise DescriptionFetchError("Fetching %s returned HTTP %d"
                                        % (location_url, res.status_code))

        return res.text

    def resolve_control_url(self, location_url):
        xml = self.fetch(location_url)
        self.debug_print("Description: " + xml)

        if self.service not in xml:
            raise DescriptionParseError("Device at %s does not offer %s"
                                        % (location_url, self.service))

        path = extract_control_path(xml, self.service)
        if path is None:
            raise DescriptionParseError("No controlURL for %s in %s"
                                        % (self.service, location_url))

        control_url = resolve_control_url(location_url, path)
        self.debug_print("Control URL: " + control_url)

        return control_url
