"""
Text-level field extraction for SSDP replies and device descriptions.

These helpers deliberately work on substrings rather than a parsed XML
tree: the description is scanned for the service type marker and the
first <controlURL> element after it is taken verbatim. Namespace noise
around the element is ignored, but attributes or whitespace inside the
tag itself are not tolerated.
"""

from urllib.parse import urlsplit

WAN_IP_SERVICE = u"urn:schemas-upnp-org:service:WANIPConnection:1"

CONTROL_OPEN = u"<controlURL>"
CONTROL_CLOSE = u"</controlURL>"


def parse_headers(response):
    # SSDP replies are HTTP style headers, one per line.
    if type(response) == bytes:
        response = response.decode("utf-8", "replace")

    headers = {}
    for line in response.splitlines():
        if ":" not in line:
            continue
        name, value = line.split(":", 1)
        name = name.strip().lower()
        if name not in headers:
            headers[name] = value.strip()

    return headers


def parse_location(response):
    """
    Returns the URL of the first line starting with "location:" (any
    case) with surrounding whitespace stripped, or None.
    """

    if type(response) == bytes:
        response = response.decode("utf-8", "replace")

    for line in response.splitlines():
        if line.lower().startswith(u"location:"):
            return line[len(u"location:"):].strip()

    return None


def response_matches_service(response, service=WAN_IP_SERVICE):
    headers = parse_headers(response)
    for name in ("st", "nt", "usn"):
        if service in headers.get(name, u""):
            return True

    return False


def extract_control_path(xml, service=WAN_IP_SERVICE):
    """
    Finds the service marker in a device description and returns the
    trimmed text of the next <controlURL> element, or None if either
    the marker or the element is missing.
    """

    start = xml.find(service)
    if start == -1:
        return None

    control_start = xml.find(CONTROL_OPEN, start)
    if control_start == -1:
        return None

    control_end = xml.find(CONTROL_CLOSE, control_start)
    if control_end == -1:
        return None

    return xml[control_start + len(CONTROL_OPEN):control_end].strip()


def resolve_control_url(location_url, path):
    if path.lower().startswith(u"http"):
        return path

    location = urlsplit(location_url)
    scheme = location.scheme or u"http"
    host = location.hostname
    port = location.port
    if port is None:
        port = 443 if scheme == u"https" else 80

    if not path.startswith(u"/"):
        path = u"/" + path

    return u"%s://%s:%d%s" % (scheme, host, port, path)
