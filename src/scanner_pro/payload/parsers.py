"""Parsers for the structured payload formats found in QR codes.

Every parser takes the trimmed payload text and returns a flat mapping of
string fields. Parsers never raise for malformed input; they return whatever
they could extract.
"""

import re
from typing import Dict, List, Optional
from urllib.parse import parse_qsl, quote, unquote, urlsplit

_WIFI_SCHEME = re.compile(r"^WIFI:", re.IGNORECASE)
_MAILTO_SCHEME = re.compile(r"^mailto:", re.IGNORECASE)
_TEL_SCHEME = re.compile(r"^tel:", re.IGNORECASE)
_SMS_SCHEME = re.compile(r"^(smsto:|sms:)", re.IGNORECASE)
_GEO_SCHEME = re.compile(r"^geo:", re.IGNORECASE)

_WIFI_KEYS = {
    "S": "ssid",
    "T": "security",
    "P": "password",
    "H": "hidden",
}
_WIFI_ESCAPE = re.compile(r"\\(.)", re.DOTALL)

_VCARD_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_VCARD_FIELDS = {
    "FN": "fullName",
    "TEL": "phone",
    "EMAIL": "email",
    "ORG": "org",
    "TITLE": "title",
    "URL": "url",
}

# Characters a WHATWG URL parser refuses in a host
_FORBIDDEN_HOST_CHARS = re.compile(r"[\s#%/<>?@\\^|\[\]]")
# ASCII punctuation a WHATWG parser leaves unescaped in a path
_PATH_SAFE_CHARS = "!$%&'()*+,/:;=@[]^|"
_WWW_PREFIX = re.compile(r"^www\.", re.IGNORECASE)
_QUERY_SUFFIX = re.compile(r"\?(.*)")


def _strip_scheme(raw: str, scheme: re.Pattern) -> str:
    return scheme.sub("", raw, count=1)


def _parse_query_pairs(query: str) -> Dict[str, str]:
    """Split ``key=value&...`` pairs, percent-decoding the values.

    Pairs with an empty key or an empty value are skipped.
    """
    result: Dict[str, str] = {}
    if not query:
        return result
    for part in query.split("&"):
        key, _, value = part.partition("=")
        if key and value:
            result[key] = unquote(value)
    return result


def strip_www(hostname: str) -> str:
    """Drop a leading ``www.`` from a hostname."""
    return _WWW_PREFIX.sub("", hostname, count=1)


def normalize_path(path: str) -> str:
    """
    Normalize an http(s) URL path the way a browser reports it.

    ``.`` and ``..`` segments are resolved, backslashes become ``/`` and
    spaces, quotes and non-ASCII characters are percent-encoded. Existing
    escapes are kept as they are.

    Args:
        path: Path component of a split URL (may be empty)

    Returns:
        Absolute path, ``/`` when empty
    """
    segments = path.replace("\\", "/").split("/")[1:]
    resolved: List[str] = []
    for index, segment in enumerate(segments):
        is_last = index == len(segments) - 1
        if segment == "..":
            if resolved:
                resolved.pop()
            if is_last:
                resolved.append("")
        elif segment == ".":
            if is_last:
                resolved.append("")
        else:
            resolved.append(segment)
    return quote("/" + "/".join(resolved), safe=_PATH_SAFE_CHARS)


def parse_url(raw: str) -> Optional[Dict[str, str]]:
    """
    Strictly parse an http(s) URL.

    Args:
        raw: Trimmed payload starting with ``http://`` or ``https://``

    Returns:
        ``{url, host, path}`` or None when the URL is malformed (no host,
        invalid port, broken IPv6 literal or forbidden host characters)
    """
    try:
        parts = urlsplit(raw)
        hostname = parts.hostname
        parts.port  # raises ValueError for a non-numeric or out of range port
    except ValueError:
        return None

    if not hostname or _FORBIDDEN_HOST_CHARS.search(hostname):
        return None

    if not hostname.isascii():
        try:
            hostname = hostname.encode("idna").decode("ascii")
        except UnicodeError:
            return None

    return {
        "url": raw,
        "host": strip_www(hostname),
        "path": normalize_path(parts.path),
    }


def _split_wifi_segments(body: str) -> List[str]:
    """Split on ``;`` while keeping backslash-escaped characters intact."""
    segments = []
    current = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\" and i + 1 < len(body):
            current.append(body[i:i + 2])
            i += 2
            continue
        if char == ";":
            segments.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1
    segments.append("".join(current))
    return segments


def parse_wifi(raw: str) -> Dict[str, str]:
    """
    Parse a Wi-Fi network config string.

    Format: ``WIFI:S:<ssid>;T:<WPA|WEP|nopass>;P:<password>;H:<hidden>;;``

    Args:
        raw: Trimmed payload starting with ``WIFI:``

    Returns:
        Mapping with any of ``ssid``, ``security``, ``password``, ``hidden``.
        Keys missing from the payload are absent; the first occurrence of a
        key wins.
    """
    result: Dict[str, str] = {}
    for segment in _split_wifi_segments(_strip_scheme(raw, _WIFI_SCHEME)):
        key, sep, value = segment.partition(":")
        name = _WIFI_KEYS.get(key.strip().upper())
        if not sep or name is None or name in result:
            continue
        result[name] = _WIFI_ESCAPE.sub(r"\1", value)
    return result


def parse_vcard(raw: str) -> Dict[str, str]:
    """
    Parse the interesting properties of a vCard.

    Args:
        raw: Trimmed payload starting with ``BEGIN:VCARD``

    Returns:
        Mapping with any of ``fullName``, ``name``, ``phone``, ``email``,
        ``org``, ``title``, ``url``, ``address``. The last occurrence of a
        repeated property wins.
    """
    result: Dict[str, str] = {}

    for line in _VCARD_LINE_BREAK.split(raw):
        key, _, value = line.partition(":")
        value = value.strip()
        if not key or not value:
            continue

        # Parameters follow the property name: "TEL;TYPE=CELL"
        key_base = key.split(";")[0].strip().upper()

        if key_base == "N":
            # family;given;additional;prefix;suffix
            name_parts = value.split(";")
            given = name_parts[1] if len(name_parts) > 1 else ""
            result["name"] = " ".join(p for p in (given, name_parts[0]) if p)
        elif key_base == "ADR":
            address = value.replace(";", ", ")
            result["address"] = re.sub(r"^,\s*", "", address, count=1)
        elif key_base in _VCARD_FIELDS:
            result[_VCARD_FIELDS[key_base]] = value

    return result


def parse_upi(raw: str) -> Dict[str, str]:
    """
    Extract UPI payment parameters (``pa``, ``pn``, ``am``, ``tn``, ...).

    Query parameters are returned verbatim (form-decoded). A URI that cannot
    be parsed falls back to a manual ``key=value&...`` split.
    """
    try:
        parts = urlsplit(raw)
        parts.port
    except ValueError:
        match = _QUERY_SUFFIX.search(raw)
        return _parse_query_pairs(match.group(1)) if match else {}

    return dict(parse_qsl(parts.query, keep_blank_values=True))


def parse_mailto(raw: str) -> Dict[str, str]:
    """Parse ``mailto:<address>?subject=..&body=..``."""
    address, _, query = _strip_scheme(raw, _MAILTO_SCHEME).partition("?")
    result = {"email": address}
    result.update(_parse_query_pairs(query))
    return result


def parse_tel(raw: str) -> Dict[str, str]:
    """Parse ``tel:<number>``; whitespace is removed, everything else kept."""
    number = re.sub(r"\s", "", _strip_scheme(raw, _TEL_SCHEME))
    return {"number": number}


def parse_sms(raw: str) -> Dict[str, str]:
    """Parse ``smsto:<number>:<message>`` or ``sms:<number>``."""
    number, _, message = _strip_scheme(raw, _SMS_SCHEME).partition(":")
    return {"number": number, "message": message}


def parse_geo(raw: str) -> Dict[str, str]:
    """Parse ``geo:<lat>,<lon>[,<alt>][?q=...]``."""
    coords = _strip_scheme(raw, _GEO_SCHEME).split(",")
    lat = coords[0]
    lon = coords[1].split("?")[0] if len(coords) > 1 else ""
    return {"lat": lat, "lon": lon, "raw": raw}
