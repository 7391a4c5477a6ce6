"""Device signature - coarse client fingerprint from a User-Agent string."""

from typing import Optional

# Chrome UAs also mention Safari; Edge and Opera UAs also mention Chrome.
_BROWSERS = (
    (("Firefox",), "Firefox"),
    (("SamsungBrowser",), "Samsung Internet"),
    (("Opera", "OPR"), "Opera"),
    (("Trident",), "Internet Explorer"),
    (("Edge",), "Edge"),
    (("Chrome",), "Chrome"),
    (("Safari",), "Safari"),
)

# Mobile platforms first: Android UAs mention Linux, iOS UAs mention "Mac OS X".
_OPERATING_SYSTEMS = (
    ("Win", "Windows"),
    ("Android", "Android"),
    ("like Mac", "iOS"),
    ("Mac", "MacOS"),
    ("Linux", "Linux"),
)


def parse_user_agent(user_agent: Optional[str]) -> str:
    """Reduce a User-Agent header to ``"<browser> on <os>"``."""
    ua = user_agent or ""

    browser = "Unknown Browser"
    for markers, name in _BROWSERS:
        if any(marker in ua for marker in markers):
            browser = name
            break

    os_name = "Unknown OS"
    for marker, name in _OPERATING_SYSTEMS:
        if marker in ua:
            os_name = name
            break

    return f"{browser} on {os_name}"
