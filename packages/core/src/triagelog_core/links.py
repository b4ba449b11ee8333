from urllib.parse import parse_qs, urlsplit

DEFAULT_PERF_BASE_URL = "https://perf.example"
DEFAULT_ISSUE_BASE_URL = "https://issues.example"
STAT = "instructions:u"


def comparison_link(start: str, end: str, base_url: str = DEFAULT_PERF_BASE_URL) -> str:
    """Dashboard link for a whole revision range."""
    return f"{base_url.rstrip('/')}/?start={start}&end={end}&absolute=false&stat={STAT}"


def compare_link(start: str, end: str, base_url: str = DEFAULT_PERF_BASE_URL) -> str:
    """Per-entry comparison page link."""
    return f"{base_url.rstrip('/')}/compare.html?start={start}&end={end}&stat={STAT}"


def issue_link(project: str, number: int, base_url: str = DEFAULT_ISSUE_BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/{project.strip('/')}/issues/{number}"


def link_references(url: str, start: str, end: str) -> bool:
    """Return True if the link's query names exactly these start/end revisions."""
    query = parse_qs(urlsplit(url).query)
    return query.get("start", [None])[0] == start and query.get("end", [None])[0] == end
