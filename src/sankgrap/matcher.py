import re

from .errors import ConfigurationError

LABEL_RUN = re.compile(r'[a-zA-Z0-9-]+')
LABEL_SEGMENT = re.compile(r'[a-zA-Z0-9-]+\.')


class SubdomainMatcher:
    """
    Finds subdomains of a target domain inside arbitrary text.

    A match is one or more ``label.`` segments (alphanumerics and hyphens)
    immediately followed by the literal domain. Matching is case-sensitive
    unless ``ignore_case`` is set; the casing found in the text is kept.

    Results are the same as ``re.findall(r'(?:[a-zA-Z0-9-]+\\.)+' +
    re.escape(domain), text)``, but the text is walked one segment at a
    time so the scan stays linear on long dotted runs that never reach the
    domain.
    """

    def __init__(self, domain, ignore_case=False):
        if not domain or not domain.strip():
            raise ConfigurationError("Target domain must not be empty")
        self.domain = domain.strip()
        self.ignore_case = ignore_case
        self._folded_domain = self.domain.lower()

    def _domain_at(self, text, pos):
        if self.ignore_case:
            return text[pos:pos + len(self.domain)].lower() == self._folded_domain
        return text.startswith(self.domain, pos)

    def find_all(self, text):
        if not text:
            return []

        found = []
        pos = 0
        while True:
            run = LABEL_RUN.search(text, pos)
            if run is None:
                break
            start = cursor = run.start()
            end = None
            # Labels cannot contain dots, so the segment chain from `start` is fixed;
            # the greedy match ends at the last segment boundary followed by the domain.
            while True:
                segment = LABEL_SEGMENT.match(text, cursor)
                if segment is None:
                    break
                cursor = segment.end()
                if self._domain_at(text, cursor):
                    end = cursor + len(self.domain)
            if end is None:
                pos = max(cursor, run.end())
            else:
                found.append(text[start:end])
                pos = end
        return found

    def __repr__(self):
        return f"SubdomainMatcher(domain={self.domain!r}, ignore_case={self.ignore_case})"
