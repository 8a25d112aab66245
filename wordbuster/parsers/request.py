from typing import Dict, List, Tuple


class Request:
    def __init__(self, requestFilename: str) -> None:
        """
        POST /login?next=FUZZ HTTP/1.1
        Host: example.com
        Content-Type: application/json

        {"user":"FUZZ","csrf":"CSRFCSRF"}
        """

        self.method = ""
        self.path = ""
        self.host = ""
        self.headers: List[Tuple[str, str]] = []
        self.body = ""

        self.requestFilename = requestFilename

    def parse(self) -> Dict:

        with open(self.requestFilename, 'r', encoding='utf-8', errors='ignore') as f:
            raw = f.read().replace("\r\n", "\n")

        head, _, body_raw = raw.partition("\n\n")
        if not head.strip():
            raise ValueError("Request file is empty.")

        lines = [l for l in head.split("\n") if l.strip()]

        # METHOD SP PATH [SP HTTP/x.y]
        parts0 = lines[0].split()
        if len(parts0) < 2:
            raise ValueError(f"Invalid request line: {lines[0]!r}")
        self.method = parts0[0]
        self.path = parts0[1] if parts0[1].startswith("/") else f"/{parts0[1]}"

        self.headers = []
        for line in lines[1:]:
            if ':' in line:
                k, v = line.split(':', 1)
                self.headers.append((k.strip(), v.strip()))

        # Body is a template: placeholders are substituted textually
        self.body = body_raw.rstrip("\n")

        # Host is rebuilt into the URL, Content-Length is recomputed
        self.host = next((v for k, v in self.headers if k.lower() == "host"), "")
        if not self.host:
            raise ValueError("Request file has no Host header.")
        self.headers = [(k, v) for k, v in self.headers
                        if k.lower() not in ("host", "content-length")]

        return {
            'host': self.host,
            'method': self.method,
            'path': self.path,
            'headers': self.headers,
            'body': self.body
        }

    def url(self, protocol: str = "https") -> str:
        return f"{protocol}://{self.host}{self.path}"

    def __str__(self) -> str:
        return f"Method: {self.method}\nPath: {self.path}\nHost: {self.host}\nHeaders: {self.headers}\nBody: {self.body}"
