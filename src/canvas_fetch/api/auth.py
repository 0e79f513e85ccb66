import os
from pathlib import Path


def select_auth_token(token_file: str | Path = "token.txt") -> str:
    token = (os.getenv("CANVAS_TOKEN") or "").strip()
    if token:
        return token

    path = Path(token_file)
    if path.is_file():
        for line in path.read_text(encoding="utf-8").splitlines():
            token = line.strip()
            if token:
                return token

    raise RuntimeError(
        f"No Canvas token found. Set CANVAS_TOKEN or write one to {path}."
    )
