import re
from typing import Text


def api_token(token: Text):
    TOKEN_PATTERN = r"^\S+$"

    return re.match(TOKEN_PATTERN, token or "")
